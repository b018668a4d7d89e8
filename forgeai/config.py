"""
Configuration loading for ForgeAI.

Settings live in config.yaml next to the app; secrets come from the
environment, optionally via a .env file.
"""

import copy
import os
import sys

import yaml
from dotenv import load_dotenv
from loguru import logger

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(ROOT_DIR, "config.yaml")

DEFAULT_CONFIG = {
    "agent": {
        "base_url": "http://localhost:8000",
        "timeout": 120,
    },
    "claude": {
        "api_key_env": "ANTHROPIC_API_KEY",
        "model": "claude-sonnet-4-5",
        "max_tokens": 4000,
        "timeout": 120,
    },
    "database": {
        "path": "data/forgeai.db",
    },
    "cache": {
        "path": "data/local_cache.json",
    },
    "logging": {
        "level": "INFO",
    },
}


def load_config(config_path=None):
    """
    Load configuration from config.yaml, filling gaps from DEFAULT_CONFIG.

    Environment variables (after loading .env) override:
        FORGE_BACKEND_URL -> agent.base_url
        FORGE_LOG_LEVEL -> logging.level

    Args:
        config_path: Optional path to a YAML file

    Returns:
        Configuration dictionary
    """
    load_dotenv()

    config = copy.deepcopy(DEFAULT_CONFIG)
    path = config_path or DEFAULT_CONFIG_PATH
    if os.path.exists(path):
        with open(path, "r") as f:
            loaded = yaml.safe_load(f) or {}
        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values
    elif config_path:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    backend_url = os.getenv("FORGE_BACKEND_URL")
    if backend_url:
        config["agent"]["base_url"] = backend_url

    log_level = os.getenv("FORGE_LOG_LEVEL")
    if log_level:
        config["logging"]["level"] = log_level

    return config


def get_api_key(config):
    """Return the Anthropic API key named by claude.api_key_env, or None."""
    env_name = (config.get("claude", {}) or {}).get("api_key_env", "ANTHROPIC_API_KEY")
    return os.getenv(env_name)


def configure_logging(level="INFO"):
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=str(level).upper())
