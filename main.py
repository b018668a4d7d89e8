#!/usr/bin/env python3
"""
ForgeAI agent proxy
Entry point for the backend that forwards prompts to Claude.
"""

import argparse
import sys

import uvicorn

from forgeai.config import configure_logging, get_api_key, load_config
from forgeai.proxy import create_app


def print_banner():
    """Print welcome banner."""
    banner = """
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║        FORGEAI AGENT PROXY                                   ║
║        Powered by Claude AI                                  ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
    """
    print(banner)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the ForgeAI agent proxy.")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def main(argv=None):
    """Load configuration and serve the proxy."""
    args = parse_args(argv)
    print_banner()

    print("Loading configuration...")
    config = load_config(args.config)
    configure_logging(config["logging"]["level"])

    if not get_api_key(config):
        api_key_env = config["claude"]["api_key_env"]
        print(f"\n⚠ Warning: {api_key_env} not found in environment variables!")
        print("Requests will fail until it is set (copy .env.example to .env and add your key).")

    print(f"\nServing on http://{args.host}:{args.port}/api/ai/agent (model: {config['claude']['model']})\n")
    uvicorn.run(create_app(config), host=args.host, port=args.port)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nExiting...")
        sys.exit(0)
