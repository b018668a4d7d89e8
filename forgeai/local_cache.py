"""
On-device key-value cache for the working state and the theme flag.

Best effort only: the cache is never a source of truth and any read or
write problem degrades to "nothing cached".
"""

import json
import os

from loguru import logger
from pydantic import ValidationError

from forgeai.models import AppState

STATE_KEY = "forge_agent_state"
THEME_KEY = "theme"
THEMES = ("light", "dark")
DEFAULT_THEME = "dark"


class LocalCache:
    """JSON file holding a handful of cached keys."""

    def __init__(self, path):
        self.path = path

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable cache {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, key, value):
        data = self._read()
        data[key] = value
        parent = os.path.dirname(self.path)
        try:
            if parent:
                os.makedirs(parent, exist_ok=True)
            tmp_path = f"{self.path}.tmp"
            with open(tmp_path, "w") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.warning(f"Could not write cache {self.path}: {exc}")

    def load_state(self):
        """Return the cached AppState, or None when nothing valid is cached."""
        raw = self._read().get(STATE_KEY)
        if raw is None:
            return None
        try:
            return AppState.model_validate(raw)
        except ValidationError as exc:
            logger.warning(f"Discarding invalid cached state: {exc.error_count()} errors")
            return None

    def save_state(self, state):
        self._write(STATE_KEY, state.model_dump(mode="json"))

    def load_theme(self):
        theme = self._read().get(THEME_KEY)
        return theme if theme in THEMES else DEFAULT_THEME

    def save_theme(self, theme):
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        self._write(THEME_KEY, theme)

    def clear(self):
        """Forget everything cached."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
