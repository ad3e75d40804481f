"""Configuration and preference helpers."""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv

from .constants import (
    API_KEY_ENV_VARS,
    CONFIG_FILE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_THEME,
    THEME_DARK,
    THEME_LIGHT,
    THEMES,
)

logger = logging.getLogger(__name__)

SystemThemeSignal = Callable[[], Optional[bool]]


def load_json_config(filepath: str, default_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Load a JSON configuration file with optional defaults."""
    if os.path.exists(filepath):
        try:
            with open(filepath, "r", encoding="utf-8") as handle:
                data = json.load(handle)
            if default_data is None:
                return data
            merged = default_data.copy()
            merged.update(data)
            return merged
        except (OSError, ValueError):
            logger.warning("Could not read %s, using defaults", filepath, exc_info=True)

    return default_data.copy() if default_data is not None else {}


def save_json_config(filepath: str, data: Dict[str, Any]) -> bool:
    """Persist configuration data to disk."""
    try:
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)
        return True
    except OSError:
        logger.warning("Could not write %s", filepath, exc_info=True)
        return False


def default_main_config() -> Dict[str, Any]:
    return {
        "theme": None,
        "output_dir": DEFAULT_OUTPUT_DIR,
        "request_timeout_ms": None,
    }


def load_main_config(filepath: str = CONFIG_FILE) -> Dict[str, Any]:
    """Load the main application configuration."""
    return load_json_config(filepath, default_main_config())


def save_main_config(config: Dict[str, Any], filepath: str = CONFIG_FILE) -> bool:
    """Save the main application configuration."""
    return save_json_config(filepath, config)


def get_api_key() -> Optional[str]:
    load_dotenv()
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


class PreferenceStore:
    """Theme preference, read once at start-up and written through on change."""

    def __init__(self, filepath: str = CONFIG_FILE, system_prefers_dark: Optional[SystemThemeSignal] = None) -> None:
        self.filepath = filepath
        self._system_prefers_dark = system_prefers_dark
        self._data = load_main_config(filepath)

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    @property
    def theme(self) -> str:
        stored = self._data.get("theme")
        if stored in THEMES:
            return stored

        if self._system_prefers_dark is not None:
            prefers_dark = self._system_prefers_dark()
            if prefers_dark is not None:
                return THEME_DARK if prefers_dark else THEME_LIGHT

        return DEFAULT_THEME

    def set_theme(self, theme: str) -> bool:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme '{theme}'")
        self._data["theme"] = theme
        return self.save()

    def toggle_theme(self) -> str:
        new_theme = THEME_LIGHT if self.theme == THEME_DARK else THEME_DARK
        self.set_theme(new_theme)
        return new_theme

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> bool:
        self._data[key] = value
        return self.save()

    def save(self) -> bool:
        return save_main_config(self._data, self.filepath)
