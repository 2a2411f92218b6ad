"""Configuration management for Child Support Calc.

Machine-specific preferences live in settings.json:
   - default_output_format: "text" or "json" for CLI output
   - parent_a_label / parent_b_label: display names used when a
     calculation has no parent names

Config directory resolution:
1. CHILD_SUPPORT_CONFIG_PATH environment variable (if set)
2. ~/.config/child-support/ (XDG_CONFIG_HOME fallback)
"""

import json
import os
from pathlib import Path
from typing import Any


APP_NAME = "child-support"
SETTINGS_FILENAME = "settings.json"

OUTPUT_FORMATS = ("text", "json")

# Known settings and their defaults
SETTINGS_DEFAULTS = {
    "default_output_format": "text",
    "parent_a_label": "Parent A",
    "parent_b_label": "Parent B",
}


class SettingsError(ValueError):
    """Raised when a setting key or value is not valid."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. CHILD_SUPPORT_CONFIG_PATH environment variable
    2. ~/.config/child-support/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("CHILD_SUPPORT_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value, falling back to the built-in default.

    Args:
        key: Setting key (e.g., "default_output_format")
        default: Value if neither settings.json nor the defaults have the key

    Returns:
        Setting value or default
    """
    settings = load_settings()
    if key in settings:
        return settings[key]
    return SETTINGS_DEFAULTS.get(key, default)


def validate_setting(key: str, value: Any) -> None:
    """Check a setting before it is saved.

    Raises:
        SettingsError: Unknown key or invalid value
    """
    if key not in SETTINGS_DEFAULTS:
        known = ", ".join(sorted(SETTINGS_DEFAULTS))
        raise SettingsError(f"Unknown setting '{key}'. Known settings: {known}")

    if key == "default_output_format" and value not in OUTPUT_FORMATS:
        raise SettingsError(
            f"Invalid value '{value}' for {key}. Must be one of: {', '.join(OUTPUT_FORMATS)}"
        )

    if key.endswith("_label") and not str(value).strip():
        raise SettingsError(f"{key} cannot be empty")


def set_setting(key: str, value: Any) -> Path:
    """Validate and set a setting value in settings.json.

    Returns:
        Path to the saved settings file

    Raises:
        SettingsError: Unknown key or invalid value
    """
    validate_setting(key, value)
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting so its default applies again.

    Returns:
        True if the key was present
    """
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True
