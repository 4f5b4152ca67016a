#!/usr/bin/env python3
"""
Configuration management for the HTML to PDF converter.
Supports environment variables, config file, and CLI arguments.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import os
import json
import shutil
import platform
from pathlib import Path
from typing import Dict, Optional, Any


DEFAULT_EXECUTABLE = "/usr/local/bin/wkhtmltopdf"


def get_user_config_dir() -> Path:
    """Get platform-appropriate user config directory."""
    system = platform.system()

    if system == "Windows":
        config_dir = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif system == "Darwin":  # macOS
        config_dir = Path.home() / "Library" / "Application Support"
    else:  # Linux and others
        config_dir = Path.home() / ".config"

    return config_dir / "html-to-pdf"


def load_config_file() -> Dict[str, Any]:
    """Load configuration from config file if it exists."""
    config_file = get_user_config_dir() / "config.json"

    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            return {}

    return {}


def parse_seconds_value(value: str) -> Optional[float]:
    """Parse a duration in seconds such as "10", "2.5" or "500ms".

    Args:
        value: String from the environment

    Returns:
        float number of seconds, or None if the value cannot be parsed

    Raises:
        ValueError: If the duration is negative
    """
    value_stripped = value.strip().lower()
    scale = 1.0
    if value_stripped.endswith('ms'):
        value_stripped = value_stripped[:-2]
        scale = 0.001
    elif value_stripped.endswith('s'):
        value_stripped = value_stripped[:-1]

    try:
        seconds = float(value_stripped) * scale
    except ValueError:
        return None

    if seconds < 0:
        raise ValueError(f"Duration cannot be negative (got {value}).")
    return seconds


def parse_bool_value(value: str) -> Optional[bool]:
    """Parse yes/no style environment flags."""
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


def get_config_from_env() -> Dict[str, Any]:
    """Load configuration from environment variables."""
    config = {}

    env_mapping = {
        "HTML2PDF_WKHTMLTOPDF": "wkhtmltopdf",
        "HTML2PDF_META_TAG_PREFIX": "meta_tag_prefix",
        "HTML2PDF_TIMEOUT": "timeout",
        "HTML2PDF_SETTLE_DELAY": "settle_delay",
        "HTML2PDF_POLL_INTERVAL": "poll_interval",
        "HTML2PDF_ENSURE_TERMINATION": "ensure_termination",
    }

    for env_var, config_key in env_mapping.items():
        value = os.environ.get(env_var)
        if value:
            if config_key in ["timeout", "settle_delay", "poll_interval"]:
                parsed = parse_seconds_value(value)
                if parsed is not None:
                    config[config_key] = parsed
            elif config_key == "ensure_termination":
                flag = parse_bool_value(value)
                if flag is not None:
                    config[config_key] = flag
            else:
                config[config_key] = value

    return config


class Config:
    """Configuration manager with multi-layer precedence."""

    def __init__(self, cli_args: Optional[Dict[str, Any]] = None):
        """Initialize configuration.

        Precedence order (highest to lowest):
        1. CLI arguments
        2. Environment variables
        3. Config file
        4. Defaults
        """
        self.cli_args = {k: v for k, v in (cli_args or {}).items() if v is not None}

        # Load from config file
        file_config = load_config_file()

        # Load from environment
        env_config = get_config_from_env()

        # Merge with precedence: CLI > ENV > FILE > DEFAULTS
        self._config = {}
        self._config.update(self._get_defaults())
        self._config.update(file_config)
        self._config.update(env_config)
        self._config.update(self.cli_args)

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            "wkhtmltopdf": shutil.which("wkhtmltopdf") or DEFAULT_EXECUTABLE,
            "meta_tag_prefix": "pdfkit-",
            "default_options": {
                "disable_smart_shrinking": False,
                "page_size": "Letter",
                "margin_top": "0.75in",
                "margin_right": "0.75in",
                "margin_bottom": "0.75in",
                "margin_left": "0.75in",
                "encoding": "UTF-8",
            },
            "ensure_termination": False,
            "timeout": 10,
            "settle_delay": 5,
            "poll_interval": 0.1,
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def get_executable(self) -> str:
        """Get the configured wkhtmltopdf path or command name."""
        return str(self._config.get("wkhtmltopdf", DEFAULT_EXECUTABLE))

    def get_meta_tag_prefix(self) -> str:
        return self._config.get("meta_tag_prefix", "pdfkit-")

    def get_default_options(self) -> Dict[str, Any]:
        """Get a copy of the default rendering options."""
        return dict(self._config.get("default_options") or {})

    def get_ensure_termination(self) -> bool:
        return bool(self._config.get("ensure_termination", False))

    def get_timeout(self) -> float:
        """Get the completion watch timeout in seconds."""
        return float(self._config.get("timeout", 10))

    def get_settle_delay(self) -> float:
        """Get the delay before the output file is watched, in seconds."""
        return float(self._config.get("settle_delay", 5))

    def get_poll_interval(self) -> float:
        return float(self._config.get("poll_interval", 0.1))

    def update(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values."""
        self._config.update(updates)

    def to_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary."""
        return self._config.copy()


_configuration: Optional[Config] = None


def get_config() -> Config:
    """Get the process-wide configuration, creating it on first use."""
    global _configuration
    if _configuration is None:
        _configuration = Config()
    return _configuration


def configure(**updates: Any) -> Config:
    """Update the process-wide configuration and return it."""
    config = get_config()
    config.update(updates)
    return config


def reset_config() -> None:
    """Drop the process-wide configuration so it is reloaded on next use."""
    global _configuration
    _configuration = None
