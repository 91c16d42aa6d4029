"""
Request Context and Configuration State for Logging.

The request id lives in a ContextVar so it follows a request through
FastAPI's threadpool and any awaits. Level and file settings are
process-wide module state.

Environment Variables:
    - TTS_PLAYGROUND_LOG_LEVEL: Override log level (1-4 or name)
    - TTS_PLAYGROUND_LOG_DIR: Directory for the JSONL log file
    - TTS_PLAYGROUND_JSONL_FILE: JSONL filename
"""
from __future__ import annotations

import os
from contextvars import ContextVar
from typing import Any, Dict

from .levels import LEVEL_NAMES, LogLevel

# "-" outside of a request
_request_id: ContextVar[str] = ContextVar("request_id", default="-")

_configured: bool = False
_log_config: Dict[str, Any] = {}
_current_level: LogLevel = LogLevel.NORMAL


def get_request_id() -> str:
    return _request_id.get()


def set_request_id(rid: str) -> None:
    """
    Set request ID in context for log correlation.

    Args:
        rid: Request identifier string (12 char UUID prefix).
    """
    _request_id.set(rid)


def get_level() -> LogLevel:
    return _current_level


def set_level(level: LogLevel) -> None:
    global _current_level
    _current_level = level


def get_level_name() -> str:
    return LEVEL_NAMES.get(_current_level, "NORMAL")


def is_configured() -> bool:
    return _configured


def set_configured(value: bool) -> None:
    global _configured
    _configured = value


def get_log_config() -> Dict[str, Any]:
    return _log_config


def set_log_config(config: Dict[str, Any]) -> None:
    global _log_config
    _log_config = config


def read_logging_config() -> Dict[str, Any]:
    """
    Read logging configuration from the settings file and environment.

    Configuration priority (highest to lowest):
        1. Environment variables (TTS_PLAYGROUND_LOG_LEVEL, etc.)
        2. settings.yaml logging section
        3. Default values

    Returns:
        Dictionary with resolved logging configuration.
    """
    import yaml

    from tts_playground.core.config import ConfigValidationError, load_settings

    cfg: Dict[str, Any] = {}

    try:
        settings = load_settings()
        cfg.update(settings.raw.get("logging", {}) or {})
    except (OSError, yaml.YAMLError, ConfigValidationError):
        # Unreadable settings file: fall back to env and defaults
        pass

    if os.getenv("TTS_PLAYGROUND_LOG_LEVEL"):
        cfg["level"] = os.environ["TTS_PLAYGROUND_LOG_LEVEL"]
    if os.getenv("TTS_PLAYGROUND_LOG_DIR"):
        cfg["log_dir"] = os.environ["TTS_PLAYGROUND_LOG_DIR"]
    if os.getenv("TTS_PLAYGROUND_JSONL_FILE"):
        cfg["jsonl_file"] = os.environ["TTS_PLAYGROUND_JSONL_FILE"]

    return cfg
