"""
Configuration Management for tts-playground.

This module provides centralized configuration handling with:
    - Default values (Defaults class)
    - Dataclass-based configuration objects
    - YAML file loading with environment variable overrides
    - Validation with meaningful error messages

Configuration Hierarchy (highest priority first):
    1. Environment variables (PORT, CORS_ORIGIN, VOICES_CACHE_TTL_SEC, ...)
    2. YAML config file (config/settings.yaml, optional)
    3. Defaults class values

Example settings.yaml:
    server:
      port: 7069
      cors_origin: http://localhost:7068

    voices:
      cache_ttl_seconds: 3600

    logging:
      level: 2  # NORMAL
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import os
import yaml


class ConfigValidationError(Exception):
    """
    Raised when configuration validation fails.

    This exception is thrown when a configuration value is outside
    acceptable bounds or of the wrong type.
    """
    pass


class Defaults:
    """
    Centralized default configuration values.

    Sections:
        - Server: Bind address and cross-origin caller
        - Voices: Voice directory cache lifetime
        - Synthesis: Request limits
        - Google: Remote credential location
        - Logging: Log level and formatting
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Server
    # ─────────────────────────────────────────────────────────────────────────
    SERVER_HOST = "127.0.0.1"
    SERVER_PORT = 7069
    SERVER_CORS_ORIGIN = "http://localhost:7068"   # Vite dev server

    # ─────────────────────────────────────────────────────────────────────────
    # Voice directory
    # ─────────────────────────────────────────────────────────────────────────
    VOICES_CACHE_TTL_SECONDS = 3600     # Voice list lifetime (1 hour)

    # ─────────────────────────────────────────────────────────────────────────
    # Synthesis
    # ─────────────────────────────────────────────────────────────────────────
    SYNTHESIS_MAX_TEXT_CHARS = 4000
    SYNTHESIS_DEFAULT_ENCODING = "MP3"
    SYNTHESIS_ENCODINGS = ("MP3", "OGG_OPUS", "LINEAR16", "MULAW")

    # ─────────────────────────────────────────────────────────────────────────
    # Google Cloud
    # ─────────────────────────────────────────────────────────────────────────
    GOOGLE_CREDENTIALS_PATH: Optional[str] = None   # None = application default

    # ─────────────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────────────
    LOGGING_TEXT_PREVIEW_CHARS = 60
    LOGGING_LEVEL = 2                   # 1=MINIMAL, 2=NORMAL, 3=VERBOSE, 4=DEBUG


@dataclass
class ServerConfig:
    """HTTP server bind address and the single allowed CORS origin."""
    host: str = Defaults.SERVER_HOST
    port: int = Defaults.SERVER_PORT
    cors_origin: str = Defaults.SERVER_CORS_ORIGIN


@dataclass
class VoicesConfig:
    """
    Voice directory cache configuration.

    The voice list is fetched from the remote service at most once per
    TTL window and shared by every request in the process.
    """
    cache_ttl_seconds: int = Defaults.VOICES_CACHE_TTL_SECONDS


@dataclass
class SynthesisConfig:
    max_text_chars: int = Defaults.SYNTHESIS_MAX_TEXT_CHARS
    default_encoding: str = Defaults.SYNTHESIS_DEFAULT_ENCODING


@dataclass
class GoogleConfig:
    """
    Remote text-to-speech credentials.

    When credentials_path is None the Google client falls back to
    Application Default Credentials.
    """
    credentials_path: Optional[str] = Defaults.GOOGLE_CREDENTIALS_PATH


@dataclass
class LoggingConfig:
    """
    Logging configuration.

    Log levels:
        1 = MINIMAL: Startup, shutdown, critical errors only
        2 = NORMAL: Request lifecycle, cache status (default)
        3 = VERBOSE: Per-stage timing, detailed flow
        4 = DEBUG: Internal state, full tracing
    """
    text_preview_chars: int = Defaults.LOGGING_TEXT_PREVIEW_CHARS
    level: int = Defaults.LOGGING_LEVEL


@dataclass
class PlaygroundConfig:
    """
    Validated configuration for the playground service.

    Usage:
        settings = load_settings("config/settings.yaml")
        config = settings.get_config()
        print(config.voices.cache_ttl_seconds)
    """
    server: ServerConfig = field(default_factory=ServerConfig)
    voices: VoicesConfig = field(default_factory=VoicesConfig)
    synthesis: SynthesisConfig = field(default_factory=SynthesisConfig)
    google: GoogleConfig = field(default_factory=GoogleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "PlaygroundConfig":
        """
        Create PlaygroundConfig from Settings with validation.

        Args:
            settings: Raw Settings object loaded from YAML and environment.

        Returns:
            Validated PlaygroundConfig instance.

        Raises:
            ConfigValidationError: If any value fails validation.
        """
        raw = settings.raw

        server_raw = raw.get("server", {}) or {}
        try:
            server = ServerConfig(
                host=str(server_raw.get("host", Defaults.SERVER_HOST)),
                port=int(server_raw.get("port", Defaults.SERVER_PORT)),
                cors_origin=str(server_raw.get("cors_origin", Defaults.SERVER_CORS_ORIGIN)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"server section is invalid: {e}") from e
        cls._validate_range("server.port", server.port, 1, 65535)

        voices_raw = raw.get("voices", {}) or {}
        try:
            voices = VoicesConfig(
                cache_ttl_seconds=int(voices_raw.get("cache_ttl_seconds", Defaults.VOICES_CACHE_TTL_SECONDS)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"voices section is invalid: {e}") from e
        cls._validate_non_negative("voices.cache_ttl_seconds", voices.cache_ttl_seconds)

        synthesis_raw = raw.get("synthesis", {}) or {}
        synthesis = SynthesisConfig(
            max_text_chars=int(synthesis_raw.get("max_text_chars", Defaults.SYNTHESIS_MAX_TEXT_CHARS)),
            default_encoding=str(synthesis_raw.get("default_encoding", Defaults.SYNTHESIS_DEFAULT_ENCODING)).upper(),
        )
        cls._validate_positive("synthesis.max_text_chars", synthesis.max_text_chars)
        if synthesis.default_encoding not in Defaults.SYNTHESIS_ENCODINGS:
            raise ConfigValidationError(
                f"synthesis.default_encoding must be one of {list(Defaults.SYNTHESIS_ENCODINGS)}, "
                f"got {synthesis.default_encoding}"
            )

        google_raw = raw.get("google", {}) or {}
        credentials_path = google_raw.get("credentials_path", Defaults.GOOGLE_CREDENTIALS_PATH)
        google = GoogleConfig(credentials_path=str(credentials_path) if credentials_path else None)

        # ─────────────────────────────────────────────────────────────────────
        # Logging configuration
        # ─────────────────────────────────────────────────────────────────────
        logging_raw = raw.get("logging", {}) or {}
        log_level_raw = logging_raw.get("level", Defaults.LOGGING_LEVEL)

        # Handle string log levels (e.g., "INFO", "DEBUG")
        if isinstance(log_level_raw, str):
            level_map = {
                "MINIMAL": 1, "1": 1,
                "NORMAL": 2, "INFO": 2, "2": 2,
                "VERBOSE": 3, "3": 3,
                "DEBUG": 4, "TRACE": 4, "4": 4,
            }
            log_level = level_map.get(log_level_raw.upper(), Defaults.LOGGING_LEVEL)
        else:
            log_level = int(log_level_raw)

        logging_cfg = LoggingConfig(
            text_preview_chars=int(logging_raw.get("text_preview_chars", Defaults.LOGGING_TEXT_PREVIEW_CHARS)),
            level=log_level,
        )
        cls._validate_non_negative("logging.text_preview_chars", logging_cfg.text_preview_chars)
        cls._validate_range("logging.level", logging_cfg.level, 1, 4)

        return cls(
            server=server,
            voices=voices,
            synthesis=synthesis,
            google=google,
            logging=logging_cfg,
        )

    @staticmethod
    def _validate_positive(name: str, value: int | float) -> None:
        """Validate that a value is positive (> 0)."""
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")

    @staticmethod
    def _validate_non_negative(name: str, value: int | float) -> None:
        """Validate that a value is non-negative (>= 0)."""
        if value < 0:
            raise ConfigValidationError(f"{name} must be non-negative, got {value}")

    @staticmethod
    def _validate_range(name: str, value: int | float, min_val: int | float, max_val: int | float) -> None:
        """Validate that a value is within a range [min_val, max_val]."""
        if not (min_val <= value <= max_val):
            raise ConfigValidationError(f"{name} must be between {min_val} and {max_val}, got {value}")


@dataclass(frozen=True)
class Settings:
    """
    Immutable settings container loaded from YAML.

    This is the raw settings object before validation. Use
    get_config() to get a validated PlaygroundConfig.

    Attributes:
        raw: Dictionary of raw configuration values.
    """
    raw: Dict[str, Any]

    @property
    def credentials_path(self) -> Optional[str]:
        return (self.raw.get("google") or {}).get("credentials_path", Defaults.GOOGLE_CREDENTIALS_PATH)

    def get_config(self) -> PlaygroundConfig:
        """
        Get validated PlaygroundConfig from these settings.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return PlaygroundConfig.from_settings(self)


# Environment variable -> (section, key)
_ENV_OVERRIDES = {
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
    "CORS_ORIGIN": ("server", "cors_origin"),
    "VOICES_CACHE_TTL_SEC": ("voices", "cache_ttl_seconds"),
    "GOOGLE_APPLICATION_CREDENTIALS": ("google", "credentials_path"),
}


def settings_path() -> str:
    """Settings file location, overridable with TTS_PLAYGROUND_SETTINGS."""
    return os.getenv("TTS_PLAYGROUND_SETTINGS", "config/settings.yaml")


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from an optional YAML file plus environment overrides.

    Environment variable overrides:
        - HOST, PORT, CORS_ORIGIN: server section
        - VOICES_CACHE_TTL_SEC: voices.cache_ttl_seconds
        - GOOGLE_APPLICATION_CREDENTIALS: google.credentials_path

    Args:
        path: Path to the YAML configuration file. A missing file is
            not an error; defaults and environment values apply.

    Returns:
        Settings object with loaded configuration.

    Raises:
        ConfigValidationError: If the file is not a YAML mapping.
    """
    p = Path(path or settings_path())
    raw: Dict[str, Any] = {}
    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ConfigValidationError(f"settings file must contain a mapping: {p.resolve()}")
        raw = loaded

    # Apply environment variable overrides
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            section_raw = raw.get(section)
            if not isinstance(section_raw, dict):
                section_raw = {}
                raw[section] = section_raw
            section_raw[key] = value

    return Settings(raw=raw)
