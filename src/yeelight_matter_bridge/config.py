"""Configuration loading for the Yeelight Matter bridge."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

CONFIG_ENV_PREFIX = "YEELIGHT_MATTER_"
CONFIG_VERSION = 1
MIN_SUPPORTED_CONFIG_VERSION = 1

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_LOG_FORMATS = {"plain", "json"}


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    log_format: str = "plain"
    log_level: str = "INFO"
    decoder_log_level: Optional[str] = None
    encoder_log_level: Optional[str] = None
    state_db_path: Optional[Path] = None
    hysteresis_enabled: bool = True
    config_version: int = CONFIG_VERSION

    def __post_init__(self) -> None:
        _validate_config(self)

    def logging_dict(self) -> Dict[str, Any]:
        """Return a mapping suitable for structured logging."""

        return {
            "config_version": self.config_version,
            "log_format": self.log_format,
            "log_level": self.log_level,
            "decoder_log_level": self.decoder_log_level,
            "encoder_log_level": self.encoder_log_level,
            "state_db_path": str(self.state_db_path) if self.state_db_path else None,
            "hysteresis_enabled": self.hysteresis_enabled,
        }

    @classmethod
    def from_sources(
        cls,
        path: Optional[Path] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "Config":
        """Load configuration from defaults, file, env, and overrides (in that order)."""

        file_config = _load_file_config(
            path or _coerce_optional_path(os.environ.get(f"{CONFIG_ENV_PREFIX}CONFIG"))
        )
        env_config = _load_env_config(CONFIG_ENV_PREFIX)

        config = cls()
        config = _apply_mapping(config, file_config)
        config = _apply_mapping(config, env_config)
        config = _apply_mapping(config, overrides or {})
        return config


def _validate_config(config: Config) -> None:
    _validate_version(config.config_version)
    if config.log_format not in _LOG_FORMATS:
        raise ValueError(
            f"log_format must be one of {sorted(_LOG_FORMATS)}; got {config.log_format}."
        )
    for field_name, value in (
        ("log_level", config.log_level),
        ("decoder_log_level", config.decoder_log_level),
        ("encoder_log_level", config.encoder_log_level),
    ):
        _validate_log_level_value(value, field_name)


def _validate_version(version: int) -> None:
    if version < MIN_SUPPORTED_CONFIG_VERSION:
        raise ValueError(
            f"Config version {version} is too old; minimum supported is {MIN_SUPPORTED_CONFIG_VERSION}."
        )
    if version > CONFIG_VERSION:
        raise ValueError(
            f"Config version {version} is newer than supported ({CONFIG_VERSION}); please upgrade."
        )


def _validate_log_level_value(value: Optional[str], name: str) -> None:
    if value is None:
        return
    if value.upper() not in _LOG_LEVELS:
        raise ValueError(f"{name} must be one of {sorted(_LOG_LEVELS)}; got {value}.")


def _load_file_config(path: Optional[Path]) -> Dict[str, Any]:
    if path is None:
        return {}
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as f:
        parsed = tomllib.load(f)
    return {k.replace("-", "_"): v for k, v in parsed.items()}


def _load_env_config(prefix: str) -> Dict[str, Any]:
    mapping: Dict[str, Any] = {}
    for field in Config.__dataclass_fields__:
        env_key = f"{prefix}{field}".upper()
        if env_key in os.environ:
            mapping[field] = os.environ[env_key]
    return mapping


def _apply_mapping(config: Config, overrides: Mapping[str, Any]) -> Config:
    data: MutableMapping[str, Any] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in Config.__dataclass_fields__:
            raise ValueError(f"Unknown configuration key: {key}")
        if key == "state_db_path":
            data[key] = _coerce_path(value)
        elif key == "config_version":
            data[key] = int(value)
        elif key == "hysteresis_enabled":
            data[key] = _coerce_bool(value)
        elif key == "log_format":
            data[key] = str(value).lower()
        elif key in {"log_level", "decoder_log_level", "encoder_log_level"}:
            data[key] = str(value).upper()
        else:
            data[key] = value
    return replace(config, **data)


def _coerce_path(value: Any) -> Path:
    return value if isinstance(value, Path) else Path(str(value)).expanduser()


def _coerce_optional_path(value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    return _coerce_path(value)


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
