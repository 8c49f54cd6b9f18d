"""Layered TOML + environment settings for the gateway."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_DIR = "config"
DEFAULT_RUN_MODE = "development"

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class ConfigError(Exception):
    """Raised when settings cannot be loaded or fail validation."""


class ServerSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=0, le=65535)
    max_body_bytes: int = Field(default=10_000_000, gt=0)


class AIServiceSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    api_key: str = Field(min_length=1, repr=False)
    timeout_s: float = Field(default=30.0, gt=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    server: ServerSettings = ServerSettings()
    ai_service: AIServiceSettings
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


def config_files(config_dir: Path, run_mode: str) -> list[Path]:
    """Return the settings files in merge order, lowest priority first."""
    return [
        config_dir / "default.toml",
        config_dir / f"{run_mode}.toml",
        config_dir / "local.toml",
    ]


def _layered(files: list[Path]) -> type[Settings]:
    class LayeredSettings(Settings):
        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource,
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Highest priority first; missing files contribute nothing.
            layers = [TomlConfigSettingsSource(settings_cls, toml_file=p) for p in reversed(files)]
            return (init_settings, env_settings, *layers)

    return LayeredSettings


def load_settings(
    config_dir: str | Path | None = None,
    run_mode: str | None = None,
) -> Settings:
    """Load settings from the defaults file, the run-mode file, the local
    override file and ``APP_``-prefixed environment variables, in that order.

    Only the defaults file is required.
    """
    cdir = Path(config_dir or os.getenv("CONFIG_DIR", DEFAULT_CONFIG_DIR))
    mode = run_mode or os.getenv("RUN_MODE", DEFAULT_RUN_MODE)

    files = config_files(cdir, mode)
    if not files[0].is_file():
        raise ConfigError(f"Missing required config file: {files[0]}")

    try:
        return _layered(files)()
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {cdir}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
