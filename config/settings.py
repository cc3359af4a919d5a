"""Process configuration.

Loaded once at startup from a YAML file (path from CONFIG_PATH, default
``config.yaml``) with environment overrides on top:

    OM_DEBUG=true
    OM_DATABASE__PASSWORD=secret
    OM_PRICE_PROVIDER__API_KEY=...

Environment values win over the file. The resulting Settings object is passed
explicitly into create_app(); nothing reads configuration from module state.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_CONFIG_PATH = "config.yaml"


class ConfigError(Exception):
    """Configuration could not be loaded or validated. Fatal at startup."""


class DatabaseSettings(BaseModel):
    host: str = Field(..., min_length=1)
    port: int = Field(..., gt=0, lt=65536)
    database: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    # Pool: fixed size, no overflow. Requests queue for a connection and fail
    # after connect_timeout_seconds.
    pool_size: int = Field(20, ge=1)
    connect_timeout_seconds: float = Field(20.0, gt=0)
    idle_timeout_seconds: float = Field(30.0, gt=0)
    statement_timeout_seconds: float = Field(30.0, gt=0)


class NodeConfig(BaseModel):
    address: str = Field(..., min_length=1)
    pair: str

    @field_validator("pair")
    @classmethod
    def pair_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("pair must be a non-empty string")
        return v


class PriceProviderSettings(BaseModel):
    type: str = Field("coingecko", min_length=1)
    token_id: str = Field(..., min_length=1)
    api_key: str | None = None
    base_url: str = "https://api.coingecko.com/api/v3"
    timeout_seconds: float = Field(10.0, gt=0)
    cache_ttl_seconds: float = Field(300.0, gt=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OM_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database: DatabaseSettings
    api_keys: list[str] = Field(..., min_length=1)
    ada_threshold: int = Field(..., ge=0)  # lovelace
    nodes: list[NodeConfig] = Field(..., min_length=1)
    reward_address: str = Field(..., min_length=1)
    token_policy: str = Field(..., min_length=1)
    price_provider: PriceProviderSettings

    # App
    app_name: str = "Oracle Node Monitor"
    debug: bool = False  # exposes internal error detail in 500 responses
    service_log_level: str = "INFO"
    http_log_level: str = "WARNING"
    cors_origin: str = "*"
    host: str = "0.0.0.0"
    port: int = 4000

    @field_validator("api_keys")
    @classmethod
    def api_keys_not_blank(cls, v: list[str]) -> list[str]:
        if any(not key.strip() for key in v):
            raise ValueError("API keys must be non-empty strings")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File contents arrive as init kwargs; environment overrides them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def _format_validation_error(exc: ValidationError) -> str:
    lines = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "<root>"
        lines.append(f"{loc}: {err['msg']}")
    return "\n- ".join(lines)


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    """Read the YAML config file and validate it into a Settings object.

    Raises ConfigError on a missing/unreadable file, malformed YAML, or any
    validation failure (all problems are listed in the message).
    """
    config_path = Path(path or os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH))
    try:
        with config_path.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load configuration from {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping")

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(
            f"Configuration validation failed:\n- {_format_validation_error(exc)}"
        ) from exc
