"""Configuration loader for the iKuai exporter."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IKuaiConfig(BaseModel):
    timeout: float = 30.0


class RefreshConfig(BaseModel):
    """VLAN cache refresh loop configuration."""

    interval_seconds: float = 60.0
    initial_delay_seconds: float = 60.0
    page_size: int = 100
    retry_delay_seconds: float = 1.0  # Between retries of the same page
    warm_up: bool = True  # Load once synchronously on startup


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 9090


class AppConfig(BaseModel):
    ikuai: IKuaiConfig = IKuaiConfig()
    refresh: RefreshConfig = RefreshConfig()
    server: ServerConfig = ServerConfig()


class Settings(BaseSettings):
    """Environment-based settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    ikuai_url: str = Field(
        default="http://192.168.1.1",
        validation_alias=AliasChoices("IK_URL", "IKUAI_URL"),
    )
    ikuai_username: str = Field(
        default="admin",
        validation_alias=AliasChoices("IK_USER", "IKUAI_USERNAME"),
    )
    ikuai_password: str = Field(
        default="",
        validation_alias=AliasChoices("IK_PWD", "IKUAI_PASSWORD"),
    )
    debug: bool = False
    skip_tls_verify: bool = True
    config_path: str = "../config/config.yaml"


def load_yaml_config(path: str) -> dict[str, Any]:
    """Load a YAML configuration file."""
    config_path = Path(path)
    if not config_path.is_absolute():
        config_path = Path(__file__).parent.parent / path

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def get_settings() -> Settings:
    return Settings()


def get_config() -> AppConfig:
    """Load and return the application configuration."""
    settings = get_settings()
    yaml_config = load_yaml_config(settings.config_path)
    return AppConfig(**yaml_config)
