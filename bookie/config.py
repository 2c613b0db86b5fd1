"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bookie.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_SECTIONS = ("ledger", "settlement", "server")


class LedgerConfig(BaseModel):
    """Bet ledger rules."""

    allow_self_accept: bool = True


class SettlementConfig(BaseModel):
    """Settlement engine behavior."""

    # acceptor: pushes fall through to the strict comparisons
    # void: pushes settle with no winner
    push_policy: Literal["acceptor", "void"] = "acceptor"


class ServerConfig(BaseModel):
    """HTTP adapter settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"]
    )


class Settings(BaseSettings):
    """Main configuration class."""

    # Paths
    data_dir: Path = Path("data")

    # Observability
    logfire_token: str = ""
    log_level: str = "INFO"

    # Nested configuration sections
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    settlement: SettlementConfig = Field(default_factory=SettlementConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("data_dir", mode="after")
    @classmethod
    def resolve_data_dir(cls, v: Path) -> Path:
        """Resolve data directory to absolute path."""
        return v.resolve()

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.yaml"

    def load_yaml_config(self) -> None:
        """Load and merge YAML configuration."""
        config_path = self.config_path

        if not config_path.exists():
            logger.warning(
                f"Config file not found: {config_path}. "
                "Using defaults. Run 'python -m bookie init' to create it."
            )
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to read config: {e}")
            raise ConfigError(f"Failed to read {config_path}: {e}") from e

        if not yaml_config:
            logger.warning(f"Empty config file: {config_path}")
            return

        for section_name in CONFIG_SECTIONS:
            if section_name in yaml_config:
                section = getattr(self, section_name)
                section_dict = section.model_dump()
                section_dict.update(yaml_config[section_name] or {})
                setattr(self, section_name, section.__class__(**section_dict))

        logger.info(f"Loaded configuration from {config_path}")


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    settings.load_yaml_config()
    return settings
