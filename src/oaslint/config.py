"""Configuration management for oaslint using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILE_NAME = ".oaslint.json"


class OutputFormat(str, Enum):
    """Output format types for lint reports."""
    TABLE = "table"
    JSON = "json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class EngineConfig(BaseModel):
    """Lint engine configuration section."""
    rule_timeout_seconds: float | None = Field(alias="ruleTimeoutSeconds", default=30.0)

    @field_validator("rule_timeout_seconds")
    @classmethod
    def validate_rule_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("rule_timeout_seconds must be > 0 or null")
        return v

    model_config = ConfigDict(populate_by_name=True)


class PortalConfig(BaseModel):
    """Documents portal configuration section."""
    base_url: str = Field(alias="baseUrl", default="http://localhost:3000")
    repositories_path: str = Field(alias="repositoriesPath", default="/gitea/repositories.yaml")
    timeout_seconds: float = Field(alias="timeoutSeconds", default=10.0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got: {v}")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout_seconds must be > 0")
        return v

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TABLE

    model_config = ConfigDict(use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class OaslintConfig(BaseModel):
    """Complete oaslint configuration model."""
    engine: EngineConfig = Field(default_factory=EngineConfig)
    portal: PortalConfig = Field(default_factory=PortalConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> OaslintConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .oaslint.json

    Returns:
        OaslintConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return OaslintConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except (ValidationError, TypeError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
    else:
        return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .oaslint.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def create_default_config() -> OaslintConfig:
    """Create zero-config defaults."""
    return OaslintConfig()
