"""Configuration management for opsrelay.

Loads settings from an optional YAML configuration file with environment
variable overrides for sensitive values (the Gemini API key). Supports
.env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/opsrelay.yaml")


class ModelConfig(BaseModel):
    name: str = Field(default="gemini-1.5-flash", description="Gemini model identifier")
    relax_safety: bool = Field(
        default=True,
        description="Disable blocking for the harassment and dangerous-content categories",
    )


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)


class ExecutorConfig(BaseModel):
    shell: str = Field(default="bash", description="Shell used to run `<shell> -c <command>`")


class ClientConfig(BaseModel):
    url: str = Field(default="ws://localhost:8080/ops")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the opsrelay server and client.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "OPSRELAY_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    gemini_api_key: SecretStr = Field(default=SecretStr(""))

    model: ModelConfig = Field(default_factory=ModelConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def require_api_key(self) -> str:
        """Return the Gemini API key, or raise ConfigError if it is unset."""
        key = self.gemini_api_key.get_secret_value()
        if not key:
            raise ConfigError("GEMINI_API_KEY environment variable is not set")
        return key


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.debug("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply environment variable overrides for non-prefixed vars."""
    api_key = os.environ.get("GEMINI_API_KEY", "")
    model_name = os.environ.get("GEMINI_MODEL", "")

    if api_key:
        yaml_data["gemini_api_key"] = api_key

    if model_name:
        yaml_data.setdefault("model", {})
        if not yaml_data["model"].get("name"):
            yaml_data["model"]["name"] = model_name
