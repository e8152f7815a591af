"""
Runtime configuration for blobprompt.

Settings are resolved once from the environment at startup and passed to the
clients that need them; nothing else in the package reads ``os.environ``.
"""
import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from .exceptions import ConfigurationError, MissingCredentialError

ENV_OPENAI_KEY = "OPENAI_KEY"
ENV_OPENAI_MODEL = "OPENAI_MODEL"
ENV_OPENAI_BASE_URL = "OPENAI_BASE_URL"
ENV_NODE_AUTH_TOKEN = "CELESTIA_NODE_AUTH_TOKEN"
ENV_EXPLORER_URL = "BLOBPROMPT_EXPLORER_URL"
ENV_TIMEOUT = "BLOBPROMPT_TIMEOUT"
ENV_RETRY_COUNT = "BLOBPROMPT_RETRY_COUNT"
ENV_GAS_PRICE = "BLOBPROMPT_GAS_PRICE"
ENV_LOG_LEVEL = "BLOBPROMPT_LOG_LEVEL"

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_EXPLORER_URL = "https://arabica.celenium.io"
DEFAULT_TIMEOUT = 30.0
# Blob RPC and completion calls are not retried unless explicitly configured.
DEFAULT_RETRY_COUNT = 0
# A negative gas price asks the node to pick its own default.
DEFAULT_GAS_PRICE = -1.0
DEFAULT_LOG_LEVEL = "INFO"


class Settings(BaseModel):
    """Configuration shared by the blob client, the completion client and the CLI."""

    model_config = ConfigDict(frozen=True)

    openai_key: SecretStr
    openai_model: str = DEFAULT_MODEL
    openai_base_url: Optional[str] = None
    node_auth_token: Optional[SecretStr] = None
    explorer_url: str = DEFAULT_EXPLORER_URL
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    retry_count: int = Field(DEFAULT_RETRY_COUNT, ge=0)
    gas_price: float = DEFAULT_GAS_PRICE
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("openai_key")
    @classmethod
    def _require_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("API key must not be empty")
        return value

    @field_validator("explorer_url")
    @classmethod
    def _strip_explorer_url(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Validated settings

        Raises:
            MissingCredentialError: If OPENAI_KEY is unset or blank
            ConfigurationError: If any other variable has an invalid value
        """
        env = os.environ if environ is None else environ

        api_key = (env.get(ENV_OPENAI_KEY) or "").strip()
        if not api_key:
            raise MissingCredentialError(
                f"{ENV_OPENAI_KEY} environment variable not set"
            )

        values = {"openai_key": api_key}
        optional = {
            "openai_model": ENV_OPENAI_MODEL,
            "openai_base_url": ENV_OPENAI_BASE_URL,
            "node_auth_token": ENV_NODE_AUTH_TOKEN,
            "explorer_url": ENV_EXPLORER_URL,
            "timeout": ENV_TIMEOUT,
            "retry_count": ENV_RETRY_COUNT,
            "gas_price": ENV_GAS_PRICE,
            "log_level": ENV_LOG_LEVEL,
        }
        for field, var in optional.items():
            raw = env.get(var)
            if raw is not None and raw.strip():
                values[field] = raw.strip()

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
