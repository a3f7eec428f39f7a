"""Configuration management for WOWSQL clients.

All configuration is passed at client construction; ``load_config`` can build
it from ``WOWSQL_*`` environment variables instead.
"""

import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .urls import DEFAULT_STORAGE_URL, project_slug_from_url

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_STORAGE_TIMEOUT = 60

ENV_PROJECT_URL = "WOWSQL_PROJECT_URL"
ENV_API_KEY = "WOWSQL_API_KEY"
ENV_TIMEOUT = "WOWSQL_TIMEOUT"
ENV_STORAGE_TIMEOUT = "WOWSQL_STORAGE_TIMEOUT"
ENV_STORAGE_URL = "WOWSQL_STORAGE_URL"
ENV_AUTO_CHECK_QUOTA = "WOWSQL_AUTO_CHECK_QUOTA"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class WOWSQLConfig(BaseModel):
    """Settings shared by the database, storage and auth clients."""

    project_url: str = Field(..., description="Project slug or full project URL")
    api_key: str = Field(..., description="Anonymous or service role API key")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, description="Database/auth request timeout in seconds"
    )
    storage_timeout: float = Field(
        default=DEFAULT_STORAGE_TIMEOUT,
        description="Storage request timeout in seconds (uploads need longer)",
    )
    storage_base_url: str = Field(
        default=DEFAULT_STORAGE_URL, description="Storage API base URL"
    )
    auto_check_quota: bool = Field(
        default=True, description="Check storage quota before every upload"
    )
    project_slug: Optional[str] = Field(
        default=None, description="Storage project slug (derived from project_url)"
    )

    @field_validator("project_url", "api_key")
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("timeout", "storage_timeout")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout must be positive. Got: {v}")
        return v

    @model_validator(mode="after")
    def derive_project_slug(self) -> "WOWSQLConfig":
        if not self.project_slug:
            self.project_slug = project_slug_from_url(self.project_url)
        return self


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean value. Got: {raw}")


def load_config(use_env: bool = True, **overrides: Any) -> WOWSQLConfig:
    """Build client configuration from environment variables and overrides.

    Explicit keyword overrides win over environment variables.

    Args:
        use_env: Whether to read ``WOWSQL_*`` environment variables
        **overrides: Field values passed straight to ``WOWSQLConfig``

    Returns:
        WOWSQLConfig instance

    Raises:
        ValueError: If a required field is missing or a value is invalid
    """
    config_data: Dict[str, Any] = {}

    if use_env:
        if ENV_PROJECT_URL in os.environ:
            config_data["project_url"] = os.environ[ENV_PROJECT_URL]
        if ENV_API_KEY in os.environ:
            config_data["api_key"] = os.environ[ENV_API_KEY]
        if ENV_TIMEOUT in os.environ:
            config_data["timeout"] = float(os.environ[ENV_TIMEOUT])
        if ENV_STORAGE_TIMEOUT in os.environ:
            config_data["storage_timeout"] = float(os.environ[ENV_STORAGE_TIMEOUT])
        if ENV_STORAGE_URL in os.environ:
            config_data["storage_base_url"] = os.environ[ENV_STORAGE_URL]
        if ENV_AUTO_CHECK_QUOTA in os.environ:
            config_data["auto_check_quota"] = _parse_bool(
                ENV_AUTO_CHECK_QUOTA, os.environ[ENV_AUTO_CHECK_QUOTA]
            )

    config_data.update({k: v for k, v in overrides.items() if v is not None})

    if "project_url" not in config_data:
        raise ValueError(
            "Missing required field: project_url\n"
            f"  Fix: Set {ENV_PROJECT_URL} environment variable\n"
            "  Or: Pass project_url explicitly"
        )
    if "api_key" not in config_data:
        raise ValueError(
            "Missing required field: api_key\n"
            f"  Fix: Set {ENV_API_KEY} environment variable\n"
            "  Or: Pass api_key explicitly"
        )

    config = WOWSQLConfig(**config_data)
    logger.debug(f"Loaded WOWSQL configuration for project {config.project_slug}")
    return config
