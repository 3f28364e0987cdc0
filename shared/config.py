"""
Shared configuration management for the SSO provider services.
"""

import json
from typing import Annotated, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _env(name: str) -> AliasChoices:
    """Accept both the field name and its SSO_ prefixed environment variable."""
    return AliasChoices(name, f"SSO_{name.upper()}")


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias=_env("env"))
    log_level: str = Field(default="info", validation_alias=_env("log_level"))

    # Identity provider hosts
    sso_host: str = Field(default="localhost:8443", validation_alias=AliasChoices("sso_host", "SSO_HOST"))
    identity_host: str = Field(default="localhost:8090", validation_alias=_env("identity_host"))

    # Group allow-list, comma separated or JSON list
    allowed_groups: Annotated[List[str], NoDecode] = Field(
        default_factory=list, validation_alias=_env("allowed_groups")
    )

    # Endpoint overrides, defaulted from sso_host when unset
    login_url: Optional[str] = Field(default=None, validation_alias=_env("login_url"))
    redeem_url: Optional[str] = Field(default=None, validation_alias=_env("redeem_url"))
    profile_url: Optional[str] = Field(default=None, validation_alias=_env("profile_url"))
    validate_url: Optional[str] = Field(default=None, validation_alias=_env("validate_url"))
    scope: str = Field(default="", validation_alias=_env("scope"))

    # Outbound HTTP
    request_timeout: float = Field(default=10.0, validation_alias=_env("request_timeout"))

    @field_validator("allowed_groups", mode="before")
    @classmethod
    def _split_groups(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [group.strip() for group in value.split(",") if group.strip()]
        return value


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
