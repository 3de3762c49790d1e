"""Environment-driven configuration for the webhook process."""

import os
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from unbound_webhook.core.domain_filter import DomainFilterSpec
from unbound_webhook.core.errors import ConfigurationError


def _split_list(value: Any) -> Any:
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return value


def _load(model: type[BaseModel], env_map: Mapping[str, str], environ: Mapping[str, str] | None):
    environ = os.environ if environ is None else environ
    values = {field: environ[var] for var, field in env_map.items() if var in environ}
    try:
        return model(**values)
    except ValidationError as e:
        missing = [
            var for var, field in env_map.items()
            if any(err["type"] == "missing" and err["loc"] == (field,) for err in e.errors())
        ]
        if missing:
            raise ConfigurationError(f"Missing required environment variable(s): {', '.join(missing)}") from e
        raise ConfigurationError(f"Invalid {model.__name__}: {e}") from e


# ============================================================================
# Provider Configuration
# ============================================================================


class ProviderConfiguration(BaseModel):
    """Unbound provider settings."""

    host: str = Field(..., min_length=1, description="Unbound control endpoint")
    ca_pem_path: str = Field(default="", description="Unbound server certificate")
    key_pem_path: str = Field(default="", description="Control client private key")
    cert_pem_path: str = Field(default="", description="Control client certificate")
    dry_run: bool = Field(default=False, description="Log changes without applying them")
    default_ttl: int = Field(default=300, ge=0, description="TTL for endpoints without one")
    domain_filter: list[str] = Field(default_factory=list)
    exclude_domains: list[str] = Field(default_factory=list)
    regex_domain_filter: str = ""
    regex_domain_exclusion: str = ""

    ENV: ClassVar[dict[str, str]] = {
        "UNBOUND_HOST": "host",
        "UNBOUND_CA_PEM_PATH": "ca_pem_path",
        "UNBOUND_KEY_PEM_PATH": "key_pem_path",
        "UNBOUND_CERT_PEM_PATH": "cert_pem_path",
        "DRY_RUN": "dry_run",
        "DEFAULT_TTL": "default_ttl",
        "DOMAIN_FILTER": "domain_filter",
        "EXCLUDE_DOMAIN_FILTER": "exclude_domains",
        "REGEXP_DOMAIN_FILTER": "regex_domain_filter",
        "REGEXP_DOMAIN_FILTER_EXCLUSION": "regex_domain_exclusion",
    }

    @field_validator("domain_filter", "exclude_domains", mode="before")
    @classmethod
    def split_comma_list(cls, v: Any) -> Any:
        return _split_list(v)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProviderConfiguration":
        return _load(cls, cls.ENV, environ)

    @property
    def domain_filter_spec(self) -> DomainFilterSpec:
        return DomainFilterSpec(
            include=self.domain_filter,
            exclude=self.exclude_domains,
            regex_include=self.regex_domain_filter,
            regex_exclude=self.regex_domain_exclusion,
        )


# ============================================================================
# Server Options
# ============================================================================


class ServerOptions(BaseModel):
    """Listen addresses and timeouts of the webhook and health servers."""

    webhook_host: str = "localhost"
    webhook_port: int = Field(default=8888, ge=0, le=65535)
    health_host: str = "0.0.0.0"
    health_port: int = Field(default=8080, ge=0, le=65535)
    read_timeout_ms: int = Field(default=60000, gt=0)
    write_timeout_ms: int = Field(default=60000, gt=0)

    ENV: ClassVar[dict[str, str]] = {
        "WEBHOOK_HOST": "webhook_host",
        "WEBHOOK_PORT": "webhook_port",
        "HEALTH_HOST": "health_host",
        "HEALTH_PORT": "health_port",
        "READ_TIMEOUT": "read_timeout_ms",
        "WRITE_TIMEOUT": "write_timeout_ms",
    }

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerOptions":
        return _load(cls, cls.ENV, environ)

    @property
    def webhook_address(self) -> str:
        return f"{self.webhook_host}:{self.webhook_port}"

    @property
    def health_address(self) -> str:
        return f"{self.health_host}:{self.health_port}"

    @property
    def read_timeout(self) -> float:
        """Read timeout in seconds."""
        return self.read_timeout_ms / 1000

    @property
    def write_timeout(self) -> float:
        """Write timeout in seconds."""
        return self.write_timeout_ms / 1000
