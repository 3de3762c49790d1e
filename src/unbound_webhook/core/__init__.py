"""Core library modules for reconciling records against unbound."""

from unbound_webhook.core.errors import (
    ApplyFailedError,
    ConfigurationError,
    InvalidPatternError,
    ResolverError,
    UpstreamUnavailableError,
    WebhookError,
)
from unbound_webhook.core.models import (
    Action,
    Changes,
    Endpoint,
    RecordType,
    ResourceRecord,
    UnboundChange,
)

__all__ = [
    "Action",
    "ApplyFailedError",
    "Changes",
    "ConfigurationError",
    "Endpoint",
    "InvalidPatternError",
    "RecordType",
    "ResolverError",
    "ResourceRecord",
    "UnboundChange",
    "UpstreamUnavailableError",
    "WebhookError",
]
