"""Exception hierarchy for the Unbound webhook."""

from typing import Any


class WebhookError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(WebhookError):
    """Invalid or incomplete configuration; fatal at startup."""


class InvalidPatternError(ConfigurationError):
    """A domain filter regular expression failed to compile."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid domain filter pattern '{pattern}': {reason}")


class ResolverError(WebhookError):
    """The resolver rejected a control command."""


class UpstreamUnavailableError(ResolverError):
    """The resolver control channel could not be reached."""


class ApplyFailedError(WebhookError):
    """A single change failed while applying a change set.

    Changes submitted before the failing one stay applied.
    """

    def __init__(self, change: Any, reason: str):
        self.change = change
        super().__init__(
            f"Failed to {change.action.value.lower()} record "
            f"{change.record.name} {change.record.type} {change.record.value}: {reason}"
        )
