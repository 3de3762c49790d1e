"""Unbound client module."""

from unbound_webhook.core.unbound.client import UnboundControlClient

__all__ = ["UnboundControlClient"]
