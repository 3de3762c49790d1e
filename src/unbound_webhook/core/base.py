"""Abstract base class defining the resolver capability."""

from abc import ABC, abstractmethod

from unbound_webhook.core.models import ResourceRecord


class BaseResolverClient(ABC):
    """Dynamic record store of a DNS resolver.

    Implementations must treat ``add_record`` of an existing record and
    ``remove_record`` of an absent record as no-ops.
    """

    @abstractmethod
    async def list_records(self) -> list[ResourceRecord]:
        """List every record currently held by the resolver."""
        ...

    @abstractmethod
    async def add_record(self, record: ResourceRecord) -> None:
        """Add a single record."""
        ...

    @abstractmethod
    async def remove_record(self, record: ResourceRecord) -> None:
        """Remove a single record."""
        ...
