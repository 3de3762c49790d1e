"""external-dns provider backed by unbound local data."""

import logging

from unbound_webhook.config import ProviderConfiguration
from unbound_webhook.core.base import BaseResolverClient
from unbound_webhook.core.domain_filter import DomainFilter, SuffixDomainFilter, build_domain_filter
from unbound_webhook.core.errors import ApplyFailedError, ResolverError
from unbound_webhook.core.models import (
    Action,
    Changes,
    Endpoint,
    UnboundChange,
    is_supported_record_type,
)
from unbound_webhook.core.translate import collapse_record, new_changes
from unbound_webhook.core.unbound.client import UnboundControlClient

logger = logging.getLogger(__name__)


class UnboundProvider:
    """
    Reconciles external-dns change sets against an unbound resolver.

    Updates are applied as remove-then-create: every old record is removed
    before any new record is added, because unbound local data only offers
    add and remove keyed on the exact record.
    """

    def __init__(
        self,
        client: BaseResolverClient,
        domain_filter: DomainFilter | None = None,
        dry_run: bool = False,
        default_ttl: int = 300,
    ):
        self.client = client
        self.domain_filter = domain_filter or SuffixDomainFilter([], [])
        self.dry_run = dry_run
        self.default_ttl = default_ttl

    @classmethod
    def from_config(cls, config: ProviderConfiguration) -> "UnboundProvider":
        """Build a provider talking to the unbound control endpoint in ``config``."""
        return cls(
            client=UnboundControlClient.from_config(config),
            domain_filter=build_domain_filter(config.domain_filter_spec),
            dry_run=config.dry_run,
            default_ttl=config.default_ttl,
        )

    async def records(self) -> list[Endpoint]:
        """List managed records, one endpoint per resolver record."""
        endpoints: list[Endpoint] = []

        for record in await self.client.list_records():
            if not is_supported_record_type(record.type):
                continue
            if not self.domain_filter.match(record.name):
                continue
            endpoints.append(collapse_record(record))

        return endpoints

    async def apply_changes(self, changes: Changes) -> None:
        """Apply a change set, stopping at the first resolver failure."""
        combined: list[UnboundChange] = []
        combined += new_changes(Action.CREATE, changes.create, self.default_ttl)
        combined += new_changes(Action.REMOVE, changes.update_old, self.default_ttl)
        combined += new_changes(Action.CREATE, changes.update_new, self.default_ttl)
        combined += new_changes(Action.REMOVE, changes.delete, self.default_ttl)

        await self._submit_changes(combined)

    async def _submit_changes(self, changes: list[UnboundChange]) -> None:
        if not changes:
            logger.info("All records are already up to date")
            return

        for change in changes:
            rr = change.record
            logger.info(
                f"Changing record. record={rr.name} type={rr.type} "
                f"ttl={rr.ttl} action={change.action.value}"
            )

            if self.dry_run:
                continue

            try:
                if change.action == Action.CREATE:
                    await self.client.add_record(rr)
                else:
                    await self.client.remove_record(rr)
            except ResolverError as e:
                raise ApplyFailedError(change, str(e)) from e

    def adjust_endpoints(self, endpoints: list[Endpoint]) -> list[Endpoint]:
        """Make every DNS name fully qualified.

        Unbound lists names with a trailing dot, so desired endpoints need one
        too for the planner to compare them equal.
        """
        adjusted: list[Endpoint] = []
        for endpoint in endpoints:
            if not endpoint.dns_name.endswith("."):
                endpoint = endpoint.model_copy(update={"dns_name": endpoint.dns_name + "."})
            adjusted.append(endpoint)
        return adjusted
