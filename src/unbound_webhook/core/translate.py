"""Conversion between external-dns endpoints and unbound records."""

from unbound_webhook.core.models import Action, Endpoint, ResourceRecord, UnboundChange


def expand_endpoint(endpoint: Endpoint, default_ttl: int) -> list[ResourceRecord]:
    """Fan an endpoint out to one record per target, keeping target order."""
    ttl = endpoint.record_ttl if endpoint.ttl_configured else default_ttl
    return [
        ResourceRecord(
            name=endpoint.dns_name,
            type=endpoint.record_type,
            ttl=ttl,
            value=target,
        )
        for target in endpoint.targets
    ]


def collapse_record(record: ResourceRecord) -> Endpoint:
    """Single-target endpoint for one listed record.

    Records sharing a name and type are not merged back together.
    """
    return Endpoint(
        dns_name=record.name,
        record_type=record.type,
        targets=[record.value],
        record_ttl=record.ttl,
    )


def new_changes(action: Action, endpoints: list[Endpoint], default_ttl: int) -> list[UnboundChange]:
    changes: list[UnboundChange] = []
    for endpoint in endpoints:
        for record in expand_endpoint(endpoint, default_ttl):
            changes.append(UnboundChange(action=action, record=record))
    return changes
