"""Pytest configuration and fixtures."""

import pytest

from unbound_webhook.core.base import BaseResolverClient
from unbound_webhook.core.domain_filter import DomainFilterSpec, build_domain_filter
from unbound_webhook.core.errors import ResolverError
from unbound_webhook.core.models import ResourceRecord
from unbound_webhook.core.provider import UnboundProvider


class FakeResolverClient(BaseResolverClient):
    """In-memory local data store recording every call."""

    def __init__(self, records: list[ResourceRecord] | None = None):
        self.records = list(records or [])
        self.calls: list[tuple[str, ResourceRecord]] = []
        self.fail_on: ResourceRecord | None = None
        self.list_error: Exception | None = None

    async def list_records(self) -> list[ResourceRecord]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.records)

    async def add_record(self, record: ResourceRecord) -> None:
        self.calls.append(("add", record))
        if record == self.fail_on:
            raise ResolverError("error add failed")
        if record not in self.records:
            self.records.append(record)

    async def remove_record(self, record: ResourceRecord) -> None:
        self.calls.append(("remove", record))
        if record == self.fail_on:
            raise ResolverError("error remove failed")
        self.records = [r for r in self.records if r != record]


@pytest.fixture
def fake_client() -> FakeResolverClient:
    return FakeResolverClient()


@pytest.fixture
def sample_records() -> list[ResourceRecord]:
    return [
        ResourceRecord(name="test.lan", type="A", ttl=300, value="192.168.1.1"),
        ResourceRecord(name="a.example.com", type="CNAME", ttl=3600, value="abc.def"),
    ]


@pytest.fixture
def make_provider():
    """Factory building a provider around a fake client."""

    def _make(
        records: list[ResourceRecord] | None = None,
        spec: DomainFilterSpec | None = None,
        dry_run: bool = False,
        default_ttl: int = 300,
    ) -> UnboundProvider:
        return UnboundProvider(
            client=FakeResolverClient(records),
            domain_filter=build_domain_filter(spec or DomainFilterSpec()),
            dry_run=dry_run,
            default_ttl=default_ttl,
        )

    return _make
