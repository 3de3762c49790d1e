"""Tests for the reconciliation engine."""

import logging

import pytest

from unbound_webhook.config import ProviderConfiguration
from unbound_webhook.core.domain_filter import DomainFilterSpec, RegexDomainFilter
from unbound_webhook.core.errors import ApplyFailedError, ConfigurationError, UpstreamUnavailableError
from unbound_webhook.core.models import Action, Changes, Endpoint, ResourceRecord
from unbound_webhook.core.provider import UnboundProvider
from unbound_webhook.core.unbound.client import UnboundControlClient


def rr(name: str, rtype: str, ttl: int, value: str) -> ResourceRecord:
    return ResourceRecord(name=name, type=rtype, ttl=ttl, value=value)


def ep(name: str, rtype: str, *targets: str, ttl: int | None = None) -> Endpoint:
    return Endpoint(dns_name=name, record_type=rtype, targets=list(targets), record_ttl=ttl)


class TestNewProvider:
    """Tests for provider construction from configuration."""

    def test_from_config(self):
        provider = UnboundProvider.from_config(
            ProviderConfiguration(host="testing", dry_run=True, regex_domain_filter=r"\.lan$")
        )

        assert isinstance(provider.client, UnboundControlClient)
        assert provider.client.host == "testing"
        assert provider.dry_run is True
        assert provider.default_ttl == 300
        assert isinstance(provider.domain_filter, RegexDomainFilter)

    def test_from_config_missing_tls_files(self):
        config = ProviderConfiguration(
            host="testing",
            ca_pem_path="./notexist",
            key_pem_path="./notexist",
            cert_pem_path="./notexist",
        )
        with pytest.raises(ConfigurationError):
            UnboundProvider.from_config(config)


class TestRecords:
    """Tests for listing records."""

    @pytest.mark.asyncio
    async def test_no_record(self, make_provider):
        assert await make_provider([]).records() == []

    @pytest.mark.asyncio
    async def test_with_records(self, make_provider, sample_records):
        result = await make_provider(sample_records).records()

        assert result == [
            ep("test.lan", "A", "192.168.1.1", ttl=300),
            ep("a.example.com", "CNAME", "abc.def", ttl=3600),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "spec,expected_names",
        [
            (DomainFilterSpec(include=["example.com"]), ["a.example.com"]),
            (DomainFilterSpec(exclude=["example.com"]), ["test.lan"]),
            (DomainFilterSpec(regex_include=".*.com"), ["a.example.com"]),
        ],
    )
    async def test_with_domain_filter(self, make_provider, sample_records, spec, expected_names):
        result = await make_provider(sample_records, spec=spec).records()
        assert [e.dns_name for e in result] == expected_names

    @pytest.mark.asyncio
    async def test_with_regex_exclude(self, make_provider):
        records = [rr("test.lan", "A", 300, "192.168.1.1"), rr("a.test.lan", "CNAME", 3600, "abc.def")]
        spec = DomainFilterSpec(regex_include=".*.lan", regex_exclude="^a.*")

        result = await make_provider(records, spec=spec).records()

        assert result == [ep("test.lan", "A", "192.168.1.1", ttl=300)]

    @pytest.mark.asyncio
    async def test_unsupported_types_skipped(self, make_provider):
        records = [
            rr("test.lan", "PTR", 300, "host.lan."),
            rr("test.lan", "SOA", 300, "ns.lan. admin.lan. 1 2 3 4 5"),
            rr("test.lan", "TXT", 300, '"v=spf1 -all"'),
        ]
        result = await make_provider(records).records()
        assert [e.record_type for e in result] == ["TXT"]

    @pytest.mark.asyncio
    async def test_multiple_values_not_merged(self, make_provider):
        records = [rr("rr.lan", "A", 60, "10.0.0.1"), rr("rr.lan", "A", 60, "10.0.0.2")]
        result = await make_provider(records).records()
        assert result == [ep("rr.lan", "A", "10.0.0.1", ttl=60), ep("rr.lan", "A", "10.0.0.2", ttl=60)]

    @pytest.mark.asyncio
    async def test_upstream_unavailable_propagates(self, make_provider):
        provider = make_provider()
        provider.client.list_error = UpstreamUnavailableError("connection refused")

        with pytest.raises(UpstreamUnavailableError):
            await provider.records()


class TestApplyChanges:
    """Tests for applying change sets."""

    @pytest.mark.asyncio
    async def test_no_changes(self, make_provider, caplog):
        provider = make_provider([rr("test.lan", "A", 300, "192.168.1.1")])

        with caplog.at_level(logging.INFO):
            await provider.apply_changes(Changes())

        assert provider.client.calls == []
        assert provider.client.records == [rr("test.lan", "A", 300, "192.168.1.1")]
        assert "All records are already up to date" in caplog.text

    @pytest.mark.asyncio
    async def test_create_on_empty_store(self, make_provider):
        provider = make_provider([])
        await provider.apply_changes(Changes(create=[ep("test.lan", "A", "192.168.1.1")]))
        assert provider.client.records == [rr("test.lan", "A", 300, "192.168.1.1")]

    @pytest.mark.asyncio
    async def test_create_with_existing_record(self, make_provider):
        provider = make_provider([rr("a.example.com", "CNAME", 3600, "abc.def")])
        await provider.apply_changes(Changes(create=[ep("test.lan", "A", "192.168.1.1", ttl=300)]))

        assert provider.client.records == [
            rr("a.example.com", "CNAME", 3600, "abc.def"),
            rr("test.lan", "A", 300, "192.168.1.1"),
        ]

    @pytest.mark.asyncio
    async def test_update_replaces_value(self, make_provider):
        provider = make_provider([rr("test.lan", "A", 300, "192.168.1.1")])
        await provider.apply_changes(
            Changes(
                update_old=[ep("test.lan", "A", "192.168.1.1", ttl=300)],
                update_new=[ep("test.lan", "A", "192.168.1.2", ttl=300)],
            )
        )
        assert provider.client.records == [rr("test.lan", "A", 300, "192.168.1.2")]

    @pytest.mark.asyncio
    async def test_delete(self, make_provider, sample_records):
        provider = make_provider(sample_records)
        await provider.apply_changes(Changes(delete=[ep("a.example.com", "CNAME", "abc.def", ttl=3600)]))
        assert provider.client.records == [rr("test.lan", "A", 300, "192.168.1.1")]

    @pytest.mark.asyncio
    async def test_operation_order(self, make_provider):
        provider = make_provider([])
        await provider.apply_changes(
            Changes(
                delete=[ep("d.lan", "A", "4.4.4.4")],
                update_new=[ep("u.lan", "A", "3.3.3.3", "3.3.3.4")],
                update_old=[ep("u.lan", "A", "2.2.2.2")],
                create=[ep("c.lan", "A", "1.1.1.1")],
            )
        )

        assert [(op, r.name, r.value) for op, r in provider.client.calls] == [
            ("add", "c.lan", "1.1.1.1"),
            ("remove", "u.lan", "2.2.2.2"),
            ("add", "u.lan", "3.3.3.3"),
            ("add", "u.lan", "3.3.3.4"),
            ("remove", "d.lan", "4.4.4.4"),
        ]

    @pytest.mark.asyncio
    async def test_dry_run_never_touches_resolver(self, make_provider, caplog):
        initial = [rr("test.lan", "A", 300, "192.168.1.1")]
        provider = make_provider(initial, dry_run=True)

        with caplog.at_level(logging.INFO):
            await provider.apply_changes(
                Changes(
                    create=[ep("new.lan", "A", "10.0.0.1")],
                    update_old=[ep("test.lan", "A", "192.168.1.1", ttl=300)],
                    update_new=[ep("test.lan", "A", "192.168.1.2", ttl=300)],
                    delete=[ep("test.lan", "A", "192.168.1.1", ttl=300)],
                )
            )

        assert provider.client.calls == []
        assert provider.client.records == initial
        assert caplog.text.count("Changing record.") == 4

    @pytest.mark.asyncio
    async def test_logs_each_change(self, make_provider, caplog):
        provider = make_provider([])
        with caplog.at_level(logging.INFO):
            await provider.apply_changes(Changes(create=[ep("test.lan", "A", "192.168.1.1", ttl=60)]))

        assert "record=test.lan type=A ttl=60 action=CREATE" in caplog.text

    @pytest.mark.asyncio
    async def test_first_failure_aborts(self, make_provider):
        provider = make_provider([])
        failing = rr("b.lan", "A", 300, "2.2.2.2")
        provider.client.fail_on = failing

        with pytest.raises(ApplyFailedError) as exc:
            await provider.apply_changes(
                Changes(create=[ep("a.lan", "A", "1.1.1.1"), ep("b.lan", "A", "2.2.2.2"), ep("c.lan", "A", "3.3.3.3")])
            )

        assert exc.value.change.record == failing
        assert exc.value.change.action == Action.CREATE
        assert "b.lan" in str(exc.value)
        assert [r.name for _, r in provider.client.calls] == ["a.lan", "b.lan"]
        assert provider.client.records == [rr("a.lan", "A", 300, "1.1.1.1")]

    @pytest.mark.asyncio
    async def test_create_then_list_round_trip(self, make_provider):
        provider = make_provider([], spec=DomainFilterSpec(include=["lan"]))
        await provider.apply_changes(Changes(create=[ep("rr.lan", "A", "10.0.0.1", "10.0.0.2", ttl=120)]))

        assert await provider.records() == [
            ep("rr.lan", "A", "10.0.0.1", ttl=120),
            ep("rr.lan", "A", "10.0.0.2", ttl=120),
        ]


class TestAdjustEndpoints:
    """Tests for endpoint normalisation."""

    def test_adds_trailing_dot(self, make_provider):
        provider = make_provider()
        result = provider.adjust_endpoints([ep("test.lan", "A", "1.1.1.1"), ep("fqdn.lan.", "A", "2.2.2.2")])
        assert [e.dns_name for e in result] == ["test.lan.", "fqdn.lan."]

    def test_other_fields_unchanged(self, make_provider):
        original = Endpoint(
            dns_name="test.lan",
            record_type="TXT",
            targets=['"a"', '"b"'],
            record_ttl=42,
            labels={"owner": "default"},
        )
        [adjusted] = make_provider().adjust_endpoints([original])

        assert adjusted.model_dump(exclude={"dns_name"}) == original.model_dump(exclude={"dns_name"})
        assert original.dns_name == "test.lan"

    def test_idempotent(self, make_provider):
        provider = make_provider()
        endpoints = [ep("a.lan", "A", "1.1.1.1"), ep("b.lan.", "CNAME", "a.lan")]

        once = provider.adjust_endpoints(endpoints)
        assert provider.adjust_endpoints(once) == once

    def test_empty(self, make_provider):
        assert make_provider().adjust_endpoints([]) == []
