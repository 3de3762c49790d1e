"""Core data models for the Unbound webhook."""

import ipaddress
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class RecordType(str, Enum):
    """Record types the provider manages."""

    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    MX = "MX"
    NS = "NS"
    SRV = "SRV"
    TXT = "TXT"


SUPPORTED_RECORD_TYPES = frozenset(t.value for t in RecordType)


def is_supported_record_type(record_type: str) -> bool:
    return record_type in SUPPORTED_RECORD_TYPES


class Action(str, Enum):
    """Resolver-side action for a single record."""

    CREATE = "CREATE"
    REMOVE = "REMOVE"


# ============================================================================
# external-dns Models
# ============================================================================


class ProviderSpecificProperty(BaseModel):
    """Provider specific key/value attached to an endpoint."""

    name: str
    value: str


class Endpoint(BaseModel):
    """Desired DNS record, possibly with several targets.

    Field aliases follow the external-dns webhook JSON format.
    """

    model_config = ConfigDict(populate_by_name=True)

    dns_name: str = Field(..., alias="dnsName")
    record_type: str = Field(..., alias="recordType")
    targets: list[str] = Field(default_factory=list)
    record_ttl: int | None = Field(default=None, alias="recordTTL")
    set_identifier: str = Field(default="", alias="setIdentifier")
    labels: dict[str, str] = Field(default_factory=dict)
    provider_specific: list[ProviderSpecificProperty] = Field(
        default_factory=list, alias="providerSpecific"
    )

    @field_validator("targets", "labels", "provider_specific", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return {} if info.field_name == "labels" else []
        return v

    @property
    def ttl_configured(self) -> bool:
        """external-dns treats a zero TTL as unset."""
        return self.record_ttl is not None and self.record_ttl > 0

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Changes(BaseModel):
    """Four-way diff computed by the external-dns planner."""

    model_config = ConfigDict(populate_by_name=True)

    create: list[Endpoint] = Field(default_factory=list, alias="Create")
    update_old: list[Endpoint] = Field(default_factory=list, alias="UpdateOld")
    update_new: list[Endpoint] = Field(default_factory=list, alias="UpdateNew")
    delete: list[Endpoint] = Field(default_factory=list, alias="Delete")

    @field_validator("create", "update_old", "update_new", "delete", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ============================================================================
# Unbound Models
# ============================================================================


class ResourceRecord(BaseModel):
    """Single-value record as stored in unbound local data."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    ttl: int
    value: str

    def to_local_data(self) -> str:
        """Render as the RR string accepted by ``local_data``."""
        return f"{self.name} {self.ttl} IN {self.type} {self.value}"

    def same_data(self, other: "ResourceRecord") -> bool:
        """Compare by (name, type, value), ignoring TTL and presentation differences."""
        return (
            normalize_name(self.name) == normalize_name(other.name)
            and self.type.upper() == other.type.upper()
            and normalize_value(self.type, self.value) == normalize_value(other.type, other.value)
        )


class UnboundChange(BaseModel):
    """One operation against the resolver."""

    action: Action
    record: ResourceRecord


def normalize_name(name: str) -> str:
    """Lower-case a DNS name and strip its trailing dot."""
    return name.rstrip(".").lower()


def normalize_value(record_type: str, value: str) -> str:
    """Canonical rdata for comparing a desired value with unbound's listing.

    Unbound prints addresses in compressed lower-case form and host names in
    record data fully qualified.
    """
    record_type = record_type.upper()
    if record_type in ("A", "AAAA"):
        try:
            return str(ipaddress.ip_address(value.strip()))
        except ValueError:
            return value.strip()
    if record_type in ("CNAME", "NS", "MX", "SRV", "PTR"):
        return " ".join(normalize_name(part) for part in value.split())
    return value
