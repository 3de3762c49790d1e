"""Domain filters restricting which names the provider reads and writes."""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from unbound_webhook.core.errors import InvalidPatternError
from unbound_webhook.core.models import normalize_name

logger = logging.getLogger(__name__)


class DomainFilterSpec(BaseModel):
    """Static filter configuration.

    The regex lists win over the plain lists whenever ``regex_include`` is set.
    """

    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    regex_include: str = ""
    regex_exclude: str = ""

    @property
    def uses_regex(self) -> bool:
        return self.regex_include != ""


class DomainFilter(ABC):
    """Predicate over DNS names."""

    @abstractmethod
    def match(self, name: str) -> bool:
        ...

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """Payload returned to external-dns during webhook negotiation."""
        ...


class SuffixDomainFilter(DomainFilter):
    """Include/exclude lists matched on domain label boundaries."""

    def __init__(self, include: list[str], exclude: list[str]):
        self.include = _clean(include)
        self.exclude = _clean(exclude)

    def match(self, name: str) -> bool:
        name = normalize_name(name)
        if self.include and not any(_in_domain(name, f) for f in self.include):
            return False
        return not any(_in_domain(name, f) for f in self.exclude)

    def to_json(self) -> dict[str, Any]:
        return {"include": list(self.include), "exclude": list(self.exclude)}


class RegexDomainFilter(DomainFilter):
    """Regular-expression include pattern with an optional exclusion."""

    def __init__(self, include: str, exclude: str = ""):
        self.include = _compile(include)
        self.exclude = _compile(exclude) if exclude else None

    def match(self, name: str) -> bool:
        if not self.include.search(name):
            return False
        return self.exclude is None or not self.exclude.search(name)

    def to_json(self) -> dict[str, Any]:
        return {
            "regexInclude": self.include.pattern,
            "regexExclude": self.exclude.pattern if self.exclude else "",
        }


def build_domain_filter(spec: DomainFilterSpec) -> DomainFilter:
    """Build the filter selected by ``spec`` and log which one is active."""
    parts: list[str] = []

    if spec.uses_regex:
        parts.append(f"Regexp domain filter: '{spec.regex_include}'")
        if spec.regex_exclude:
            parts.append(f"with exclusion: '{spec.regex_exclude}'")
        domain_filter: DomainFilter = RegexDomainFilter(spec.regex_include, spec.regex_exclude)
    else:
        if _clean(spec.include):
            parts.append(f"Domain filter: '{','.join(spec.include)}'")
        if _clean(spec.exclude):
            parts.append(f"Exclude domain filter: '{','.join(spec.exclude)}'")
        domain_filter = SuffixDomainFilter(spec.include, spec.exclude)

    logger.info(f"Creating Unbound provider with {', '.join(parts) or 'no kind of domain filters'}")
    return domain_filter


def _clean(entries: list[str]) -> list[str]:
    cleaned = (normalize_name(e.strip()) for e in entries)
    return [e for e in cleaned if e]


def _in_domain(name: str, domain: str) -> bool:
    """Label-boundary suffix test; a leading dot matches subdomains only."""
    if domain.startswith("."):
        return name.endswith(domain)
    return name == domain or name.endswith("." + domain)


def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e
