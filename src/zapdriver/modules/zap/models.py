"""Data models for ZAP scan orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .har import HarRequest
from .login import AuthenticationSettings

SESSION_NAME = "secureCodeBoxSession"
CONTEXT_NAME = "secureCodeBoxContext"
AUTH_USER = "Testuser"

# Sentinel user id for scans that run without the forced identity.
ANONYMOUS_USER = "-1"


class SitemapEntry(HarRequest):
    """A previously captured request, replayed into the engine before a scan."""


@dataclass
class ReplacerRule:
    """Declarative request/response mutation handed to the replacer add-on."""

    description: str
    match_type: str
    match_string: str
    replacement: str = ""
    match_regex: bool = False
    initiators: str = ""
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReplacerRule":
        return cls(
            description=data["description"],
            match_type=data["match_type"],
            match_string=data["match_string"],
            replacement=data.get("replacement") or "",
            match_regex=bool(data.get("match_regex", False)),
            initiators=data.get("initiators") or "",
            enabled=bool(data.get("enabled", True)),
        )


@dataclass
class TargetAttributes:
    """Per-target scan options and captured traffic."""

    sitemap: list[SitemapEntry] | None = None
    include_regex: list[str] = field(default_factory=list)
    exclude_regex: list[str] = field(default_factory=list)
    api_spec_url: str | None = None
    max_depth: int = 5
    delay_in_ms: int | None = None
    threads_per_host: int | None = None
    replacer_rules: list[ReplacerRule] = field(default_factory=list)
    authentication: AuthenticationSettings | None = None


@dataclass
class Target:
    """A scan subject."""

    location: str
    name: str = ""
    attributes: TargetAttributes = field(default_factory=TargetAttributes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Target":
        attrs = data.get("attributes") or {}
        sitemap = attrs.get("sitemap")
        auth = attrs.get("authentication")
        return cls(
            location=data["location"],
            name=data.get("name") or "",
            attributes=TargetAttributes(
                sitemap=None
                if sitemap is None
                else [SitemapEntry.from_dict(entry, strict=False) for entry in sitemap],
                include_regex=list(attrs.get("include_regex") or []),
                exclude_regex=list(attrs.get("exclude_regex") or []),
                api_spec_url=attrs.get("api_spec_url"),
                max_depth=int(attrs.get("max_depth", 5)),
                delay_in_ms=attrs.get("delay_in_ms"),
                threads_per_host=attrs.get("threads_per_host"),
                replacer_rules=[
                    ReplacerRule.from_dict(rule) for rule in attrs.get("replacer_rules") or []
                ],
                authentication=AuthenticationSettings.from_dict(auth) if auth else None,
            ),
        )


class ScanKind(str, Enum):
    SPIDER = "spider"
    ACTIVE_SCAN = "active_scan"


@dataclass
class ScanJob:
    """An engine job and its last reported progress."""

    scan_id: str
    kind: ScanKind
    progress: int = 0


@dataclass
class Reference:
    """Weakness reference attached to an alert finding."""

    id: str
    source: str


@dataclass
class Finding:
    """Normalized crawl record or alert."""

    location: str
    name: str = ""
    severity: str = ""
    description: str = ""
    hint: str = ""
    category: str = ""
    reference: Reference | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RateLimitConfig:
    """Active-scan throughput limits."""

    delay_in_ms: int
    threads_per_host: int

    def with_overrides(
        self, delay_in_ms: int | None = None, threads_per_host: int | None = None
    ) -> "RateLimitConfig":
        """Return limits where each supplied override replaces the default."""
        changes: dict[str, int] = {}
        if delay_in_ms is not None:
            changes["delay_in_ms"] = delay_in_ms
        if threads_per_host is not None:
            changes["threads_per_host"] = threads_per_host
        return replace(self, **changes)


class Status(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class StatusDetail:
    """Outcome of the engine health check."""

    name: str
    status: Status
    message: str
    details: dict[str, str] = field(default_factory=dict)


@dataclass
class ReplayResult:
    """Outcome of replaying one sitemap entry."""

    url: str
    submitted: bool
    reason: str = ""


@dataclass
class ReplayReport:
    """Per-entry outcomes of a traffic replay batch."""

    results: list[ReplayResult] = field(default_factory=list)

    @property
    def submitted(self) -> list[ReplayResult]:
        return [r for r in self.results if r.submitted]

    @property
    def skipped(self) -> list[ReplayResult]:
        return [r for r in self.results if not r.submitted]


@dataclass
class ScanReport:
    """Everything one workflow run produced."""

    target: str
    context_id: str = ""
    user_id: str = ANONYMOUS_USER
    replay: ReplayReport = field(default_factory=ReplayReport)
    spider_findings: list[Finding] = field(default_factory=list)
    scanner_findings: list[Finding] = field(default_factory=list)
