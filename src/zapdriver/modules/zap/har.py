"""HTTP Archive (HAR) models for captured transactions.

ZAP returns a HAR document per message id. Only the request portion is used
by the result normalizer, but the full entry list is kept so findings can
carry the whole transaction.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


class HarParseError(ValueError):
    """A HAR document could not be parsed."""


@dataclass
class HarRequest:
    """Request portion of a HAR entry."""

    method: str
    url: str
    http_version: str = "HTTP/1.1"
    headers: list[dict[str, str]] = field(default_factory=list)
    query_string: list[dict[str, str]] = field(default_factory=list)
    cookies: list[dict[str, Any]] = field(default_factory=list)
    post_data: dict[str, Any] | None = None
    headers_size: int = -1
    body_size: int = -1
    comment: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = True) -> "HarRequest":
        """Build a request; ``strict=False`` keeps entries that lack a method or URL."""
        if not isinstance(data, dict):
            raise HarParseError("HAR request must be an object")
        method = data.get("method") or ""
        url = data.get("url") or ""
        if strict and (not method or not url):
            raise HarParseError("HAR request requires method and url")
        try:
            return cls(
                method=str(method),
                url=str(url),
                http_version=str(data.get("httpVersion") or "HTTP/1.1"),
                headers=list(data.get("headers") or []),
                query_string=list(data.get("queryString") or []),
                cookies=list(data.get("cookies") or []),
                post_data=data.get("postData"),
                headers_size=int(data.get("headersSize", -1)),
                body_size=int(data.get("bodySize", -1)),
                comment=str(data.get("comment") or ""),
            )
        except (TypeError, ValueError) as exc:
            raise HarParseError(f"Malformed HAR request: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "method": self.method,
            "url": self.url,
            "httpVersion": self.http_version,
            "cookies": self.cookies,
            "headers": self.headers,
            "queryString": self.query_string,
            "headersSize": self.headers_size,
            "bodySize": self.body_size,
        }
        if self.post_data is not None:
            data["postData"] = self.post_data
        if self.comment:
            data["comment"] = self.comment
        return data

    def to_har_json(self) -> str:
        """Serialize to the archive-request wire format."""
        return json.dumps(self.to_dict())


@dataclass
class HarEntry:
    """One request/response pair."""

    request: HarRequest
    response: dict[str, Any] = field(default_factory=dict)
    started_date_time: str = ""
    time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "startedDateTime": self.started_date_time,
            "time": self.time,
            "request": self.request.to_dict(),
            "response": self.response,
        }


@dataclass
class Har:
    """A parsed HAR log."""

    entries: list[HarEntry] = field(default_factory=list)
    version: str = "1.2"
    creator: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "Har":
        try:
            document = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise HarParseError(f"HAR document is not valid JSON: {exc}") from exc

        log = document.get("log") if isinstance(document, dict) else None
        if not isinstance(log, dict):
            raise HarParseError("HAR document has no log object")
        raw_entries = log.get("entries") or []
        if not isinstance(raw_entries, list):
            raise HarParseError("HAR log entries must be a list")

        entries = []
        for item in raw_entries:
            if not isinstance(item, dict):
                raise HarParseError("HAR entry must be an object")
            response = item.get("response") or {}
            try:
                elapsed = float(item.get("time") or 0.0)
            except (TypeError, ValueError) as exc:
                raise HarParseError(f"Malformed HAR entry time: {exc}") from exc
            entries.append(
                HarEntry(
                    request=HarRequest.from_dict(item.get("request")),
                    response=response if isinstance(response, dict) else {},
                    started_date_time=str(item.get("startedDateTime") or ""),
                    time=elapsed,
                )
            )
        return cls(
            entries=entries,
            version=str(log.get("version") or "1.2"),
            creator=log.get("creator") or {},
        )

    @property
    def first_request(self) -> HarRequest | None:
        if not self.entries:
            return None
        return self.entries[0].request

    def to_dict(self) -> dict[str, Any]:
        return {
            "log": {
                "version": self.version,
                "creator": self.creator,
                "entries": [entry.to_dict() for entry in self.entries],
            }
        }
