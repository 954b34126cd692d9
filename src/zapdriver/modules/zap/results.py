"""Convert raw engine output into findings."""

from __future__ import annotations

from typing import Any

from .har import Har, HarRequest
from .models import Finding, Reference

CWE_DEFINITION_URL = "https://cwe.mitre.org/data/definitions/{cwe_id}.html"


def crawl_records(groups: Any) -> list[dict[str, Any]]:
    """Flatten the spider full results into the records that carry a message id.

    The response is a list of groups (in scope, out of scope, I/O errors);
    out-of-scope groups hold bare URL strings and are skipped.
    """
    if not isinstance(groups, list):
        return []
    records: list[dict[str, Any]] = []
    for group in groups:
        if not isinstance(group, dict):
            continue
        for items in group.values():
            if not isinstance(items, list):
                continue
            records.extend(
                item for item in items if isinstance(item, dict) and item.get("messageId")
            )
    return records


def spider_finding(
    record: dict[str, Any], request: HarRequest | None, target_url: str = ""
) -> Finding:
    """Build a crawl finding; the record URL, then the target, stand in for the request."""
    if request is not None and request.url:
        location = request.url
    else:
        location = str(record.get("url") or target_url)
    return Finding(location=location, attributes={"request": request})


def cwe_reference(cwe_id: Any) -> Reference:
    # The id keeps the historic "CVE-" prefix even though the number is a CWE id.
    return Reference(
        id=f"CVE-{cwe_id}",
        source=CWE_DEFINITION_URL.format(cwe_id=cwe_id),
    )


def _enum_label(value: Any) -> str:
    return str(value or "").replace(" ", "")


def alert_finding(alert: dict[str, Any], har: Har | None, target_url: str = "") -> Finding:
    """Build a finding from one ``core/view/alerts`` entry.

    Alerts without a URL are located at ``target_url``.
    """
    name = str(alert.get("name") or alert.get("alert") or "")
    references = str(alert.get("reference") or "")
    return Finding(
        location=str(alert.get("url") or target_url),
        name=name,
        severity=_enum_label(alert.get("risk")),
        description=str(alert.get("description") or ""),
        hint=str(alert.get("solution") or ""),
        category=name,
        reference=cwe_reference(alert.get("cweid", "")),
        attributes={
            "HAR": har,
            "OTHER": alert.get("other", ""),
            "ATTACK": alert.get("attack", ""),
            "CONFIDENCE": _enum_label(alert.get("confidence")),
            "EVIDENCE": alert.get("evidence", ""),
            "WASC_ID": alert.get("wascid", ""),
            "PLUGIN_ID": alert.get("pluginId", ""),
            "OTHER_REFERENCES": references.split("\n"),
        },
    )
