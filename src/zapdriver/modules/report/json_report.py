"""JSON findings report rendering."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from zapdriver.modules.zap.models import Finding, ScanReport


def _jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {k: _jsonable(v) for k, v in asdict(value).items()}
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def finding_to_dict(finding: Finding) -> dict[str, Any]:
    return {
        "location": finding.location,
        "name": finding.name,
        "severity": finding.severity,
        "category": finding.category,
        "description": finding.description,
        "hint": finding.hint,
        "reference": _jsonable(finding.reference),
        "attributes": _jsonable(finding.attributes),
    }


def build_report_data(report: ScanReport, version: str = "") -> dict[str, Any]:
    """Return the report as plain JSON-serializable data."""
    severities = Counter(f.severity or "Unknown" for f in report.scanner_findings)
    return {
        "report_metadata": {
            "generated_at": datetime.now().isoformat(),
            "tool": "zapdriver",
            "zap_version": version,
        },
        "target": report.target,
        "summary": {
            "spider_urls": len(report.spider_findings),
            "alerts": len(report.scanner_findings),
            "by_severity": dict(sorted(severities.items())),
            "replayed": len(report.replay.submitted),
            "replay_skipped": len(report.replay.skipped),
        },
        "spider_findings": [finding_to_dict(f) for f in report.spider_findings],
        "scanner_findings": [finding_to_dict(f) for f in report.scanner_findings],
    }


def write_findings_report(path: Path, report: ScanReport, version: str = "") -> Path:
    """Write a JSON findings report and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_report_data(report, version), indent=2), encoding="utf-8")
    return path
