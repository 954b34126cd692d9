"""Findings report output."""

from .json_report import build_report_data, finding_to_dict, write_findings_report

__all__ = [
    "build_report_data",
    "finding_to_dict",
    "write_findings_report",
]
