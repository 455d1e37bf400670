"""Report rendering for layerlint."""

from report.formatters import (
    format_json_report,
    format_text_report,
    format_violation,
    report_payload,
)

__all__ = [
    "format_json_report",
    "format_text_report",
    "format_violation",
    "report_payload",
]
