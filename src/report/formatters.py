"""Human-readable and JSON rendering of check results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from checks.engine import CheckResult
    from checks.models import Violation

_TITLES = {
    "isolation": "DOMAIN ISOLATION VIOLATION",
    "direction": "LAYER DEPENDENCY VIOLATION",
    "cycle": "CIRCULAR DEPENDENCY",
    "immutability": "VALUE OBJECT MUTABILITY VIOLATION",
    "interface_contract": "REPOSITORY INTERFACE VIOLATION",
    "purity": "SERVICE PURITY VIOLATION",
}


def format_violation(violation: Violation) -> str:
    """Render one violation: subject, offending relation, layers/types, hint."""
    title = _TITLES.get(violation.kind.value, violation.kind.value.upper())
    lines = [
        f"{title}: {violation.subject}",
        f"  {violation.message}",
        f"  relation: {violation.detail}",
    ]
    if violation.layers:
        lines.append(f"  involves: {', '.join(violation.layers)}")
    if violation.hint:
        lines.append(f"  hint: {violation.hint}")
    return "\n".join(lines)


def format_text_report(result: CheckResult, *, package_count: int) -> str:
    """Render all violations followed by a per-rule summary."""
    sections = [format_violation(v) for v in result.violations]

    summary = ["Summary:"]
    for outcome in result.outcomes:
        if outcome.passed:
            summary.append(f"  PASS {outcome.kind.value}")
        else:
            count = len(outcome.violations)
            noun = "violation" if count == 1 else "violations"
            summary.append(f"  FAIL {outcome.kind.value} ({count} {noun})")

    total = len(result.violations)
    status = "passed" if result.ok else "failed"
    summary.append(
        f"{package_count} files analyzed, {total} violation(s): {status}"
    )
    sections.append("\n".join(summary))
    return "\n\n".join(sections) + "\n"


def report_payload(result: CheckResult, *, package_count: int) -> dict[str, Any]:
    return {
        "ok": result.ok,
        "package_count": package_count,
        "rules": {
            outcome.kind.value: {
                "passed": outcome.passed,
                "violation_count": len(outcome.violations),
            }
            for outcome in result.outcomes
        },
        "violations": [v.model_dump(mode="json") for v in result.violations],
    }


def format_json_report(result: CheckResult, *, package_count: int) -> str:
    payload = report_payload(result, package_count=package_count)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(payload, option=opts).decode("utf-8") + "\n"


__all__ = [
    "format_json_report",
    "format_text_report",
    "format_violation",
    "report_payload",
]
