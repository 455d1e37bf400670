from __future__ import annotations

import orjson

from checks.engine import CheckResult, RuleOutcome
from checks.models import Violation, ViolationKind
from report.formatters import format_json_report, format_text_report, format_violation


def _isolation_violation() -> Violation:
    return Violation(
        kind=ViolationKind.ISOLATION,
        subject="shop/domain/entities/order.py",
        detail="shop.infrastructure.db",
        message=(
            "shop/domain/entities/order.py (layer: domain/entities) imports "
            "non-domain dependency shop.infrastructure.db (layer: infrastructure)"
        ),
        layers=("domain/entities", "infrastructure"),
        hint="Keep the domain isolated.",
    )


def _result() -> CheckResult:
    return CheckResult(
        outcomes=(
            RuleOutcome(
                kind=ViolationKind.ISOLATION, violations=(_isolation_violation(),)
            ),
            RuleOutcome(kind=ViolationKind.CYCLE, violations=()),
        )
    )


def test_format_violation_lists_subject_relation_layers_and_hint() -> None:
    text = format_violation(_isolation_violation())

    assert text.splitlines() == [
        "DOMAIN ISOLATION VIOLATION: shop/domain/entities/order.py",
        "  shop/domain/entities/order.py (layer: domain/entities) imports "
        "non-domain dependency shop.infrastructure.db (layer: infrastructure)",
        "  relation: shop.infrastructure.db",
        "  involves: domain/entities, infrastructure",
        "  hint: Keep the domain isolated.",
    ]


def test_text_report_ends_with_rule_summary() -> None:
    text = format_text_report(_result(), package_count=12)

    assert text.startswith("DOMAIN ISOLATION VIOLATION")
    assert text.endswith(
        "Summary:\n"
        "  FAIL isolation (1 violation)\n"
        "  PASS cycle\n"
        "12 files analyzed, 1 violation(s): failed\n"
    )


def test_text_report_for_clean_run() -> None:
    result = CheckResult(
        outcomes=(RuleOutcome(kind=ViolationKind.CYCLE, violations=()),)
    )

    assert format_text_report(result, package_count=3) == (
        "Summary:\n  PASS cycle\n3 files analyzed, 0 violation(s): passed\n"
    )


def test_json_report_is_sorted_and_complete() -> None:
    text = format_json_report(_result(), package_count=12)
    payload = orjson.loads(text)

    assert payload["ok"] is False
    assert payload["package_count"] == 12
    assert payload["rules"] == {
        "cycle": {"passed": True, "violation_count": 0},
        "isolation": {"passed": False, "violation_count": 1},
    }
    violation = payload["violations"][0]
    assert violation["kind"] == "isolation"
    assert violation["layers"] == ["domain/entities", "infrastructure"]
    assert violation["chain"] == []
    assert text.index('"ok"') < text.index('"package_count"') < text.index('"rules"')
    assert text.endswith("\n")
