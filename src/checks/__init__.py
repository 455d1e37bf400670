"""Conformance checks for layerlint."""

from checks.engine import CHECKS, CheckResult, RuleOutcome, run_checks
from checks.models import Violation, ViolationKind

__all__ = [
    "CHECKS",
    "CheckResult",
    "RuleOutcome",
    "Violation",
    "ViolationKind",
    "run_checks",
]
