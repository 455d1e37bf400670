"""Composition of the conformance checks into one aggregated run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import islice
from typing import TYPE_CHECKING

from checks.context import CheckContext
from checks.contracts import check_repository_interfaces
from checks.cycles import check_no_cycles
from checks.direction import check_layer_direction
from checks.immutability import check_value_object_immutability
from checks.isolation import check_domain_isolation
from checks.models import Violation, ViolationKind
from checks.purity import check_service_purity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from extract.models import PackageInfo
    from graph.builder import DependencyGraph
    from rules.config import LintConfig

    CheckFunction = Callable[[CheckContext], Iterator[Violation]]

logger = logging.getLogger(__name__)

CHECKS: dict[ViolationKind, CheckFunction] = {
    ViolationKind.ISOLATION: check_domain_isolation,
    ViolationKind.DIRECTION: check_layer_direction,
    ViolationKind.CYCLE: check_no_cycles,
    ViolationKind.IMMUTABILITY: check_value_object_immutability,
    ViolationKind.INTERFACE_CONTRACT: check_repository_interfaces,
    ViolationKind.PURITY: check_service_purity,
}


@dataclass(frozen=True)
class RuleOutcome:
    kind: ViolationKind
    violations: tuple[Violation, ...]

    @property
    def passed(self) -> bool:
        return not self.violations


@dataclass(frozen=True)
class CheckResult:
    """Per-rule outcomes of one analysis run."""

    outcomes: tuple[RuleOutcome, ...]

    @property
    def violations(self) -> list[Violation]:
        return [v for outcome in self.outcomes for v in outcome.violations]

    @property
    def ok(self) -> bool:
        return all(outcome.passed for outcome in self.outcomes)


def _run_check(
    check: CheckFunction, context: CheckContext, *, fail_fast: bool
) -> tuple[Violation, ...]:
    found: Iterable[Violation] = check(context)
    if fail_fast:
        found = islice(found, 1)
    unique = dict.fromkeys(found)
    return tuple(sorted(unique, key=Violation.sort_key))


def run_checks(
    packages: Iterable[PackageInfo],
    graph: DependencyGraph,
    config: LintConfig,
) -> CheckResult:
    """Run every enabled check and collect their violations.

    All checks run unconditionally; with `fail_fast` each check stops at its
    first violation. Outcomes follow ViolationKind order and violations are
    sorted, so identical inputs give identical results.
    """
    context = CheckContext(
        packages=tuple(sorted(packages, key=lambda p: p.path)),
        graph=graph,
        config=config,
    )
    enabled = set(config.enabled_checks)

    outcomes: list[RuleOutcome] = []
    for kind, check in CHECKS.items():
        if kind.value not in enabled:
            continue
        violations = _run_check(check, context, fail_fast=config.fail_fast)
        logger.debug("Check %s: %d violation(s)", kind.value, len(violations))
        outcomes.append(RuleOutcome(kind=kind, violations=violations))

    return CheckResult(outcomes=tuple(outcomes))


__all__ = ["CHECKS", "CheckResult", "RuleOutcome", "run_checks"]
