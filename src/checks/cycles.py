"""Import cycle detection over the internal dependency graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from checks.models import Violation, ViolationKind
from graph.algos import find_component_cycles, find_first_cycle

if TYPE_CHECKING:
    from collections.abc import Iterator

    from checks.context import CheckContext

HINT = (
    "Refactor to remove the circular dependency by introducing interfaces "
    "or reorganizing code."
)


def check_no_cycles(context: CheckContext) -> Iterator[Violation]:
    """Report the first cycle found, or one cycle per cyclic component."""
    graph = context.graph.edges
    if context.config.cycle_mode == "per_component":
        cycles = find_component_cycles(graph)
    else:
        first = find_first_cycle(graph)
        cycles = [first] if first is not None else []

    for cycle in cycles:
        rendered = " -> ".join(cycle)
        layers = tuple(dict.fromkeys(context.layer_of(path) for path in cycle))
        yield Violation(
            kind=ViolationKind.CYCLE,
            subject=cycle[0],
            detail=rendered,
            message=f"Circular dependency detected: {rendered}",
            layers=layers,
            chain=tuple(cycle),
            hint=HINT,
        )
