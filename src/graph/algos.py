"""Graph algorithms for layerlint."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence, Set


def _neighbors(
    graph: Mapping[str, Sequence[str]], node: str, restrict_to: Set[str] | None
) -> Iterator[str]:
    for neighbor in sorted(graph.get(node, ())):
        if restrict_to is None or neighbor in restrict_to:
            yield neighbor


def _dfs_cycle(
    start: str,
    graph: Mapping[str, Sequence[str]],
    visited: set[str],
    restrict_to: Set[str] | None,
) -> list[str] | None:
    """Depth-first search from start; return the first cycle closed by a back edge.

    The cycle is the current path sliced from the first occurrence of the
    repeated node, followed by that node again.
    """
    visited.add(start)
    path = [start]
    on_stack = {start}
    iterators = [_neighbors(graph, start, restrict_to)]

    while iterators:
        neighbor = next(iterators[-1], None)
        if neighbor is None:
            iterators.pop()
            on_stack.discard(path.pop())
            continue
        if neighbor in on_stack:
            return [*path[path.index(neighbor) :], neighbor]
        if neighbor not in visited:
            visited.add(neighbor)
            on_stack.add(neighbor)
            path.append(neighbor)
            iterators.append(_neighbors(graph, neighbor, restrict_to))

    return None


def find_first_cycle(
    graph: Mapping[str, Sequence[str]],
    *,
    restrict_to: Set[str] | None = None,
) -> list[str] | None:
    """Find the first cycle in a directed graph.

    Roots and neighbors are visited in sorted order so the result is
    deterministic.

    Args:
        graph: Adjacency mapping node -> successors
        restrict_to: Optional node subset; edges leaving it are ignored

    Returns:
        The cycle as a node list whose last element repeats the first
        (e.g. ["a", "b", "c", "a"]), or None when the graph is acyclic.
    """
    visited: set[str] = set()
    for start in sorted(graph):
        if start in visited:
            continue
        if restrict_to is not None and start not in restrict_to:
            continue
        cycle = _dfs_cycle(start, graph, visited, restrict_to)
        if cycle is not None:
            return cycle
    return None


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[str, int] = {}
        self.low_link: dict[str, int] = {}
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.sccs: list[list[str]] = []


def _extract_scc(state: _TarjanState, root: str) -> list[str]:
    """Extract a strongly connected component from the stack."""
    scc: list[str] = []
    while state.stack:
        w = state.stack.pop()
        state.on_stack.remove(w)
        scc.append(w)
        if w == root:
            break
    if root not in scc:
        msg = (
            f"Tarjan algorithm invariant violated: root node {root!r} "
            "not found in stack during SCC extraction."
        )
        raise RuntimeError(msg)
    return scc


def _strongconnect(
    node: str, graph: Mapping[str, Sequence[str]], state: _TarjanState
) -> None:
    """Process a node in Tarjan's algorithm."""
    state.indices[node] = state.index
    state.low_link[node] = state.index
    state.index += 1
    state.stack.append(node)
    state.on_stack.add(node)

    for neighbor in sorted(graph.get(node, ())):
        if neighbor not in state.indices:
            _strongconnect(neighbor, graph, state)
            state.low_link[node] = min(state.low_link[node], state.low_link[neighbor])
        elif neighbor in state.on_stack:
            state.low_link[node] = min(state.low_link[node], state.indices[neighbor])

    if state.low_link[node] == state.indices[node]:
        scc = _extract_scc(state, node)
        if len(scc) > 1 or node in graph.get(node, ()):
            state.sccs.append(scc)


def find_cyclic_components(graph: Mapping[str, Sequence[str]]) -> list[list[str]]:
    """Find strongly connected components that contain a cycle.

    Uses Tarjan's algorithm. Each component is returned sorted, and the
    components are sorted by their first node.
    """
    state = _TarjanState()

    for node in sorted(graph):
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return sorted(sorted(scc) for scc in state.sccs)


def find_component_cycles(graph: Mapping[str, Sequence[str]]) -> list[list[str]]:
    """Return one concrete cycle per cyclic strongly connected component."""
    cycles: list[list[str]] = []
    for component in find_cyclic_components(graph):
        cycle = find_first_cycle(graph, restrict_to=set(component))
        if cycle is not None:
            cycles.append(cycle)
    return cycles


__all__ = [
    "find_component_cycles",
    "find_cyclic_components",
    "find_first_cycle",
]
