"""Dependency graph construction for layerlint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from types import MappingProxyType
from typing import TYPE_CHECKING

from utils import matches_prefix

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from extract.models import PackageInfo
    from rules.config import ImportsConfig

logger = logging.getLogger(__name__)


def _resolve_module_path(
    import_name: str, module_to_path: Mapping[str, str]
) -> str | None:
    parts = import_name.split(".")
    for end in range(len(parts), 0, -1):
        path = module_to_path.get(".".join(parts[:end]))
        if path is not None:
            return path
    return None


@dataclass(frozen=True)
class DependencyGraph:
    """Internal import graph between analyzed files.

    Nodes are package paths; an edge a -> b means a imports the in-project
    module defined by b. Standard-library and external imports never
    appear as edges.
    """

    nodes: tuple[str, ...]
    edges: Mapping[str, tuple[str, ...]]
    module_to_path: Mapping[str, str]

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.edges.values())

    @cached_property
    def project_roots(self) -> frozenset[str]:
        """Top-level module names defined by the analyzed tree."""
        return frozenset(module.split(".", 1)[0] for module in self.module_to_path)

    def successors(self, path: str) -> tuple[str, ...]:
        return self.edges.get(path, ())

    def edge_list(self) -> list[tuple[str, str]]:
        return [
            (source, target)
            for source in self.nodes
            for target in self.edges.get(source, ())
        ]

    def is_project_import(self, import_name: str) -> bool:
        return import_name.split(".", 1)[0] in self.project_roots

    def resolve(self, import_name: str) -> str | None:
        """Path of the in-project module an import string refers to.

        The longest dotted prefix that names an analyzed module wins, so
        `from shop.domain.user import User` (recorded as "shop.domain.user")
        and `import shop.domain.user.helpers` both land on the file defining
        the deepest known module.
        """
        return _resolve_module_path(import_name, self.module_to_path)


def _is_excluded_import(import_name: str, imports_config: ImportsConfig) -> bool:
    return matches_prefix(
        import_name, imports_config.standard_library_prefixes
    ) or matches_prefix(import_name, imports_config.allowed_external_prefixes)


def build_dependency_graph(
    packages: Iterable[PackageInfo],
    imports_config: ImportsConfig,
) -> DependencyGraph:
    """Build the internal dependency graph from extracted packages.

    Args:
        packages: All PackageInfo entries of the run
        imports_config: Standard-library and external allow-list prefixes

    Returns:
        DependencyGraph restricted to edges between analyzed files.
    """
    package_list = sorted(packages, key=lambda p: p.path)

    module_to_path: dict[str, str] = {}
    for package in package_list:
        if not package.module:
            continue
        if package.module in module_to_path:
            logger.debug(
                "Module %s defined by both %s and %s; keeping the first",
                package.module,
                module_to_path[package.module],
                package.path,
            )
            continue
        module_to_path[package.module] = package.path

    edges: dict[str, tuple[str, ...]] = {}
    for package in package_list:
        targets: dict[str, None] = {}
        for import_name in package.imports:
            if _is_excluded_import(import_name, imports_config):
                continue
            target = _resolve_module_path(import_name, module_to_path)
            if target is not None and target != package.path:
                targets[target] = None
        edges[package.path] = tuple(sorted(targets))

    graph = DependencyGraph(
        nodes=tuple(package.path for package in package_list),
        edges=MappingProxyType(edges),
        module_to_path=MappingProxyType(module_to_path),
    )
    logger.debug(
        "Built dependency graph: %d nodes, %d edges",
        len(graph.nodes),
        graph.edge_count,
    )
    return graph


__all__ = ["DependencyGraph", "build_dependency_graph"]
