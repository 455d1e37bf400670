"""Shared, read-only inputs of the conformance checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

from rules.layers import UNKNOWN_LAYER, classify_import, is_domain_layer
from utils import matches_prefix

if TYPE_CHECKING:
    from extract.models import PackageInfo, TypeDescriptor
    from graph.builder import DependencyGraph
    from rules.config import LintConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckContext:
    """Everything a check may look at. Checks never mutate it."""

    packages: tuple[PackageInfo, ...]
    graph: DependencyGraph
    config: LintConfig

    @cached_property
    def _types_by_qualified_name(
        self,
    ) -> dict[str, tuple[PackageInfo, TypeDescriptor]]:
        index: dict[str, tuple[PackageInfo, TypeDescriptor]] = {}
        for package in self.packages:
            for descriptor in package.types:
                index.setdefault(descriptor.qualified_name, (package, descriptor))
        return index

    @cached_property
    def _types_by_name(self) -> dict[str, list[tuple[PackageInfo, TypeDescriptor]]]:
        index: dict[str, list[tuple[PackageInfo, TypeDescriptor]]] = {}
        for package in self.packages:
            for descriptor in package.types:
                index.setdefault(descriptor.name, []).append((package, descriptor))
        return index

    @cached_property
    def _layer_by_path(self) -> dict[str, str]:
        return {package.path: package.layer for package in self.packages}

    def find_type(
        self, identifier: str
    ) -> tuple[PackageInfo, TypeDescriptor] | None:
        """Resolve a configured type identifier.

        Qualified names ("shop.domain.values.email.Email") take precedence;
        a bare class name ("Email") matches the first definition by path.
        """
        found = self._types_by_qualified_name.get(identifier)
        if found is not None:
            return found
        candidates = self._types_by_name.get(identifier, [])
        if len(candidates) > 1:
            logger.debug(
                "Type %s is ambiguous (%d definitions); using %s",
                identifier,
                len(candidates),
                candidates[0][1].qualified_name,
            )
        if candidates:
            return candidates[0]
        logger.debug("Type %s not found in analyzed sources", identifier)
        return None

    def type_lineage(self, descriptor: TypeDescriptor) -> list[TypeDescriptor]:
        """The type followed by its ancestors defined in analyzed sources.

        Bases are looked up by the name as written, then by its last dotted
        segment. Bases outside the analyzed tree end the walk.
        """
        lineage = [descriptor]
        seen = {descriptor.qualified_name}
        index = 0
        while index < len(lineage):
            for base in lineage[index].bases:
                name = base.split("[", 1)[0]
                found = self.find_type(name) or self.find_type(name.rsplit(".", 1)[-1])
                if found is not None and found[1].qualified_name not in seen:
                    seen.add(found[1].qualified_name)
                    lineage.append(found[1])
            index += 1
        return lineage

    def layer_of(self, path: str) -> str:
        return self._layer_by_path.get(path, UNKNOWN_LAYER)

    def import_layer(self, import_name: str) -> str:
        return classify_import(import_name, self.config.layers)

    def is_standard_library(self, import_name: str) -> bool:
        return matches_prefix(
            import_name, self.config.imports.standard_library_prefixes
        )

    def is_test_import(self, import_name: str) -> bool:
        return matches_prefix(import_name, self.config.imports.test_prefixes)

    def is_allowed_external(self, import_name: str) -> bool:
        return matches_prefix(
            import_name, self.config.imports.allowed_external_prefixes
        )

    def is_domain_layer(self, layer: str) -> bool:
        return is_domain_layer(layer, self.config.layers.domain_prefix)


__all__ = ["CheckContext"]
