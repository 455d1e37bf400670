"""Layer direction: imports follow the allowed dependency table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from checks.models import Violation, ViolationKind
from rules.layers import UNKNOWN_LAYER, build_allowed_deps, is_allowed_dependency

if TYPE_CHECKING:
    from collections.abc import Iterator

    from checks.context import CheckContext

HINT = "Dependencies must flow inward: infrastructure -> application -> domain."


def format_layer_set(layers: frozenset[str]) -> str:
    return f"[{', '.join(sorted(layers))}]"


def check_layer_direction(context: CheckContext) -> Iterator[Violation]:
    """Check every import of every constrained layer against its allowed set.

    Layers without an entry in the table are unconstrained; exempt layers
    (composition roots such as "main") are never checked. Imports of the
    standard library and of code outside the analyzed tree are skipped.
    """
    allowed_deps = build_allowed_deps(context.config.layers)
    exempt = set(context.config.layers.exempt)

    for package in context.packages:
        layer = package.layer
        if layer in exempt or layer not in allowed_deps:
            continue
        allowed = allowed_deps[layer]

        for import_name in package.imports:
            if context.is_standard_library(import_name):
                continue
            if not context.graph.is_project_import(import_name):
                continue

            import_layer = context.import_layer(import_name)
            if import_layer == UNKNOWN_LAYER:
                continue
            if is_allowed_dependency(layer, import_layer, allowed):
                continue

            allowed_text = format_layer_set(allowed)
            yield Violation(
                kind=ViolationKind.DIRECTION,
                subject=package.path,
                detail=import_name,
                message=(
                    f"{package.path} (layer: {layer}) cannot depend on "
                    f"{import_name} (layer: {import_layer}); allowed "
                    f"dependencies for {layer}: {allowed_text}"
                ),
                layers=(layer, import_layer),
                hint=HINT,
            )
