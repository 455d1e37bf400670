"""Domain isolation: the domain depends only on itself."""

from __future__ import annotations

from typing import TYPE_CHECKING

from checks.models import Violation, ViolationKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from checks.context import CheckContext

HINT = (
    "Domain layer must not depend on infrastructure, application, or external "
    "concerns. Allowed: domain layers, standard library, approved external "
    "packages."
)


def check_domain_isolation(context: CheckContext) -> Iterator[Violation]:
    """Every non-exempt import of a domain package must be domain-classified."""
    for package in context.packages:
        if not context.is_domain_layer(package.layer):
            continue

        for import_name in package.imports:
            if context.is_standard_library(import_name):
                continue
            if context.is_test_import(import_name):
                continue
            if context.is_allowed_external(import_name):
                continue

            import_layer = context.import_layer(import_name)
            if context.is_domain_layer(import_layer):
                continue

            yield Violation(
                kind=ViolationKind.ISOLATION,
                subject=package.path,
                detail=import_name,
                message=(
                    f"{package.path} (layer: {package.layer}) imports non-domain "
                    f"dependency {import_name} (layer: {import_layer})"
                ),
                layers=(package.layer, import_layer),
                hint=HINT,
            )
