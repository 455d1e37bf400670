"""Service purity: domain services stay free of infrastructure."""

from __future__ import annotations

from typing import TYPE_CHECKING

from checks.models import Violation, ViolationKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from checks.context import CheckContext

HINT = (
    "Domain services must not depend directly on infrastructure. Use "
    "repository interfaces and dependency injection instead."
)


def _first_marker(text: str, markers: list[str]) -> str | None:
    return next((marker for marker in markers if marker in text), None)


def _check_service_imports(context: CheckContext) -> Iterator[Violation]:
    contracts = context.config.contracts
    for package in context.packages:
        if package.layer != contracts.pure_layer_name:
            continue
        for import_name in package.imports:
            if context.is_domain_layer(context.import_layer(import_name)):
                continue
            marker = _first_marker(import_name, contracts.forbidden_import_markers)
            if marker is None:
                continue
            yield Violation(
                kind=ViolationKind.PURITY,
                subject=package.path,
                detail=import_name,
                message=(
                    f"Service {package.path} imports infrastructure dependency "
                    f"{import_name} (matches {marker!r})"
                ),
                layers=(package.layer,),
                hint=HINT,
            )


def _check_service_fields(context: CheckContext) -> Iterator[Violation]:
    contracts = context.config.contracts
    for identifier in contracts.service_types:
        found = context.find_type(identifier)
        if found is None:
            yield Violation(
                kind=ViolationKind.PURITY,
                subject=identifier,
                detail=identifier,
                message=f"Service type {identifier} was not found",
                layers=(identifier,),
                hint="Check service_types in the configuration.",
            )
            continue

        package, descriptor = found
        for field in descriptor.fields:
            if field.annotation is None:
                continue
            marker = _first_marker(
                field.annotation, contracts.forbidden_import_markers
            )
            if marker is None:
                continue
            yield Violation(
                kind=ViolationKind.PURITY,
                subject=package.path,
                detail=f"{descriptor.name}.{field.name}",
                message=(
                    f"{descriptor.qualified_name}.{field.name} has infrastructure "
                    f"dependency {field.annotation}"
                ),
                layers=(descriptor.qualified_name,),
                hint=(
                    "Services should depend on repository interfaces, not "
                    "concrete infrastructure types."
                ),
            )


def check_service_purity(context: CheckContext) -> Iterator[Violation]:
    yield from _check_service_imports(context)
    yield from _check_service_fields(context)
