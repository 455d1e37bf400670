"""Value objects expose no public fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

from checks.models import Violation, ViolationKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from checks.context import CheckContext

HINT = (
    "Value objects must be immutable. Keep fields private (leading "
    "underscore) and expose read-only properties."
)


def check_value_object_immutability(context: CheckContext) -> Iterator[Violation]:
    contracts = context.config.contracts

    for identifier in contracts.value_object_types:
        found = context.find_type(identifier)
        if found is None:
            yield Violation(
                kind=ViolationKind.IMMUTABILITY,
                subject=identifier,
                detail=identifier,
                message=f"Value object type {identifier} was not found",
                layers=(identifier,),
                hint="Check value_object_types in the configuration.",
            )
            continue

        package, descriptor = found
        if descriptor.frozen and contracts.frozen_value_objects_exempt:
            continue

        for field in descriptor.fields:
            if not field.exported:
                continue
            yield Violation(
                kind=ViolationKind.IMMUTABILITY,
                subject=package.path,
                detail=f"{descriptor.name}.{field.name}",
                message=(
                    f"Value object {descriptor.qualified_name} exposes field "
                    f"{field.name}"
                ),
                layers=(descriptor.qualified_name,),
                hint=HINT,
            )
