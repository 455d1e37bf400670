"""Repository interface contracts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from checks.models import Violation, ViolationKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from checks.context import CheckContext
    from extract.models import MethodDescriptor, PackageInfo, TypeDescriptor

_TUPLE_PREFIXES = ("tuple[", "Tuple[", "typing.Tuple[", "typing.tuple[")


def split_top_level(text: str) -> list[str]:
    """Split a comma separated annotation list, ignoring nested brackets.

    >>> split_top_level("User, dict[str, int], Error")
    ['User', 'dict[str, int]', 'Error']
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in "[(":
            depth += 1
        elif char in "])":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def last_return_type(annotation: str | None) -> str | None:
    """Type of the last returned value, None when nothing is returned.

    `tuple[A, B]` returns two values; any other annotation is one value.
    """
    if annotation is None:
        return None
    text = annotation.strip().strip("\"'")
    if text in ("", "None"):
        return None
    for prefix in _TUPLE_PREFIXES:
        if text.startswith(prefix) and text.endswith("]"):
            elements = split_top_level(text[len(prefix) : -1])
            return elements[-1] if elements else None
    return text


def _violation(
    package: PackageInfo,
    descriptor: TypeDescriptor,
    detail: str,
    message: str,
    hint: str,
) -> Violation:
    return Violation(
        kind=ViolationKind.INTERFACE_CONTRACT,
        subject=package.path,
        detail=detail,
        message=message,
        layers=(descriptor.qualified_name,),
        hint=hint,
    )


def _check_method(
    package: PackageInfo,
    descriptor: TypeDescriptor,
    method: MethodDescriptor,
    context_marker: str,
    error_marker: str,
) -> Iterator[Violation]:
    detail = f"{descriptor.name}.{method.name}"

    if method.parameters:
        first = method.parameters[0]
        if context_marker not in (first.annotation or ""):
            yield _violation(
                package,
                descriptor,
                detail,
                (
                    f"{detail} should take {context_marker} as first parameter "
                    f"(got {first.name}: {first.annotation or 'unannotated'})"
                ),
                "Repository methods must accept a context for cancellation "
                "and timeout support.",
            )

    last = last_return_type(method.returns)
    if last is not None and error_marker not in last:
        yield _violation(
            package,
            descriptor,
            detail,
            f"{detail} should return {error_marker} as last value (got {last})",
            "Repository methods must return errors for proper error handling.",
        )


def check_repository_interfaces(context: CheckContext) -> Iterator[Violation]:
    contracts = context.config.contracts

    for identifier in contracts.repository_interface_types:
        found = context.find_type(identifier)
        if found is None:
            yield Violation(
                kind=ViolationKind.INTERFACE_CONTRACT,
                subject=identifier,
                detail=identifier,
                message=f"Repository interface {identifier} was not found",
                layers=(identifier,),
                hint="Check repository_interface_types in the configuration.",
            )
            continue

        package, descriptor = found
        lineage = context.type_lineage(descriptor)
        if all(ancestor.kind != "interface" for ancestor in lineage):
            yield _violation(
                package,
                descriptor,
                descriptor.name,
                (
                    f"{descriptor.qualified_name} should be an interface "
                    f"(Protocol or ABC), not a concrete {descriptor.kind}"
                ),
                "Declare repositories as Protocols or ABCs in the domain and "
                "implement them in infrastructure.",
            )
            continue

        methods: dict[str, MethodDescriptor] = {}
        for ancestor in lineage:
            for method in ancestor.methods:
                if method.is_public:
                    methods.setdefault(method.name, method)
        if not methods:
            yield _violation(
                package,
                descriptor,
                descriptor.name,
                f"{descriptor.qualified_name} should define methods",
                "Repository interfaces describe persistence operations.",
            )
            continue

        for method in methods.values():
            yield from _check_method(
                package,
                descriptor,
                method,
                contracts.context_marker_type,
                contracts.error_marker_type,
            )
