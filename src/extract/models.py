"""Package and type descriptor models.

These records are produced once per analyzed file by the extractor and are
immutable for the rest of the run.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TypeKind = Literal["interface", "class"]


class ParameterDescriptor(BaseModel):
    """A declared method parameter (receiver excluded)."""

    model_config = ConfigDict(frozen=True)

    name: str
    annotation: str | None = None


class MethodDescriptor(BaseModel):
    """A method declared in a class body."""

    model_config = ConfigDict(frozen=True)

    name: str
    parameters: tuple[ParameterDescriptor, ...] = ()
    returns: str | None = Field(
        default=None, description="Return annotation as written, if any"
    )

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")


class FieldDescriptor(BaseModel):
    """An instance or class-level data field."""

    model_config = ConfigDict(frozen=True)

    name: str
    annotation: str | None = None
    exported: bool


class TypeDescriptor(BaseModel):
    """Static description of a module-level class."""

    model_config = ConfigDict(frozen=True)

    name: str
    qualified_name: str
    kind: TypeKind
    bases: tuple[str, ...] = ()
    frozen: bool = Field(
        default=False,
        description="Frozen dataclass, NamedTuple or attrs frozen class",
    )
    fields: tuple[FieldDescriptor, ...] = ()
    methods: tuple[MethodDescriptor, ...] = ()


class PackageInfo(BaseModel):
    """Metadata extracted from one analyzed source file."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="POSIX path relative to the analysis root")
    module: str
    layer: str
    imports: tuple[str, ...] = Field(
        default=(), description="Absolute import strings in source order"
    )
    exported_functions: frozenset[str] = frozenset()
    exported_types: frozenset[str] = frozenset()
    types: tuple[TypeDescriptor, ...] = ()


__all__ = [
    "FieldDescriptor",
    "MethodDescriptor",
    "PackageInfo",
    "ParameterDescriptor",
    "TypeDescriptor",
    "TypeKind",
]
