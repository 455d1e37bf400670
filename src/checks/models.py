"""Violation models produced by the conformance checks."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ViolationKind(str, Enum):
    """The conformance rule a violation belongs to."""

    ISOLATION = "isolation"
    DIRECTION = "direction"
    CYCLE = "cycle"
    IMMUTABILITY = "immutability"
    INTERFACE_CONTRACT = "interface_contract"
    PURITY = "purity"


class Violation(BaseModel):
    """A single broken structural rule."""

    model_config = ConfigDict(frozen=True)

    kind: ViolationKind
    subject: str = Field(description="File path or type the violation is about")
    detail: str = Field(description="Offending import, field, method or cycle")
    message: str
    layers: tuple[str, ...] = Field(
        default=(), description="Layers or types involved"
    )
    chain: tuple[str, ...] = Field(
        default=(), description="Cycle path, first node repeated at the end"
    )
    hint: str = Field(default="", description="Remediation hint")

    def sort_key(self) -> tuple[str, str, str]:
        return (self.subject, self.detail, self.message)


__all__ = ["Violation", "ViolationKind"]
