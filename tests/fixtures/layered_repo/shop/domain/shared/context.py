from __future__ import annotations

from typing import Protocol


class Context(Protocol):
    def deadline(self) -> float | None: ...


class BackgroundContext:
    def deadline(self) -> float | None:
        return None
