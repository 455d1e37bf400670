from __future__ import annotations

from shop.domain.errors.errors import InvalidEmailError


class Email:
    def __init__(self, value: str) -> None:
        if "@" not in value:
            raise InvalidEmailError(value)
        self._value = value.lower()

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Email) and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)
