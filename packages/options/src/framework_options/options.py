"""Immutable holder for a configured options instance."""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from . import validation
from .exceptions import NullOptionsError
from .ledger import AssignmentLedger

T = TypeVar("T")


class Options(Generic[T]):
    """Wraps a single options instance for hand-off to application code.

    The holder itself cannot be rebound; ``value`` always returns the
    instance it was constructed with.

    Example:
        ```python
        options = Options(load(ServiceSettings)).validate_declared()
        options.value.Port
        ```
    """

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        """Initialize the holder.

        Args:
            value: Options instance to wrap

        Raises:
            NullOptionsError: If value is None
        """
        if value is None:
            raise NullOptionsError("Options value must not be None", context={"argument": "value"})
        object.__setattr__(self, "_value", value)

    @property
    def value(self) -> T:
        return self._value

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"Options({self._value!r})"

    def validate_declared(self, ledger: AssignmentLedger | None = None) -> "Options[T]":
        """Validate declared constraints and required fields; see ``validation.validate_declared``."""
        return validation.validate_declared(self, ledger=ledger)

    def validate(self, predicate: Callable[[T], bool], message: str) -> "Options[T]":
        """Validate with a predicate; see ``validation.validate``."""
        return validation.validate(self, predicate, message)
