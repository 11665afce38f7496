"""Declared constraints attached to options fields.

Constraints are attached through ``typing.Annotated``:

    ```python
    @dataclass
    class ServerSettings:
        Port: Annotated[int, Required(), Range(1, 65535)] = 0
        AdminEmail: Annotated[str, EmailAddress()] = ""
    ```

Every constraint except ``Required`` is evaluated against the field's
current value. ``Required`` is a marker; whether a required field received
a value is decided from the assignment ledger, not from the value itself.
``None`` values pass every value constraint.
"""

from __future__ import annotations

import re
from typing import Any


class Constraint:
    """Base class for declared field constraints.

    Subclasses implement ``is_valid`` and provide a ``default_message``
    template. Templates and custom messages may use ``{name}`` for the
    field name plus any attribute of the constraint.
    """

    default_message = "The field {name} is invalid."

    def __init__(self, message: str | None = None) -> None:
        self.message = message

    def is_valid(self, value: Any) -> bool:
        raise NotImplementedError

    def format_message(self, field_name: str) -> str:
        template = self.message or self.default_message
        return template.format(name=field_name, **vars(self))

    def __repr__(self) -> str:
        params = ", ".join(
            f"{key}={value!r}" for key, value in vars(self).items() if value is not None
        )
        return f"{type(self).__name__}({params})"


class Required(Constraint):
    """Marks a field as required: it must be assigned from a source."""

    default_message = "{name} is required."

    def is_valid(self, value: Any) -> bool:
        return True


class Range(Constraint):
    """Value must lie within ``[minimum, maximum]`` (inclusive)."""

    default_message = "The field {name} must be between {minimum} and {maximum}."

    def __init__(self, minimum: Any, maximum: Any, message: str | None = None) -> None:
        super().__init__(message)
        self.minimum = minimum
        self.maximum = maximum

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return True
        try:
            return bool(self.minimum <= value <= self.maximum)
        except TypeError:
            return False


class Length(Constraint):
    """String or collection length must lie within ``[min_length, max_length]``."""

    default_message = (
        "The field {name} must be a string or collection with a minimum length "
        "of {min_length} and a maximum length of {max_length}."
    )

    def __init__(
        self, min_length: int = 0, max_length: int | None = None, message: str | None = None
    ) -> None:
        super().__init__(message)
        self.min_length = min_length
        self.max_length = max_length

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return True
        try:
            length = len(value)
        except TypeError:
            return False
        if length < self.min_length:
            return False
        return self.max_length is None or length <= self.max_length


class Pattern(Constraint):
    """String form of the value must fully match a regular expression."""

    default_message = "The field {name} must match the regular expression '{pattern}'."

    def __init__(self, pattern: str, message: str | None = None) -> None:
        super().__init__(message)
        self.pattern = pattern
        self._regex = re.compile(pattern)

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return True
        return self._regex.fullmatch(str(value)) is not None

    def __repr__(self) -> str:
        return f"Pattern({self.pattern!r})"


class EmailAddress(Constraint):
    """Value must look like an e-mail address (one ``@``, not at either end)."""

    default_message = "The {name} field is not a valid e-mail address."

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return True
        if not isinstance(value, str):
            return False
        at = value.find("@")
        return at > 0 and at == value.rfind("@") and at != len(value) - 1


class Url(Constraint):
    """Value must be an absolute http, https or ftp URL."""

    default_message = "The {name} field is not a valid fully-qualified http, https, or ftp URL."
    schemes = ("http://", "https://", "ftp://")

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return True
        if not isinstance(value, str):
            return False
        lowered = value.lower()
        return any(
            lowered.startswith(scheme) and len(value) > len(scheme) for scheme in self.schemes
        )
