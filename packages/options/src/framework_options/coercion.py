"""Conversion of raw source strings to declared field types."""

from __future__ import annotations

import re
import types
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin

from .exceptions import ConversionError

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)
_DECIMAL_PATTERN = re.compile(
    r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*$", re.ASCII
)
_SPECIAL_FLOATS = {"nan", "+nan", "-nan", "infinity", "+infinity", "-infinity", "inf", "+inf", "-inf"}


def unwrap_type(declared: Any) -> Any:
    """Strip ``Annotated`` and ``Optional`` wrappers from a type hint.

    Args:
        declared: Declared type hint

    Returns:
        The innermost concrete type, or the hint unchanged when it is a
        union of several non-None types
    """
    if get_origin(declared) is Annotated:
        return unwrap_type(get_args(declared)[0])

    origin = get_origin(declared)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(declared) if arg is not type(None)]
        if len(members) == 1:
            return unwrap_type(members[0])

    return declared


def coerce(raw: str, target_type: Any) -> Any:
    """Convert a raw string to the target type.

    Booleans accept ``true``/``false`` in any case, enumerations accept
    member names in any case, and numbers are parsed independently of the
    current locale.

    Args:
        raw: Raw string value from a source
        target_type: Declared type of the destination field

    Returns:
        Converted value

    Raises:
        ConversionError: If the value cannot be converted
    """
    target = unwrap_type(target_type)

    if target is str:
        return raw

    # bool is an int subclass, so it must be handled first
    if target is bool:
        return _to_bool(raw, target)

    if isinstance(target, type) and issubclass(target, Enum):
        return _to_enum(raw, target)

    if target is int:
        if not _INTEGER_PATTERN.match(raw):
            raise ConversionError(raw, target, "not an integer")
        return int(raw)

    if target is float:
        if raw.strip().lower() in _SPECIAL_FLOATS:
            return float(raw.strip())
        if not _DECIMAL_PATTERN.match(raw):
            raise ConversionError(raw, target, "not a number")
        return float(raw)

    if target is Decimal:
        if not _DECIMAL_PATTERN.match(raw):
            raise ConversionError(raw, target, "not a decimal number")
        try:
            return Decimal(raw.strip())
        except InvalidOperation as e:
            raise ConversionError(raw, target, "not a decimal number") from e

    raise ConversionError(raw, target, "unsupported type")


def _to_bool(raw: str, target: type) -> bool:
    text = raw.strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise ConversionError(raw, target, "expected 'true' or 'false'")


def _to_enum(raw: str, target: type[Enum]) -> Enum:
    text = raw.strip().lower()
    for name, member in target.__members__.items():
        if name.lower() == text:
            return member
    raise ConversionError(raw, target, f"not a member of {target.__name__}")
