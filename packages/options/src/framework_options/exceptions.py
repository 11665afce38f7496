"""Exception hierarchy for the options package.

All errors raised by the package derive from ``OptionsError``, which carries
an optional context dictionary with structured error information.

Binding-time problems (``ConversionError``) are absorbed by the loader and
never escape ``load``. Validation-time problems (``OptionsValidationError``,
``PredicateValidationError``) and holder construction problems
(``NullOptionsError``) propagate to the caller and are expected to stop
application startup.

Example:
    ```python
    from framework_options import OptionsValidationError, load, Options

    try:
        Options(load(ServiceSettings)).validate_declared()
    except OptionsValidationError as e:
        for failure in e.failures:
            logger.error(f"{failure.field}: {failure.message}")
        raise
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

if TYPE_CHECKING:
    from .validation import ValidationFailure


class OptionsError(Exception):
    """Base exception for the options package.

    Attributes:
        context: Dictionary containing contextual information about the error

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (field names, types, etc.)
    """

    def __init__(self, message: str, context: Dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(OptionsError):
    """Raised when a configuration source itself is invalid or missing."""

    pass


class SettingsFileError(ConfigurationError):
    """Raised when an application settings document cannot be read or parsed."""

    pass


class ValidationError(OptionsError):
    """Raised when a value or an options instance fails validation."""

    pass


class ConversionError(ValidationError, ValueError):
    """Raised when a raw string cannot be coerced to a field's declared type.

    The loader recovers from this error per field; it only surfaces when
    ``coerce`` is called directly.
    """

    def __init__(self, raw: str, target_type: Any, reason: str | None = None):
        type_name = getattr(target_type, "__name__", repr(target_type))
        message = f"Cannot convert value to {type_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, context={"target_type": type_name})
        self.raw = raw
        self.target_type = target_type


class OptionsValidationError(ValidationError):
    """Raised when declared constraints or required fields fail.

    Carries every failure found in a single validation pass so that all
    configuration problems can be fixed at once.

    Attributes:
        record_type: The options type that was validated
        failures: Structured failure records, in reporting order
    """

    def __init__(self, record_type: type, failures: List["ValidationFailure"]):
        joined = "; ".join(failure.message for failure in failures)
        super().__init__(
            f"Configuration validation failed for {record_type.__name__}: {joined}",
            context={
                "record_type": record_type.__name__,
                "fields": [failure.field for failure in failures],
            },
        )
        self.record_type = record_type
        self.failures = list(failures)

    @property
    def messages(self) -> List[str]:
        """Individual failure messages."""
        return [failure.message for failure in self.failures]


class PredicateValidationError(ValidationError):
    """Raised when a caller-supplied predicate rejects an options value.

    The string form is exactly the message supplied to ``validate``.
    """

    pass


class NullOptionsError(OptionsError, ValueError):
    """Raised when an options holder is constructed without a value."""

    pass


__all__ = [
    "OptionsError",
    "ConfigurationError",
    "SettingsFileError",
    "ValidationError",
    "ConversionError",
    "OptionsValidationError",
    "PredicateValidationError",
    "NullOptionsError",
]
