"""Framework Options Package

Binds environment variables and application settings onto typed options
classes, and validates the result.
"""

from .coercion import coerce
from .constraints import Constraint, EmailAddress, Length, Pattern, Range, Required, Url
from .exceptions import (
    ConfigurationError,
    ConversionError,
    NullOptionsError,
    OptionsError,
    OptionsValidationError,
    PredicateValidationError,
    SettingsFileError,
    ValidationError,
)
from .fields import FieldDescriptor, describe_fields
from .ledger import AssignmentLedger, default_ledger
from .loader import (
    BindResult,
    OptionsLoader,
    bind,
    get_default_loader,
    load,
    set_default_loader,
    was_assigned,
)
from .options import Options
from .sources import EnvironmentSource, PrecedenceMode, SettingsSource, Source, SourceResolver
from .validation import (
    ValidationFailure,
    ValidationResult,
    check_declared,
    validate,
    validate_declared,
)

__version__ = "0.1.0"
__all__ = [
    # Binding
    "OptionsLoader",
    "BindResult",
    "PrecedenceMode",
    "load",
    "bind",
    "was_assigned",
    "get_default_loader",
    "set_default_loader",
    "coerce",
    # Sources
    "Source",
    "EnvironmentSource",
    "SettingsSource",
    "SourceResolver",
    # Fields and constraints
    "FieldDescriptor",
    "describe_fields",
    "Constraint",
    "Required",
    "Range",
    "Length",
    "Pattern",
    "EmailAddress",
    "Url",
    # Tracking
    "AssignmentLedger",
    "default_ledger",
    # Holder and validation
    "Options",
    "ValidationFailure",
    "ValidationResult",
    "check_declared",
    "validate",
    "validate_declared",
    # Errors
    "OptionsError",
    "ConfigurationError",
    "SettingsFileError",
    "ValidationError",
    "ConversionError",
    "OptionsValidationError",
    "PredicateValidationError",
    "NullOptionsError",
]
