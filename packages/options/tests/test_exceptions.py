"""Tests for the options exception hierarchy."""

import pytest

from framework_options import (
    ConfigurationError,
    ConversionError,
    OptionsError,
    OptionsValidationError,
    PredicateValidationError,
    SettingsFileError,
    ValidationError,
)


class TestOptionsError:
    """Test the base exception."""

    def test_basic_exception(self):
        error = OptionsError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.context == {}

    def test_exception_with_context(self):
        error = OptionsError("Operation failed", context={"path": "app.yaml"})
        assert str(error) == "Operation failed"
        assert error.context == {"path": "app.yaml"}


class TestHierarchy:
    """Test the relationships between exception types."""

    @pytest.mark.parametrize(
        "exc_type, base",
        [
            (ConfigurationError, OptionsError),
            (SettingsFileError, ConfigurationError),
            (ValidationError, OptionsError),
            (ConversionError, ValidationError),
            (ConversionError, ValueError),
            (OptionsValidationError, ValidationError),
            (PredicateValidationError, ValidationError),
        ],
    )
    def test_subclass(self, exc_type, base):
        assert issubclass(exc_type, base)

    def test_conversion_error_context(self):
        error = ConversionError("abc", int, "not an integer")
        assert str(error) == "Cannot convert value to int: not an integer"
        assert error.raw == "abc"
        assert error.target_type is int
        assert error.context == {"target_type": "int"}
