"""Tests for declared-constraint and predicate validation."""

from dataclasses import dataclass
from typing import Annotated

import pytest

from framework_options import (
    EmailAddress,
    Length,
    Options,
    OptionsValidationError,
    PredicateValidationError,
    Range,
    Required,
    check_declared,
    validate,
    validate_declared,
)

from sample_options import ConstrainedSettings, SampleSettings, SingleRequiredSettings


class TestValidateDeclared:
    """Test declared constraints combined with required-field tracking."""

    def test_loaded_values_pass(self, make_loader, ledger):
        loader = make_loader(
            settings={"RequiredInt": "24", "RequiredBool": "true", "RequiredString": "test"}
        )
        options = Options(loader.load(SampleSettings))

        result = validate_declared(options, ledger=ledger)

        assert result is options
        assert result.value.RequiredInt == 24

    def test_missing_required_field(self, make_loader, ledger):
        options = Options(make_loader().load(SingleRequiredSettings))

        with pytest.raises(OptionsValidationError) as exc_info:
            validate_declared(options, ledger=ledger)

        message = str(exc_info.value)
        assert "ApiKey" in message
        assert "required" in message
        assert message == (
            "Configuration validation failed for SingleRequiredSettings: ApiKey is required."
        )

    def test_unassigned_default_counts_as_missing(self, make_loader, ledger):
        """A valid-looking default is still missing if never assigned."""
        options = Options(make_loader().load(ConstrainedSettings))
        assert options.value.Port == 8080

        with pytest.raises(OptionsValidationError) as exc_info:
            validate_declared(options, ledger=ledger)

        assert exc_info.value.messages == ["Port is required."]

    def test_instance_never_loaded(self, ledger):
        options = Options(SampleSettings(RequiredInt=1, RequiredBool=True, RequiredString="abc"))

        with pytest.raises(OptionsValidationError, match="is required"):
            validate_declared(options, ledger=ledger)

    def test_failed_conversion_reports_required(self, make_loader, ledger):
        loader = make_loader(
            settings={"RequiredInt": "invalid", "RequiredBool": "true", "RequiredString": "x"}
        )
        options = Options(loader.load(SampleSettings))

        with pytest.raises(OptionsValidationError) as exc_info:
            validate_declared(options, ledger=ledger)

        assert [f.field for f in exc_info.value.failures] == ["RequiredInt"]

    def test_all_failures_reported_in_order(self, make_loader, ledger):
        loader = make_loader(
            settings={"Port": "70000", "Name": "x", "Code": "abc", "AdminEmail": "nobody"}
        )
        options = Options(loader.load(ConstrainedSettings))

        with pytest.raises(OptionsValidationError) as exc_info:
            validate_declared(options, ledger=ledger)

        error = exc_info.value
        assert [f.field for f in error.failures] == ["Port", "Name", "Code", "AdminEmail"]
        assert error.messages == [
            "The field Port must be between 1 and 65535.",
            "The field Name must be a string or collection with a minimum length of 3 "
            "and a maximum length of 10.",
            "The field Code must match the regular expression '[A-Z]{3}'.",
            "The AdminEmail field is not a valid e-mail address.",
        ]
        assert str(error).startswith("Configuration validation failed for ConstrainedSettings: ")
        assert "; ".join(error.messages) in str(error)
        assert error.record_type is ConstrainedSettings
        assert error.context["fields"] == ["Port", "Name", "Code", "AdminEmail"]

    def test_constraint_failures_precede_required_failures(self, ledger):
        @dataclass
        class Mixed:
            First: Annotated[int, Required()] = 0
            Second: Annotated[int, Range(1, 5)] = 0

        with pytest.raises(OptionsValidationError) as exc_info:
            validate_declared(Options(Mixed()), ledger=ledger)

        assert exc_info.value.messages == [
            "The field Second must be between 1 and 5.",
            "First is required.",
        ]

    def test_custom_messages(self, ledger):
        @dataclass
        class Custom:
            Port: Annotated[int, Required(message="Set {name} please."), Range(1, 2, message="{name} out of range")] = 0

        with pytest.raises(OptionsValidationError) as exc_info:
            validate_declared(Options(Custom()), ledger=ledger)

        assert exc_info.value.messages == ["Port out of range", "Set Port please."]

    def test_holder_method(self, make_loader, ledger):
        loader = make_loader(settings={"ApiKey": "secret"})
        options = Options(loader.load(SingleRequiredSettings))

        assert options.validate_declared(ledger=ledger) is options


class TestCheckDeclared:
    """Test non-raising validation results."""

    def test_result_exposes_failures(self, ledger):
        result = check_declared(Options(SingleRequiredSettings()), ledger=ledger)

        assert not result.ok
        assert result.record_type is SingleRequiredSettings
        (failure,) = result.failures
        assert failure.field == "ApiKey"
        assert isinstance(failure.constraint, Required)

        with pytest.raises(OptionsValidationError):
            result.raise_for_failures()

    def test_result_ok(self, ledger):
        @dataclass
        class Lenient:
            Name: Annotated[str, Length(0, 5)] = ""
            Email: Annotated[str, EmailAddress()] = "a@b.c"

        result = check_declared(Options(Lenient()), ledger=ledger)

        assert result.ok
        assert result.messages == []
        result.raise_for_failures()


class TestValidatePredicate:
    """Test caller-supplied predicate validation."""

    def test_predicate_fails(self):
        options = Options(SampleSettings(RequiredInt=1, RequiredBool=True, RequiredString="abc"))

        with pytest.raises(PredicateValidationError) as exc_info:
            validate(options, lambda o: o.RequiredInt > 10, "Must be greater than 10")

        assert str(exc_info.value) == "Must be greater than 10"

    def test_predicate_passes_returns_same_holder(self):
        options = Options(SampleSettings(RequiredInt=10, RequiredBool=True, RequiredString="abc"))

        result = validate(options, lambda o: o.RequiredInt == 10, "Invalid")

        assert result is options

    def test_chained_validation(self, make_loader, ledger):
        loader = make_loader(
            settings={"RequiredInt": "24", "RequiredBool": "true", "RequiredString": "test"}
        )

        options = (
            Options(loader.load(SampleSettings))
            .validate_declared(ledger=ledger)
            .validate(lambda o: o.RequiredBool, "RequiredBool must be enabled")
        )

        assert options.value.RequiredString == "test"
