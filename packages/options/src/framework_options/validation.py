"""Validation of loaded options.

Two independent checks are available, each returning the holder unchanged
on success so they can be chained:

- ``validate_declared`` runs every declared constraint and checks that each
  required field was actually assigned by the loader. All failures are
  collected and reported together.
- ``validate`` evaluates a caller-supplied predicate and fails with the
  caller's message.

``check_declared`` runs the same declared checks without raising, for
callers that want to inspect individual failures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, TypeVar

from .constraints import Constraint, Required
from .exceptions import OptionsValidationError, PredicateValidationError
from .fields import describe_fields
from .ledger import AssignmentLedger

if TYPE_CHECKING:
    from .options import Options

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationFailure:
    """A single failed check.

    Attributes:
        field: Name of the field that failed
        message: Human-readable failure message
        constraint: The constraint that failed
    """

    field: str
    message: str
    constraint: Constraint


@dataclass
class ValidationResult:
    """Outcome of a declared-constraint validation pass."""

    record_type: type
    failures: List[ValidationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def messages(self) -> List[str]:
        return [failure.message for failure in self.failures]

    def raise_for_failures(self) -> None:
        """Raise OptionsValidationError if any check failed."""
        if self.failures:
            raise OptionsValidationError(self.record_type, self.failures)


def check_declared(holder: "Options[Any]", ledger: AssignmentLedger | None = None) -> ValidationResult:
    """Run declared constraints and required-field checks without raising.

    Constraint failures are reported first, in field and annotation order,
    followed by required-field failures in field order. A required field
    that was never assigned by the loader fails even if its current value
    would satisfy every other constraint.

    Args:
        holder: Options holder to validate
        ledger: Assignment ledger to consult (default: the default loader's ledger)

    Returns:
        ValidationResult with every failure found
    """
    if ledger is None:
        from .loader import get_default_loader

        ledger = get_default_loader().ledger
    value = holder.value
    record_type = type(value)
    descriptors = describe_fields(record_type)

    constraint_failures: List[ValidationFailure] = []
    for descriptor in descriptors:
        if not descriptor.constraints:
            continue
        current = getattr(value, descriptor.name, None)
        for constraint in descriptor.constraints:
            if not constraint.is_valid(current):
                constraint_failures.append(
                    ValidationFailure(
                        field=descriptor.name,
                        message=constraint.format_message(descriptor.name),
                        constraint=constraint,
                    )
                )

    required_failures: List[ValidationFailure] = []
    for descriptor in descriptors:
        if descriptor.required and not ledger.was_assigned(value, descriptor.name):
            required = descriptor.required_rule or Required()
            required_failures.append(
                ValidationFailure(
                    field=descriptor.name,
                    message=required.format_message(descriptor.name),
                    constraint=required,
                )
            )

    result = ValidationResult(record_type, constraint_failures + required_failures)
    if not result.ok:
        logger.debug(f"{record_type.__name__} failed {len(result.failures)} declared check(s)")
    return result


def validate_declared(holder: "Options[T]", ledger: AssignmentLedger | None = None) -> "Options[T]":
    """Validate declared constraints and required fields.

    Args:
        holder: Options holder to validate
        ledger: Assignment ledger to consult (default: the default loader's ledger)

    Returns:
        The same holder

    Raises:
        OptionsValidationError: If any check fails; the message names the
            options type and joins every failure message with ``"; "``
    """
    check_declared(holder, ledger).raise_for_failures()
    return holder


def validate(holder: "Options[T]", predicate: Callable[[T], bool], message: str) -> "Options[T]":
    """Validate the wrapped value with a predicate.

    Args:
        holder: Options holder to validate
        predicate: Returns True when the value is valid
        message: Error message used when the predicate returns False

    Returns:
        The same holder

    Raises:
        PredicateValidationError: If the predicate returns False
    """
    if not predicate(holder.value):
        raise PredicateValidationError(
            message, context={"record_type": type(holder.value).__name__}
        )
    return holder
