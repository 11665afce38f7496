"""Binding of environment and settings values onto options instances.

Example:
    ```python
    @dataclass
    class ServiceSettings:
        Port: Annotated[int, Required(), Range(1, 65535)] = 0
        Debug: bool = False
        LogLevel: LogLevel = LogLevel.INFO

    loader = OptionsLoader(settings=SettingsSource.from_file("app.yaml"))
    settings = loader.load(ServiceSettings)
    loader.was_assigned(settings, "Port")
    ```

Each public writable field is looked up by name in both sources. Values
that are missing, blank, or cannot be converted leave the field at its
default; one bad value never prevents the other fields from binding.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Generic, Type, TypeVar

from .coercion import coerce
from .exceptions import ConversionError
from .fields import describe_fields
from .ledger import AssignmentLedger, default_ledger
from .sources import EnvironmentSource, PrecedenceMode, SettingsSource, Source, SourceResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")

SETTINGS_FILE_ENV_VAR = "FRAMEWORK_OPTIONS_SETTINGS_FILE"


@dataclass
class BindResult(Generic[T]):
    """Outcome of binding one options instance.

    Attributes:
        instance: The newly created and populated instance
        assigned: Names of the fields that received a converted value
        failures: Field name to reason, for raw values that failed conversion
    """

    instance: T
    assigned: FrozenSet[str] = frozenset()
    failures: Dict[str, str] = field(default_factory=dict)

    def was_assigned(self, field_name: str) -> bool:
        return field_name in self.assigned


class OptionsLoader:
    """Creates options instances populated from environment and settings sources."""

    def __init__(
        self,
        environment: Source | None = None,
        settings: Source | None = None,
        ledger: AssignmentLedger | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            environment: Environment source (default: process environment)
            settings: Application settings source (default: empty)
            ledger: Assignment ledger to record into (default: shared ledger)
        """
        self.resolver = SourceResolver(
            environment if environment is not None else EnvironmentSource(),
            settings if settings is not None else SettingsSource(),
        )
        self.ledger = ledger if ledger is not None else default_ledger

    def bind(
        self,
        record_type: Type[T],
        mode: PrecedenceMode = PrecedenceMode.ENVIRONMENT_FIRST,
    ) -> BindResult[T]:
        """Create and populate a new instance without touching the ledger.

        Args:
            record_type: Options class; must be constructible without arguments
            mode: Precedence between environment and settings values

        Returns:
            BindResult with the instance and its assignment state

        Raises:
            TypeError: If the options class requires constructor arguments
        """
        instance = record_type()
        assigned = set()
        failures: Dict[str, str] = {}

        for descriptor in describe_fields(record_type):
            if not descriptor.writable:
                continue

            raw = self.resolver.resolve(descriptor.name, mode)
            if raw is None or not raw.strip():
                logger.debug(f"No value for {record_type.__name__}.{descriptor.name}")
                continue

            try:
                value = coerce(raw, descriptor.declared_type)
            except ConversionError as e:
                failures[descriptor.name] = str(e)
                logger.debug(f"Skipped {record_type.__name__}.{descriptor.name}: {e}")
                continue

            setattr(instance, descriptor.name, value)
            assigned.add(descriptor.name)

        return BindResult(instance=instance, assigned=frozenset(assigned), failures=failures)

    def load(
        self,
        record_type: Type[T],
        mode: PrecedenceMode = PrecedenceMode.ENVIRONMENT_FIRST,
    ) -> T:
        """Create and populate a new instance and record its assignments.

        Args:
            record_type: Options class; must be constructible without arguments
            mode: Precedence between environment and settings values

        Returns:
            The populated instance
        """
        result = self.bind(record_type, mode)
        self.ledger.record(result.instance, result.assigned)
        logger.info(
            f"Loaded {record_type.__name__}: {len(result.assigned)} field(s) assigned, "
            f"{len(result.failures)} conversion failure(s)"
        )
        return result.instance

    def was_assigned(self, instance: Any, field_name: str) -> bool:
        """Check whether a field of a loaded instance received a value."""
        return self.ledger.was_assigned(instance, field_name)


_default_loader: OptionsLoader | None = None
_default_loader_lock = threading.Lock()


def get_default_loader() -> OptionsLoader:
    """Get the process-wide loader, creating it on first use.

    The default loader reads the process environment and, when the
    ``FRAMEWORK_OPTIONS_SETTINGS_FILE`` environment variable names a file,
    the settings in that file.
    """
    global _default_loader
    with _default_loader_lock:
        if _default_loader is None:
            settings_file = os.environ.get(SETTINGS_FILE_ENV_VAR)
            settings = SettingsSource.from_file(settings_file) if settings_file else SettingsSource()
            _default_loader = OptionsLoader(EnvironmentSource(), settings)
        return _default_loader


def set_default_loader(loader: OptionsLoader | None) -> None:
    """Replace the process-wide loader; None resets it to be recreated on next use."""
    global _default_loader
    with _default_loader_lock:
        _default_loader = loader


def load(record_type: Type[T], mode: PrecedenceMode = PrecedenceMode.ENVIRONMENT_FIRST) -> T:
    """Load an options instance with the default loader."""
    return get_default_loader().load(record_type, mode)


def bind(
    record_type: Type[T], mode: PrecedenceMode = PrecedenceMode.ENVIRONMENT_FIRST
) -> BindResult[T]:
    """Bind an options instance with the default loader, without recording it."""
    return get_default_loader().bind(record_type, mode)


def was_assigned(instance: Any, field_name: str) -> bool:
    """Check the default loader's ledger for an assigned field."""
    return get_default_loader().was_assigned(instance, field_name)
