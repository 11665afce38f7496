"""Key-value sources for options binding and precedence resolution.

Two sources feed the loader:

- ``EnvironmentSource`` reads process environment variables.
- ``SettingsSource`` reads a static, flat application settings document.

``SourceResolver`` picks the winning raw value for a field name according
to a ``PrecedenceMode``.

Settings file formats:
    YAML (``.yaml``/``.yml``) or JSON (``.json``) with a flat top-level
    mapping::

        RequiredInt: 24
        RequiredBool: true
        RequiredString: test

    XML application configuration (``.xml``/``.config``)::

        <configuration>
          <appSettings>
            <add key="RequiredInt" value="24" />
          </appSettings>
        </configuration>
"""

from __future__ import annotations

import json
import logging
import os
import xml.etree.ElementTree as ET
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Protocol, Union, runtime_checkable

import yaml  # type: ignore[import-untyped]

from .exceptions import SettingsFileError

logger = logging.getLogger(__name__)


class PrecedenceMode(Enum):
    """Which source wins when both hold a value for the same field."""

    ENVIRONMENT_FIRST = "environment_first"
    SETTINGS_FIRST = "settings_first"


@runtime_checkable
class Source(Protocol):
    """Read-only string-keyed lookup."""

    def get(self, key: str) -> str | None:
        ...


class EnvironmentSource:
    """Process environment variables as a source.

    Lookups are case-sensitive and read the environment at call time, so
    variables set after construction are visible.
    """

    def __init__(self, environ: Mapping[str, str] | None = None, prefix: str = "") -> None:
        """Initialize the environment source.

        Args:
            environ: Mapping to read instead of ``os.environ``
            prefix: Prefix prepended to every looked-up key (e.g. ``MYAPP_``)
        """
        self._environ = environ
        self.prefix = prefix

    def get(self, key: str) -> str | None:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(f"{self.prefix}{key}")


class SettingsSource:
    """Static application settings as a source.

    Holds a flat, read-only mapping of string keys to string values.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        """Initialize the settings source.

        Args:
            values: Flat mapping of settings; scalar values are stringified
        """
        self._values: Dict[str, str] = {}
        for key, value in (values or {}).items():
            self._values[str(key)] = _to_setting_string(key, value)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SettingsSource":
        """Load settings from a YAML, JSON or XML application settings file.

        Args:
            path: Path to the settings document

        Returns:
            SettingsSource holding the document's settings

        Raises:
            SettingsFileError: If the file is missing, unreadable or not flat
        """
        path = Path(path)
        if not path.exists():
            raise SettingsFileError(
                f"Settings file not found: {path}", context={"path": str(path)}
            )

        suffix = path.suffix.lower()
        try:
            if suffix in [".yaml", ".yml"]:
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            elif suffix == ".json":
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            elif suffix in [".xml", ".config"]:
                data = _read_app_settings(path)
            else:
                raise SettingsFileError(
                    f"Unsupported settings file format: {suffix}", context={"path": str(path)}
                )
        except (yaml.YAMLError, json.JSONDecodeError, ET.ParseError) as e:
            raise SettingsFileError(
                f"Failed to parse settings file {path}: {e}", context={"path": str(path)}
            ) from e
        except OSError as e:
            raise SettingsFileError(
                f"Failed to read settings file {path}: {e}", context={"path": str(path)}
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SettingsFileError(
                f"Settings file must contain a mapping: {path}", context={"path": str(path)}
            )

        source = cls(data)
        logger.info(f"Loaded {len(source)} settings from {path}")
        return source

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def keys(self) -> Iterator[str]:
        return iter(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)


class SourceResolver:
    """Picks the winning raw value for a field from two sources."""

    def __init__(self, environment: Source, settings: Source) -> None:
        self.environment = environment
        self.settings = settings

    def resolve(
        self, field_name: str, mode: PrecedenceMode = PrecedenceMode.ENVIRONMENT_FIRST
    ) -> str | None:
        """Resolve the raw value for a field name.

        The first source in precedence order that reports a value wins, even
        if that value is empty; blank handling is left to the caller.

        Args:
            field_name: Key to look up in both sources
            mode: Precedence between the environment and settings sources

        Returns:
            The winning raw value, or None if neither source has the key
        """
        environment_value = self.environment.get(field_name)
        settings_value = self.settings.get(field_name)

        if mode is PrecedenceMode.ENVIRONMENT_FIRST:
            return environment_value if environment_value is not None else settings_value
        return settings_value if settings_value is not None else environment_value


def _to_setting_string(key: Any, value: Any) -> str:
    if isinstance(value, (dict, list, tuple, set)):
        raise SettingsFileError(
            f"Setting '{key}' must be a scalar value, got {type(value).__name__}",
            context={"key": str(key)},
        )
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _read_app_settings(path: Path) -> Dict[str, str]:
    root = ET.parse(path).getroot()
    sections = [root] if root.tag == "appSettings" else root.iter("appSettings")

    settings: Dict[str, str] = {}
    for section in sections:
        for entry in section.findall("add"):
            key = entry.get("key")
            if key is None:
                raise SettingsFileError(
                    f"appSettings entry without a key in {path}", context={"path": str(path)}
                )
            settings[key] = entry.get("value", "")
    return settings
