"""Pytest configuration and fixtures for options package tests."""

import pytest

from framework_options import (
    AssignmentLedger,
    EnvironmentSource,
    OptionsLoader,
    SettingsSource,
    set_default_loader,
)


@pytest.fixture
def ledger():
    """A fresh assignment ledger."""
    return AssignmentLedger()


@pytest.fixture
def make_loader(ledger):
    """Build a loader over in-memory environment and settings mappings."""

    def _make(environ=None, settings=None):
        return OptionsLoader(
            environment=EnvironmentSource(environ=environ or {}),
            settings=SettingsSource(settings or {}),
            ledger=ledger,
        )

    return _make


@pytest.fixture
def reset_default_loader():
    """Reset the process-wide loader before and after a test."""
    set_default_loader(None)
    yield
    set_default_loader(None)
