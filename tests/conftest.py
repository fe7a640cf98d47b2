"""Shared fixtures: a pinned clock and a throwaway SQLite database."""

from datetime import date

import pytest

from action_center.adapters.clock import FixedClock
from action_center.adapters.sqlite_store import SQLiteStore
from action_center.registry import ProjectRegistry
from action_center.service import TriageService


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def clock(today):
    return FixedClock(today)


@pytest.fixture
def store(tmp_path):
    return SQLiteStore(tmp_path / "action-center.db")


@pytest.fixture
def registry(store, clock):
    return ProjectRegistry(store, clock)


@pytest.fixture
def service(store, clock, registry):
    return TriageService(store, clock, registry)
