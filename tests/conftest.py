# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

START = 1_000_000


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


@pytest.fixture
def clock():
    """A manual time source starting at a fixed reading."""
    from turnstate.runtime.timers import ManualTimeSource

    return ManualTimeSource(start=START)


@pytest.fixture
def scheduler(clock):
    """An empty scheduler on the manual clock."""
    from turnstate.runtime.scheduler import Scheduler

    return Scheduler(clock=clock)


@pytest.fixture
def state():
    """An empty state store."""
    from turnstate.core.state import State

    return State()


@pytest.fixture
def runtime(scheduler, state):
    """A runtime with no modules registered."""
    from turnstate.runtime.runtime import Runtime

    return Runtime(scheduler, state)


@pytest.fixture
def module_factory():
    """Returns a factory building Modules from keyword functions."""
    from turnstate.core.modules import Module

    def _factory(name="mod", init=None, **functions):
        return Module(name=name, functions=functions, init=init)

    return _factory


@pytest.fixture
def mock_function():
    """A mock module function that records its calls."""
    return MagicMock(name="module_function")


@pytest.fixture
def error_classes():
    """Provides a tuple of error classes for quick reference."""
    from turnstate.core.errors import (
        ContextError,
        DuplicateError,
        ResolutionError,
        SnapshotError,
        TurnStateError,
        ValidationError,
    )

    return (TurnStateError, ValidationError, DuplicateError, ContextError, ResolutionError, SnapshotError)
