"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from adorn import BehaviorRegistry, Decorator, unwrap


@pytest.fixture
def registry():
    """Fresh BehaviorRegistry instance."""
    return BehaviorRegistry()


@pytest.fixture
def decorator(registry):
    """Decorator over the fresh registry."""
    return Decorator(registry)


@pytest.fixture
def array_decorator(decorator):
    """Decorator with the as_array conversions registered.

    object -> [self], list -> self
    """
    decorator.register(object, {"as_array": lambda self: [unwrap(self)]})
    decorator.register(list, {"as_array": lambda self: unwrap(self)})
    return decorator
