"""Decorator applier and registration scopes."""

from adorn.decorator.decorator import DecorationScope, Decorator
from adorn.proxy import InvalidTargetError

__all__ = [
    "Decorator",
    "DecorationScope",
    "InvalidTargetError",
]
