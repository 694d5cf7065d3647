"""Core type definitions for adorn."""

from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

TypeKey: TypeAlias = type
"""A class, ABC, or runtime-checkable Protocol used as a registry key."""

Behavior: TypeAlias = Callable[..., Any] | property | staticmethod
"""A single bundle entry. Functions receive the proxy as their first argument."""

Definition: TypeAlias = Mapping[str, Behavior] | type
"""Source of a behavior bundle: a name -> behavior mapping or a definition class."""
