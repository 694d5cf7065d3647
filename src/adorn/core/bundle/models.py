"""Behavior bundle model.

A bundle is the unit of behavior attached to a type key: a frozen,
read-only mapping from operation name to behavior.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from adorn.core.types import Behavior


@dataclass(frozen=True, slots=True, eq=False)
class BehaviorBundle:
    """Immutable named collection of behaviors.

    Bundles compare by identity: two registrations of the same definition
    produce two distinct bundles.
    """

    name: str
    behaviors: Mapping[str, Behavior] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Snapshot the caller's mapping so later edits to it cannot leak in
        object.__setattr__(self, "behaviors", MappingProxyType(dict(self.behaviors)))

    def __contains__(self, name: object) -> bool:
        return name in self.behaviors

    def __iter__(self) -> Iterator[str]:
        return iter(self.behaviors)

    def __len__(self) -> int:
        return len(self.behaviors)

    def __repr__(self) -> str:
        return f"BehaviorBundle({self.name!r}, {sorted(self.behaviors)})"

    def get(self, name: str, default: Any = None) -> Behavior | Any:
        """Get a behavior by operation name.

        Args:
            name: Operation name.
            default: Value returned when the bundle does not define ``name``.

        Returns:
            The behavior, or ``default``.
        """
        return self.behaviors.get(name, default)

    def names(self) -> tuple[str, ...]:
        """Operation names defined by this bundle, in definition order."""
        return tuple(self.behaviors)
