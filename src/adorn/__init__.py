"""adorn: attach per-type behavior to individual objects without touching their classes.

Usage:
    from adorn import Decorator, unwrap

    decorator = Decorator()

    @decorator.behaviors(object)
    class ObjectBehaviors:
        def as_array(self):
            return [unwrap(self)]

    @decorator.behaviors(list)
    class ListBehaviors:
        def as_array(self):
            return unwrap(self)

    decorator.decorate(5).as_array()          # [5]
    decorator.decorate([1, 2, 3]).as_array()  # [1, 2, 3], the same list
    decorator.decorate("x").upper()           # "X", forwarded to the str
"""

__version__ = "0.1.0"

# Core primitives
from adorn.core import (
    Behavior,
    BehaviorBundle,
    BehaviorRegistry,
    Definition,
    RegistryFrozenError,
    TypeKey,
    ancestry,
    ancestry_of,
    build_bundle,
)

# Decoration
from adorn.decorator import DecorationScope, Decorator

# Proxy
from adorn.proxy import (
    DecoratedProxy,
    InvalidTargetError,
    UnsupportedOperationError,
    applied_bundles,
    behavior_super,
    extend,
    is_decorated,
    unwrap,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "TypeKey",
    "Behavior",
    "Definition",
    "BehaviorBundle",
    "BehaviorRegistry",
    "RegistryFrozenError",
    "build_bundle",
    "ancestry",
    "ancestry_of",
    # Decoration
    "Decorator",
    "DecorationScope",
    # Proxy
    "DecoratedProxy",
    "InvalidTargetError",
    "UnsupportedOperationError",
    "applied_bundles",
    "behavior_super",
    "extend",
    "is_decorated",
    "unwrap",
]
