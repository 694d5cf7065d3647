"""Core functionalities: bundles, registry, and ancestry.

Architecture Note:
    core/ contains the pieces that know nothing about proxies. The registry
    is the only stateful object here; everything else is a pure function of
    its inputs. Proxy construction and layering live in proxy/ and decorator/.
"""

from adorn.core.ancestry import ancestry, ancestry_of
from adorn.core.bundle import (
    BehaviorBundle,
    BehaviorRegistry,
    RegistryFrozenError,
    build_bundle,
)
from adorn.core.types import Behavior, Definition, TypeKey

__all__ = [
    # Types
    "TypeKey",
    "Behavior",
    "Definition",
    # Bundle
    "BehaviorBundle",
    "BehaviorRegistry",
    "RegistryFrozenError",
    "build_bundle",
    # Ancestry
    "ancestry",
    "ancestry_of",
]
