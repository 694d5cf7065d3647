"""Behavior bundles: model, construction, and registry."""

from adorn.core.bundle.core import (
    BehaviorRegistry,
    RegistryFrozenError,
    build_bundle,
)
from adorn.core.bundle.models import BehaviorBundle

__all__ = [
    # Models
    "BehaviorBundle",
    # Core
    "BehaviorRegistry",
    "RegistryFrozenError",
    "build_bundle",
]
