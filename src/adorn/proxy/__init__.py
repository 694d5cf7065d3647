"""Forwarding proxy and helpers for layered behavior."""

from adorn.proxy.proxy import (
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
    "DecoratedProxy",
    "InvalidTargetError",
    "UnsupportedOperationError",
    "applied_bundles",
    "behavior_super",
    "extend",
    "is_decorated",
    "unwrap",
]
