"""Ancestry chains: MRO plus satisfied capability markers."""

from adorn.core.ancestry.core import ancestry, ancestry_of

__all__ = [
    "ancestry",
    "ancestry_of",
]
