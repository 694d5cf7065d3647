"""Ancestry chain computation.

The ancestry chain of a class is its MRO with capability markers spliced in.
A capability marker is an ABC or runtime-checkable Protocol the class
satisfies without listing it as a base (``list`` satisfies
``collections.abc.Sequence`` through ABC registration, for example).

Each satisfied capability is placed directly after the most general class in
the MRO that satisfies it, the same spot an included mixin would occupy:

    >>> from collections.abc import Sequence
    >>> ancestry(list, capabilities=(Sequence,))
    (<class 'list'>, <class 'collections.abc.Sequence'>, <class 'object'>)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from adorn.core.types import TypeKey


def _is_static_protocol(key: type) -> bool:
    """Check if key is a Protocol that cannot be checked at runtime."""
    return getattr(key, "_is_protocol", False) and not getattr(key, "_is_runtime_protocol", False)


def _anchor(
    mro: tuple[type, ...],
    key: type,
    instance_check: Callable[[type], bool] | None,
) -> type | None:
    """Find the most general MRO class that satisfies a capability.

    The class itself (or the instance, when one is given) must satisfy the
    capability; a base class satisfying it is not enough, since subclasses
    can cancel capabilities (``list`` sets ``__hash__ = None``).

    Args:
        mro: Method resolution order, most specific first.
        key: Capability marker.
        instance_check: Instance test for the target, when there is one.

    Returns:
        The anchor class, or None if the capability is not satisfied.
    """
    if _is_static_protocol(key):
        return None

    try:
        satisfied = issubclass(mro[0], key)
    except TypeError:
        # Protocols with data members reject issubclass(); only the
        # concrete target can be checked, and it anchors on its own type
        if instance_check is not None and instance_check(key):
            return mro[0]
        return None
    if not satisfied or (instance_check is not None and not instance_check(key)):
        return None

    anchor = mro[0]
    for cls in mro[1:]:
        if issubclass(cls, key):
            anchor = cls
    return anchor


def _specific_first(keys: list[type]) -> list[type]:
    """Order capabilities so a subclass precedes the capabilities it extends.

    Unrelated capabilities keep the order they were supplied in.
    """
    remaining = list(keys)
    ordered: list[type] = []
    while remaining:
        for key in remaining:
            if not any(other is not key and key in other.__mro__ for other in remaining):
                break
        remaining.remove(key)
        ordered.append(key)
    return ordered


def _walk(
    cls: type,
    capabilities: Iterable[TypeKey],
    instance_check: Callable[[type], bool] | None,
) -> tuple[type, ...]:
    mro = cls.__mro__
    in_mro = set(mro)

    anchored: dict[type, list[type]] = {}
    for key in dict.fromkeys(capabilities):
        if key in in_mro or not isinstance(key, type):
            continue
        anchor = _anchor(mro, key, instance_check)
        if anchor is not None:
            anchored.setdefault(anchor, []).append(key)

    chain: list[type] = []
    for base in mro:
        chain.append(base)
        if base in anchored:
            chain.extend(_specific_first(anchored[base]))
    return tuple(chain)


def ancestry(cls: type, capabilities: Iterable[TypeKey] = ()) -> tuple[type, ...]:
    """Compute the ancestry chain of a class.

    Args:
        cls: Class to walk.
        capabilities: Candidate capability markers, in registration order.
            Candidates already in the MRO or not satisfied are ignored.

    Returns:
        Ancestry chain, most specific first, ending with ``object`` or with
        capabilities anchored on ``object``.
    """
    return _walk(cls, capabilities, None)


def ancestry_of(target: Any, capabilities: Iterable[TypeKey] = ()) -> tuple[type, ...]:
    """Compute the ancestry chain of an object's type.

    Unlike :func:`ancestry`, protocols that only support ``isinstance()`` are
    checked against the object itself.

    Args:
        target: Object whose type is walked.
        capabilities: Candidate capability markers, in registration order.

    Returns:
        Ancestry chain, most specific first.
    """
    return _walk(type(target), capabilities, lambda key: isinstance(target, key))
