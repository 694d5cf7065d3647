"""Bundle construction and the type-keyed behavior registry.

Usage:
    registry = BehaviorRegistry()

    # Mapping definition
    registry.register(object, {"greet": lambda self: "hi"})

    # Class body as a definition block
    @registry.behaviors(list, tuple)
    class SequenceBehaviors:
        def as_array(self):
            return list(unwrap(self))

    registry.lookup(list)  # -> BehaviorBundle
    registry.lookup(dict)  # -> None
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from types import FunctionType, MappingProxyType
from typing import Any, TypeVar

from adorn.core.bundle.models import BehaviorBundle
from adorn.core.types import Behavior, TypeKey

logger = logging.getLogger(__name__)

D = TypeVar("D")

# Class-body entries that describe the class itself rather than behavior
_CLASS_BOOKKEEPING = frozenset(
    {
        "__module__",
        "__qualname__",
        "__doc__",
        "__dict__",
        "__weakref__",
        "__annotations__",
        "__annotate__",
        "__annotate_func__",
        "__annotations_cache__",
        "__firstlineno__",
        "__static_attributes__",
        "__slots__",
        "__classcell__",
        "__orig_bases__",
        "__type_params__",
        "__parameters__",
        "__new__",
        "__init__",
        "__init_subclass__",
        "__class_getitem__",
        "__subclasshook__",
        "__abstractmethods__",
        "_abc_impl",
    }
)


class RegistryFrozenError(RuntimeError):
    """Raised when a frozen registry is asked to change."""

    pass


def _is_behavior(value: object) -> bool:
    if isinstance(value, (property, staticmethod)):
        return True
    return callable(value) and not isinstance(value, (type, classmethod))


def _behaviors_from_class(cls: type) -> dict[str, Behavior]:
    """Collect behaviors defined directly in a class body.

    Inherited members are ignored. Plain data attributes are skipped;
    classmethods are rejected because a proxy has no class of its own
    to bind them to.
    """
    behaviors: dict[str, Behavior] = {}
    for name, value in vars(cls).items():
        if name in _CLASS_BOOKKEEPING:
            continue
        if isinstance(value, classmethod):
            raise TypeError(
                f"{cls.__qualname__}.{name} is a classmethod; "
                f"behaviors must be functions, properties or staticmethods"
            )
        if _is_behavior(value):
            behaviors[name] = value
    return behaviors


def build_bundle(definition: Any, name: str | None = None) -> BehaviorBundle:
    """Build a fresh behavior bundle from a definition.

    Args:
        definition: A ``{name: behavior}`` mapping, a class whose body defines
            the behaviors, a single function (registered under its own name),
            or an existing BehaviorBundle (copied by value).
        name: Bundle name. Defaults to the definition's own name.

    Returns:
        New BehaviorBundle instance.

    Raises:
        TypeError: If the definition or one of its entries is not usable.
    """
    if isinstance(definition, BehaviorBundle):
        return BehaviorBundle(name or definition.name, definition.behaviors)

    if isinstance(definition, type):
        return BehaviorBundle(name or definition.__qualname__, _behaviors_from_class(definition))

    if isinstance(definition, FunctionType):
        return BehaviorBundle(name or definition.__name__, {definition.__name__: definition})

    if isinstance(definition, Mapping):
        for key, value in definition.items():
            if not isinstance(key, str):
                raise TypeError(f"Behavior names must be strings, got {key!r}")
            if not _is_behavior(value):
                raise TypeError(
                    f"Behavior {key!r} must be a function, property or staticmethod, "
                    f"got {type(value).__name__}"
                )
        return BehaviorBundle(name or "behaviors", definition)

    raise TypeError(
        f"Cannot build a behavior bundle from {type(definition).__name__}. "
        f"Use a mapping, a class, a function or a BehaviorBundle."
    )


def _normalize_types(types: TypeKey | Iterable[TypeKey]) -> tuple[TypeKey, ...]:
    keys = (types,) if isinstance(types, type) else tuple(types)
    for key in keys:
        if not isinstance(key, type):
            raise TypeError(f"Type keys must be classes, got {key!r}")
    return keys


class BehaviorRegistry:
    """Mapping from type keys to behavior bundles, owned by one namespace.

    Writes are serialized by a lock and publish a fresh read-only snapshot;
    reads go to the current snapshot without locking. Registries never
    share state with each other.
    """

    def __init__(self) -> None:
        """Initialize empty, unfrozen registry."""
        self._lock = threading.Lock()
        self._bundles: Mapping[TypeKey, BehaviorBundle] = MappingProxyType({})
        self._frozen = False

    def __contains__(self, key: object) -> bool:
        return key in self._bundles

    def __len__(self) -> int:
        return len(self._bundles)

    def __repr__(self) -> str:
        keys = ", ".join(k.__qualname__ for k in self._bundles)
        return f"BehaviorRegistry([{keys}], frozen={self._frozen})"

    @property
    def frozen(self) -> bool:
        """Whether the setup phase has ended."""
        return self._frozen

    def register(
        self,
        types: TypeKey | Iterable[TypeKey],
        definition: Any,
    ) -> tuple[BehaviorBundle, ...]:
        """Register a behavior definition for one or more type keys.

        Each key gets its own freshly built bundle. Registering a key again
        replaces its bundle (last write wins).

        Args:
            types: A type key or an iterable of type keys.
            definition: Mapping, class, function or BehaviorBundle, see
                :func:`build_bundle`.

        Returns:
            The stored bundles, in the order of ``types``.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
            TypeError: If a key is not a class or the definition is unusable.
        """
        keys = _normalize_types(types)
        template = build_bundle(definition)
        stored = tuple(BehaviorBundle(template.name, template.behaviors) for _ in keys)

        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(
                    f"Cannot register {[k.__qualname__ for k in keys]}: registry is frozen"
                )
            updated = dict(self._bundles)
            for key, bundle in zip(keys, stored, strict=True):
                # Re-registration moves the key to the end of the order
                updated.pop(key, None)
                updated[key] = bundle
            self._bundles = MappingProxyType(updated)

        for key, bundle in zip(keys, stored, strict=True):
            logger.debug("Registered %r for %s", bundle, key.__qualname__)
        return stored

    def behaviors(self, *types: TypeKey) -> Callable[[D], D]:
        """Decorator form of :meth:`register`.

        Usage:
            @registry.behaviors(int, float)
            class NumberBehaviors:
                def double(self):
                    return unwrap(self) * 2

            @registry.behaviors(object)
            def describe(self):
                return f"<{type(unwrap(self)).__name__}>"

        Args:
            types: Type keys the decorated definition is registered for.

        Returns:
            Decorator that registers the definition and returns it unchanged.
        """
        if not types:
            raise TypeError("behaviors() requires at least one type key")

        def decorator(definition: D) -> D:
            self.register(types, definition)
            return definition

        return decorator

    def lookup(self, key: object) -> BehaviorBundle | None:
        """Get the bundle registered for a type key.

        Args:
            key: Type key to look up. Any object is accepted.

        Returns:
            The registered bundle, or None if the key is not registered.
        """
        try:
            return self._bundles.get(key)  # type: ignore[call-overload]
        except TypeError:
            # Unhashable keys can never be registered
            return None

    def is_registered(self, key: object) -> bool:
        """Check if a type key has a bundle.

        Args:
            key: Type key to check.

        Returns:
            True if a bundle is registered for the key, False otherwise.
        """
        return self.lookup(key) is not None

    def keys(self) -> tuple[TypeKey, ...]:
        """Registered type keys in registration order."""
        return tuple(self._bundles)

    def snapshot(self) -> Mapping[TypeKey, BehaviorBundle]:
        """Current read-only view of the registry.

        The view never changes; later registrations publish a new one.
        """
        return self._bundles

    def unregister(self, key: TypeKey) -> BehaviorBundle | None:
        """Remove the bundle registered for a type key.

        Args:
            key: Type key to remove.

        Returns:
            The removed bundle, or None if the key was not registered.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
        """
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(
                    f"Cannot unregister {key.__qualname__}: registry is frozen"
                )
            if key not in self._bundles:
                return None
            updated = dict(self._bundles)
            removed = updated.pop(key)
            self._bundles = MappingProxyType(updated)

        logger.debug("Unregistered %r for %s", removed, key.__qualname__)
        return removed

    def freeze(self) -> None:
        """End the setup phase. Later register/unregister calls raise."""
        with self._lock:
            self._frozen = True
        logger.debug("Froze registry with %d bundles", len(self._bundles))

    def copy(self) -> BehaviorRegistry:
        """Create an independent, unfrozen registry with the same bundles.

        Returns:
            New BehaviorRegistry sharing bundle values but no state.
        """
        clone = BehaviorRegistry()
        clone._bundles = MappingProxyType(dict(self._bundles))
        return clone
