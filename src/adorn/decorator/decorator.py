"""Decorator applier and registration scopes.

Usage:
    decorator = Decorator()

    decorator.register(object, {"as_array": lambda self: [unwrap(self)]})
    decorator.register(list, {"as_array": lambda self: unwrap(self)})

    decorator.decorate(5).as_array()          # [5]
    decorator.decorate([1, 2, 3]).as_array()  # the original list

    # Scopes: each subclass owns an isolated registry
    class Conversions(DecorationScope):
        pass

    @Conversions.behaviors(object)
    class ObjectConversions:
        def as_array(self):
            return [unwrap(self)]

    Conversions.decorate(5).as_array()  # [5]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from adorn.core.ancestry import ancestry_of
from adorn.core.bundle import BehaviorBundle, BehaviorRegistry
from adorn.core.types import TypeKey
from adorn.proxy import DecoratedProxy, InvalidTargetError, extend, unwrap

if TYPE_CHECKING:
    from adorn.config import DecorationSettings

logger = logging.getLogger(__name__)

D = TypeVar("D")


class Decorator:
    """Wraps objects in proxies layered with the bundles of their ancestry.

    Args:
        registry: Registry to read bundles from. A private one is created
            when omitted.
        virtual_capabilities: Include registered ABCs and runtime protocols
            the target satisfies without inheriting from them.
        freeze_on_first_decorate: Freeze the registry on the first decorate().
        log_layering: Log every layered bundle at DEBUG.
    """

    def __init__(
        self,
        registry: BehaviorRegistry | None = None,
        *,
        virtual_capabilities: bool = True,
        freeze_on_first_decorate: bool = False,
        log_layering: bool = False,
    ):
        """Initialize decorator.

        Args:
            registry: Registry to read bundles from. A private one is created
                when omitted.
            virtual_capabilities: Include registered ABCs and runtime protocols
                the target satisfies without inheriting from them.
            freeze_on_first_decorate: Freeze the registry on the first decorate().
            log_layering: Log every layered bundle at DEBUG.
        """
        self._registry = registry if registry is not None else BehaviorRegistry()
        self._virtual_capabilities = virtual_capabilities
        self._freeze_on_first_decorate = freeze_on_first_decorate
        self._log_layering = log_layering

    @classmethod
    def from_settings(
        cls,
        settings: DecorationSettings,
        registry: BehaviorRegistry | None = None,
    ) -> Decorator:
        """Build a decorator configured from settings.

        Args:
            settings: Loaded DecorationSettings.
            registry: Optional registry to share.

        Returns:
            Configured Decorator.
        """
        return cls(
            registry,
            virtual_capabilities=settings.virtual_capabilities,
            freeze_on_first_decorate=settings.freeze_on_first_decorate,
            log_layering=settings.log_layering,
        )

    def derive(self, registry: BehaviorRegistry) -> Decorator:
        """Create a decorator with the same options over another registry."""
        return Decorator(
            registry,
            virtual_capabilities=self._virtual_capabilities,
            freeze_on_first_decorate=self._freeze_on_first_decorate,
            log_layering=self._log_layering,
        )

    @property
    def registry(self) -> BehaviorRegistry:
        """The registry this decorator reads from."""
        return self._registry

    def register(
        self,
        types: TypeKey | Iterable[TypeKey],
        definition: Any,
    ) -> tuple[BehaviorBundle, ...]:
        """Register a behavior definition, see :meth:`BehaviorRegistry.register`."""
        return self._registry.register(types, definition)

    def behaviors(self, *types: TypeKey) -> Callable[[D], D]:
        """Decorator form of :meth:`register`."""
        return self._registry.behaviors(*types)

    def lookup(self, key: object) -> BehaviorBundle | None:
        """Get the bundle registered for a type key, or None."""
        return self._registry.lookup(key)

    def ancestry(self, target: Any) -> tuple[type, ...]:
        """Ancestry chain decorate() walks for a target, most specific first.

        Args:
            target: Object (or proxy) to inspect.

        Returns:
            Ancestry chain including satisfied registered capabilities.
        """
        return self._chain(unwrap(target), self._registry.snapshot().keys())

    def _chain(self, target: Any, keys: Iterable[TypeKey]) -> tuple[type, ...]:
        capabilities = keys if self._virtual_capabilities else ()
        return ancestry_of(target, capabilities)

    def decorate(self, target: Any) -> DecoratedProxy:
        """Wrap a target in a proxy layered with its ancestry's bundles.

        Bundles are layered most general first, so more specific bundles
        shadow less specific ones. The ancestry is walked fresh on every
        call; registry changes between calls take effect immediately.

        Args:
            target: Object to decorate. A proxy is unwrapped first, so
                decorating a proxy never nests proxies.

        Returns:
            New DecoratedProxy. Without matching bundles it is a pure
            pass-through.

        Raises:
            InvalidTargetError: If target is None.
        """
        if target is None:
            raise InvalidTargetError("Cannot decorate None")
        target = unwrap(target)

        if self._freeze_on_first_decorate and not self._registry.frozen:
            self._registry.freeze()

        # One snapshot for the whole walk so concurrent registration cannot
        # mix two registry states into one proxy
        snapshot = self._registry.snapshot()
        proxy = DecoratedProxy(target)
        layered = 0
        for key in reversed(self._chain(target, snapshot.keys())):
            bundle = snapshot.get(key)
            if bundle is None:
                continue
            extend(proxy, bundle, key)
            layered += 1
            if self._log_layering:
                logger.debug("Layered %r for %s", bundle, key.__qualname__)

        logger.debug("Decorated %s with %d bundle(s)", type(target).__qualname__, layered)
        return proxy


class DecorationScope:
    """Base class for isolated registration namespaces.

    Every subclass owns its own Decorator and registry. A subclass of a
    scope starts from a copy of its parent's registrations; after that the
    two evolve independently. Decorator options are passed as class keywords
    and inherited when omitted.

    Usage:
        class Conversions(DecorationScope, virtual_capabilities=False):
            pass

        Conversions.register(object, {"as_array": lambda self: [unwrap(self)]})
        Conversions.decorate(5).as_array()
    """

    _decorator: ClassVar[Decorator | None] = None

    def __init_subclass__(cls, **options: Any) -> None:
        parent = cls._decorator
        if parent is None:
            cls._decorator = Decorator(**options)
        elif options:
            cls._decorator = Decorator(parent.registry.copy(), **options)
        else:
            cls._decorator = parent.derive(parent.registry.copy())
        logger.debug("Created decoration scope %s", cls.__qualname__)
        super().__init_subclass__()

    @classmethod
    def _scope(cls) -> Decorator:
        if cls._decorator is None:
            raise TypeError(f"{cls.__name__} is not a scope; subclass it to get one")
        return cls._decorator

    @classmethod
    def decorator(cls) -> Decorator:
        """The Decorator owned by this scope."""
        return cls._scope()

    @classmethod
    def register(
        cls,
        types: TypeKey | Iterable[TypeKey],
        definition: Any,
    ) -> tuple[BehaviorBundle, ...]:
        """Register a behavior definition in this scope."""
        return cls._scope().register(types, definition)

    @classmethod
    def behaviors(cls, *types: TypeKey) -> Callable[[D], D]:
        """Decorator form of :meth:`register` for this scope."""
        return cls._scope().behaviors(*types)

    @classmethod
    def lookup(cls, key: object) -> BehaviorBundle | None:
        """Get the bundle registered in this scope for a type key, or None."""
        return cls._scope().lookup(key)

    @classmethod
    def decorate(cls, target: Any) -> DecoratedProxy:
        """Wrap a target using this scope's registrations."""
        return cls._scope().decorate(target)
