"""Forwarding proxy with layered behavior bundles.

Usage:
    proxy = DecoratedProxy(target)
    extend(proxy, general_bundle, key=object)
    extend(proxy, specific_bundle, key=list)

    proxy.as_array()    # most specific bundle defining as_array
    proxy.append(4)     # not in any bundle: forwarded to target
    unwrap(proxy)       # -> target

Attribute reads resolve through the layered method table first, then the
target. Attribute writes and deletes always go to the target. Special methods
(len(), iteration, operators, ...) follow the same rule: a bundle may define
them, otherwise the builtin operation is applied to the target.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from types import MethodType
from typing import Any

from adorn.core.bundle import BehaviorBundle
from adorn.core.types import Behavior, TypeKey

_SLOTS = ("_adorn_target", "_adorn_layers", "_adorn_table")

# Marks "no applied behavior"; None is a legitimate behavior result
_MISSING = object()


class InvalidTargetError(ValueError):
    """Raised when asked to decorate None."""

    pass


class UnsupportedOperationError(AttributeError):
    """Raised when neither an applied bundle nor the target has an attribute."""

    def __init__(self, target: Any, name: str) -> None:
        super().__init__(
            f"{type(target).__name__!r} object has no attribute {name!r} "
            f"and no applied behavior defines it",
            name=name,
            obj=target,
        )
        self.target_type = type(target)


def _bind(behavior: Behavior, proxy: DecoratedProxy) -> Any:
    """Bind a behavior to the proxy the way a class attribute binds to an instance."""
    if isinstance(behavior, property):
        return behavior.__get__(proxy, type(proxy))
    if isinstance(behavior, staticmethod):
        return behavior.__func__
    return MethodType(behavior, proxy)


class DecoratedProxy:
    """Per-call wrapper around exactly one target object.

    Holds the target, the applied bundles (most general first), and the
    flattened method table. Never copies the target.

    Args:
        target: Object to wrap. Must not be None.
    """

    __slots__ = _SLOTS

    def __init__(self, target: Any) -> None:
        """Initialize pass-through proxy.

        Args:
            target: Object to wrap. Must not be None.

        Raises:
            InvalidTargetError: If target is None.
        """
        if target is None:
            raise InvalidTargetError("Cannot decorate None")
        object.__setattr__(self, "_adorn_target", target)
        object.__setattr__(self, "_adorn_layers", [])
        # name -> behaviors from every layer defining it, most general first
        object.__setattr__(self, "_adorn_table", {})

    @property  # type: ignore[misc]
    def __class__(self) -> type:
        return type(self._adorn_target)

    @property
    def __wrapped__(self) -> Any:
        return self._adorn_target

    def _adorn_layer(self, bundle: BehaviorBundle, key: TypeKey | None) -> None:
        self._adorn_layers.append((key, bundle))
        for name, behavior in bundle.behaviors.items():
            self._adorn_table[name] = (*self._adorn_table.get(name, ()), behavior)

    def _adorn_resolve(self, name: str) -> Any:
        layers = self._adorn_table.get(name)
        if layers:
            return _bind(layers[-1], self)
        return _MISSING

    def __getattr__(self, name: str) -> Any:
        if name in _SLOTS:
            # Slot not initialized yet (e.g. during copy); never forward these
            raise AttributeError(name)
        bound = self._adorn_resolve(name)
        if bound is not _MISSING:
            return bound
        target = self._adorn_target
        try:
            return getattr(target, name)
        except AttributeError as e:
            raise UnsupportedOperationError(target, name) from e

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._adorn_target, name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._adorn_target, name)

    def __dir__(self) -> list[str]:
        # Reports the target's attributes only; applied behaviors are not listed
        return dir(self._adorn_target)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        bound = self._adorn_resolve("__call__")
        if bound is not _MISSING:
            return bound(*args, **kwargs)
        return self._adorn_target(*args, **kwargs)

    def __round__(self, ndigits: int | None = None) -> Any:
        bound = self._adorn_resolve("__round__")
        if bound is not _MISSING:
            return bound(ndigits)
        return round(self._adorn_target, ndigits)

    def __format__(self, format_spec: str) -> str:
        bound = self._adorn_resolve("__format__")
        if bound is not _MISSING:
            return bound(format_spec)
        return format(self._adorn_target, format_spec)

    def __enter__(self) -> Any:
        bound = self._adorn_resolve("__enter__")
        if bound is not _MISSING:
            return bound()
        return type(self._adorn_target).__enter__(self._adorn_target)

    def __exit__(self, *exc_info: Any) -> Any:
        bound = self._adorn_resolve("__exit__")
        if bound is not _MISSING:
            return bound(*exc_info)
        return type(self._adorn_target).__exit__(self._adorn_target, *exc_info)


def _forward(name: str, operation: Callable[..., Any]) -> Callable[..., Any]:
    """Build a special method that prefers an applied behavior, else applies
    ``operation`` to the target with proxy operands unwrapped."""

    def method(self: DecoratedProxy, *args: Any) -> Any:
        bound = self._adorn_resolve(name)
        if bound is not _MISSING:
            return bound(*args)
        return operation(self._adorn_target, *(unwrap(a) for a in args))

    method.__name__ = method.__qualname__ = name
    return method


def _forward_inplace(name: str, operation: Callable[[Any, Any], Any]) -> Callable[..., Any]:
    """In-place operators keep the proxy when the target mutates in place."""

    def method(self: DecoratedProxy, other: Any) -> Any:
        bound = self._adorn_resolve(name)
        if bound is not _MISSING:
            return bound(other)
        target = self._adorn_target
        result = operation(target, unwrap(other))
        return self if result is target else result

    method.__name__ = method.__qualname__ = name
    return method


def _reflected(operation: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    return lambda target, other: operation(other, target)


_UNARY: dict[str, Callable[..., Any]] = {
    "__len__": len,
    "__iter__": iter,
    "__reversed__": reversed,
    "__bool__": bool,
    "__str__": str,
    "__repr__": repr,
    "__bytes__": bytes,
    "__hash__": hash,
    "__int__": int,
    "__float__": float,
    "__complex__": complex,
    "__index__": operator.index,
    "__neg__": operator.neg,
    "__pos__": operator.pos,
    "__abs__": abs,
    "__invert__": operator.invert,
}

_ITEM: dict[str, Callable[..., Any]] = {
    "__getitem__": operator.getitem,
    "__setitem__": operator.setitem,
    "__delitem__": operator.delitem,
    "__contains__": operator.contains,
}

_COMPARISON: dict[str, Callable[[Any, Any], Any]] = {
    "__eq__": operator.eq,
    "__ne__": operator.ne,
    "__lt__": operator.lt,
    "__le__": operator.le,
    "__gt__": operator.gt,
    "__ge__": operator.ge,
}

_BINARY: dict[str, Callable[[Any, Any], Any]] = {
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "matmul": operator.matmul,
    "truediv": operator.truediv,
    "floordiv": operator.floordiv,
    "mod": operator.mod,
    "pow": operator.pow,
    "lshift": operator.lshift,
    "rshift": operator.rshift,
    "and": operator.and_,
    "or": operator.or_,
    "xor": operator.xor,
}

_INPLACE: dict[str, Callable[[Any, Any], Any]] = {
    "add": operator.iadd,
    "sub": operator.isub,
    "mul": operator.imul,
    "matmul": operator.imatmul,
    "truediv": operator.itruediv,
    "floordiv": operator.ifloordiv,
    "mod": operator.imod,
    "pow": operator.ipow,
    "lshift": operator.ilshift,
    "rshift": operator.irshift,
    "and": operator.iand,
    "or": operator.ior,
    "xor": operator.ixor,
}

for _name, _operation in {**_UNARY, **_ITEM, **_COMPARISON}.items():
    setattr(DecoratedProxy, _name, _forward(_name, _operation))

for _op, _operation in _BINARY.items():
    setattr(DecoratedProxy, f"__{_op}__", _forward(f"__{_op}__", _operation))
    setattr(DecoratedProxy, f"__r{_op}__", _forward(f"__r{_op}__", _reflected(_operation)))
    setattr(DecoratedProxy, f"__i{_op}__", _forward_inplace(f"__i{_op}__", _INPLACE[_op]))

del _name, _op, _operation


class _ForwardedDoc:
    """Class access gives the proxy docs, instance access the target's docstring."""

    def __init__(self, doc: str | None) -> None:
        self._doc = doc

    def __get__(self, instance: DecoratedProxy | None, owner: type) -> str | None:
        if instance is None:
            return self._doc
        return instance._adorn_target.__doc__


DecoratedProxy.__doc__ = _ForwardedDoc(DecoratedProxy.__doc__)  # type: ignore[assignment]


def is_decorated(obj: Any) -> bool:
    """Check if an object is a DecoratedProxy.

    Args:
        obj: Object to check.

    Returns:
        True for proxies, False otherwise (including the wrapped target).
    """
    return type(obj) is DecoratedProxy


def unwrap(obj: Any) -> Any:
    """Get the target behind a proxy.

    Args:
        obj: Proxy or plain object.

    Returns:
        The wrapped target for proxies, ``obj`` itself otherwise.
    """
    if type(obj) is DecoratedProxy:
        return object.__getattribute__(obj, "_adorn_target")
    return obj


def applied_bundles(proxy: DecoratedProxy) -> tuple[BehaviorBundle, ...]:
    """Bundles layered onto a proxy, most general first."""
    return tuple(bundle for _, bundle in object.__getattribute__(proxy, "_adorn_layers"))


def extend(
    proxy: DecoratedProxy,
    bundle: BehaviorBundle,
    key: TypeKey | None = None,
) -> DecoratedProxy:
    """Layer one more bundle on top of a proxy.

    Only this proxy changes; other proxies of the same target keep their
    own bundles.

    Args:
        proxy: Proxy to extend.
        bundle: Bundle to layer; its behaviors shadow existing ones.
        key: Type key the bundle stands for, used by :func:`behavior_super`.

    Returns:
        The same proxy, for chaining.

    Raises:
        TypeError: If ``proxy`` is not a DecoratedProxy.
    """
    if not is_decorated(proxy):
        raise TypeError(f"extend() needs a DecoratedProxy, got {type(proxy).__name__}")
    DecoratedProxy._adorn_layer(proxy, bundle, key)
    return proxy


class _SuperView:
    """Attribute view over the layers below one bundle, then the target."""

    __slots__ = ("_proxy", "_table")

    def __init__(self, proxy: DecoratedProxy, table: dict[str, Behavior]) -> None:
        self._proxy = proxy
        self._table = table

    def __getattr__(self, name: str) -> Any:
        if name in self._table:
            return _bind(self._table[name], self._proxy)
        target = unwrap(self._proxy)
        try:
            return getattr(target, name)
        except AttributeError as e:
            raise UnsupportedOperationError(target, name) from e


def behavior_super(key: TypeKey | BehaviorBundle, proxy: DecoratedProxy) -> _SuperView:
    """Reach behaviors shadowed by the bundle layered for ``key``.

    The two-argument analogue of ``super()``: names resolve through the
    bundles layered before the one registered for ``key``, then the target.

    Usage:
        @registry.behaviors(bool)
        class BoolBehaviors:
            def describe(self):
                return "flag " + behavior_super(bool, self).describe()

    Args:
        key: Type key (or the bundle itself) whose layer to look below.
        proxy: The proxy the calling behavior is bound to.

    Returns:
        View whose attributes resolve below that layer.

    Raises:
        ValueError: If no layer for ``key`` is applied to the proxy.
    """
    layers = object.__getattribute__(proxy, "_adorn_layers")
    for index in range(len(layers) - 1, -1, -1):
        layer_key, bundle = layers[index]
        if layer_key is key or bundle is key:
            table: dict[str, Behavior] = {}
            for _, lower in layers[:index]:
                table.update(lower.behaviors)
            return _SuperView(proxy, table)
    name = getattr(key, "__qualname__", repr(key))
    raise ValueError(f"No bundle for {name} is applied to this proxy")
