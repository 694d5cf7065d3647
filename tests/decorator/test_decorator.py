"""Tests for the decorator applier."""

import logging
from collections.abc import Hashable, Sequence

import pytest
from hypothesis import given
from hypothesis import strategies as st

from adorn import (
    BehaviorRegistry,
    Decorator,
    InvalidTargetError,
    RegistryFrozenError,
    UnsupportedOperationError,
    applied_bundles,
    behavior_super,
    is_decorated,
    unwrap,
)


class Shape:
    def __init__(self, sides: int) -> None:
        self.sides = sides


class Square(Shape):
    def __init__(self) -> None:
        super().__init__(4)


def test_as_array_scalar(array_decorator):
    """object -> [self]: a scalar is wrapped in a list."""
    assert array_decorator.decorate(5).as_array() == [5]


def test_as_array_list_is_identity(array_decorator):
    """list -> self: the original list comes back, not wrapped again."""
    items = [1, 2, 3]

    result = array_decorator.decorate(items).as_array()

    assert result == [1, 2, 3]
    assert result is items


def test_greet_and_forward(decorator):
    """Bundle behaviors and target operations coexist on one proxy."""
    decorator.register(object, {"greet": lambda self: "hi"})

    proxy = decorator.decorate("x")

    assert proxy.greet() == "hi"
    assert proxy.upper() == "X"


def test_no_matching_bundle_is_pass_through(decorator):
    """Targets with no registered ancestor get a bare proxy."""
    decorator.register(Shape, {"area": lambda self: 0})

    proxy = decorator.decorate("plain")

    assert applied_bundles(proxy) == ()
    assert proxy.title() == "Plain"
    with pytest.raises(UnsupportedOperationError):
        proxy.area()


def test_most_specific_wins(decorator):
    """A subclass bundle shadows its base class bundle."""
    decorator.register(Shape, {"name": lambda self: "shape", "kind": lambda self: "polygon"})
    decorator.register(Square, {"name": lambda self: "square"})

    proxy = decorator.decorate(Square())

    assert proxy.name() == "square"
    assert proxy.kind() == "polygon"
    assert proxy.sides == 4


def test_layering_order_is_general_first(decorator):
    """Bundles are applied from the most general ancestor down."""
    (object_bundle,) = decorator.register(object, {})
    (shape_bundle,) = decorator.register(Shape, {})
    (square_bundle,) = decorator.register(Square, {})

    proxy = decorator.decorate(Square())

    assert applied_bundles(proxy) == (object_bundle, shape_bundle, square_bundle)


def test_specific_behavior_chains_to_general(decorator):
    """A specific behavior can call the shadowed general one explicitly."""
    decorator.register(Shape, {"describe": lambda self: f"{self.sides} sides"})

    @decorator.behaviors(Square)
    class SquareBehaviors:
        def describe(self):
            return "square with " + behavior_super(Square, self).describe()

    assert decorator.decorate(Square()).describe() == "square with 4 sides"


def test_capability_bundles_apply(decorator):
    """Registered ABCs apply to classes that satisfy them virtually."""
    decorator.register(object, {"label": lambda self: "object"})
    decorator.register(Sequence, {"label": lambda self: f"sequence of {len(self)}"})

    assert decorator.decorate((1, 2)).label() == "sequence of 2"
    assert decorator.decorate(7).label() == "object"


def test_virtual_capabilities_can_be_disabled(registry):
    """With virtual capabilities off only the MRO is walked."""
    decorator = Decorator(registry, virtual_capabilities=False)
    decorator.register(object, {"label": lambda self: "object"})
    decorator.register(Sequence, {"label": lambda self: "sequence"})

    assert decorator.decorate([1]).label() == "object"
    assert decorator.ancestry([1]) == (list, object)


def test_ancestry_lists_the_walked_chain(decorator):
    """ancestry() shows what decorate() walks."""
    decorator.register(Sequence, {})

    assert decorator.ancestry([1]) == (list, Sequence, object)
    assert decorator.ancestry(decorator.decorate([1])) == (list, Sequence, object)


def test_decorate_none_fails(decorator):
    """None is rejected at proxy construction."""
    with pytest.raises(InvalidTargetError, match="Cannot decorate None"):
        decorator.decorate(None)
    assert issubclass(InvalidTargetError, ValueError)


def test_decorating_a_proxy_does_not_nest(array_decorator):
    """Decorating a proxy decorates its target."""
    items = [1]
    proxy = array_decorator.decorate(array_decorator.decorate(items))

    assert is_decorated(proxy)
    assert unwrap(proxy) is items
    assert len(applied_bundles(proxy)) == 2


def test_each_decorate_returns_an_independent_proxy(array_decorator):
    """Two decorations of one object share the target, nothing else."""
    items = [1]

    first = array_decorator.decorate(items)
    second = array_decorator.decorate(items)
    first.append(2)

    assert first is not second
    assert second == [1, 2]
    assert items == [1, 2]


def test_registry_changes_apply_to_next_decorate(decorator):
    """Ancestry is walked fresh on every call."""
    decorator.register(object, {"greet": lambda self: "hi"})
    before = decorator.decorate(1)

    decorator.register(object, {"greet": lambda self: "hello"})
    after = decorator.decorate(1)

    assert before.greet() == "hi"
    assert after.greet() == "hello"


def test_freeze_on_first_decorate(registry):
    """The first decorate() can end the setup phase."""
    decorator = Decorator(registry, freeze_on_first_decorate=True)
    decorator.register(object, {"greet": lambda self: "hi"})

    assert decorator.decorate(1).greet() == "hi"
    assert registry.frozen
    with pytest.raises(RegistryFrozenError):
        decorator.register(int, {})


def test_decorators_can_share_a_registry():
    """Two decorators over one registry see the same registrations."""
    registry = BehaviorRegistry()
    first = Decorator(registry)
    second = Decorator(registry)

    first.register(object, {"greet": lambda self: "hi"})

    assert second.decorate(1).greet() == "hi"
    assert second.lookup(object) is first.lookup(object)


def test_default_decorators_are_isolated():
    """Decorators created without a registry share nothing."""
    first = Decorator()
    second = Decorator()

    first.register(object, {"greet": lambda self: "hi"})

    assert second.lookup(object) is None
    assert not hasattr(second.decorate(1), "greet")


def test_decorate_logs_layering(registry, caplog):
    """Layering is logged at DEBUG when enabled."""
    decorator = Decorator(registry, log_layering=True)
    decorator.register(object, {"greet": lambda self: "hi"})

    with caplog.at_level(logging.DEBUG, logger="adorn"):
        decorator.decorate(1)

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Layered") and "object" in message for message in messages)
    assert any("Decorated int with 1 bundle(s)" in message for message in messages)


@given(value=st.one_of(st.integers(), st.text(), st.lists(st.integers())))
def test_pass_through_property(value):
    """PROPERTY: with nothing registered a proxy behaves like its target."""
    proxy = Decorator().decorate(value)

    assert proxy == value
    assert str(proxy) == str(value)
    assert unwrap(proxy) is value
    assert isinstance(proxy, type(value))


@given(depth=st.integers(min_value=1, max_value=6))
def test_most_specific_wins_property(depth):
    """PROPERTY: in any class chain the deepest registered bundle is used."""
    classes = [object]
    for level in range(depth):
        classes.append(type(f"Level{level}", (classes[-1],), {}))

    decorator = Decorator()
    for level, cls in enumerate(classes):
        decorator.register(cls, {"level": lambda self, n=level: n})

    assert decorator.decorate(classes[-1]()).level() == depth


def test_capability_cancelled_by_target_type_is_not_layered(decorator):
    """list sets __hash__ = None, so a Hashable bundle never reaches a list."""
    decorator.register(Hashable, {"fingerprint": lambda self: hash(unwrap(self))})

    assert decorator.decorate(1).fingerprint() == hash(1)
    with pytest.raises(AttributeError):
        decorator.decorate([1]).fingerprint()
