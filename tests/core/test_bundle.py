"""Tests for behavior bundle construction."""

from types import MappingProxyType

import pytest

from adorn import BehaviorBundle, build_bundle


def test_bundle_from_mapping():
    """Mapping definitions keep every entry under its name."""

    def greet(self):
        return "hi"

    bundle = build_bundle({"greet": greet}, name="greeting")

    assert bundle.name == "greeting"
    assert bundle.get("greet") is greet
    assert "greet" in bundle
    assert len(bundle) == 1


def test_bundle_snapshots_caller_mapping():
    """Editing the source mapping after construction does not change the bundle."""
    source = {"greet": lambda self: "hi"}
    bundle = build_bundle(source)

    source["wave"] = lambda self: "o/"

    assert "wave" not in bundle
    assert isinstance(bundle.behaviors, MappingProxyType)


def test_bundle_is_immutable():
    """Bundles are frozen: neither fields nor behaviors can be replaced."""
    bundle = build_bundle({"greet": lambda self: "hi"})

    with pytest.raises(AttributeError):
        bundle.name = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        bundle.behaviors["greet"] = lambda self: "bye"  # type: ignore[index]


def test_bundle_from_class_body():
    """Class definition blocks contribute their own functions, properties and staticmethods."""

    class Conversions:
        """Docstrings are not behaviors."""

        LIMIT = 3  # data attributes are skipped

        def as_array(self):
            return [self]

        @property
        def size(self):
            return 1

        @staticmethod
        def kind():
            return "conversion"

        def __len__(self):
            return 1

    bundle = build_bundle(Conversions)

    assert bundle.name.endswith("Conversions")
    assert set(bundle.names()) == {"as_array", "size", "kind", "__len__"}
    assert isinstance(bundle.get("size"), property)
    assert isinstance(bundle.get("kind"), staticmethod)


def test_bundle_from_class_ignores_inherited_members():
    """Only the class's own body counts as the definition block."""

    class Base:
        def inherited(self):
            return "base"

    class Child(Base):
        def own(self):
            return "child"

    bundle = build_bundle(Child)

    assert bundle.names() == ("own",)


def test_bundle_from_class_rejects_classmethod():
    """Classmethods cannot be bound to a proxy."""

    class Broken:
        @classmethod
        def make(cls):
            return cls()

    with pytest.raises(TypeError, match="classmethod"):
        build_bundle(Broken)


def test_bundle_from_function():
    """A lone function becomes a single-behavior bundle named after it."""

    def describe(self):
        return "thing"

    bundle = build_bundle(describe)

    assert bundle.name == "describe"
    assert bundle.names() == ("describe",)


def test_bundle_from_bundle_is_a_new_instance():
    """Rebuilding from a bundle copies it by value."""
    original = build_bundle({"greet": lambda self: "hi"}, name="greeting")

    copy = build_bundle(original)

    assert copy is not original
    assert copy.name == "greeting"
    assert dict(copy.behaviors) == dict(original.behaviors)


def test_bundle_rejects_non_callable_entries():
    """Mapping values must be behaviors."""
    with pytest.raises(TypeError, match="'greet' must be a function"):
        build_bundle({"greet": "hi"})


def test_bundle_rejects_non_string_names():
    """Mapping keys must be operation names."""
    with pytest.raises(TypeError, match="names must be strings"):
        build_bundle({1: lambda self: None})


def test_bundle_rejects_unknown_definitions():
    """Definitions must be a mapping, class, function or bundle."""
    with pytest.raises(TypeError, match="Cannot build a behavior bundle"):
        build_bundle(42)


def test_bundles_compare_by_identity():
    """Two bundles built from the same definition are distinct."""
    definition = {"greet": lambda self: "hi"}

    assert BehaviorBundle("a", definition) != BehaviorBundle("a", definition)
