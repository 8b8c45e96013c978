import pytest

from bindery.domain import Binding
from bindery.registry import BindingRegistry


@pytest.fixture
def registry() -> BindingRegistry:
    return BindingRegistry()


@pytest.fixture
def binding() -> Binding:
    return Binding(lambda c, p: object(), shared=True)


def test_binding_is_stored_and_overwritten(registry, binding):
    registry.add_binding("a", Binding(lambda c, p: None))
    registry.add_binding("a", binding)

    assert registry.binding("a") is binding
    assert registry.has_binding("a")
    assert registry.binding("missing") is None


def test_instance_counts_as_bound_and_resolved(registry):
    registry.add_instance("a", 1)

    assert registry.is_bound("a")
    assert registry.is_resolved("a")
    assert not registry.has_binding("a")


def test_resolved_marker_survives_forgetting_instances(registry, binding):
    registry.add_binding("a", binding)
    registry.add_instance("a", 1)
    registry.mark_resolved("a")

    registry.forget_instances()

    assert not registry.has_instance("a")
    assert registry.is_resolved("a")
    assert registry.is_bound("a")


def test_forget_instance_of_unknown_key_is_silent(registry):
    registry.forget_instance("missing")


def test_remove_drops_every_trace(registry, binding):
    registry.add_binding("a", binding)
    registry.add_instance("a", 1)
    registry.mark_resolved("a")

    registry.remove("a")

    assert not registry.is_bound("a")
    assert not registry.is_resolved("a")


def test_flush(registry, binding):
    registry.add_binding("a", binding)
    registry.add_instance("b", 1)
    registry.mark_resolved("c")

    registry.flush()

    assert not registry.is_bound("a")
    assert not registry.is_bound("b")
    assert not registry.is_resolved("c")
    assert dict(registry.snapshot()) == {}


def test_snapshot_is_read_only_and_detached(registry, binding):
    registry.add_binding("a", binding)
    snapshot = registry.snapshot()

    registry.add_binding("b", binding)

    assert dict(snapshot) == {"a": binding}
    with pytest.raises(TypeError):
        snapshot["c"] = binding


def test_type_index(registry):
    registry.remember_type("services.Local", int)

    assert registry.known_type("services.Local") is int
    assert registry.known_type("services.Other") is None
