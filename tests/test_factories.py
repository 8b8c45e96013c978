import pytest

from bindery.container import Container
from bindery.factories import class_factory, is_factory, share, value_factory
from services import Transport


@pytest.fixture
def container() -> Container:
    return Container()


def test_share_invokes_wrapped_factory_once(container):
    calls = []
    shared = share(lambda c, p: calls.append(c) or object())

    first = shared(container, {})
    second = shared(Container(), {})

    assert first is second
    assert calls == [container]


def test_share_caches_none(container):
    calls = []
    shared = share(lambda c, p: calls.append(1))

    assert shared(container, {}) is None
    assert shared(container, {}) is None
    assert calls == [1]


def test_each_share_wrapper_has_its_own_storage(container):
    factory = lambda c, p: object()

    assert share(factory)(container, {}) is not share(factory)(container, {})


def test_shared_factory_reused_under_several_abstracts(container):
    connection = container.share(lambda c, p: object())
    container.bind("db.read", connection)
    container.bind("db.write", connection)

    assert container.make("db.read") is container.make("db.write")
    assert not container.is_shared("db.read")


def test_value_factory_returns_value(container):
    value = ["unchanged"]

    assert value_factory(value)(container, {}) is value


def test_class_factory_builds_when_concrete_is_abstract(container):
    container.bind("services.Transport", lambda c, p: "bound")
    factory = class_factory("services.Transport", "services.Transport")

    transport = factory(container, {"host": "mx.example.com"})

    assert isinstance(transport, Transport)
    assert transport.host == "mx.example.com"


def test_class_factory_makes_an_alias(container):
    container.bind("services.Transport", lambda c, p: "bound")
    factory = class_factory("transport", "services.Transport")

    assert factory(container, {}) == "bound"


def test_is_factory():
    assert is_factory(lambda c, p: None)
    assert is_factory(share(lambda c, p: None))
    assert not is_factory(Transport)
    assert not is_factory("services.Transport")
    assert not is_factory(42)
