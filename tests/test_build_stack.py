import threading

import pytest

from bindery.build_stack import BuildStack
from bindery.errors import CircularDependencyError


@pytest.fixture
def stack() -> BuildStack:
    return BuildStack("building")


def test_enter_pushes_and_pops(stack):
    with stack.enter("a"):
        with stack.enter("b"):
            assert stack.frames == ("a", "b")
            assert stack.describe() == "a, b"
        assert stack.frames == ("a",)

    assert not stack
    assert len(stack) == 0


def test_enter_pops_on_error(stack):
    with pytest.raises(RuntimeError):
        with stack.enter("a"):
            raise RuntimeError("boom")

    assert stack.frames == ()


def test_reentry_raises_with_chain(stack):
    with stack.enter("a"), stack.enter("b"):
        with pytest.raises(
            CircularDependencyError,
            match=r"Circular dependency detected while building \[a -> b -> a\]",
        ):
            with stack.enter("a"):
                pass

        assert stack.frames == ("a", "b")


def test_each_thread_has_its_own_chain(stack):
    seen = []

    def worker():
        seen.append(stack.frames)
        with stack.enter("a"):
            seen.append(stack.frames)

    with stack.enter("a"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert stack.frames == ("a",)

    assert seen == [(), ("a",)]
