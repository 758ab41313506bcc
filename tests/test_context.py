"""Tests for the buffer stack handed to rules."""

import pytest

from tagweave.context import BufferStack, ProcessingContext
from tagweave.errors import BufferStackError, BufferUnderflowError, TagWarning
from tagweave.sink import Sink
from tagweave.state import State
from tagweave.tags import Tag, TagKind


@pytest.fixture
def stack() -> BufferStack:
    slot = {"state": State(name="start")}
    return BufferStack(Sink(), lambda: slot["state"], lambda s: slot.__setitem__("state", s))


class TestBufferStack:
    def test_starts_with_root_only(self, stack: BufferStack) -> None:
        assert stack.depth == 1
        assert stack.current_buffer() is stack.root

    def test_push_redirects_and_pop_restores(self, stack: BufferStack) -> None:
        stack.current_buffer().append("kept ")
        pushed = stack.push_buffer()
        assert stack.current_buffer() is pushed
        stack.current_buffer().append("dropped")
        assert stack.current_buffer_contents() == "dropped"
        assert stack.pop_buffer() is pushed
        stack.current_buffer().append("again")
        assert stack.root.getvalue() == "kept again"
        assert stack.depth == 1

    def test_deep_nesting(self, stack: BufferStack) -> None:
        for i in range(1000):
            stack.push_buffer().append(str(i))
        assert stack.depth == 1001
        assert stack.current_buffer_contents() == "999"
        for _ in range(1000):
            stack.pop_buffer()
        assert stack.depth == 1

    def test_popping_root_raises(self, stack: BufferStack) -> None:
        with pytest.raises(BufferUnderflowError):
            stack.pop_buffer()
        assert stack.depth == 1

    def test_underflow_is_a_stack_error(self) -> None:
        assert issubclass(BufferUnderflowError, BufferStackError)

    def test_pushed_buffer_pops_on_error(self, stack: BufferStack) -> None:
        with pytest.raises(ValueError):
            with stack.pushed_buffer() as buffer:
                buffer.append("x")
                stack.push_buffer()
                raise ValueError("rule failed")
        assert stack.depth == 1
        assert stack.root.getvalue() == ""

    def test_state_slot(self, stack: BufferStack) -> None:
        assert stack.current_state().name == "start"
        other = State(name="other")
        stack.change_state(other)
        assert stack.current_state() is other

    def test_satisfies_protocol(self, stack: BufferStack) -> None:
        assert isinstance(stack, ProcessingContext)


class TestWarn:
    def test_warning_handler_receives_tag_location(self) -> None:
        received: list[TagWarning] = []
        stack = BufferStack(Sink(), State, lambda state: None, on_warning=received.append)
        tag = Tag("x", TagKind.CLOSE, raw="</x>", offset=3, end_offset=7, _source="ab\nc</x>")
        stack.warn("Unmatched end tag </x> copied through", tag)
        assert len(received) == 1
        assert received[0].message == "Unmatched end tag </x> copied through"
        assert (received[0].lineno, received[0].col_offset) == (2, 1)

    def test_logged_without_handler(self, stack: BufferStack, caplog) -> None:
        with caplog.at_level("WARNING", logger="tagweave"):
            stack.warn("something odd", Tag("x", TagKind.EMPTY))
        assert "something odd" in caplog.text
