"""Processing context: the buffer stack and the current-state slot.

Rules never see the processor itself. Each dispatch receives a
ProcessingContext through which a rule can:

- write to the current buffer,
- push a new buffer to redirect everything that follows (usually a tag
  body), read it back, and pop it again,
- read or replace the processor's current State.

The bottom buffer is the processor's output and can never be popped.
Popping it is a contract violation (an unbalanced rule) and raises
BufferUnderflowError, which the engine does not catch.

Thread Safety:
A BufferStack belongs to one process() call. Not shared.

"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from tagweave.errors import BufferUnderflowError, TagWarning
from tagweave.sink import Sink
from tagweave.utils.logger import get_logger

if TYPE_CHECKING:
    from tagweave.state import State
    from tagweave.tags import Tag

logger = get_logger(__name__)


@runtime_checkable
class ProcessingContext(Protocol):
    """What a rule may do to the processor while handling a tag."""

    def current_state(self) -> State:
        """The State used to resolve the next tag."""
        ...

    def change_state(self, state: State) -> None:
        """Replace the current State (a state transition)."""
        ...

    def push_buffer(self) -> Sink:
        """Start a new empty buffer and make it current."""
        ...

    def current_buffer(self) -> Sink:
        """The buffer output is currently written to."""
        ...

    def current_buffer_contents(self) -> str:
        """Text accumulated in the current buffer so far."""
        ...

    def pop_buffer(self) -> Sink:
        """Discard the current buffer and restore the one beneath it."""
        ...

    def warn(self, message: str, tag: Tag) -> None:
        """Report a non-fatal problem with a tag through the processor."""
        ...


class BufferStack:
    """Concrete ProcessingContext owned by a TagProcessor.

    Args:
        root: Bottom buffer; receives all output not redirected by a rule
        get_state: Returns the processor's current State
        set_state: Replaces the processor's current State
        on_warning: Receives TagWarnings reported by rules. None logs them.

    Usage:
            >>> stack = BufferStack(Sink(), lambda: state, set_state)
            >>> stack.current_buffer().append("kept")
            >>> with stack.pushed_buffer():
            ...     stack.current_buffer().append("dropped")
            >>> stack.root.getvalue()
            'kept'

    """

    __slots__ = ("_buffers", "_get_state", "_set_state", "_on_warning")

    def __init__(
        self,
        root: Sink,
        get_state: Callable[[], State],
        set_state: Callable[[State], None],
        on_warning: Callable[[TagWarning], None] | None = None,
    ) -> None:
        self._buffers: list[Sink] = [root]
        self._get_state = get_state
        self._set_state = set_state
        self._on_warning = on_warning

    @property
    def root(self) -> Sink:
        return self._buffers[0]

    @property
    def depth(self) -> int:
        """Number of buffers on the stack, root included (always >= 1)."""
        return len(self._buffers)

    def current_state(self) -> State:
        return self._get_state()

    def change_state(self, state: State) -> None:
        self._set_state(state)

    def push_buffer(self) -> Sink:
        buffer = Sink()
        self._buffers.append(buffer)
        return buffer

    def current_buffer(self) -> Sink:
        return self._buffers[-1]

    def current_buffer_contents(self) -> str:
        return self._buffers[-1].getvalue()

    def pop_buffer(self) -> Sink:
        """Discard the current buffer and return it.

        Raises:
            BufferUnderflowError: If only the root buffer is left
        """
        if len(self._buffers) == 1:
            raise BufferUnderflowError()
        return self._buffers.pop()

    def warn(self, message: str, tag: Tag) -> None:
        warning = TagWarning(message, tag.location)
        if self._on_warning is None:
            logger.warning("%s", warning)
        else:
            self._on_warning(warning)

    @contextmanager
    def pushed_buffer(self) -> Iterator[Sink]:
        """Push a buffer for the duration of a with-block.

        The buffer is popped on exit even if the block raises, so an error
        inside a rule cannot leave the stack unbalanced.
        """
        depth = len(self._buffers)
        buffer = self.push_buffer()
        try:
            yield buffer
        finally:
            del self._buffers[depth:]

    def __repr__(self) -> str:
        return f"BufferStack(depth={len(self._buffers)})"
