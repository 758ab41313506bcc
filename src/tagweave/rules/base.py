"""Base rules: pass-through and block (start/end paired) rules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tagweave.tags import TagKind

if TYPE_CHECKING:
    from tagweave.context import ProcessingContext
    from tagweave.tags import Tag


class PassThroughRule:
    """Copies the tag to the current buffer unchanged."""

    __slots__ = ()

    def process(self, tag: Tag, context: ProcessingContext) -> None:
        context.current_buffer().append(tag.raw)

    def __repr__(self) -> str:
        return "PassThroughRule()"


PASS_THROUGH = PassThroughRule()


class BlockRule:
    """Base class for rules that pair a start tag with its end tag.

    Subclasses implement ``process_start`` and ``process_end``. Whatever
    ``process_start`` returns is handed back to the ``process_end`` call
    for the matching end tag.

    Pairing is done per rule instance with a stack of occurrence data:
    an open tag pushes a frame, a close tag pops the innermost one. This
    makes ``<x>a<x>b</x>c</x>`` pair outer with outer and inner with
    inner. A self-closing tag runs start and end back to back and never
    touches the stack.

    An end tag with no open occurrence is reported through
    ``context.warn`` and copied through.

    Thread Safety:
        Block rules hold per-document state. Use one instance per
        processor (or per thread).

    Example:
        >>> class BoldRule(BlockRule):
        ...     def process_start(self, tag, context):
        ...         context.current_buffer().append("<strong>")
        ...
        ...     def process_end(self, tag, context, data):
        ...         context.current_buffer().append("</strong>")
    """

    def __init__(self) -> None:
        self._occurrences: list[Any] = []

    @property
    def depth(self) -> int:
        """Number of start tags currently waiting for their end tag."""
        return len(self._occurrences)

    def process(self, tag: Tag, context: ProcessingContext) -> None:
        if tag.kind is TagKind.OPEN:
            self._occurrences.append(self.process_start(tag, context))
        elif tag.kind is TagKind.CLOSE:
            if not self._occurrences:
                context.warn(f"Unmatched end tag </{tag.name}> copied through", tag)
                context.current_buffer().append(tag.raw)
                return
            self.process_end(tag, context, self._occurrences.pop())
        else:
            self.process_end(tag, context, self.process_start(tag, context))

    def reset(self) -> None:
        """Forget open occurrences (called before each document)."""
        self._occurrences.clear()

    def process_start(self, tag: Tag, context: ProcessingContext) -> Any:
        """Handle the start tag. Return data for the matching end tag."""
        raise NotImplementedError

    def process_end(self, tag: Tag, context: ProcessingContext, data: Any) -> None:
        """Handle the end tag with the data its start tag returned."""
        raise NotImplementedError
