"""TagRule protocol for pluggable tag handling.

A rule is bound to a tag name in a State. When the tokenizer produces a
tag with that name, the processor calls ``rule.process(tag, context)`` and
the rule decides everything else: it may write to the current buffer,
push or pop buffers, or switch the current state.

Example:
    >>> class UpperRule:
    ...     def process(self, tag, context):
    ...         context.current_buffer().append(tag.raw.upper())
    ...
    >>> processor.add_rule("b", UpperRule())

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tagweave.context import ProcessingContext
    from tagweave.tags import Tag


@runtime_checkable
class TagRule(Protocol):
    """Protocol for rule implementations.

    Rules receive the processing context as an argument and must not keep
    references to buffers beyond the tag pair they handle.
    """

    def process(self, tag: Tag, context: ProcessingContext) -> None:
        """Handle one tag occurrence.

        Args:
            tag: The tag (open, close, or self-closing)
            context: Buffer stack and current-state slot for this document
        """
        ...
