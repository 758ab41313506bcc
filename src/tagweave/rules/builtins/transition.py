"""State transition rule.

Switches the processor to another State between a start tag and its end
tag. The classic use is a State with no rules for ``<script>`` bodies, so
tags inside them are left alone::

    raw = State(name="raw")
    StateTransitionRule.paired("script", processor.default_state, raw)

The target State must also bind the end tag, otherwise the processor never
leaves it. ``StateTransitionRule.paired`` registers both sides.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tagweave.rules.base import BlockRule
from tagweave.tags import TagKind

if TYPE_CHECKING:
    from tagweave.context import ProcessingContext
    from tagweave.state import State
    from tagweave.tags import Tag


class StateTransitionRule(BlockRule):
    """Enter ``state`` on the start tag; restore the previous State on the end tag.

    Args:
        state: State to switch to for the tag body
        write_enclosing_tag: Copy the start and end tags to the output
    """

    def __init__(self, state: State, write_enclosing_tag: bool = True) -> None:
        super().__init__()
        self.state = state
        self.write_enclosing_tag = write_enclosing_tag

    def process_start(self, tag: Tag, context: ProcessingContext) -> State:
        if self.write_enclosing_tag:
            tag.write_to(context.current_buffer())
        previous = context.current_state()
        if tag.kind is not TagKind.EMPTY:
            context.change_state(self.state)
        return previous

    def process_end(self, tag: Tag, context: ProcessingContext, data: State) -> None:
        if tag.kind is TagKind.EMPTY:
            return
        context.change_state(data)
        if self.write_enclosing_tag:
            tag.write_to(context.current_buffer())

    @classmethod
    def paired(
        cls,
        tag_name: str,
        outer: State,
        inner: State,
        write_enclosing_tag: bool = True,
    ) -> StateTransitionRule:
        """Bind ``tag_name`` in both states so its body is read with ``inner``.

        The rule registered on ``inner`` only handles the end tag: it
        shares the occurrence stack of the outer rule.

        Returns:
            The rule registered on ``outer``
        """
        rule = cls(inner, write_enclosing_tag)
        outer.add_rule(tag_name, rule)
        inner.add_rule(tag_name, _EndOnly(rule))
        return rule


class _EndOnly:
    """Forwards end tags to a transition rule; other tags pass through."""

    __slots__ = ("_rule",)

    def __init__(self, rule: StateTransitionRule) -> None:
        self._rule = rule

    def process(self, tag: Tag, context: ProcessingContext) -> None:
        if tag.kind is TagKind.CLOSE and self._rule.depth:
            self._rule.process(tag, context)
        else:
            context.current_buffer().append(tag.raw)
