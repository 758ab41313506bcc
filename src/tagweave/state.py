"""Tag-name to rule bindings.

A State is the set of rules active at a point in the document. The
processor holds a reference to the current State; rules may swap it
(see StateTransitionRule) to change how the rest of the document is read,
e.g. to stop interpreting markup inside ``<script>``.

Thread Safety:
Build states before processing. A State is only read during process(),
so a fully built State may be shared between processors.

Example:
    >>> state = State()
    >>> state.add_rule("tw:write", MergePropertyRule(merge_context))
    >>> state.should_process_tag("TW:Write")
    True

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from tagweave.errors import RuleError
from tagweave.rules.base import PASS_THROUGH

if TYPE_CHECKING:
    from tagweave.context import ProcessingContext
    from tagweave.rules.protocol import TagRule

TextFilter = Callable[[str], str]
"""Transforms a run of bare text before it reaches the current buffer."""


class State:
    """Lookup table from lower-cased tag name to rule.

    Args:
        intercept_all: Route every tag through get_rule, even tags with no
            registered rule (they get the pass-through rule).
        name: Optional label, used in logs and repr

    """

    __slots__ = ("_rules", "_intercept_all", "_text_filters", "name")

    def __init__(self, *, intercept_all: bool = False, name: str | None = None) -> None:
        self._rules: dict[str, TagRule] = {}
        self._intercept_all = intercept_all
        self._text_filters: list[TextFilter] = []
        self.name = name

    @property
    def intercept_all(self) -> bool:
        return self._intercept_all

    @property
    def rules(self) -> Mapping[str, TagRule]:
        """Read-only view of registered rules."""
        return MappingProxyType(self._rules)

    def add_rule(self, name: str, rule: TagRule) -> State:
        """Register a rule for a tag name.

        Names are matched case-insensitively. Registering the same name
        again replaces the earlier rule.

        Raises:
            RuleError: If rule has no process() method

        Returns:
            Self for chaining
        """
        if not callable(getattr(rule, "process", None)):
            raise RuleError(type(rule).__name__, "missing process(tag, context) method")
        self._rules[name.lower()] = rule
        return self

    def add_text_filter(self, text_filter: TextFilter) -> State:
        """Register a filter applied to bare text, in registration order."""
        self._text_filters.append(text_filter)
        return self

    def should_process_tag(self, name: str) -> bool:
        """Whether a tag with this name should be handed to a rule."""
        return self._intercept_all or name.lower() in self._rules

    def get_rule(self, name: str) -> TagRule:
        """Rule for this tag name, or the pass-through rule if none."""
        return self._rules.get(name.lower(), PASS_THROUGH)

    def handle_text(self, text: str, context: ProcessingContext) -> None:
        """Write a run of bare text to the current buffer."""
        for text_filter in self._text_filters:
            text = text_filter(text)
        context.current_buffer().append(text)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return f"State({label}rules={sorted(self._rules)}, intercept_all={self._intercept_all})"
