"""Tag rename rule."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tagweave.errors import RuleError
from tagweave.tags import serialize_tag

if TYPE_CHECKING:
    from tagweave.context import ProcessingContext
    from tagweave.tags import Tag


class RenameTagRule:
    """Rewrite a tag under a new name, keeping kind and attributes.

    Attributes are re-serialized, so quoting may differ from the source.

    Example:
        >>> processor.add_rule("b", RenameTagRule("strong"))
        >>> # "<b id=x>hi</b>" -> '<strong id="x">hi</strong>'
    """

    __slots__ = ("new_name",)

    def __init__(self, new_name: str) -> None:
        if not new_name:
            raise RuleError("RenameTagRule", "new tag name must not be empty")
        self.new_name = new_name

    def process(self, tag: Tag, context: ProcessingContext) -> None:
        context.current_buffer().append(serialize_tag(self.new_name, tag.kind, tag.attributes))
