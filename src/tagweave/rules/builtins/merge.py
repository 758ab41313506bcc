"""Property substitution rule.

Replaces tags such as::

    <tw:write property="title">Default title</tw:write>

with the named property of the content being merged. The tag body is
always discarded, whether or not the property exists, so the body only
documents the decorator. A self-closing ``<tw:write property="title"/>``
works the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tagweave.rules.base import BlockRule

if TYPE_CHECKING:
    from tagweave.content import MergeContext
    from tagweave.context import ProcessingContext
    from tagweave.tags import Tag


class MergePropertyRule(BlockRule):
    """Write a property of the merged content in place of the tag.

    Args:
        merge_context: Supplies the content to merge
        attribute: Name of the required attribute naming the property

    Raises (from process):
        AttributeMissingError: If the tag has no property attribute
    """

    def __init__(self, merge_context: MergeContext, attribute: str = "property") -> None:
        super().__init__()
        self.merge_context = merge_context
        self.attribute = attribute

    def process_start(self, tag: Tag, context: ProcessingContext) -> None:
        property_name = tag.get_attribute_value(self.attribute, required=True)
        content = self.merge_context.get_content_to_merge()
        if content is not None:
            prop = content.get_property(property_name)
            if prop.exists():
                # Into the buffer the tag sits in, before the body is redirected
                prop.write_to(context.current_buffer())
        context.push_buffer()

    def process_end(self, tag: Tag, context: ProcessingContext, data: None) -> None:
        context.pop_buffer()
