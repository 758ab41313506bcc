"""Body capture rule.

Redirects a tag's body into its own buffer, reads it back when the end
tag arrives, and passes ``(tag, body)`` to a callback. Useful for pulling
pieces out of a page while it is copied, e.g. collecting ``<title>``::

    found = {}
    processor.add_rule("title", CaptureBodyRule(lambda tag, body: found.setdefault("title", body)))
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from tagweave.rules.base import BlockRule

if TYPE_CHECKING:
    from tagweave.context import ProcessingContext
    from tagweave.tags import Tag

CaptureCallback = Callable[["Tag", str], None]


class CaptureBodyRule(BlockRule):
    """Capture the text between a start tag and its end tag.

    Args:
        callback: Called with the start tag and the captured body
        write_body: Re-emit the body into the enclosing buffer
        write_enclosing_tag: Copy the start and end tags to the output

    A self-closing tag is captured with an empty body.
    """

    def __init__(
        self,
        callback: CaptureCallback,
        write_body: bool = True,
        write_enclosing_tag: bool = True,
    ) -> None:
        super().__init__()
        self.callback = callback
        self.write_body = write_body
        self.write_enclosing_tag = write_enclosing_tag

    def process_start(self, tag: Tag, context: ProcessingContext) -> Tag:
        if self.write_enclosing_tag:
            tag.write_to(context.current_buffer())
        context.push_buffer()
        return tag

    def process_end(self, tag: Tag, context: ProcessingContext, data: Tag) -> None:
        body = context.current_buffer_contents()
        context.pop_buffer()
        self.callback(data, body)
        if self.write_body:
            context.current_buffer().append(body)
        if self.write_enclosing_tag and tag is not data:
            tag.write_to(context.current_buffer())
