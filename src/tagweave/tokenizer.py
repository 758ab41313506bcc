"""Single-pass tag tokenizer.

Scans source text once, left to right, and yields ``Text`` and ``Tag``
events in document order. No regex in the hot path; the only lookahead is
within the bounds of one tag.

Before a tag is built, the tokenizer asks its ``should_process`` callback
whether the (lower-cased) name is interesting. Declined tags are never
parsed: their source text is folded into the surrounding text run, so a
document with no registered rules comes out as a single Text event.

Comments, CDATA sections, declarations and processing instructions are
always text.

Malformed markup never raises. Each problem is reported as a TagWarning
(1-based line/column) and the offending region is treated as text.

Thread Safety:
Tokenizer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from string import ascii_letters

from tagweave.errors import TagWarning
from tagweave.location import SourceLocation
from tagweave.tags import Tag, TagKind, Text
from tagweave.utils.logger import get_logger

logger = get_logger(__name__)

_WHITESPACE = frozenset(" \t\n\r\f")
_NAME_START = frozenset(ascii_letters + "_:")
# Characters that end a tag or attribute name
_NAME_STOP = frozenset(" \t\n\r\f/>=<\"'")
_QUOTES = frozenset("\"'")

# (opener, terminator) for constructs that are copied through verbatim
_OPAQUE_CONSTRUCTS = (
    ("<!--", "-->"),
    ("<![CDATA[", "]]>"),
    ("<!", ">"),
    ("<?", ">"),
)


class _Malformed(Exception):
    """Internal signal: attribute list could not be parsed."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset


class TagTokenizer:
    """Tokenizer for tag markup embedded in arbitrary text.

    Usage:
            >>> tokenizer = TagTokenizer('Hi <b class="x">there</b>')
            >>> for event in tokenizer.tokenize():
            ...     print(event)
        Text(value='Hi ', offset=0)
        <b class="x">
        Text(value='there', offset=16)
        </b>

    Args:
        source: Text to scan
        should_process: Called with the lower-cased name of each candidate
            tag; returning False makes the tag plain text. None accepts
            every tag.
        on_warning: Receives a TagWarning for each malformed construct.
            None logs the warning.
        source_file: Optional source file path for locations
        allow_unquoted_values: Accept ``attr=value`` without quotes

    """

    __slots__ = (
        "_source",
        "_source_len",
        "_should_process",
        "_on_warning",
        "_source_file",
        "_allow_unquoted_values",
        "_absent_after",
    )

    def __init__(
        self,
        source: str,
        should_process: Callable[[str], bool] | None = None,
        *,
        on_warning: Callable[[TagWarning], None] | None = None,
        source_file: str | None = None,
        allow_unquoted_values: bool = True,
    ) -> None:
        self._source = source
        self._source_len = len(source)
        self._should_process = should_process
        self._on_warning = on_warning
        self._source_file = source_file
        self._allow_unquoted_values = allow_unquoted_values
        # needle -> offset after which it is known not to occur
        self._absent_after: dict[str, int] = {}

    def tokenize(self) -> Iterator[Tag | Text]:
        """Yield Text and Tag events in document order.

        Consecutive text (including declined tags and malformed regions) is
        coalesced into one Text event.
        """
        source = self._source
        source_len = self._source_len
        pos = 0
        text_start = 0

        while pos < source_len:
            lt = source.find("<", pos)
            if lt == -1 or lt + 1 >= source_len:
                break

            nxt = source[lt + 1]
            if nxt == "!" or nxt == "?":
                pos = self._skip_opaque(lt)
                continue

            closing = nxt == "/"
            name_start = lt + 2 if closing else lt + 1
            if name_start >= source_len or source[name_start] not in _NAME_START:
                # "a < b", "</ >", "<3": literal text
                pos = lt + 1
                continue

            name_end = name_start + 1
            while name_end < source_len and source[name_end] not in _NAME_STOP:
                name_end += 1
            name = source[name_start:name_end]
            accepted = self._should_process is None or self._should_process(name.lower())

            tag_end, stray = self._find_tag_end(name_end)
            if tag_end == -1:
                # Declined tags fail silently
                if stray != -1:
                    if accepted:
                        self._warn(f"Unexpected '<' inside tag <{name}>", stray)
                    pos = stray
                else:
                    if accepted:
                        self._warn(f"Unterminated tag <{name}>", lt)
                    pos = lt + 1
                continue

            if not accepted:
                pos = tag_end + 1
                continue

            attr_end = tag_end
            if closing:
                kind = TagKind.CLOSE
            elif tag_end > name_end and source[tag_end - 1] == "/":
                kind = TagKind.EMPTY
                attr_end = tag_end - 1
            else:
                kind = TagKind.OPEN

            try:
                attributes = self._parse_attributes(name_end, attr_end)
            except _Malformed as exc:
                self._warn(f"{exc.message} in tag <{name}>", exc.offset)
                pos = tag_end + 1
                continue

            if lt > text_start:
                yield Text(source[text_start:lt], text_start)

            pos = text_start = tag_end + 1
            yield Tag(
                name=name,
                kind=kind,
                attributes=attributes,
                raw=source[lt:pos],
                offset=lt,
                end_offset=pos,
                source_file=self._source_file,
                _source=source,
            )

        if text_start < source_len:
            yield Text(source[text_start:], text_start)

    def _skip_opaque(self, lt: int) -> int:
        """Return the position after a comment, CDATA, declaration or PI."""
        source = self._source
        for opener, terminator in _OPAQUE_CONSTRUCTS:
            if source.startswith(opener, lt):
                start = lt + len(opener)
                known_absent = self._is_absent(terminator, start)
                end = -1 if known_absent else self._find(terminator, start)
                if end == -1:
                    if not known_absent:
                        self._warn(f"Unterminated '{opener}' construct", lt)
                    return start
                return end + len(terminator)
        # Unreachable: "<!" and "<?" always match an opener
        return lt + 1

    def _is_absent(self, needle: str, start: int) -> bool:
        after = self._absent_after.get(needle)
        return after is not None and start >= after

    def _find(self, needle: str, start: int) -> int:
        """source.find that remembers failures, so each needle is searched
        to the end of the source at most once."""
        if self._is_absent(needle, start):
            return -1
        index = self._source.find(needle, start)
        if index == -1:
            self._absent_after[needle] = start
        return index

    def _find_tag_end(self, pos: int) -> tuple[int, int]:
        """Find the closing '>' of a tag, skipping quoted attribute values.

        Quotes only open a value directly after '=' (ignoring whitespace),
        so ``<p don't>`` still ends at its '>'.

        Returns:
            (index of '>', -1) on success, (-1, index of stray '<') if another
            tag starts first, (-1, -1) if the source ends first.
        """
        source = self._source
        source_len = self._source_len
        after_equals = False
        i = pos
        while i < source_len:
            c = source[i]
            if c == ">":
                return i, -1
            if c == "<":
                return -1, i
            if c == "=":
                after_equals = True
            elif c in _QUOTES and after_equals:
                close = self._find(c, i + 1)
                if close == -1:
                    return -1, -1
                i = close
                after_equals = False
            elif c not in _WHITESPACE:
                after_equals = False
            i += 1
        return -1, -1

    def _parse_attributes(self, start: int, end: int) -> tuple[tuple[str, str | None], ...]:
        """Parse the attribute list in source[start:end].

        Raises:
            _Malformed: On an attribute without a name, '=' without a value,
                or a bare value when unquoted values are disabled.
        """
        source = self._source
        attributes: list[tuple[str, str | None]] = []
        i = start
        while True:
            while i < end and source[i] in _WHITESPACE:
                i += 1
            if i >= end:
                break

            c = source[i]
            if c == "=":
                raise _Malformed("Attribute value without a name", i)
            if c in _QUOTES:
                raise _Malformed("Unexpected quote", i)
            if c == "/":
                i += 1
                continue

            name_start = i
            while i < end and source[i] not in _NAME_STOP:
                i += 1
            attr = source[name_start:i]

            j = i
            while j < end and source[j] in _WHITESPACE:
                j += 1
            if j >= end or source[j] != "=":
                attributes.append((attr, None))
                continue

            j += 1
            while j < end and source[j] in _WHITESPACE:
                j += 1
            if j >= end:
                raise _Malformed(f"Missing value for attribute '{attr}'", name_start)

            quote = source[j]
            if quote in _QUOTES:
                close = source.find(quote, j + 1, end)
                if close == -1:
                    raise _Malformed(f"Unterminated value for attribute '{attr}'", j)
                attributes.append((attr, source[j + 1 : close]))
                i = close + 1
            else:
                if not self._allow_unquoted_values:
                    raise _Malformed(f"Unquoted value for attribute '{attr}'", j)
                value_start = j
                while j < end and source[j] not in _WHITESPACE:
                    j += 1
                attributes.append((attr, source[value_start:j]))
                i = j
        return tuple(attributes)

    def _warn(self, message: str, offset: int) -> None:
        warning = TagWarning(
            message,
            SourceLocation.from_offset(self._source, offset, source_file=self._source_file),
        )
        if self._on_warning is None:
            logger.warning("%s", warning)
        else:
            self._on_warning(warning)


def tokenize(
    source: str,
    should_process: Callable[[str], bool] | None = None,
    **kwargs: object,
) -> list[Tag | Text]:
    """Tokenize source into a list of events (convenience wrapper)."""
    return list(TagTokenizer(source, should_process, **kwargs).tokenize())  # type: ignore[arg-type]
