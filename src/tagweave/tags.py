"""Tag and Text events produced by the tokenizer.

Thread Safety:
Both event types are frozen (immutable) and safe to share across threads.

Performance Note:
Tags store raw offsets and create SourceLocation on demand, since most
tags are dispatched without anyone asking where they came from.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from tagweave.errors import AttributeMissingError
from tagweave.location import SourceLocation

if TYPE_CHECKING:
    from tagweave.sink import Sink


class TagKind(Enum):
    """Shape of a tag occurrence."""

    OPEN = auto()  # <name ...>
    CLOSE = auto()  # </name>
    EMPTY = auto()  # <name .../>


@dataclass(frozen=True, slots=True)
class Tag:
    """One parsed tag occurrence.

    Attributes:
        name: Tag name exactly as written (``"tw:Write"``)
        kind: OPEN, CLOSE or EMPTY
        attributes: ``(name, value)`` pairs in source order. ``value`` is
            None for a bare attribute such as ``<input disabled>``.
        raw: The exact source text of the tag, used for pass-through
        offset: Absolute start offset of ``raw`` in the source
        end_offset: Absolute end offset of ``raw`` in the source
        source_file: Optional source file path

    Attribute lookup is case-sensitive as written; tag name matching is
    done by the State on ``normalized_name``.
    """

    name: str
    kind: TagKind
    attributes: tuple[tuple[str, str | None], ...] = ()
    raw: str = ""
    offset: int = 0
    end_offset: int = 0
    source_file: str | None = None
    _source: str | None = field(default=None, repr=False, compare=False)

    @property
    def normalized_name(self) -> str:
        """Lower-cased tag name used for rule lookup."""
        return self.name.lower()

    @property
    def location(self) -> SourceLocation:
        """Source location of the tag (computed lazily)."""
        if self._source is None:
            return SourceLocation(
                lineno=0,
                col_offset=0,
                offset=self.offset,
                end_offset=self.end_offset,
                source_file=self.source_file,
            )
        return SourceLocation.from_offset(
            self._source, self.offset, self.end_offset, self.source_file
        )

    def has_attribute(self, name: str) -> bool:
        return any(attr == name for attr, _ in self.attributes)

    def get_attribute_value(self, name: str, required: bool = False) -> str | None:
        """Look up an attribute value.

        The first occurrence wins when an attribute is repeated. A bare
        attribute yields an empty string.

        Args:
            name: Attribute name, matched case-sensitively
            required: Raise instead of returning None when absent

        Returns:
            The attribute value, or None if absent and not required

        Raises:
            AttributeMissingError: If required and the attribute is absent
        """
        for attr, value in self.attributes:
            if attr == name:
                return "" if value is None else value
        if required:
            lineno = self.location.lineno if self._source is not None else None
            raise AttributeMissingError(self.name, name, lineno=lineno)
        return None

    @property
    def attribute_map(self) -> dict[str, str]:
        """Attributes as a dict (first occurrence wins)."""
        result: dict[str, str] = {}
        for attr, value in self.attributes:
            result.setdefault(attr, "" if value is None else value)
        return result

    def write_to(self, sink: Sink) -> None:
        """Copy the tag's raw source text into a sink."""
        sink.append(self.raw)

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True, slots=True)
class Text:
    """A run of literal text between tags.

    Attributes:
        value: The text, exactly as in the source
        offset: Absolute start offset in the source
    """

    value: str
    offset: int = 0


def serialize_tag(
    name: str,
    kind: TagKind,
    attributes: tuple[tuple[str, str | None], ...] = (),
) -> str:
    """Render tag markup from its parts.

    Used by rules that synthesize or rename tags. Values are written
    double-quoted unless they contain a double quote; a value holding both
    quote characters is double-quoted with ``&quot;`` for the double quotes.

    Example:
        >>> serialize_tag("a", TagKind.OPEN, (("href", "/"),))
        '<a href="/">'
    """
    if kind is TagKind.CLOSE:
        return f"</{name}>"
    parts = [name]
    for attr, value in attributes:
        if value is None:
            parts.append(attr)
        elif '"' in value and "'" not in value:
            parts.append(f"{attr}='{value}'")
        elif '"' in value:
            escaped = value.replace('"', "&quot;")
            parts.append(f'{attr}="{escaped}"')
        else:
            parts.append(f'{attr}="{value}"')
    body = " ".join(parts)
    if kind is TagKind.EMPTY:
        return f"<{body}/>"
    return f"<{body}>"
