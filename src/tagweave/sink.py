"""Append-only text sink with deferred concatenation.

Appends to a list, joins only when the contents are read: O(1) per append
and O(n) total, instead of O(n²) for repeated string concatenation.

Sinks are the unit the buffer stack is made of. The bottom sink of a
processor holds the final document; sinks pushed by rules collect (and
usually discard) tag bodies.

Thread Safety:
Sink instances are local to one process() call.
No shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterable


class Sink:
    """Append-only accumulator of text chunks.

    Usage:
            >>> sink = Sink()
            >>> sink.append("<title>").append("Home").append("</title>")
            >>> sink.getvalue()
            '<title>Home</title>'

    Besides ``append``, a Sink exposes ``write`` so anything that knows how
    to write to a text stream (``print(..., file=sink)``, a property
    serializer) can target it directly.

    """

    __slots__ = ("_parts", "_length")

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._length = 0

    def append(self, s: str) -> Sink:
        """Append a chunk of text.

        Args:
            s: Text to append (empty strings are skipped)

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
            self._length += len(s)
        return self

    def write(self, s: str) -> int:
        """Append text, file-object style.

        Returns:
            Number of characters written
        """
        self.append(s)
        return len(s)

    def extend(self, strings: Iterable[str]) -> Sink:
        """Append several chunks at once."""
        for s in strings:
            self.append(s)
        return self

    def getvalue(self) -> str:
        """Return the accumulated text.

        Joins the chunks and keeps the joined result as the single chunk,
        so repeated reads do not re-join and the sink stays appendable.
        """
        if len(self._parts) > 1:
            self._parts[:] = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    @property
    def part_count(self) -> int:
        """Number of chunks currently held."""
        return len(self._parts)

    def __str__(self) -> str:
        return self.getvalue()

    def __len__(self) -> int:
        """Total number of characters appended."""
        return self._length

    def __bool__(self) -> bool:
        return self._length > 0

    def __repr__(self) -> str:
        return f"Sink(parts={len(self._parts)}, length={self._length})"
