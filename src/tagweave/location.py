"""Source location tracking for warnings and error messages.

Provides SourceLocation dataclass for tracking positions in source text.
Tags carry raw offsets and only build a SourceLocation when something
(usually a warning) asks for it.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position in a source document.

    All positions are 1-indexed (lineno and col_offset start at 1).

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Column offset (1-indexed)
        offset: Absolute start offset in source
        end_offset: Absolute end offset in source
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(lineno=3, col_offset=7)
            >>> str(loc)
            '3:7'

            >>> loc = SourceLocation(1, 1, source_file="layout.html")
            >>> str(loc)
            'layout.html:1:1'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def from_offset(
        cls,
        source: str,
        offset: int,
        end_offset: int | None = None,
        source_file: str | None = None,
    ) -> SourceLocation:
        """Compute line and column for an absolute offset into source.

        O(offset). Only called on the slow path (warnings, error messages).

        Args:
            source: Full source text
            offset: Absolute position (clamped to the source bounds)
            end_offset: Optional end position, defaults to offset
            source_file: Optional source file path

        Returns:
            SourceLocation with 1-indexed line and column
        """
        offset = max(0, min(offset, len(source)))
        lineno = source.count("\n", 0, offset) + 1
        col_offset = offset - source.rfind("\n", 0, offset)
        return cls(
            lineno=lineno,
            col_offset=col_offset,
            offset=offset,
            end_offset=offset if end_offset is None else end_offset,
            source_file=source_file,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create a placeholder location for synthetic tags."""
        return cls(lineno=0, col_offset=0)
