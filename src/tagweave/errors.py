"""Exception classes and warnings for tagweave.

Errors fall into two groups:

- Data errors (``AttributeMissingError``, ``ParseError``): the document
  is not what a rule expects. Callers may catch these and decide whether
  to drop the document or the tag.
- Contract violations (``BufferStackError``): a rule pushed or popped
  buffers out of balance. These indicate a bug in rule code and are never
  caught by the engine.

Malformed markup is not an error at all: the tokenizer reports it as a
``TagWarning`` and keeps going.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tagweave.location import SourceLocation


class TagweaveError(Exception):
    """Base exception for all tagweave errors."""

    pass


class ParseError(TagweaveError):
    """Malformed markup, promoted from a warning.

    The tokenizer never raises this itself; see ``TagWarning.as_error``.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class AttributeMissingError(TagweaveError):
    """A rule required an attribute the tag does not carry."""

    def __init__(
        self,
        tag_name: str,
        attribute: str,
        lineno: int | None = None,
    ) -> None:
        """Initialize attribute missing error.

        Args:
            tag_name: Tag name as written in the source (e.g., "tw:write")
            attribute: Name of the missing attribute (e.g., "property")
            lineno: Line number of the tag (optional)
        """
        self.tag_name = tag_name
        self.attribute = attribute
        self.lineno = lineno

        location = f" (line {lineno})" if lineno else ""
        super().__init__(
            f"Tag <{tag_name}>{location} is missing required attribute '{attribute}'"
        )


class BufferStackError(TagweaveError):
    """The buffer stack was left in an inconsistent state.

    Raised for unbalanced push/pop sequences. This is a defect in a rule,
    not bad input.
    """

    pass


class BufferUnderflowError(BufferStackError):
    """A rule tried to pop the root buffer."""

    def __init__(self) -> None:
        super().__init__("Cannot pop the root buffer: push/pop calls are unbalanced")


class RuleError(TagweaveError):
    """A rule is misconfigured or was registered incorrectly."""

    def __init__(self, rule_name: str, message: str) -> None:
        """Initialize rule error.

        Args:
            rule_name: Name of the failing rule (usually its class name)
            message: Description of the error
        """
        self.rule_name = rule_name
        super().__init__(f"Rule '{rule_name}': {message}")


@dataclass(frozen=True, slots=True)
class TagWarning:
    """Non-fatal problem found while tokenizing.

    Attributes:
        message: Human-readable description
        location: Where in the source the problem starts
    """

    message: str
    location: SourceLocation

    @property
    def lineno(self) -> int:
        return self.location.lineno

    @property
    def col_offset(self) -> int:
        return self.location.col_offset

    def as_error(self) -> ParseError:
        """Promote this warning to a ParseError (for strict callers)."""
        return ParseError(
            self.message,
            lineno=self.location.lineno,
            col_offset=self.location.col_offset,
            source_file=self.location.source_file,
        )

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"
