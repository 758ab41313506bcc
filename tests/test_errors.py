"""Tests for exception formatting and hierarchy."""

import pytest

from tagweave.errors import (
    AttributeMissingError,
    BufferStackError,
    BufferUnderflowError,
    ParseError,
    RuleError,
    TagWarning,
    TagweaveError,
)
from tagweave.location import SourceLocation


class TestParseErrorFormatting:
    def test_message_only(self) -> None:
        err = ParseError("unexpected token")
        assert str(err) == "unexpected token"
        assert err.lineno is None

    def test_with_line_and_column(self) -> None:
        err = ParseError("missing quote", lineno=10, col_offset=5)
        assert str(err) == "10:5 missing quote"

    def test_with_source_file(self) -> None:
        err = ParseError("error", lineno=1, col_offset=2, source_file="base.html")
        assert str(err) == "base.html:1:2 error"


class TestAttributeMissingError:
    def test_format(self) -> None:
        err = AttributeMissingError("tw:write", "property")
        assert "<tw:write>" in str(err)
        assert "'property'" in str(err)
        assert err.tag_name == "tw:write"
        assert err.attribute == "property"

    def test_with_line_number(self) -> None:
        assert "line 4" in str(AttributeMissingError("x", "y", lineno=4))


class TestHierarchy:
    @pytest.mark.parametrize(
        "err",
        [
            ParseError("x"),
            AttributeMissingError("a", "b"),
            BufferStackError("x"),
            BufferUnderflowError(),
            RuleError("r", "m"),
        ],
    )
    def test_all_are_tagweave_errors(self, err: Exception) -> None:
        assert isinstance(err, TagweaveError)

    def test_rule_error_format(self) -> None:
        assert str(RuleError("MyRule", "bad")) == "Rule 'MyRule': bad"


class TestTagWarning:
    def test_str_and_promotion(self) -> None:
        warning = TagWarning("Unterminated tag <a>", SourceLocation(3, 7, source_file="f.html"))
        assert str(warning) == "f.html:3:7: Unterminated tag <a>"
        assert (warning.lineno, warning.col_offset) == (3, 7)
        err = warning.as_error()
        assert isinstance(err, ParseError)
        assert str(err) == "f.html:3:7 Unterminated tag <a>"
