"""Property-based tests for tokenizer invariants using Hypothesis.

These tests verify that certain properties always hold regardless
of the input, helping catch edge cases that example-based tests miss.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from tagweave.tags import Tag, Text
from tagweave.tokenizer import TagTokenizer

markup_text = st.text(alphabet="<>/!?-=\"' abAB:\n", max_size=200)


def _quiet(source: str, should_process=None) -> list[Tag | Text]:
    return list(TagTokenizer(source, should_process, on_warning=lambda w: None).tokenize())


class TestLosslessness:
    @given(markup_text)
    @settings(max_examples=300)
    def test_events_reassemble_source(self, source: str) -> None:
        """Concatenating every event's text reproduces the input exactly."""
        events = _quiet(source)
        rebuilt = "".join(e.raw if isinstance(e, Tag) else e.value for e in events)
        assert rebuilt == source

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_arbitrary_text_never_raises(self, source: str) -> None:
        _quiet(source)

    @given(markup_text)
    @settings(max_examples=200)
    def test_declining_everything_yields_single_text(self, source: str) -> None:
        events = _quiet(source, lambda name: False)
        assert events == ([Text(source, 0)] if source else [])


class TestOrdering:
    @given(markup_text)
    @settings(max_examples=200)
    def test_offsets_increase_and_no_adjacent_text(self, source: str) -> None:
        events = _quiet(source)
        offsets = [e.offset for e in events]
        assert offsets == sorted(offsets)
        for prev, cur in zip(events, events[1:]):
            assert not (isinstance(prev, Text) and isinstance(cur, Text))
