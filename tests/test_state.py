"""Tests for State rule lookup."""

import pytest

from tagweave.context import BufferStack
from tagweave.errors import RuleError
from tagweave.rules import PASS_THROUGH, RenameTagRule
from tagweave.sink import Sink
from tagweave.state import State


class TestRuleLookup:
    def test_names_are_case_insensitive(self) -> None:
        rule = RenameTagRule("strong")
        state = State().add_rule("B", rule)
        for name in ("b", "B"):
            assert state.should_process_tag(name)
            assert state.get_rule(name) is rule
        assert "b" in state
        assert list(state.rules) == ["b"]

    def test_last_registration_wins(self) -> None:
        first, second = RenameTagRule("x"), RenameTagRule("y")
        state = State().add_rule("a", first).add_rule("A", second)
        assert state.get_rule("a") is second
        assert len(state) == 1

    def test_unknown_name(self) -> None:
        state = State()
        assert not state.should_process_tag("div")
        assert state.get_rule("div") is PASS_THROUGH

    def test_intercept_all(self) -> None:
        state = State(intercept_all=True)
        assert state.intercept_all
        assert state.should_process_tag("anything")
        assert state.get_rule("anything") is PASS_THROUGH

    def test_rules_view_is_read_only(self) -> None:
        state = State().add_rule("a", RenameTagRule("b"))
        with pytest.raises(TypeError):
            state.rules["c"] = RenameTagRule("d")  # type: ignore[index]

    def test_rejects_objects_without_process(self) -> None:
        with pytest.raises(RuleError, match="process"):
            State().add_rule("a", object())  # type: ignore[arg-type]


class TestTextHandling:
    def _context(self, state: State) -> BufferStack:
        return BufferStack(Sink(), lambda: state, lambda s: None)

    def test_text_goes_to_current_buffer(self) -> None:
        state = State()
        context = self._context(state)
        context.push_buffer()
        state.handle_text("hello", context)
        assert context.current_buffer_contents() == "hello"
        assert context.root.getvalue() == ""

    def test_text_filters_apply_in_order(self) -> None:
        state = State().add_text_filter(str.upper).add_text_filter(lambda t: t.replace("A", "4"))
        context = self._context(state)
        state.handle_text("a cat", context)
        assert context.root.getvalue() == "4 C4T"
