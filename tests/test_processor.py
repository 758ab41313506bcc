"""Tests for TagProcessor dispatch, pass-through and buffer balance."""

from __future__ import annotations

import logging

import pytest

from tagweave import TagProcessor
from tagweave.config import ProcessConfig
from tagweave.errors import BufferStackError, BufferUnderflowError, TagWarning
from tagweave.rules import BlockRule, RenameTagRule, StateTransitionRule
from tagweave.state import State

QUIET = ProcessConfig(log_warnings=False)


class Swallow(BlockRule):
    """Drops the tag and its body."""

    def process_start(self, tag, context):
        context.push_buffer()

    def process_end(self, tag, context, data):
        context.pop_buffer()


class TestPassThrough:
    def test_no_rules_output_equals_input(self) -> None:
        source = '<!DOCTYPE html>\n<html lang="en"><body class=x>Tom &amp; Jerry <3</body></html>'
        assert TagProcessor(source).process() == source

    def test_unregistered_tags_are_untouched(self) -> None:
        processor = TagProcessor("<p>a <b>b</b> <i>c</i></p>")
        processor.add_rule("b", RenameTagRule("strong"))
        assert processor.process() == "<p>a <strong>b</strong> <i>c</i></p>"

    def test_intercept_all_default_state_copies_tags(self) -> None:
        source = "<p a='1'>x<br/></p>"
        processor = TagProcessor(source, default_state=State(intercept_all=True))
        assert processor.process() == source

    def test_empty_document(self) -> None:
        assert TagProcessor("").process() == ""


class TestDispatch:
    def test_case_insensitive_rule_match(self) -> None:
        processor = TagProcessor("<b>1</b><B>2</B><b>3</B>")
        processor.add_rule("b", RenameTagRule("em"))
        assert processor.process() == "<em>1</em><em>2</em><em>3</em>"

    def test_rule_resolved_in_state_current_at_dispatch(self) -> None:
        raw = State(name="raw")
        processor = TagProcessor("<b>x</b><pre><b>y</b></pre><b>z</b>")
        processor.add_rule("b", RenameTagRule("strong"))
        StateTransitionRule.paired("pre", processor.default_state, raw)
        assert processor.process() == (
            "<strong>x</strong><pre><b>y</b></pre><strong>z</strong>"
        )
        assert processor.current_state is processor.default_state

    def test_rule_can_rebind_state_mid_document(self) -> None:
        loud = State(name="loud").add_rule("b", RenameTagRule("STRONG"))

        class Switch:
            def process(self, tag, context):
                context.change_state(loud)

        processor = TagProcessor("<b>1</b><switch/><b>2</b>")
        processor.add_rule("b", RenameTagRule("strong"))
        processor.add_rule("switch", Switch())
        assert processor.process() == "<strong>1</strong><STRONG>2</STRONG>"
        assert processor.current_state is loud

    def test_add_rule_chains(self) -> None:
        processor = TagProcessor("")
        assert processor.add_rule("a", Swallow()) is processor

    def test_rule_errors_propagate(self) -> None:
        class Boom:
            def process(self, tag, context):
                raise RuntimeError("boom")

        processor = TagProcessor("a<x>b")
        processor.add_rule("x", Boom())
        with pytest.raises(RuntimeError, match="boom"):
            processor.process()


class TestBufferBalance:
    def test_stack_depth_is_one_after_process(self) -> None:
        processor = TagProcessor("a<s>b<s>c</s>d</s>e")
        processor.add_rule("s", Swallow())
        assert processor.process() == "ae"
        assert processor.context.depth == 1

    def test_unclosed_block_is_unwound_with_warning(self) -> None:
        warnings: list[TagWarning] = []
        processor = TagProcessor("keep<s>lost", on_warning=warnings.append)
        processor.add_rule("s", Swallow())
        assert processor.process() == "keep"
        assert processor.context.depth == 1
        assert len(warnings) == 1
        assert "Unclosed block tag" in warnings[0].message
        assert processor.warnings == warnings

    def test_unclosed_block_raises_when_unwinding_disabled(self) -> None:
        processor = TagProcessor("<s>x", config=ProcessConfig(unwind_unclosed=False))
        processor.add_rule("s", Swallow())
        with pytest.raises(BufferStackError, match="1 buffer"):
            processor.process()

    def test_unbalanced_rule_underflows(self) -> None:
        class PopOnly:
            def process(self, tag, context):
                context.pop_buffer()

        processor = TagProcessor("<x>")
        processor.add_rule("x", PopOnly())
        with pytest.raises(BufferUnderflowError):
            processor.process()

    def test_process_is_repeatable(self) -> None:
        processor = TagProcessor("a<s>b", config=QUIET)
        processor.add_rule("s", Swallow())
        assert processor.process() == "a"
        assert processor.process() == "a"

    def test_block_rule_in_entered_state_is_reset_after_failed_run(self) -> None:
        inner = State(name="inner")
        swallow = Swallow()
        failures = [RuntimeError("boom")]

        class Enter:
            def process(self, tag, context):
                context.change_state(inner)

        class FailOnce:
            def process(self, tag, context):
                if failures:
                    raise failures.pop()

        inner.add_rule("s", swallow).add_rule("boom", FailOnce())
        processor = TagProcessor("a<in/><s>x<boom/>y</s>b")
        processor.add_rule("in", Enter())
        with pytest.raises(RuntimeError, match="boom"):
            processor.process()
        assert swallow.depth == 1

        assert processor.process() == "ab"
        assert swallow.depth == 0


class TestWarnings:
    def test_warnings_logged_by_default(self, caplog) -> None:
        processor = TagProcessor("<a x=>", source_file="layout.html")
        processor.add_rule("a", RenameTagRule("b"))
        with caplog.at_level(logging.WARNING, logger="tagweave"):
            assert processor.process() == "<a x=>"
        assert "layout.html:1:4" in caplog.text

    def test_warnings_not_logged_when_disabled(self, caplog) -> None:
        processor = TagProcessor("<a x=>", config=QUIET)
        processor.add_rule("a", RenameTagRule("b"))
        with caplog.at_level(logging.WARNING, logger="tagweave"):
            processor.process()
        assert caplog.text == ""
        assert len(processor.warnings) == 1
