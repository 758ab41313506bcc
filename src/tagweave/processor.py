"""Tag processor: drives the tokenizer and dispatches tags to rules.

Copies a document to an output buffer, applying rules on the way to
extract and/or transform content. Text outside intercepted tags passes
through byte for byte.

Flow for one process() call:

1. A fresh BufferStack is seeded with the root buffer.
2. The tokenizer asks the *current* State whether each tag name is
   interesting; uninteresting tags stay text.
3. Text runs go to ``current_state.handle_text``.
4. For each tag, the rule is resolved in the current State at dispatch
   time. A rule may have switched State since the tokenizer asked, so the
   lookup is never cached.
5. At end of document, buffers still pushed by unclosed block tags are
   unwound (or reported, see ProcessConfig.unwind_unclosed).

Thread Safety:
A TagProcessor is single-use per call to process() and holds mutable
state (current State, buffers). Do not share one across threads.

"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from tagweave.config import ProcessConfig, get_process_config
from tagweave.context import BufferStack
from tagweave.errors import BufferStackError, TagWarning
from tagweave.location import SourceLocation
from tagweave.rules.base import BlockRule
from tagweave.sink import Sink
from tagweave.state import State
from tagweave.tags import Tag
from tagweave.tokenizer import TagTokenizer
from tagweave.utils.logger import get_logger

if TYPE_CHECKING:
    from tagweave.rules.protocol import TagRule

logger = get_logger(__name__)


class TagProcessor:
    """Applies tag rules to a document.

    Usage:
            >>> processor = TagProcessor("<p>Hello <b>World</b></p>")
            >>> processor.add_rule("b", RenameTagRule("strong"))
            >>> processor.process()
            '<p>Hello <strong>World</strong></p>'

    Args:
        source: Document text
        source_file: Optional source file path for warnings
        on_warning: Receives tokenizer warnings. When None, warnings are
            logged (if config.log_warnings).
        config: Overrides the context-local ProcessConfig
        default_state: State to start in (a new empty State if None)

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_on_warning",
        "_config",
        "_default_state",
        "_current_state",
        "_default_buffer",
        "_context",
        "_seen_states",
        "warnings",
    )

    def __init__(
        self,
        source: str,
        *,
        source_file: str | None = None,
        on_warning: Callable[[TagWarning], None] | None = None,
        config: ProcessConfig | None = None,
        default_state: State | None = None,
    ) -> None:
        self._source = source
        self._source_file = source_file
        self._on_warning = on_warning
        self._config = config if config is not None else get_process_config()
        self._default_state = default_state if default_state is not None else State(name="default")
        self._current_state = self._default_state
        self._default_buffer = Sink()
        self._context: BufferStack | None = None
        self._seen_states: list[State] = [self._default_state]
        self.warnings: list[TagWarning] = []

    @property
    def default_state(self) -> State:
        """The State the processor starts in."""
        return self._default_state

    @property
    def current_state(self) -> State:
        return self._current_state

    @property
    def default_buffer(self) -> Sink:
        """Root buffer; holds the output after process()."""
        return self._default_buffer

    @property
    def context(self) -> BufferStack | None:
        """Buffer stack of the last process() call (None before the first)."""
        return self._context

    def add_rule(self, name: str, rule: TagRule) -> TagProcessor:
        """Register a rule on the default State.

        Returns:
            Self for chaining
        """
        self._default_state.add_rule(name, rule)
        return self

    def process(self) -> str:
        """Process the document and return the output.

        Errors raised by rules (e.g. AttributeMissingError) propagate
        unchanged; BufferUnderflowError signals an unbalanced rule.

        Returns:
            Contents of the root buffer

        Raises:
            BufferStackError: If block tags are left open and
                config.unwind_unclosed is False
        """
        self._current_state = self._default_state
        self._default_buffer = Sink()
        self.warnings = []
        self._reset_block_rules()

        context = BufferStack(
            self._default_buffer, self._get_state, self._set_state, on_warning=self._warning
        )
        self._context = context
        tokenizer = TagTokenizer(
            self._source,
            self._should_process_tag,
            on_warning=self._warning,
            source_file=self._source_file,
            allow_unquoted_values=self._config.allow_unquoted_values,
        )

        logger.debug("Processing %s (%d chars)", self._source_file or "<string>", len(self._source))
        for event in tokenizer.tokenize():
            if isinstance(event, Tag):
                rule = self._current_state.get_rule(event.normalized_name)
                rule.process(event, context)
            else:
                self._current_state.handle_text(event.value, context)

        if context.depth > 1:
            self._unwind(context)
        return self._default_buffer.getvalue()

    def _unwind(self, context: BufferStack) -> None:
        open_buffers = context.depth - 1
        if not self._config.unwind_unclosed:
            msg = f"{open_buffers} buffer(s) still pushed at end of document"
            raise BufferStackError(msg)
        self._warning(
            TagWarning(
                f"Unclosed block tag: {open_buffers} pushed buffer(s) discarded",
                SourceLocation.from_offset(
                    self._source, len(self._source), source_file=self._source_file
                ),
            )
        )
        while context.depth > 1:
            context.pop_buffer()

    def _reset_block_rules(self) -> None:
        """Clear occurrence stacks left by an earlier, possibly failed, run.

        Covers rules on every State this processor has been in.
        """
        for state in self._seen_states:
            for rule in state.rules.values():
                if isinstance(rule, BlockRule):
                    rule.reset()

    def _should_process_tag(self, name: str) -> bool:
        return self._current_state.should_process_tag(name)

    def _get_state(self) -> State:
        return self._current_state

    def _set_state(self, state: State) -> None:
        logger.debug("State change: %r -> %r", self._current_state.name, state.name)
        self._current_state = state
        if not any(seen is state for seen in self._seen_states):
            self._seen_states.append(state)

    def _warning(self, warning: TagWarning) -> None:
        if self._config.collect_warnings:
            self.warnings.append(warning)
        if self._on_warning is not None:
            self._on_warning(warning)
        elif self._config.log_warnings:
            logger.warning("%s", warning)
