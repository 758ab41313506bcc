"""
tagweave: rule-driven tag processing for text documents

Scans text for markup tags and applies pluggable per-tag rules that can
rewrite, suppress, or redirect output. Text outside intercepted tags passes
through unchanged. Zero runtime dependencies.

Quick Start:
    >>> from tagweave import merge
    >>> merge(
    ...     '<h1><tw:write property="title">Untitled</tw:write></h1>',
    ...     {"title": "My Page"},
    ... )
    '<h1>My Page</h1>'

Custom Rules:
    >>> from tagweave import TagProcessor, BlockRule
    >>>
    >>> class ShoutRule(BlockRule):
    ...     def process_start(self, tag, context):
    ...         context.push_buffer()
    ...
    ...     def process_end(self, tag, context, data):
    ...         body = context.current_buffer_contents()
    ...         context.pop_buffer()
    ...         context.current_buffer().append(body.upper())
    >>>
    >>> processor = TagProcessor("say <shout>hello</shout>")
    >>> processor.add_rule("shout", ShoutRule())
    >>> processor.process()
    'say HELLO'

Installation:
    pip install tagweave
"""

from collections.abc import Mapping

from tagweave.config import (
    ProcessConfig,
    get_process_config,
    process_config_context,
    reset_process_config,
    set_process_config,
)
from tagweave.content import (
    MISSING_PROPERTY,
    Content,
    DictContent,
    MergeContext,
    Property,
    StaticMergeContext,
    StaticProperty,
)
from tagweave.context import BufferStack, ProcessingContext
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
from tagweave.processor import TagProcessor
from tagweave.rules import (
    PASS_THROUGH,
    BlockRule,
    CaptureBodyRule,
    MergePropertyRule,
    PassThroughRule,
    RenameTagRule,
    StateTransitionRule,
    TagRule,
)
from tagweave.sink import Sink
from tagweave.state import State
from tagweave.tags import Tag, TagKind, Text, serialize_tag
from tagweave.tokenizer import TagTokenizer, tokenize

__version__ = "0.1.0"


def process(
    source: str,
    rules: Mapping[str, TagRule] | None = None,
    *,
    source_file: str | None = None,
    config: ProcessConfig | None = None,
) -> str:
    """Apply rules to a document and return the output.

    Args:
        source: Document text
        rules: Tag name to rule mapping for the default State
        source_file: Optional source file path for warnings
        config: Overrides the context-local ProcessConfig

    Returns:
        Processed text

    Example:
        >>> process("<b>hi</b>", {"b": RenameTagRule("strong")})
        '<strong>hi</strong>'
    """
    processor = TagProcessor(source, source_file=source_file, config=config)
    for name, rule in (rules or {}).items():
        processor.add_rule(name, rule)
    return processor.process()


def merge(
    source: str,
    content: Content | Mapping[str, str] | None,
    *,
    prefix: str = "tw",
    attribute: str = "property",
    source_file: str | None = None,
    config: ProcessConfig | None = None,
) -> str:
    """Replace ``<{prefix}:write property="...">`` tags with content properties.

    Args:
        source: Decorator document containing write tags
        content: Content to merge, a plain mapping of property values, or
            None (every write tag then produces nothing)
        prefix: Namespace prefix of the write tag
        attribute: Attribute naming the property
        source_file: Optional source file path for warnings
        config: Overrides the context-local ProcessConfig

    Returns:
        The merged document

    Raises:
        AttributeMissingError: If a write tag has no property attribute
    """
    if isinstance(content, Mapping):
        content = DictContent(content)
    rule = MergePropertyRule(StaticMergeContext(content), attribute=attribute)
    return process(
        source,
        {f"{prefix}:write": rule},
        source_file=source_file,
        config=config,
    )


__all__ = [
    # Main API
    "process",
    "merge",
    "TagProcessor",
    "__version__",
    # Tokenizer
    "TagTokenizer",
    "tokenize",
    "Tag",
    "TagKind",
    "Text",
    "serialize_tag",
    "SourceLocation",
    # State and context
    "State",
    "BufferStack",
    "ProcessingContext",
    "Sink",
    # Rules
    "TagRule",
    "BlockRule",
    "PassThroughRule",
    "PASS_THROUGH",
    "MergePropertyRule",
    "StateTransitionRule",
    "CaptureBodyRule",
    "RenameTagRule",
    # Content
    "Content",
    "Property",
    "MergeContext",
    "DictContent",
    "StaticProperty",
    "StaticMergeContext",
    "MISSING_PROPERTY",
    # Config
    "ProcessConfig",
    "get_process_config",
    "set_process_config",
    "reset_process_config",
    "process_config_context",
    # Errors
    "TagweaveError",
    "ParseError",
    "AttributeMissingError",
    "BufferStackError",
    "BufferUnderflowError",
    "RuleError",
    "TagWarning",
]
