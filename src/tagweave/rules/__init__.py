"""Rule system for tagweave.

Rules are bound to tag names in a State and decide how each tag, and
through pushed buffers its body, is written to the output.

Key components:
- TagRule: Protocol every rule implements (``process(tag, context)``)
- BlockRule: Base class pairing start tags with their end tags
- PassThroughRule: Copies a tag unchanged
- builtins: MergePropertyRule, StateTransitionRule, CaptureBodyRule,
  RenameTagRule
"""

from __future__ import annotations

from tagweave.rules.base import PASS_THROUGH, BlockRule, PassThroughRule
from tagweave.rules.builtins import (
    CaptureBodyRule,
    MergePropertyRule,
    RenameTagRule,
    StateTransitionRule,
)
from tagweave.rules.protocol import TagRule

__all__ = [
    "PASS_THROUGH",
    "BlockRule",
    "CaptureBodyRule",
    "MergePropertyRule",
    "PassThroughRule",
    "RenameTagRule",
    "StateTransitionRule",
    "TagRule",
]
