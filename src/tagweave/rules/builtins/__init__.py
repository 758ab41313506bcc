"""Built-in rules.

- MergePropertyRule: replace a tag with a property of merged content
- StateTransitionRule: switch the current State for a tag's body
- CaptureBodyRule: hand a tag's body to a callback
- RenameTagRule: rename a tag, keeping its attributes
"""

from tagweave.rules.builtins.capture import CaptureBodyRule
from tagweave.rules.builtins.merge import MergePropertyRule
from tagweave.rules.builtins.rename import RenameTagRule
from tagweave.rules.builtins.transition import StateTransitionRule

__all__ = [
    "CaptureBodyRule",
    "MergePropertyRule",
    "RenameTagRule",
    "StateTransitionRule",
]
