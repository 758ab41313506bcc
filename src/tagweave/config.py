"""ContextVar-based processing configuration for tagweave.

Provides context-local configuration using Python's ContextVars (PEP 567).
A processor reads the active config once when it is created; passing a
config explicitly to ``TagProcessor`` overrides the context value.

Usage:
    # Direct use
    from tagweave.config import ProcessConfig, process_config_context

    with process_config_context(ProcessConfig(allow_unquoted_values=False)):
        processor = TagProcessor(source)
        output = processor.process()

    # Or from a settings dict (unknown keys are ignored)
    config = ProcessConfig.from_dict(settings["tagweave"])

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProcessConfig:
    """Immutable processing configuration.

    Attributes:
        allow_unquoted_values: Accept ``<tag attr=value>``; when False a bare
            value is a malformed attribute and the tag passes through as text
        log_warnings: Log tokenizer warnings when no warning handler is given
        collect_warnings: Keep tokenizer warnings on ``TagProcessor.warnings``
        unwind_unclosed: At end of document, pop buffers left pushed by
            unclosed block tags (with a warning). When False, raise
            BufferStackError instead.

    """

    allow_unquoted_values: bool = True
    log_warnings: bool = True
    collect_warnings: bool = True
    unwind_unclosed: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ProcessConfig":
        """Create ProcessConfig from dictionary.

        Only includes keys that are valid ProcessConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = ProcessConfig.from_dict({
            ...     "log_warnings": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.log_warnings
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ProcessConfig = ProcessConfig()

_process_config: ContextVar[ProcessConfig] = ContextVar(
    "process_config",
    default=_DEFAULT_CONFIG,
)


def get_process_config() -> ProcessConfig:
    """Get current processing configuration (context-local)."""
    return _process_config.get()


def set_process_config(config: ProcessConfig) -> None:
    """Set processing configuration for the current context."""
    _process_config.set(config)


def reset_process_config() -> None:
    """Reset to the default configuration."""
    _process_config.set(_DEFAULT_CONFIG)


@contextmanager
def process_config_context(config: ProcessConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with process_config_context(ProcessConfig(log_warnings=False)):
        ...     output = TagProcessor("<a>").process()
    """
    previous = _process_config.get()
    _process_config.set(config)
    try:
        yield
    finally:
        _process_config.set(previous)


__all__ = [
    "ProcessConfig",
    "get_process_config",
    "set_process_config",
    "reset_process_config",
    "process_config_context",
]
