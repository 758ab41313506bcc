"""Utility helpers for tagweave."""

from tagweave.utils.logger import get_logger

__all__ = ["get_logger"]
