"""CLI utilities for running async operations and formatting output."""

from helperbuddy.cli.utils.async_runner import coro
from helperbuddy.cli.utils.formatters import error, header, info, success, warning

__all__ = ["coro", "error", "header", "info", "success", "warning"]
