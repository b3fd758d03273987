"""Shared utilities."""

from __future__ import annotations

from .retry import RetryError, retry

__all__ = ["RetryError", "retry"]
