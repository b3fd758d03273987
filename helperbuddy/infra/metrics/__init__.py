"""Prometheus metrics infrastructure."""

from __future__ import annotations

from .prometheus import (
    REGISTRY,
    application_info,
    http_request_duration_seconds,
    http_requests_total,
)

__all__ = [
    "REGISTRY",
    "application_info",
    "http_request_duration_seconds",
    "http_requests_total",
]
