"""Prometheus metrics for reminder dispatch.

Usage:
    from helperbuddy.features.reminders.metrics import reminders_dispatched_total

    reminders_dispatched_total.labels(status="sent").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

from helperbuddy.infra.metrics.prometheus import REGISTRY

# =============================================================================
# Sweep Metrics
# =============================================================================

reminder_sweeps_total = Counter(
    "reminder_sweeps_total",
    "Total number of reminder sweeps by outcome",
    labelnames=["outcome"],
    registry=REGISTRY,
)
"""
Labels:
    outcome: completed, aborted (due query failed) or skipped (previous sweep still running)
"""

reminder_sweep_duration_seconds = Histogram(
    "reminder_sweep_duration_seconds",
    "Duration of a completed reminder sweep",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
    registry=REGISTRY,
)

# =============================================================================
# Delivery Metrics
# =============================================================================

reminders_dispatched_total = Counter(
    "reminders_dispatched_total",
    "Total number of reminders moved out of pending",
    labelnames=["status"],
    registry=REGISTRY,
)

reminder_channel_deliveries_total = Counter(
    "reminder_channel_deliveries_total",
    "Channel delivery attempts by channel and outcome",
    labelnames=["channel", "outcome"],
    registry=REGISTRY,
)
"""
Labels:
    channel: email or sms
    outcome: success or failure
"""

reminder_continuations_total = Counter(
    "reminder_continuations_total",
    "Total number of next-occurrence reminders created",
    registry=REGISTRY,
)

reminder_dispatch_errors_total = Counter(
    "reminder_dispatch_errors_total",
    "Reminders whose dispatch could not be persisted",
    registry=REGISTRY,
)


__all__ = [
    "reminder_channel_deliveries_total",
    "reminder_continuations_total",
    "reminder_dispatch_errors_total",
    "reminder_sweep_duration_seconds",
    "reminder_sweeps_total",
    "reminders_dispatched_total",
]
