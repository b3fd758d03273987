"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - scrape endpoint in Prometheus text format

Metrics Exposed:
    HTTP:
        - http_requests_total, http_request_duration_seconds
    Reminders:
        - reminder_sweeps_total, reminder_sweep_duration_seconds
        - reminders_dispatched_total, reminder_channel_deliveries_total
        - reminder_continuations_total, reminder_dispatch_errors_total
    Application Info:
        - application_info
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from helperbuddy.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose the service registry for scraping."""
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
