"""Prometheus metrics endpoint.

Scraped by Prometheus; returns the text exposition format, not JSON:

  # TYPE activities_recorded_total counter
  activities_recorded_total{result="accepted"} 1432.0
  activities_recorded_total{result="duplicate"} 17.0

Metric data reveals request rates and error patterns; restrict access to
/metrics at the ingress in production.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose all Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
