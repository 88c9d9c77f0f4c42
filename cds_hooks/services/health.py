# -*- coding: utf-8 -*-
"""Liveness and readiness checks."""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from cds_hooks.config import settings
from cds_hooks.config.constants import FHIR_JSON

__all__ = ["check_health", "check_fhir_server", "check_readiness"]

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def check_health() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": _now_iso(),
    }


async def check_fhir_server(
    base_url: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """Probe ``{base_url}/metadata``; unreachable is unhealthy, non-2xx degraded."""
    timeout = timeout if timeout is not None else settings.HEALTH_CHECK_TIMEOUT_SEC
    url = f"{base_url.rstrip('/')}/metadata"
    start = time.perf_counter()
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(url, headers={"Accept": FHIR_JSON})
    except httpx.HTTPError as e:
        latency = round((time.perf_counter() - start) * 1000)
        logger.warning("FHIR server health check failed for %s: %s", url, e)
        return {"status": "unhealthy", "message": f"FHIR server unreachable: {e}", "latencyMs": latency}

    latency = round((time.perf_counter() - start) * 1000)
    if response.is_success:
        return {"status": "healthy", "message": "FHIR server is reachable", "latencyMs": latency}
    return {
        "status": "degraded",
        "message": f"FHIR server returned {response.status_code}",
        "latencyMs": latency,
    }


async def check_readiness(
    transport: Optional[httpx.AsyncBaseTransport] = None,
    base_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Ready unless the configured FHIR server is unreachable."""
    base_url = settings.FHIR_BASE_URL if base_url is None else base_url
    checks: Dict[str, Any] = {}
    if base_url:
        checks["fhirServer"] = await check_fhir_server(base_url, transport=transport)

    ready = all(c["status"] != "unhealthy" for c in checks.values())
    return {
        "status": "ready" if ready else "not_ready",
        "service": settings.SERVICE_NAME,
        "timestamp": _now_iso(),
        "checks": checks,
    }
