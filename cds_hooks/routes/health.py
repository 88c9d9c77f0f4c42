# -*- coding: utf-8 -*-
"""Health, readiness and metrics routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from cds_hooks.services.cds_service import CDSHooksService, get_cds_service
from cds_hooks.services.health import check_health, check_readiness
from cds_hooks.utils.metrics import metrics

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness: the process is up."""
    return check_health()


@router.get("/ready")
async def readiness_check(cds: CDSHooksService = Depends(get_cds_service)):
    """Readiness: 503 while the FHIR server is unreachable."""
    readiness = await check_readiness(transport=cds.transport)
    return JSONResponse(status_code=200 if readiness["status"] == "ready" else 503, content=readiness)


@router.get("/metrics")
async def service_metrics():
    return metrics.snapshot()
