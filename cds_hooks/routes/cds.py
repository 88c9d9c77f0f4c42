# -*- coding: utf-8 -*-
"""CDS Hooks discovery and invocation routes."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from cds_hooks.core.models import HookRequest, validate_context, validation_messages
from cds_hooks.services.cds_service import (
    CDSHooksService,
    HookMismatchError,
    UnknownServiceError,
    get_cds_service,
)
from cds_hooks.utils.metrics import metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cds-services")


def error_response(status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message, **extra})


@router.get("")
async def discovery(cds: CDSHooksService = Depends(get_cds_service)):
    """List every CDS service this server provides."""
    return cds.discovery()


@router.get("/{service_id}")
async def get_service(service_id: str, cds: CDSHooksService = Depends(get_cds_service)):
    try:
        return cds.get_service(service_id).model_dump()
    except UnknownServiceError as e:
        return error_response(404, "not_found", str(e))


@router.post("/{service_id}")
async def invoke_service(
    service_id: str,
    payload: Dict[str, Any] = Body(...),
    cds: CDSHooksService = Depends(get_cds_service),
):
    """
    Invoke a CDS service.

    Args:
        service_id: Service id from discovery
        payload: CDS Hooks request body

    Returns:
        {"cards": [...]} plus "systemActions" when there are any
    """
    try:
        service = cds.get_service(service_id)
    except UnknownServiceError as e:
        metrics.record_error("not_found")
        return error_response(404, "not_found", str(e))

    try:
        request = HookRequest.model_validate(payload)
    except ValidationError as e:
        metrics.record_error("validation")
        return error_response(
            400, "invalid_request", "Invalid CDS Hooks request",
            validationErrors=validation_messages(e),
        )

    if request.hook != service.hook:
        metrics.record_error("hook_mismatch")
        return error_response(400, "invalid_request", str(HookMismatchError(service, request.hook)))

    try:
        validate_context(request.hook, request.context)
    except ValidationError as e:
        metrics.record_error("validation")
        return error_response(
            400, "invalid_request", f"Invalid context for hook '{request.hook}'",
            validationErrors=[f"context.{m}" for m in validation_messages(e)],
        )

    try:
        response = await cds.invoke(service_id, request)
    except Exception:
        logger.exception("CDS service '%s' failed for hookInstance %s", service_id, request.hookInstance)
        metrics.record_error("internal")
        return error_response(500, "internal_error", "An unexpected error occurred")

    return response.to_dict()
