# -*- coding: utf-8 -*-
"""CDS Hooks service dispatcher: discovery, invocation, timing and metrics."""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from cds_hooks.config import settings
from cds_hooks.config.services import (
    MEDICATION_PRESCRIBE_SERVICE,
    ORDER_REVIEW_SERVICE,
    PATIENT_VIEW_SERVICE,
    SERVICES,
    service_by_id,
)
from cds_hooks.core.cards import HookResponse
from cds_hooks.core.models import HookRequest, ServiceDefinition
from cds_hooks.services.medication_prescribe import handle_medication_prescribe
from cds_hooks.services.order_review import handle_order_review
from cds_hooks.services.patient_view import handle_patient_view
from cds_hooks.utils.metrics import metrics

__all__ = [
    "UnknownServiceError",
    "HookMismatchError",
    "CDSHooksService",
    "get_cds_service",
]

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[HookResponse]]

HANDLERS: Dict[str, Handler] = {
    PATIENT_VIEW_SERVICE.id: handle_patient_view,
    ORDER_REVIEW_SERVICE.id: handle_order_review,
    MEDICATION_PRESCRIBE_SERVICE.id: handle_medication_prescribe,
}


class UnknownServiceError(LookupError):
    def __init__(self, service_id: str):
        self.service_id = service_id
        super().__init__(f"CDS service '{service_id}' not found")


class HookMismatchError(ValueError):
    def __init__(self, service: ServiceDefinition, hook: str):
        self.service = service
        self.hook = hook
        super().__init__(
            f"Service '{service.id}' handles '{service.hook}' hooks, not '{hook}'"
        )


class CDSHooksService:
    """
    Entry point used by the routes.

    ``transport`` is handed to every upstream FHIR client; leave it None in
    production and plug an ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_cards: Optional[int] = None,
    ):
        self.transport = transport
        self.max_cards = max_cards or settings.MAX_CARDS

    def discovery(self) -> Dict[str, Any]:
        return {"services": [s.model_dump() for s in SERVICES]}

    def get_service(self, service_id: str) -> ServiceDefinition:
        service = service_by_id(service_id)
        if service is None:
            logger.info("Unknown CDS service requested: %s", service_id)
            raise UnknownServiceError(service_id)
        return service

    async def invoke(self, service_id: str, request: HookRequest) -> HookResponse:
        """
        Run one hook invocation.

        Args:
            service_id: Service id from the URL path
            request: Validated hook request

        Returns:
            HookResponse (cards sorted and capped)

        Raises:
            UnknownServiceError: no such service
            HookMismatchError: request.hook does not match the service
        """
        service = self.get_service(service_id)
        if request.hook != service.hook:
            raise HookMismatchError(service, request.hook)

        metrics.record_request(service.hook)
        start = time.perf_counter()

        response = await HANDLERS[service.id](
            request, transport=self.transport, max_cards=self.max_cards
        )

        duration_ms = (time.perf_counter() - start) * 1000.0
        counts = {"critical": 0, "warning": 0, "info": 0}
        for card in response.cards:
            counts[card.indicator] += 1
        metrics.record_response_time(service.hook, duration_ms)
        metrics.record_cards(**counts)

        logger.info(
            "hook=%s service=%s hookInstance=%s cards=%d (critical=%d warning=%d info=%d) %.1fms",
            service.hook, service.id, request.hookInstance, len(response.cards),
            counts["critical"], counts["warning"], counts["info"], duration_ms,
        )
        if duration_ms > settings.RESPONSE_TIME_TARGET_MS:
            logger.warning(
                "Slow CDS response for %s: %.0fms (target %dms)",
                service.id, duration_ms, settings.RESPONSE_TIME_TARGET_MS,
            )
        return response


_service: Optional[CDSHooksService] = None


def get_cds_service() -> CDSHooksService:
    """Process-wide service instance (FastAPI dependency)."""
    global _service
    if _service is None:
        _service = CDSHooksService()
    return _service
