# -*- coding: utf-8 -*-
"""Services module for the CDS Hooks API."""

from cds_hooks.services.fhir_client import FetchResult, FHIRClient, create_fhir_client
from cds_hooks.services.prefetch import (
    PrefetchResult,
    HookContext,
    resolve_prefetch,
    build_hook_context,
    detect_missing_prefetch,
    is_prefetch_incomplete,
    create_prefetch_warning_card,
    should_add_prefetch_warning,
)
from cds_hooks.services.patient_view import handle_patient_view
from cds_hooks.services.order_review import handle_order_review
from cds_hooks.services.medication_prescribe import handle_medication_prescribe
from cds_hooks.services.cds_service import CDSHooksService, get_cds_service
from cds_hooks.services.health import check_health, check_readiness

__all__ = [
    "FetchResult",
    "FHIRClient",
    "create_fhir_client",
    "PrefetchResult",
    "HookContext",
    "resolve_prefetch",
    "build_hook_context",
    "detect_missing_prefetch",
    "is_prefetch_incomplete",
    "create_prefetch_warning_card",
    "should_add_prefetch_warning",
    "handle_patient_view",
    "handle_order_review",
    "handle_medication_prescribe",
    "CDSHooksService",
    "get_cds_service",
    "check_health",
    "check_readiness",
]
