# -*- coding: utf-8 -*-
"""
Prefetch resolution.

Combines what the EHR already sent in ``prefetch`` with what can be fetched
from its FHIR server. Every key declared by the service ends up in the result;
None means the key could not be resolved.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import httpx

from cds_hooks.builders.card import create_info_card
from cds_hooks.config.constants import PREFETCH_TOKEN_REGEX, SOURCE_LABELS
from cds_hooks.config.services import service_by_id
from cds_hooks.core.cards import Card
from cds_hooks.core.models import HookRequest, ServiceDefinition
from cds_hooks.services.fhir_client import FetchResult, FHIRClient

__all__ = [
    "PrefetchResult",
    "HookContext",
    "substitute_context",
    "detect_missing_prefetch",
    "is_prefetch_incomplete",
    "resolve_prefetch",
    "build_hook_context",
    "create_prefetch_warning_card",
    "should_add_prefetch_warning",
]

logger = logging.getLogger(__name__)

PREFETCH_WARNING_SUMMARY = "Data fetch warning"


@dataclass
class PrefetchResult:
    data: Dict[str, Any]
    errors: Dict[str, str] = field(default_factory=dict)
    complete: bool = False


@dataclass
class HookContext:
    request: HookRequest
    prefetch: Dict[str, Any]
    warnings: List[str] = field(default_factory=list)
    complete: bool = False


def substitute_context(template: str, context: Mapping[str, Any]) -> str:
    """Fill ``{{context.x}}`` placeholders; unknown/None fields become ''."""
    def _sub(m):
        value = (context or {}).get(m.group(1))
        return "" if value is None else str(value)
    return PREFETCH_TOKEN_REGEX.sub(_sub, template)


def detect_missing_prefetch(request: HookRequest, service: ServiceDefinition) -> List[str]:
    """Declared keys the caller did not send, or sent as null."""
    provided = request.prefetch or {}
    return [key for key in service.prefetch if provided.get(key) is None]


def is_prefetch_incomplete(request: HookRequest, service: ServiceDefinition) -> bool:
    return bool(detect_missing_prefetch(request, service))


async def _fetch_one(client: FHIRClient, key: str, query: str) -> FetchResult:
    result = await client.fetch(query)
    if not result.success:
        logger.warning("Prefetch key '%s' not resolved: %s", key, result.error)
    return result


async def resolve_prefetch(
    request: HookRequest,
    service_id: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[float] = None,
) -> PrefetchResult:
    """
    Resolve the prefetch data a service needs.

    Args:
        request: Validated hook request
        service_id: Id of the service whose templates apply
        transport: Optional httpx transport (tests plug a MockTransport here)
        timeout: Per-key fetch timeout in seconds (defaults to settings)

    Returns:
        PrefetchResult; an unknown service yields errors["service"]
    """
    service = service_by_id(service_id)
    if service is None:
        logger.warning("Prefetch requested for unknown service '%s'", service_id)
        return PrefetchResult(data={}, errors={"service": f"Unknown service: {service_id}"}, complete=False)

    provided = request.prefetch or {}
    data: Dict[str, Any] = {k: v for k, v in provided.items() if v is not None}
    missing = detect_missing_prefetch(request, service)

    if not missing:
        return PrefetchResult(data=data, complete=True)

    if not request.fhirServer:
        # Nothing to fetch from: incomplete, but not an error
        for key in missing:
            data[key] = None
        return PrefetchResult(data=data, complete=False)

    queries = {key: substitute_context(service.prefetch[key], request.context) for key in missing}
    errors: Dict[str, str] = {}

    async with FHIRClient(
        request.fhirServer,
        authorization=request.fhirAuthorization,
        timeout=timeout,
        transport=transport,
    ) as client:
        results = await asyncio.gather(*(_fetch_one(client, k, q) for k, q in queries.items()))

    for key, result in zip(queries, results):
        if result.success and result.data is not None:
            data[key] = result.data
        else:
            data[key] = None
            errors[key] = result.error or "Unknown fetch error"

    complete = all(v is not None for v in data.values())
    return PrefetchResult(data=data, errors=errors, complete=complete)


async def build_hook_context(
    request: HookRequest,
    service_id: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[float] = None,
) -> HookContext:
    """Resolve prefetch and turn errors/gaps into human-readable warnings."""
    result = await resolve_prefetch(request, service_id, transport=transport, timeout=timeout)

    warnings = [f"Failed to fetch {key}: {error}" for key, error in result.errors.items()]
    if not result.complete:
        still_missing = [k for k, v in result.data.items() if v is None]
        if still_missing:
            warnings.append(f"Missing prefetch data: {', '.join(still_missing)}")

    return HookContext(
        request=request,
        prefetch=result.data,
        warnings=warnings,
        complete=result.complete,
    )


def create_prefetch_warning_card(warnings: List[str]) -> Card:
    """One low-severity card summarizing all data-availability problems."""
    return create_info_card(PREFETCH_WARNING_SUMMARY, SOURCE_LABELS["CDS"], "\n".join(warnings))


def should_add_prefetch_warning(context: HookContext) -> bool:
    return len(context.warnings) > 0
