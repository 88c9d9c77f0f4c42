# -*- coding: utf-8 -*-
"""patient-view hook: care plan recommendations when a chart is opened."""

import logging
from datetime import date
from typing import Optional

import httpx

from cds_hooks.assemblers.response import ResponseAssembler
from cds_hooks.builders.issue import recommendation_to_card
from cds_hooks.config import settings
from cds_hooks.config.services import PATIENT_VIEW_SERVICE
from cds_hooks.core.cards import HookResponse
from cds_hooks.core.models import HookRequest
from cds_hooks.rules.care_plan import generate_recommendations
from cds_hooks.services.prefetch import (
    build_hook_context,
    create_prefetch_warning_card,
    should_add_prefetch_warning,
)
from cds_hooks.utils.type_guards import extract_conditions, extract_observations, extract_patient

logger = logging.getLogger(__name__)


async def handle_patient_view(
    request: HookRequest,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    max_cards: Optional[int] = None,
    today: Optional[date] = None,
) -> HookResponse:
    ctx = await build_hook_context(request, PATIENT_VIEW_SERVICE.id, transport=transport)
    prefetch = ctx.prefetch

    patient = extract_patient(prefetch)
    conditions = extract_conditions(prefetch)
    # Unresolved observations must not read as "no vitals on record"
    observations = extract_observations(prefetch) if prefetch.get("observations") is not None else None

    recommendations = generate_recommendations(patient, conditions, observations, today=today)
    logger.debug("patient-view produced %d recommendations", len(recommendations))

    assembler = ResponseAssembler(max_cards=max_cards or settings.MAX_CARDS)
    if should_add_prefetch_warning(ctx):
        assembler.add_card(create_prefetch_warning_card(ctx.warnings))
    for rec in recommendations:
        assembler.add_card(recommendation_to_card(rec))
    return assembler.build()
