# -*- coding: utf-8 -*-
"""medication-prescribe hook: medication safety checks at prescribing time."""

import logging
from typing import List, Optional

import httpx

from cds_hooks.assemblers.response import ResponseAssembler
from cds_hooks.builders.issue import issue_to_card
from cds_hooks.config import settings
from cds_hooks.config.services import MEDICATION_PRESCRIBE_SERVICE
from cds_hooks.core.cards import HookResponse
from cds_hooks.core.models import HookRequest
from cds_hooks.rules import (
    Issue,
    check_allergy_conflicts,
    check_contraindications,
    check_drug_interactions,
    check_duplicate_medications,
    check_renal_dosing,
)
from cds_hooks.services.prefetch import (
    build_hook_context,
    create_prefetch_warning_card,
    should_add_prefetch_warning,
)
from cds_hooks.utils.type_guards import (
    extract_allergies,
    extract_conditions,
    extract_medications,
    extract_observations,
    extract_prescribed_medications,
)

logger = logging.getLogger(__name__)


async def handle_medication_prescribe(
    request: HookRequest,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    max_cards: Optional[int] = None,
) -> HookResponse:
    ctx = await build_hook_context(request, MEDICATION_PRESCRIBE_SERVICE.id, transport=transport)
    prefetch = ctx.prefetch

    prescribed = extract_prescribed_medications(request.context)
    active = extract_medications(prefetch)
    allergies = extract_allergies(prefetch)
    conditions = extract_conditions(prefetch)
    labs = extract_observations(prefetch, "labResults")

    # Allergies first; the assembler re-sorts by severity anyway
    issues: List[Issue] = []
    issues += check_allergy_conflicts(prescribed, allergies)
    issues += check_drug_interactions(prescribed, active)
    issues += check_contraindications(prescribed, conditions)
    issues += check_duplicate_medications(prescribed, active)
    issues += check_renal_dosing(prescribed, labs)
    logger.debug("medication-prescribe checked %d medications: %d issues", len(prescribed), len(issues))

    assembler = ResponseAssembler(max_cards=max_cards or settings.MAX_CARDS)
    if should_add_prefetch_warning(ctx):
        assembler.add_card(create_prefetch_warning_card(ctx.warnings))
    for issue in issues:
        assembler.add_card(issue_to_card(issue))
    return assembler.build()
