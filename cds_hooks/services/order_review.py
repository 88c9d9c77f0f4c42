# -*- coding: utf-8 -*-
"""order-review hook: safety and completeness checks on a draft order set."""

import logging
from typing import List, Optional

import httpx

from cds_hooks.assemblers.response import ResponseAssembler
from cds_hooks.builders.issue import ORDER_LABEL, issue_to_card
from cds_hooks.config import settings
from cds_hooks.config.constants import SOURCE_LABELS
from cds_hooks.config.services import ORDER_REVIEW_SERVICE
from cds_hooks.core.cards import HookResponse
from cds_hooks.core.models import HookRequest
from cds_hooks.rules import (
    Issue,
    check_allergy_conflicts,
    check_contraindications,
    check_drug_interactions,
    check_duplicate_draft_orders,
    check_duplicate_medications,
    check_missing_prerequisites,
)
from cds_hooks.services.prefetch import (
    build_hook_context,
    create_prefetch_warning_card,
    should_add_prefetch_warning,
)
from cds_hooks.utils.type_guards import (
    extract_allergies,
    extract_conditions,
    extract_draft_orders,
    extract_medications,
)

logger = logging.getLogger(__name__)


async def handle_order_review(
    request: HookRequest,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    max_cards: Optional[int] = None,
) -> HookResponse:
    ctx = await build_hook_context(request, ORDER_REVIEW_SERVICE.id, transport=transport)
    prefetch = ctx.prefetch

    medication_orders, service_orders = extract_draft_orders(request.context)
    active = extract_medications(prefetch)
    allergies = extract_allergies(prefetch)
    conditions = extract_conditions(prefetch)
    source = {"label": SOURCE_LABELS["ORDER_REVIEW"]}

    issues: List[Issue] = []
    issues += check_duplicate_medications(medication_orders, active, source=source)
    issues += check_duplicate_draft_orders(medication_orders, source=source)
    issues += check_allergy_conflicts(medication_orders, allergies, source=source)
    issues += check_missing_prerequisites(
        medication_orders, service_orders, patient_id=request.context.get("patientId"), source=source
    )
    issues += check_contraindications(medication_orders, conditions, source=source)
    issues += check_drug_interactions(medication_orders, active, source=source)
    logger.debug(
        "order-review checked %d medication and %d service orders: %d issues",
        len(medication_orders), len(service_orders), len(issues),
    )

    assembler = ResponseAssembler(max_cards=max_cards or settings.MAX_CARDS)
    if should_add_prefetch_warning(ctx):
        assembler.add_card(create_prefetch_warning_card(ctx.warnings))
    for issue in issues:
        assembler.add_card(issue_to_card(issue, subject_label=ORDER_LABEL))
    return assembler.build()
