# -*- coding: utf-8 -*-
"""Missing baseline-lab detection for draft medication orders (order-review)."""

from typing import Dict, List, Mapping, Optional, Sequence

from cds_hooks.config.clinical_rules import LAB_PREREQUISITES, LabPrerequisite
from cds_hooks.config.constants import INDICATOR_INFO, LAB_CATEGORY_CODES, SOURCE_LABELS
from cds_hooks.core.resources import MedicationOrder, ServiceOrder
from cds_hooks.fhir_builder import make_lab_order
from cds_hooks.rules.issues import MISSING_PREREQUISITE, Issue, SuggestedFix
from cds_hooks.rules.matching import names_match, normalize

__all__ = ["check_missing_prerequisites", "has_lab_order"]


def _is_lab_order(order: ServiceOrder) -> bool:
    # Uncategorized orders are judged by name alone
    if not order.categories:
        return True
    return any(c.lower() in LAB_CATEGORY_CODES for c in order.categories)


def has_lab_order(lab: str, service_orders: Sequence[ServiceOrder]) -> bool:
    """True if a sibling draft ServiceRequest already orders ``lab``.

    Orders categorized as something other than laboratory never count.
    """
    lab_token = normalize(lab)
    for order in service_orders:
        if not _is_lab_order(order):
            continue
        if lab_token and lab_token in normalize(order.display):
            return True
    return False


def check_missing_prerequisites(
    medication_orders: Sequence[MedicationOrder],
    service_orders: Sequence[ServiceOrder],
    patient_id: Optional[str] = None,
    source: Optional[Dict[str, str]] = None,
    table: Mapping[str, Sequence[LabPrerequisite]] = LAB_PREREQUISITES,
) -> List[Issue]:
    """
    Suggest baseline labs for draft medications that have none in the batch.

    Args:
        medication_orders: Draft MedicationRequests
        service_orders: Draft ServiceRequests of the same batch
        patient_id: Subject of the suggested lab orders
        source: Card source attribution (defaults to order review)
        table: medication -> required baseline labs

    Returns:
        One info issue per missing lab; only the first matching table
        medication is considered for each order
    """
    source = source or {"label": SOURCE_LABELS["ORDER_REVIEW"]}
    issues: List[Issue] = []

    for med in medication_orders:
        med_token = normalize(med.display)
        prerequisites = None
        for medication, labs in table.items():
            if names_match(med_token, normalize(medication)):
                prerequisites = labs
                break
        if not prerequisites:
            continue

        for prereq in prerequisites:
            if has_lab_order(prereq.lab, service_orders):
                continue
            lab_label = prereq.lab.upper()
            issues.append(Issue(
                subject=med.reference,
                subject_display=med.display,
                category=MISSING_PREREQUISITE,
                severity=INDICATOR_INFO,
                title=f"Consider {lab_label} Before {med.display}",
                description=prereq.rationale,
                rationale="Baseline lab values help ensure safe dosing and monitoring.",
                suggestion=SuggestedFix(
                    label=f"Add {lab_label} order",
                    actions=[{
                        "type": "create",
                        "description": f"Add {prereq.lab} lab order",
                        "resource": make_lab_order(prereq.lab, patient_id),
                    }],
                ),
                source=source,
            ))
    return issues
