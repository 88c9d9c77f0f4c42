# -*- coding: utf-8 -*-
"""Duplicate medication detection by coding (system + code)."""

from typing import Dict, Iterable, List, Optional, Sequence

from cds_hooks.config.constants import INDICATOR_WARNING, SOURCE_LABELS
from cds_hooks.core.resources import MedicationOrder
from cds_hooks.rules.issues import DUPLICATE, Issue, delete_fix

__all__ = ["check_duplicate_medications", "check_duplicate_draft_orders"]

_RATIONALE = "Prescribing duplicate medications may lead to dosing errors or unintended polypharmacy."


def check_duplicate_medications(
    ordered: Iterable[MedicationOrder],
    active: Sequence[MedicationOrder],
    source: Optional[Dict[str, str]] = None,
) -> List[Issue]:
    """Ordered medications whose coding already appears on the active list."""
    source = source or {"label": SOURCE_LABELS["MEDICATION_SAFETY"]}
    active_keys = {m.coding_key for m in active if m.coding_key is not None}
    issues: List[Issue] = []

    for med in ordered:
        if med.coding_key is None or med.coding_key not in active_keys:
            continue
        issues.append(Issue(
            subject=med.reference,
            subject_display=med.display,
            category=DUPLICATE,
            severity=INDICATOR_WARNING,
            title=f"Duplicate Medication: {med.display}",
            description="This medication is already on the patient's active medication list.",
            rationale=_RATIONALE,
            suggestion=delete_fix(
                "Remove duplicate prescription",
                f"Remove duplicate {med.display}",
                med.reference,
            ),
            source=source,
        ))
    return issues


def check_duplicate_draft_orders(
    ordered: Sequence[MedicationOrder],
    source: Optional[Dict[str, str]] = None,
) -> List[Issue]:
    """Same-coded orders inside one draft batch.

    Each group is reported once, on the order with the smallest id; orders
    without an id are never chosen as the reported one.
    """
    source = source or {"label": SOURCE_LABELS["ORDER_REVIEW"]}
    issues: List[Issue] = []

    for med in ordered:
        if med.coding_key is None or not med.id:
            continue
        siblings = [o for o in ordered if o is not med and o.coding_key == med.coding_key]
        if not siblings:
            continue
        if any(o.id <= med.id for o in siblings if o.id):
            continue
        issues.append(Issue(
            subject=med.reference,
            subject_display=med.display,
            category=DUPLICATE,
            severity=INDICATOR_WARNING,
            title=f"Duplicate Orders in Draft: {med.display}",
            description=(
                "Multiple orders for the same medication are in the draft order set. "
                "Please review and consolidate."
            ),
            rationale=_RATIONALE,
            suggestion=delete_fix(
                "Remove duplicate order",
                f"Remove duplicate draft order for {med.display}",
                med.reference,
            ),
            source=source,
        ))
    return issues
