# -*- coding: utf-8 -*-
"""Allergy and cross-reactivity conflict detection."""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from cds_hooks.config.clinical_rules import CROSS_REACTIVITY
from cds_hooks.config.constants import INDICATOR_CRITICAL, SOURCE_LABELS
from cds_hooks.core.resources import Allergy, MedicationOrder
from cds_hooks.rules.issues import ALLERGY, Issue, delete_fix
from cds_hooks.rules.matching import names_match, normalize

__all__ = ["check_allergy_conflicts", "cross_reactive_tokens"]

_INACTIVE = ("inactive", "resolved")


def cross_reactive_tokens(
    allergy_token: str,
    table: Mapping[str, Sequence[str]] = CROSS_REACTIVITY,
) -> List[str]:
    """Normalized tokens known to cross-react with an allergen.

    Only a table key equal to the allergen token contributes.
    """
    out: List[str] = []
    for key, related in table.items():
        if normalize(key) and normalize(key) == allergy_token:
            for drug in related:
                token = normalize(drug)
                if token and token != allergy_token and token not in out:
                    out.append(token)
    return out


def _match_allergy(
    med_token: str,
    allergy_token: str,
    table: Mapping[str, Sequence[str]],
) -> Optional[bool]:
    """True on direct match, False on cross-reactive match, None otherwise."""
    if names_match(med_token, allergy_token):
        return True
    for token in cross_reactive_tokens(allergy_token, table):
        if names_match(med_token, token):
            return False
    return None


def check_allergy_conflicts(
    medications: Iterable[MedicationOrder],
    allergies: Iterable[Allergy],
    source: Optional[Dict[str, str]] = None,
    table: Mapping[str, Sequence[str]] = CROSS_REACTIVITY,
) -> List[Issue]:
    """
    Flag ordered medications that conflict with an active allergy.

    Args:
        medications: Draft/prescribed medication orders
        allergies: Patient allergies; inactive or resolved entries are ignored
        source: Card source attribution (defaults to medication safety)
        table: Cross-reactivity table, allergen -> related drugs

    Returns:
        At most one critical issue per medication-allergy pair
    """
    source = source or {"label": SOURCE_LABELS["MEDICATION_SAFETY"]}
    active: List[Tuple[Allergy, str]] = [
        (a, normalize(a.display))
        for a in allergies
        if a.clinical_status not in _INACTIVE and normalize(a.display)
    ]
    issues: List[Issue] = []

    for med in medications:
        med_token = normalize(med.display)
        if not med_token:
            continue
        for allergy, allergy_token in active:
            direct = _match_allergy(med_token, allergy_token, table)
            if direct is None:
                continue
            if direct:
                issues.append(Issue(
                    subject=med.reference,
                    subject_display=med.display,
                    category=ALLERGY,
                    severity=INDICATOR_CRITICAL,
                    title=f"Allergy Alert: {med.display}",
                    description=(
                        f"Patient has a documented allergy to {allergy.display}. "
                        "This medication may cause an allergic reaction."
                    ),
                    rationale=(
                        "Prescribing medications that directly match documented allergies "
                        "can cause severe adverse reactions including anaphylaxis."
                    ),
                    suggestion=delete_fix(
                        "Remove medication with allergy concern",
                        f"Remove {med.display} due to allergy",
                        med.reference,
                    ),
                    source=source,
                ))
            else:
                issues.append(Issue(
                    subject=med.reference,
                    subject_display=med.display,
                    category=ALLERGY,
                    severity=INDICATOR_CRITICAL,
                    title=f"Cross-Reactive Allergy Alert: {med.display}",
                    description=(
                        f"Patient has an allergy to {allergy.display}. {med.display} may have "
                        "cross-reactivity and could cause an allergic reaction."
                    ),
                    rationale="Cross-reactive allergies can occur between medications in the same drug class.",
                    suggestion=delete_fix(
                        "Remove medication with cross-reactive allergy concern",
                        f"Remove {med.display} due to cross-reactive allergy",
                        med.reference,
                    ),
                    source=source,
                ))

    return issues
