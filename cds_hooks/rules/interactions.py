# -*- coding: utf-8 -*-
"""Drug-drug interaction detection."""

from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from cds_hooks.config.clinical_rules import DRUG_INTERACTIONS, InteractionRule
from cds_hooks.config.constants import SOURCE_LABELS
from cds_hooks.core.resources import MedicationOrder
from cds_hooks.rules.issues import INTERACTION, Issue
from cds_hooks.rules.matching import names_match, normalize

__all__ = ["check_drug_interactions", "find_interaction"]


def find_interaction(
    subject_token: str,
    other_token: str,
    table: Sequence[InteractionRule] = DRUG_INTERACTIONS,
) -> Optional[InteractionRule]:
    """First table row matching the pair in either orientation."""
    for rule in table:
        a, b = normalize(rule.drug_a), normalize(rule.drug_b)
        if names_match(subject_token, a) and names_match(other_token, b):
            return rule
        if names_match(subject_token, b) and names_match(other_token, a):
            return rule
    return None


def check_drug_interactions(
    ordered: Sequence[MedicationOrder],
    active: Iterable[MedicationOrder] = (),
    source: Optional[Dict[str, str]] = None,
    table: Sequence[InteractionRule] = DRUG_INTERACTIONS,
) -> List[Issue]:
    """
    Check each ordered medication against every other ordered or active one.

    A pair is reported once per (subject, interacting display) even when
    several table rows match it.
    """
    source = source or {"label": SOURCE_LABELS["MEDICATION_SAFETY"]}
    combined = list(ordered) + list(active)
    seen: Set[Tuple[int, str]] = set()
    issues: List[Issue] = []

    for med in ordered:
        med_token = normalize(med.display)
        for other in combined:
            if other is med:
                continue
            key = (id(med), other.display)
            if key in seen:
                continue
            rule = find_interaction(med_token, normalize(other.display), table)
            if rule is None:
                continue
            seen.add(key)
            issues.append(Issue(
                subject=med.reference,
                subject_display=med.display,
                category=INTERACTION,
                severity=rule.severity,
                title=f"Drug Interaction: {med.display} + {other.display}",
                description=rule.description,
                rationale=rule.mechanism,
                interacting=other.display,
                source=source,
            ))

    return issues
