# -*- coding: utf-8 -*-
"""Condition-based contraindication detection (ICD-10 prefix table)."""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from cds_hooks.config.clinical_rules import CONDITION_CONTRAINDICATIONS, ContraindicationRule
from cds_hooks.config.constants import SOURCE_LABELS
from cds_hooks.core.resources import ConditionRecord, MedicationOrder
from cds_hooks.rules.issues import CONTRAINDICATION, Issue
from cds_hooks.rules.matching import names_match, normalize

__all__ = ["check_contraindications", "active_condition_prefixes"]

PREFIX_LENGTH = 3


def active_condition_prefixes(conditions: Iterable[ConditionRecord]) -> Dict[str, ConditionRecord]:
    """Map 3-character code prefix -> first active condition carrying it."""
    out: Dict[str, ConditionRecord] = {}
    for condition in conditions:
        if not condition.is_active or condition.coding is None or not condition.coding.code:
            continue
        prefix = condition.coding.code[:PREFIX_LENGTH].upper()
        out.setdefault(prefix, condition)
    return out


def check_contraindications(
    medications: Iterable[MedicationOrder],
    conditions: Iterable[ConditionRecord],
    source: Optional[Dict[str, str]] = None,
    table: Mapping[str, Sequence[ContraindicationRule]] = CONDITION_CONTRAINDICATIONS,
) -> List[Issue]:
    """One issue per (condition prefix, medication); first matching token wins."""
    source = source or {"label": SOURCE_LABELS["MEDICATION_SAFETY"]}
    prefixes = active_condition_prefixes(conditions)
    issues: List[Issue] = []
    if not prefixes:
        return issues

    for med in medications:
        med_token = normalize(med.display)
        for prefix, rules in table.items():
            condition = prefixes.get(prefix)
            if condition is None:
                continue
            hit = _first_rule_hit(med_token, rules)
            if hit is None:
                continue
            issues.append(Issue(
                subject=med.reference,
                subject_display=med.display,
                category=CONTRAINDICATION,
                severity=hit.severity,
                title=f"Contraindication: {med.display}",
                description=f"{hit.description}. Patient has {condition.display}.",
                rationale=(
                    "This medication may be contraindicated or require dose adjustment "
                    "given the patient's medical conditions."
                ),
                source=source,
            ))
    return issues


def _first_rule_hit(med_token: str, rules: Sequence[ContraindicationRule]) -> Optional[ContraindicationRule]:
    for rule in rules:
        for token in rule.medications:
            if names_match(med_token, normalize(token)):
                return rule
    return None
