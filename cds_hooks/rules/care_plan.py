# -*- coding: utf-8 -*-
"""
Care-plan recommendations for the patient-view hook.

Condition rules are matched by code system family and code: ICD-10 codes by
prefix ("E11.9" falls under "E1"), SNOMED CT concepts exactly. The first
matching rule wins for each active condition.
"""

from datetime import date
from typing import List, Optional, Sequence

from cds_hooks.config.clinical_rules import (
    CODE_SYSTEM_ICD10,
    CODE_SYSTEM_SNOMED,
    CONDITION_RULES,
    MISSING_VITALS_DESCRIPTION,
    MISSING_VITALS_TITLE,
    SCREENING_RULES,
    ConditionRule,
    ScreeningRule,
)
from cds_hooks.config.constants import INDICATOR_INFO, SOURCE_LABELS
from cds_hooks.core.resources import CodingRef, ConditionRecord, LabObservation, PatientDemographics
from cds_hooks.rules.issues import Recommendation

__all__ = [
    "code_system_family",
    "match_condition_rule",
    "condition_recommendations",
    "missing_vitals_recommendation",
    "patient_age",
    "screening_recommendations",
    "generate_recommendations",
]


def code_system_family(system: Optional[str]) -> Optional[str]:
    s = (system or "").lower()
    if "icd-10" in s or "icd10" in s:
        return CODE_SYSTEM_ICD10
    if "snomed" in s:
        return CODE_SYSTEM_SNOMED
    return None


def match_condition_rule(
    coding: Optional[CodingRef],
    rules: Sequence[ConditionRule] = CONDITION_RULES,
) -> Optional[ConditionRule]:
    if coding is None or not coding.code:
        return None
    family = code_system_family(coding.system)
    if family is None:
        return None
    code = coding.code.upper()
    for rule in rules:
        if rule.code_system != family:
            continue
        if family == CODE_SYSTEM_ICD10 and code.startswith(rule.code_prefix):
            return rule
        if family == CODE_SYSTEM_SNOMED and code == rule.code_prefix:
            return rule
    return None


def condition_recommendations(
    conditions: Sequence[ConditionRecord],
    rules: Sequence[ConditionRule] = CONDITION_RULES,
) -> List[Recommendation]:
    out: List[Recommendation] = []
    for condition in conditions:
        if not condition.is_active:
            continue
        rule = match_condition_rule(condition.coding, rules)
        if rule is None:
            continue
        display = (condition.coding.display if condition.coding else None) or condition.display
        out.append(Recommendation(
            title=rule.title,
            description=rule.description.format(condition=display),
            indicator=rule.indicator,
            rationale=rule.rationale,
            actions=rule.actions,
            source=rule.source,
            condition_code=condition.coding.code,
            condition_display=display,
        ))
    return out


def missing_vitals_recommendation(observations: Optional[Sequence[LabObservation]]) -> Optional[Recommendation]:
    """None means the observations could not be retrieved, which is not the
    same as an empty record."""
    if observations is None or observations:
        return None
    return Recommendation(
        title=MISSING_VITALS_TITLE,
        description=MISSING_VITALS_DESCRIPTION,
        indicator=INDICATOR_INFO,
        source={"label": SOURCE_LABELS["CARE_PLAN"]},
    )


def patient_age(patient: Optional[PatientDemographics], today: Optional[date] = None) -> Optional[int]:
    """Age in whole years, or None without a usable birth date."""
    if patient is None or patient.birth_date is None:
        return None
    today = today or date.today()
    born = patient.birth_date
    age = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
    return age if age >= 0 else None


def screening_recommendations(
    patient: Optional[PatientDemographics],
    today: Optional[date] = None,
    rules: Sequence[ScreeningRule] = SCREENING_RULES,
) -> List[Recommendation]:
    age = patient_age(patient, today)
    if age is None:
        return []
    out: List[Recommendation] = []
    for rule in rules:
        if not rule.min_age <= age <= rule.max_age:
            continue
        if rule.gender and (patient.gender or "").lower() != rule.gender:
            continue
        out.append(Recommendation(
            title=rule.title,
            description=rule.description,
            indicator=rule.indicator,
            rationale=rule.rationale,
            source=rule.source,
        ))
    return out


def generate_recommendations(
    patient: Optional[PatientDemographics],
    conditions: Sequence[ConditionRecord],
    observations: Optional[Sequence[LabObservation]],
    today: Optional[date] = None,
) -> List[Recommendation]:
    """All patient-view recommendations: conditions, vitals, screenings."""
    recommendations = condition_recommendations(conditions)
    vitals = missing_vitals_recommendation(observations)
    if vitals is not None:
        recommendations.append(vitals)
    recommendations.extend(screening_recommendations(patient, today))
    return recommendations
