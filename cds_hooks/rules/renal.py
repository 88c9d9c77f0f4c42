# -*- coding: utf-8 -*-
"""Renal dosing caution based on creatinine / eGFR lab values."""

from typing import Dict, Iterable, List, Optional, Sequence

from cds_hooks.config.clinical_rules import (
    CREATININE_IMPAIRMENT_THRESHOLD,
    EGFR_IMPAIRMENT_THRESHOLD,
    RENALLY_CLEARED_MEDICATIONS,
)
from cds_hooks.config.constants import (
    INDICATOR_WARNING,
    LOINC_CREATININE,
    LOINC_EGFR_CODES,
    SOURCE_LABELS,
)
from cds_hooks.core.resources import LabObservation, MedicationOrder
from cds_hooks.rules.issues import RENAL_CAUTION, Issue
from cds_hooks.rules.matching import first_match, normalize

__all__ = ["classify_renal_lab", "find_renal_impairment", "has_renal_impairment", "check_renal_dosing"]

EGFR = "egfr"
CREATININE = "creatinine"


def _labels(obs: LabObservation) -> List[str]:
    labels = [c.display.lower() for c in obs.codings if c.display]
    if obs.text:
        labels.append(obs.text.lower())
    return labels


def classify_renal_lab(obs: LabObservation) -> Optional[str]:
    """'egfr', 'creatinine' or None. eGFR is checked first since its
    labels usually mention creatinine too."""
    codes = {c.code for c in obs.codings if c.code}
    labels = _labels(obs)
    if codes.intersection(LOINC_EGFR_CODES) or any("egfr" in label or "glomerular" in label for label in labels):
        return EGFR
    if LOINC_CREATININE in codes or any("creatinine" in label for label in labels):
        return CREATININE
    return None


def find_renal_impairment(labs: Iterable[LabObservation]) -> Optional[LabObservation]:
    """First reading showing impairment (eGFR < 60 or creatinine > 1.5)."""
    for obs in labs:
        if obs.value is None:
            continue
        kind = classify_renal_lab(obs)
        if kind == EGFR and obs.value < EGFR_IMPAIRMENT_THRESHOLD:
            return obs
        if kind == CREATININE and obs.value > CREATININE_IMPAIRMENT_THRESHOLD:
            return obs
    return None


def has_renal_impairment(labs: Iterable[LabObservation]) -> bool:
    return find_renal_impairment(labs) is not None


def check_renal_dosing(
    medications: Iterable[MedicationOrder],
    labs: Iterable[LabObservation],
    source: Optional[Dict[str, str]] = None,
    renal_medications: Sequence[str] = RENALLY_CLEARED_MEDICATIONS,
) -> List[Issue]:
    source = source or {"label": SOURCE_LABELS["MEDICATION_SAFETY"]}
    if not has_renal_impairment(labs):
        return []

    issues: List[Issue] = []
    for med in medications:
        if first_match(normalize(med.display), renal_medications) is None:
            continue
        issues.append(Issue(
            subject=med.reference,
            subject_display=med.display,
            category=RENAL_CAUTION,
            severity=INDICATOR_WARNING,
            title=f"Renal Dosing: {med.display}",
            description=(
                f"Patient has renal impairment. {med.display} may require dose adjustment "
                "based on kidney function."
            ),
            rationale=(
                "Many medications are cleared by the kidneys and require dose adjustment "
                "in renal impairment to prevent toxicity."
            ),
            source=source,
        ))
    return issues
