# -*- coding: utf-8 -*-
"""Internal issue and recommendation records produced by the rule engines."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from cds_hooks.config.clinical_rules import RecommendedAction

# Issue categories
ALLERGY = "allergy"
INTERACTION = "interaction"
CONTRAINDICATION = "contraindication"
DUPLICATE = "duplicate"
RENAL_CAUTION = "renal-caution"
MISSING_PREREQUISITE = "missing-prerequisite"
CARE_PLAN = "care-plan"


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class SuggestedFix:
    """Remediation attached to an issue: one label, one or more raw actions."""

    label: str
    actions: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class Issue:
    subject: str           # reference of the order/medication concerned
    subject_display: str
    category: str
    severity: str
    title: str
    description: str
    rationale: Optional[str] = None
    interacting: Optional[str] = None
    suggestion: Optional[SuggestedFix] = None
    source: Optional[Dict[str, str]] = None
    id: str = field(default_factory=new_id)


@dataclass
class Recommendation:
    title: str
    description: str
    indicator: str
    rationale: Optional[str] = None
    actions: Tuple[RecommendedAction, ...] = ()
    source: Optional[Dict[str, str]] = None
    condition_code: Optional[str] = None
    condition_display: Optional[str] = None
    id: str = field(default_factory=new_id)


def delete_fix(label: str, description: str, resource_id: str) -> SuggestedFix:
    return SuggestedFix(
        label=label,
        actions=[{"type": "delete", "description": description, "resourceId": resource_id}],
    )
