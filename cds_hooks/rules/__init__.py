# -*- coding: utf-8 -*-
"""
Rule engines.

Each module exposes pure, synchronous ``check_*`` functions that take typed
clinical records (see ``cds_hooks.core.resources``) and return fresh
``Issue`` or ``Recommendation`` records. They share no state and do no I/O.
"""

from cds_hooks.rules.issues import Issue, Recommendation, SuggestedFix
from cds_hooks.rules.allergy import check_allergy_conflicts
from cds_hooks.rules.interactions import check_drug_interactions
from cds_hooks.rules.contraindications import check_contraindications
from cds_hooks.rules.duplicates import check_duplicate_medications, check_duplicate_draft_orders
from cds_hooks.rules.renal import check_renal_dosing, has_renal_impairment
from cds_hooks.rules.prerequisites import check_missing_prerequisites
from cds_hooks.rules.care_plan import (
    condition_recommendations,
    missing_vitals_recommendation,
    screening_recommendations,
    generate_recommendations,
)

__all__ = [
    "Issue",
    "Recommendation",
    "SuggestedFix",
    "check_allergy_conflicts",
    "check_drug_interactions",
    "check_contraindications",
    "check_duplicate_medications",
    "check_duplicate_draft_orders",
    "check_renal_dosing",
    "has_renal_impairment",
    "check_missing_prerequisites",
    "condition_recommendations",
    "missing_vitals_recommendation",
    "screening_recommendations",
    "generate_recommendations",
]
