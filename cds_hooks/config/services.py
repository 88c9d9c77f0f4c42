# -*- coding: utf-8 -*-
"""Static service definitions advertised by the discovery endpoint."""

from typing import List, Optional

from cds_hooks.config.constants import (
    HOOK_MEDICATION_PRESCRIBE,
    HOOK_ORDER_REVIEW,
    HOOK_PATIENT_VIEW,
)
from cds_hooks.core.models import ServiceDefinition

__all__ = [
    "PATIENT_VIEW_SERVICE",
    "ORDER_REVIEW_SERVICE",
    "MEDICATION_PRESCRIBE_SERVICE",
    "SERVICES",
    "service_by_id",
    "services_by_hook",
]

# ========= Prefetch templates =========

_PATIENT = "Patient/{{context.patientId}}"
_CONDITIONS = "Condition?patient={{context.patientId}}&clinical-status=active"
_MEDICATIONS = "MedicationRequest?patient={{context.patientId}}&status=active"
_ALLERGIES = "AllergyIntolerance?patient={{context.patientId}}&clinical-status=active"
_VITALS = "Observation?patient={{context.patientId}}&category=vital-signs&_sort=-date&_count=10"
_LABS = "Observation?patient={{context.patientId}}&category=laboratory&_sort=-date&_count=20"

# ========= Services =========

PATIENT_VIEW_SERVICE = ServiceDefinition(
    id="prism-patient-view",
    hook=HOOK_PATIENT_VIEW,
    title="Prism Care Plan Recommendations",
    description=(
        "Provides care plan recommendations and clinical decision support "
        "when viewing a patient chart."
    ),
    prefetch={
        "patient": _PATIENT,
        "conditions": _CONDITIONS,
        "medications": _MEDICATIONS,
        "observations": _VITALS,
    },
)

ORDER_REVIEW_SERVICE = ServiceDefinition(
    id="prism-order-review",
    hook=HOOK_ORDER_REVIEW,
    title="Prism Order Review",
    description="Reviews pending orders for alignment with care plans and clinical guidelines.",
    prefetch={
        "patient": _PATIENT,
        "conditions": _CONDITIONS,
        "allergies": _ALLERGIES,
        "medications": _MEDICATIONS,
    },
)

MEDICATION_PRESCRIBE_SERVICE = ServiceDefinition(
    id="prism-medication-prescribe",
    hook=HOOK_MEDICATION_PRESCRIBE,
    title="Prism Medication Safety Check",
    description="Checks prescribed medications for interactions, allergies, and contraindications.",
    prefetch={
        "patient": _PATIENT,
        "allergies": _ALLERGIES,
        "medications": _MEDICATIONS,
        "conditions": _CONDITIONS,
        "labResults": _LABS,
    },
)

SERVICES: List[ServiceDefinition] = [
    PATIENT_VIEW_SERVICE,
    ORDER_REVIEW_SERVICE,
    MEDICATION_PRESCRIBE_SERVICE,
]

_BY_ID = {s.id: s for s in SERVICES}


def service_by_id(service_id: str) -> Optional[ServiceDefinition]:
    return _BY_ID.get(service_id)


def services_by_hook(hook: str) -> List[ServiceDefinition]:
    return [s for s in SERVICES if s.hook == hook]
