# -*- coding: utf-8 -*-
"""
Type guards and extraction for FHIR resources.

Prefetch data and hook contexts are plain JSON. Everything here is tolerant:
a missing, null or malformed bundle/resource yields an empty result, never an
exception, so rule engines can run on whatever data is available.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

from cds_hooks.core.resources import (
    Allergy,
    CodingRef,
    ConditionRecord,
    LabObservation,
    MedicationOrder,
    PatientDemographics,
    ServiceOrder,
)

__all__ = [
    "is_fhir_resource",
    "is_fhir_bundle",
    "is_resource_of",
    "extract_resources",
    "first_coding",
    "codeable_concept_text",
    "clinical_status_code",
    "extract_patient",
    "extract_conditions",
    "extract_allergies",
    "extract_medications",
    "extract_observations",
    "extract_prescribed_medications",
    "extract_draft_orders",
    "parse_fhir_date",
]


# --------- Guards ---------
def is_fhir_resource(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and isinstance(value.get("resourceType"), str)
        and len(value["resourceType"]) > 0
    )


def is_fhir_bundle(value: Any) -> bool:
    if not is_fhir_resource(value) or value["resourceType"] != "Bundle":
        return False
    # entry is optional, but if present must be a list
    entry = value.get("entry")
    return entry is None or isinstance(entry, list)


def is_resource_of(value: Any, resource_type: str) -> bool:
    return is_fhir_resource(value) and value["resourceType"] == resource_type


def extract_resources(bundle: Any, resource_type: str) -> List[Dict[str, Any]]:
    """Resources of one type from a bundle; anything else is skipped."""
    if not is_fhir_bundle(bundle):
        return []
    out: List[Dict[str, Any]] = []
    for entry in bundle.get("entry") or []:
        if not isinstance(entry, dict):
            continue
        resource = entry.get("resource")
        if is_resource_of(resource, resource_type):
            out.append(resource)
    return out


# --------- CodeableConcept helpers ---------
def _codings(cc: Any) -> List[Dict[str, Any]]:
    if not isinstance(cc, dict):
        return []
    coding = cc.get("coding")
    if not isinstance(coding, list):
        return []
    return [c for c in coding if isinstance(c, dict)]


def _as_str(x: Any) -> Optional[str]:
    return x if isinstance(x, str) and x else None


def _coding_ref(c: Dict[str, Any]) -> CodingRef:
    return CodingRef(
        system=_as_str(c.get("system")),
        code=_as_str(c.get("code")),
        display=_as_str(c.get("display")),
    )


def first_coding(cc: Any) -> Optional[CodingRef]:
    codings = _codings(cc)
    return _coding_ref(codings[0]) if codings else None


def codeable_concept_text(cc: Any) -> Optional[str]:
    """Prefer ``text``, fall back to the first coding's display."""
    if not isinstance(cc, dict):
        return None
    text = _as_str(cc.get("text"))
    if text:
        return text
    coding = first_coding(cc)
    return coding.display if coding else None


def clinical_status_code(resource: Dict[str, Any]) -> Optional[str]:
    coding = first_coding(resource.get("clinicalStatus"))
    return coding.code if coding else None


def parse_fhir_date(value: Any) -> Optional[date]:
    """Parse a FHIR date (YYYY, YYYY-MM or YYYY-MM-DD, optionally with time)."""
    if not isinstance(value, str) or not value:
        return None
    parts = value[:10].split("-")
    try:
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 else 1
        day = int(parts[2]) if len(parts) > 2 else 1
        return date(year, month, day)
    except (ValueError, IndexError):
        return None


# --------- Converters ---------
def _medication_order(resource: Dict[str, Any]) -> MedicationOrder:
    cc = resource.get("medicationCodeableConcept")
    ref = resource.get("medicationReference")
    display = (
        codeable_concept_text(cc)
        or (_as_str(ref.get("display")) if isinstance(ref, dict) else None)
        or "Unknown medication"
    )
    return MedicationOrder(
        id=_as_str(resource.get("id")),
        display=display,
        coding=first_coding(cc),
        status=_as_str(resource.get("status")),
    )


def _service_order(resource: Dict[str, Any]) -> ServiceOrder:
    cc = resource.get("code")
    categories: List[str] = []
    raw = resource.get("category")
    for cat in raw if isinstance(raw, list) else []:
        for c in _codings(cat):
            label = _as_str(c.get("code")) or _as_str(c.get("display"))
            if label:
                categories.append(label)
    return ServiceOrder(
        id=_as_str(resource.get("id")),
        display=codeable_concept_text(cc) or "Unknown order",
        coding=first_coding(cc),
        categories=categories,
    )


def _allergy(resource: Dict[str, Any]) -> Optional[Allergy]:
    display = codeable_concept_text(resource.get("code"))
    if not display:
        return None
    return Allergy(
        id=_as_str(resource.get("id")),
        display=display,
        clinical_status=clinical_status_code(resource),
    )


def _condition(resource: Dict[str, Any]) -> ConditionRecord:
    cc = resource.get("code")
    coding = first_coding(cc)
    display = codeable_concept_text(cc) or "Unknown condition"
    return ConditionRecord(
        id=_as_str(resource.get("id")),
        display=display,
        coding=coding,
        clinical_status=clinical_status_code(resource),
    )


def _observation(resource: Dict[str, Any]) -> LabObservation:
    cc = resource.get("code")
    value: Optional[float] = None
    unit: Optional[str] = None
    quantity = resource.get("valueQuantity")
    if isinstance(quantity, dict):
        raw = quantity.get("value")
        # bool is an int subclass; a True value is not a lab reading
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            value = float(raw)
        unit = _as_str(quantity.get("unit"))
    return LabObservation(
        id=_as_str(resource.get("id")),
        codings=tuple(_coding_ref(c) for c in _codings(cc)),
        text=_as_str(cc.get("text")) if isinstance(cc, dict) else None,
        value=value,
        unit=unit,
    )


# --------- Prefetch readers ---------
def extract_patient(prefetch: Mapping[str, Any], key: str = "patient") -> Optional[PatientDemographics]:
    resource = (prefetch or {}).get(key)
    if not is_resource_of(resource, "Patient"):
        return None
    return PatientDemographics(
        id=_as_str(resource.get("id")),
        birth_date=parse_fhir_date(resource.get("birthDate")),
        gender=_as_str(resource.get("gender")),
    )


def extract_conditions(prefetch: Mapping[str, Any], key: str = "conditions") -> List[ConditionRecord]:
    return [_condition(r) for r in extract_resources((prefetch or {}).get(key), "Condition")]


def extract_allergies(prefetch: Mapping[str, Any], key: str = "allergies") -> List[Allergy]:
    out: List[Allergy] = []
    for r in extract_resources((prefetch or {}).get(key), "AllergyIntolerance"):
        allergy = _allergy(r)
        if allergy is not None:
            out.append(allergy)
    return out


def extract_medications(prefetch: Mapping[str, Any], key: str = "medications") -> List[MedicationOrder]:
    return [_medication_order(r) for r in extract_resources((prefetch or {}).get(key), "MedicationRequest")]


def extract_observations(prefetch: Mapping[str, Any], key: str = "observations") -> List[LabObservation]:
    return [_observation(r) for r in extract_resources((prefetch or {}).get(key), "Observation")]


# --------- Context readers ---------
def extract_prescribed_medications(context: Mapping[str, Any]) -> List[MedicationOrder]:
    """Draft MedicationRequests of a medication-prescribe context."""
    bundle = (context or {}).get("medications")
    return [_medication_order(r) for r in extract_resources(bundle, "MedicationRequest")]


def extract_draft_orders(context: Mapping[str, Any]) -> Tuple[List[MedicationOrder], List[ServiceOrder]]:
    """Draft medication and service orders of an order-review context."""
    bundle = (context or {}).get("draftOrders")
    medications = [_medication_order(r) for r in extract_resources(bundle, "MedicationRequest")]
    services = [_service_order(r) for r in extract_resources(bundle, "ServiceRequest")]
    return medications, services
