# -*- coding: utf-8 -*-
"""FHIR resource payloads carried inside suggestion actions."""

from typing import Any, Dict, Optional

LAB_CATEGORY = {
    "coding": [{
        "system": "http://snomed.info/sct",
        "code": "108252007",
        "display": "Laboratory procedure",
    }]
}


def _subject(patient_id: Optional[str]) -> Optional[Dict[str, str]]:
    return {"reference": f"Patient/{patient_id}"} if patient_id else None


def make_lab_order(lab: str, patient_id: Optional[str] = None) -> Dict[str, Any]:
    """Draft ServiceRequest ordering one lab test, coded by text only."""
    resource: Dict[str, Any] = {
        "resourceType": "ServiceRequest",
        "status": "draft",
        "intent": "order",
        "category": [LAB_CATEGORY],
        "code": {"text": lab.upper()},
    }
    subject = _subject(patient_id)
    if subject:
        resource["subject"] = subject
    return resource
