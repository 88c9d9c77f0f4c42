# -*- coding: utf-8 -*-
"""Constants used throughout the application."""

import re

# ========= Card indicators =========

INDICATOR_CRITICAL = "critical"
INDICATOR_WARNING = "warning"
INDICATOR_INFO = "info"

INDICATORS = (INDICATOR_INFO, INDICATOR_WARNING, INDICATOR_CRITICAL)

# Lower sorts first
INDICATOR_ORDER = {
    INDICATOR_CRITICAL: 0,
    INDICATOR_WARNING: 1,
    INDICATOR_INFO: 2,
}

SELECTION_BEHAVIORS = ("at-most-one", "any")
ACTION_TYPES = ("create", "update", "delete")
LINK_TYPES = ("absolute", "smart")

# ========= Hooks =========

HOOK_PATIENT_VIEW = "patient-view"
HOOK_ORDER_REVIEW = "order-review"
HOOK_MEDICATION_PRESCRIBE = "medication-prescribe"

# ========= Regex Patterns =========

# hookInstance must be a version 4 UUID
UUID_V4_REGEX = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# Card and suggestion ids only need the 8-4-4-4-12 shape
UUID_SHAPE_REGEX = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# {{context.patientId}} style prefetch placeholders
PREFETCH_TOKEN_REGEX = re.compile(r"\{\{context\.(\w+)\}\}")

# ========= FHIR =========

FHIR_JSON = "application/fhir+json"

LOINC_CREATININE = "2160-0"
LOINC_EGFR_CODES = ("33914-3", "48642-3", "48643-1", "62238-1", "98979-8")

# ServiceRequest.category codes (HL7 "laboratory", SNOMED laboratory procedure)
LAB_CATEGORY_CODES = ("laboratory", "108252007")

# ========= Source attribution =========

SOURCE_LABELS = {
    "CDS": "Prism CDS",
    "MEDICATION_SAFETY": "Prism Medication Safety",
    "ORDER_REVIEW": "Prism Order Review",
    "CARE_PLAN": "Prism Care Plan",
}

GUIDELINE_SOURCES = {
    "ADA": {"label": "ADA Standards of Care", "url": "https://diabetesjournals.org/care"},
    "JNC": {"label": "JNC Guidelines", "url": "https://www.heart.org"},
    "ACC_AHA_HF": {"label": "ACC/AHA HF Guidelines", "url": "https://www.heart.org"},
    "GOLD": {"label": "GOLD Guidelines", "url": "https://goldcopd.org"},
    "KDIGO": {"label": "KDIGO Guidelines", "url": "https://kdigo.org"},
    "GINA": {"label": "GINA Guidelines", "url": "https://ginasthma.org"},
    "USPSTF": {"label": "USPSTF", "url": "https://www.uspreventiveservicestaskforce.org"},
}
