# -*- coding: utf-8 -*-
"""Request and discovery models for the CDS Hooks API."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from cds_hooks.config.constants import (
    HOOK_MEDICATION_PRESCRIBE,
    HOOK_ORDER_REVIEW,
    HOOK_PATIENT_VIEW,
    UUID_V4_REGEX,
)

_HTTP_URL = TypeAdapter(AnyHttpUrl)

HookType = Literal[
    "patient-view",
    "order-select",
    "order-sign",
    "order-review",
    "medication-prescribe",
    "encounter-start",
    "encounter-discharge",
]


class ServiceDefinition(BaseModel):
    """One entry of the discovery response."""

    model_config = ConfigDict(frozen=True)

    id: str
    hook: HookType
    title: str
    description: str
    prefetch: Dict[str, str] = Field(default_factory=dict)


class FHIRAuthorization(BaseModel):
    """Bearer credential the EHR hands over for reading the patient's data."""

    access_token: str = Field(..., min_length=1)
    token_type: str = Field(..., min_length=1)
    expires_in: int = Field(..., gt=0)
    scope: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)


class FHIRBundleRef(BaseModel):
    """Loose bundle shape accepted inside hook contexts."""

    model_config = ConfigDict(extra="allow")

    resourceType: Literal["Bundle"]
    entry: Optional[List[Dict[str, Any]]] = None


class PatientViewContext(BaseModel):
    model_config = ConfigDict(extra="allow")

    userId: str = Field(..., min_length=1)
    patientId: str = Field(..., min_length=1)
    encounterId: Optional[str] = None


class OrderReviewContext(PatientViewContext):
    draftOrders: FHIRBundleRef


class MedicationPrescribeContext(PatientViewContext):
    medications: FHIRBundleRef


CONTEXT_MODELS = {
    HOOK_PATIENT_VIEW: PatientViewContext,
    HOOK_ORDER_REVIEW: OrderReviewContext,
    HOOK_MEDICATION_PRESCRIBE: MedicationPrescribeContext,
}


class HookRequest(BaseModel):
    """A CDS Hooks invocation as sent by the EHR."""

    hookInstance: str
    hook: HookType
    context: Dict[str, Any]
    fhirServer: Optional[str] = None
    fhirAuthorization: Optional[FHIRAuthorization] = None
    prefetch: Optional[Dict[str, Any]] = None

    @field_validator("hookInstance")
    @classmethod
    def _check_hook_instance(cls, v: str) -> str:
        if not UUID_V4_REGEX.match(v or ""):
            raise ValueError("hookInstance must be a valid UUID v4")
        return v

    @field_validator("fhirServer")
    @classmethod
    def _check_fhir_server(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            _HTTP_URL.validate_python(v)
        except ValidationError:
            raise ValueError("fhirServer must be a valid URL")
        return v


def validate_context(hook: str, context: Dict[str, Any]) -> BaseModel:
    """Validate a hook context against its trigger-specific shape.

    Raises pydantic.ValidationError when required sub-fields are missing.
    Hooks without a dedicated model are checked against the base context.
    """
    model = CONTEXT_MODELS.get(hook, PatientViewContext)
    return model.model_validate(context)


def validation_messages(exc: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into 'field.path: message' lines."""
    out = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        out.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return out
