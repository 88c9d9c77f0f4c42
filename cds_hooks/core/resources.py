# -*- coding: utf-8 -*-
"""Typed clinical records read out of loosely-typed FHIR JSON.

The rule engines only ever see these records; ``cds_hooks.utils.type_guards``
is responsible for producing them from prefetch data and hook contexts.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class CodingRef:
    system: Optional[str] = None
    code: Optional[str] = None
    display: Optional[str] = None


@dataclass(eq=False)
class MedicationOrder:
    """A MedicationRequest, either drafted in this hook call or already active.

    Compared by identity: two orders for the same drug are still two orders.
    """

    id: Optional[str]
    display: str
    coding: Optional[CodingRef] = None
    status: Optional[str] = None
    resource_type: str = "MedicationRequest"

    @property
    def reference(self) -> str:
        return f"{self.resource_type}/{self.id or 'unknown'}"

    @property
    def coding_key(self) -> Optional[Tuple[Optional[str], str]]:
        """(system, code) of the primary coding, or None when uncoded."""
        if self.coding is None or not self.coding.code:
            return None
        return (self.coding.system, self.coding.code)


@dataclass(eq=False)
class ServiceOrder:
    """A draft ServiceRequest (lab, imaging, procedure) from order-review."""

    id: Optional[str]
    display: str
    coding: Optional[CodingRef] = None
    categories: List[str] = field(default_factory=list)

    @property
    def reference(self) -> str:
        return f"ServiceRequest/{self.id or 'unknown'}"


@dataclass(frozen=True)
class Allergy:
    id: Optional[str]
    display: str
    clinical_status: Optional[str] = None


@dataclass(frozen=True)
class ConditionRecord:
    id: Optional[str]
    display: str
    coding: Optional[CodingRef] = None
    clinical_status: Optional[str] = None

    @property
    def is_active(self) -> bool:
        # No clinical status at all counts as active
        return self.clinical_status is None or self.clinical_status == "active"


@dataclass(frozen=True)
class LabObservation:
    id: Optional[str]
    codings: Tuple[CodingRef, ...] = ()
    text: Optional[str] = None
    value: Optional[float] = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class PatientDemographics:
    id: Optional[str]
    birth_date: Optional[date] = None
    gender: Optional[str] = None
