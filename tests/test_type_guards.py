# -*- coding: utf-8 -*-
from dataclasses import fields
from datetime import date

import pytest

from cds_hooks.core.resources import Allergy, LabObservation, PatientDemographics
from cds_hooks.utils.type_guards import (
    codeable_concept_text,
    extract_allergies,
    extract_conditions,
    extract_draft_orders,
    extract_medications,
    extract_observations,
    extract_patient,
    extract_prescribed_medications,
    extract_resources,
    is_fhir_bundle,
    is_fhir_resource,
    parse_fhir_date,
)
from fhir_data import (
    allergy,
    bundle,
    condition,
    medication_request,
    observation,
    patient,
    service_request,
)


class TestGuards:
    @pytest.mark.parametrize("value,expected", [
        ({"resourceType": "Patient"}, True),
        ({"resourceType": ""}, False),
        ({"id": "1"}, False),
        ("Patient", False),
        (None, False),
    ])
    def test_is_fhir_resource(self, value, expected):
        assert is_fhir_resource(value) is expected

    def test_bundle_entry_optional_but_must_be_list(self):
        assert is_fhir_bundle({"resourceType": "Bundle"})
        assert not is_fhir_bundle({"resourceType": "Bundle", "entry": {}})
        assert not is_fhir_bundle({"resourceType": "Patient"})

    def test_extract_resources_skips_other_types_and_junk(self):
        data = bundle(patient(), condition("c1", "I10", "Hypertension"))
        data["entry"].extend([None, {"resource": "x"}, {}])
        found = extract_resources(data, "Condition")
        assert [r["id"] for r in found] == ["c1"]

    def test_extract_resources_from_non_bundle(self):
        assert extract_resources(None, "Condition") == []
        assert extract_resources({"resourceType": "Bundle", "entry": None}, "Condition") == []


class TestConcepts:
    def test_text_preferred_over_coding(self):
        assert codeable_concept_text({"text": "Tylenol", "coding": [{"display": "Acetaminophen"}]}) == "Tylenol"
        assert codeable_concept_text({"coding": [{"display": "Acetaminophen"}]}) == "Acetaminophen"
        assert codeable_concept_text("nope") is None

    @pytest.mark.parametrize("value,expected", [
        ("1980-06-15", date(1980, 6, 15)),
        ("1980-06", date(1980, 6, 1)),
        ("1980", date(1980, 1, 1)),
        ("1980-06-15T10:00:00Z", date(1980, 6, 15)),
        ("garbage", None),
        (None, None),
    ])
    def test_parse_fhir_date(self, value, expected):
        assert parse_fhir_date(value) == expected


class TestPrefetchReaders:
    """Extraction of typed records from prefetch and contexts."""

    def test_patient(self):
        p = extract_patient({"patient": patient("p9", "1970-03-02", "male")})
        assert p.id == "p9"
        assert p.birth_date == date(1970, 3, 2)
        assert p.gender == "male"

    def test_patient_missing_or_wrong_type(self):
        assert extract_patient({"patient": None}) is None
        assert extract_patient({"patient": {"resourceType": "Practitioner"}}) is None
        assert extract_patient({}) is None

    def test_medications_coding_and_display(self):
        meds = extract_medications({"medications": bundle(medication_request("m1", "Warfarin 5 MG", "855332"))})
        assert meds[0].display == "Warfarin 5 MG"
        assert meds[0].coding_key == ("http://www.nlm.nih.gov/research/umls/rxnorm", "855332")
        assert meds[0].reference == "MedicationRequest/m1"

    def test_medication_without_name(self):
        meds = extract_medications({"medications": bundle({"resourceType": "MedicationRequest", "id": "x"})})
        assert meds[0].display == "Unknown medication"
        assert meds[0].coding_key is None

    def test_medication_reference_display(self):
        resource = {"resourceType": "MedicationRequest", "id": "r",
                    "medicationReference": {"reference": "Medication/1", "display": "Lisinopril"}}
        assert extract_medications({"medications": bundle(resource)})[0].display == "Lisinopril"

    def test_allergies_without_display_skipped(self):
        nameless = {"resourceType": "AllergyIntolerance", "id": "a0", "code": {}}
        found = extract_allergies({"allergies": bundle(nameless, allergy("a1", "Penicillin", "inactive"))})
        assert len(found) == 1
        assert found[0].clinical_status == "inactive"

    def test_conditions(self):
        found = extract_conditions({"conditions": bundle(condition("c1", "E11.9", "Type 2 diabetes", status=None))})
        assert found[0].coding.code == "E11.9"
        assert found[0].is_active

    def test_observation_values(self):
        obs = observation("o1", "2160-0", "Creatinine", 1.8, "mg/dL")
        obs_bool = observation("o2", "2160-0", "Creatinine", 1.0)
        obs_bool["valueQuantity"]["value"] = True
        found = extract_observations({"labResults": bundle(obs, obs_bool)}, "labResults")
        assert found[0].value == 1.8
        assert found[0].unit == "mg/dL"
        assert found[1].value is None

    def test_records_carry_only_read_fields(self):
        assert [f.name for f in fields(Allergy)] == ["id", "display", "clinical_status"]
        assert [f.name for f in fields(LabObservation)] == ["id", "codings", "text", "value", "unit"]
        assert [f.name for f in fields(PatientDemographics)] == ["id", "birth_date", "gender"]

    def test_null_prefetch_is_empty(self):
        assert extract_conditions({"conditions": None}) == []
        assert extract_observations(None) == []


class TestContextReaders:
    def test_prescribed_medications(self):
        context = {"medications": bundle(medication_request("d1", "Aspirin 81 MG", status="draft"))}
        meds = extract_prescribed_medications(context)
        assert [m.display for m in meds] == ["Aspirin 81 MG"]
        assert meds[0].status == "draft"

    def test_draft_orders_split_by_type(self):
        context = {"draftOrders": bundle(
            medication_request("d1", "Metformin 500 MG", status="draft"),
            service_request("s1", "Creatinine serum"),
        )}
        meds, services = extract_draft_orders(context)
        assert [m.id for m in meds] == ["d1"]
        assert [s.display for s in services] == ["Creatinine serum"]

    def test_service_categories(self):
        labs = dict(service_request("s1", "Creatinine serum"),
                    category=[{"coding": [{"code": "108252007", "display": "Laboratory procedure"}]}])
        scalar = dict(service_request("s2", "Chest X-ray"), category=5)
        _, services = extract_draft_orders({"draftOrders": bundle(labs, scalar)})
        assert [s.categories for s in services] == [["108252007"], []]

    def test_missing_bundle(self):
        assert extract_draft_orders({}) == ([], [])
        assert extract_prescribed_medications({"medications": "oops"}) == []
