# -*- coding: utf-8 -*-
from datetime import date

from cds_hooks.builders import recommendation_to_card
from cds_hooks.core.resources import CodingRef, ConditionRecord, LabObservation, PatientDemographics
from cds_hooks.rules import (
    condition_recommendations,
    generate_recommendations,
    missing_vitals_recommendation,
    screening_recommendations,
)
from cds_hooks.rules.care_plan import code_system_family, patient_age

ICD10 = "http://hl7.org/fhir/sid/icd-10-cm"
SNOMED = "http://snomed.info/sct"
TODAY = date(2026, 3, 1)


def dx(code, display, system=ICD10, status="active"):
    return ConditionRecord(
        id=code,
        display=display,
        coding=CodingRef(system=system, code=code, display=display),
        clinical_status=status,
    )


def person(birth_date, gender="female"):
    return PatientDemographics(id="pat-1", birth_date=birth_date, gender=gender)


class TestConditionRules:
    """Condition-driven care plan recommendations."""

    def test_diabetes_by_icd10_prefix(self):
        recs = condition_recommendations([dx("E11.9", "Type 2 diabetes mellitus")])
        assert len(recs) == 1
        assert recs[0].title == "Diabetes Care Plan Review Recommended"
        assert "Type 2 diabetes mellitus" in recs[0].description

    def test_heart_failure_is_warning(self):
        recs = condition_recommendations([dx("I50.9", "Heart failure")])
        assert recs[0].indicator == "warning"

    def test_asthma_snomed_exact(self):
        assert len(condition_recommendations([dx("195967001", "Asthma", SNOMED)])) == 1
        assert condition_recommendations([dx("1959670011", "Other", SNOMED)]) == []

    def test_unknown_system_or_inactive_skipped(self):
        conditions = [
            dx("E11.9", "Diabetes", system="http://example.org/local"),
            dx("I10", "Hypertension", status="resolved"),
        ]
        assert condition_recommendations(conditions) == []

    def test_code_system_family(self):
        assert code_system_family("http://hl7.org/fhir/sid/icd-10") == "icd-10"
        assert code_system_family(SNOMED) == "snomed"
        assert code_system_family(None) is None


class TestMissingVitals:
    def test_empty_record(self):
        rec = missing_vitals_recommendation([])
        assert rec.title == "Missing Recent Vital Signs"
        assert rec.indicator == "info"

    def test_unresolved_record_is_not_empty(self):
        assert missing_vitals_recommendation(None) is None

    def test_vitals_present(self):
        assert missing_vitals_recommendation([LabObservation(id="o1", value=120.0)]) is None


class TestScreening:
    def test_age_in_whole_years(self):
        assert patient_age(person(date(1960, 3, 2)), TODAY) == 65
        assert patient_age(person(date(1960, 3, 1)), TODAY) == 66
        assert patient_age(person(None), TODAY) is None

    def test_26_year_old_gets_no_screening(self):
        assert screening_recommendations(person(date(2000, 1, 1)), TODAY) == []

    def test_66_year_old_gets_colorectal_once(self):
        recs = screening_recommendations(person(date(1960, 1, 1)), TODAY)
        assert [r.title for r in recs] == ["Colorectal Cancer Screening"]

    def test_range_bounds(self):
        assert len(screening_recommendations(person(date(1981, 3, 1)), TODAY)) == 1   # 45
        assert len(screening_recommendations(person(date(1950, 3, 2)), TODAY)) == 1   # 75
        assert screening_recommendations(person(date(1950, 3, 1)), TODAY) == []     # 76

    def test_no_patient(self):
        assert screening_recommendations(None, TODAY) == []


class TestGenerateRecommendations:
    def test_combined(self):
        recs = generate_recommendations(
            person(date(1960, 1, 1)),
            [dx("N18.3", "CKD stage 3")],
            [],
            today=TODAY,
        )
        assert [r.title for r in recs] == [
            "CKD Monitoring Needed",
            "Missing Recent Vital Signs",
            "Colorectal Cancer Screening",
        ]

    def test_card_has_guideline_link_and_actions(self):
        rec = condition_recommendations([dx("N18.3", "CKD stage 3")])[0]
        card = recommendation_to_card(rec)
        assert card.uuid == rec.id
        assert card.source.label == "KDIGO Guidelines"
        assert card.links[0].label == "View KDIGO Guidelines"
        assert card.links[0].url == "https://kdigo.org"
        assert "**Recommended Actions:**\n- Check recent eGFR and UACR" in card.detail

    def test_vitals_card_has_no_link(self):
        card = recommendation_to_card(missing_vitals_recommendation([]))
        assert card.links is None
        assert card.source.label == "Prism Care Plan"
