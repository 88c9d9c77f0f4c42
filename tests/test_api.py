# -*- coding: utf-8 -*-
import httpx

from cds_hooks.services import health as health_service
from fhir_data import (
    FHIR_SERVER,
    allergy,
    bundle,
    condition,
    fhir_transport,
    hook_request,
    medication_request,
    patient,
)

PATIENT_VIEW_PREFETCH = {
    "patient": patient(birth_date="2000-01-01"),
    "conditions": bundle(condition("c1", "I10", "Essential hypertension")),
    "medications": bundle(),
    "observations": bundle(),
}


class TestDiscovery:
    def test_lists_three_services(self, client):
        response = client.get("/cds-services")
        assert response.status_code == 200
        services = response.json()["services"]
        assert {s["id"] for s in services} == {
            "prism-patient-view", "prism-order-review", "prism-medication-prescribe",
        }
        pv = next(s for s in services if s["id"] == "prism-patient-view")
        assert pv["hook"] == "patient-view"
        assert pv["prefetch"]["patient"] == "Patient/{{context.patientId}}"

    def test_get_single_service(self, client):
        response = client.get("/cds-services/prism-order-review")
        assert response.status_code == 200
        assert response.json()["hook"] == "order-review"

    def test_unknown_service(self, client):
        response = client.get("/cds-services/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestInvocationErrors:
    def test_unknown_service(self, client):
        response = client.post("/cds-services/nope", json=hook_request("patient-view"))
        assert response.status_code == 404

    def test_invalid_hook_instance(self, client):
        response = client.post(
            "/cds-services/prism-patient-view",
            json=hook_request("patient-view", hookInstance="not-a-uuid"),
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_request"
        assert any("hookInstance" in e for e in body["validationErrors"])

    def test_non_v4_uuid_rejected(self, client):
        response = client.post(
            "/cds-services/prism-patient-view",
            json=hook_request("patient-view", hookInstance="123e4567-e89b-12d3-a456-426614174000"),
        )
        assert response.status_code == 400

    def test_bad_fhir_server(self, client):
        response = client.post(
            "/cds-services/prism-patient-view",
            json=hook_request("patient-view", fhirServer="ftp://fhir.example.org"),
        )
        assert response.status_code == 400
        assert any("fhirServer" in e for e in response.json()["validationErrors"])

    def test_fhir_server_without_host(self, client):
        response = client.post(
            "/cds-services/prism-patient-view",
            json=hook_request("patient-view", fhirServer="https://"),
        )
        assert response.status_code == 400
        assert any("fhirServer" in e for e in response.json()["validationErrors"])

    def test_fhir_server_on_localhost(self, client):
        response = client.post(
            "/cds-services/prism-patient-view",
            json=hook_request("patient-view", fhirServer="http://localhost:8080/fhir", prefetch=PATIENT_VIEW_PREFETCH),
        )
        assert response.status_code == 200

    def test_unknown_hook(self, client):
        response = client.post("/cds-services/prism-patient-view", json=hook_request("chart-open"))
        assert response.status_code == 400

    def test_hook_mismatch(self, client):
        response = client.post("/cds-services/prism-patient-view", json=hook_request("order-review"))
        assert response.status_code == 400
        assert "handles 'patient-view' hooks" in response.json()["message"]

    def test_missing_context_field(self, client):
        response = client.post(
            "/cds-services/prism-order-review",
            json=hook_request("order-review", context={"userId": "u", "patientId": "p"}),
        )
        assert response.status_code == 400
        assert any(e.startswith("context.draftOrders") for e in response.json()["validationErrors"])

    def test_body_must_be_object(self, client):
        response = client.post("/cds-services/prism-patient-view", json=[1, 2])
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_request"

    def test_errors_counted(self, client):
        client.post("/cds-services/nope", json=hook_request("patient-view"))
        errors = client.get("/metrics").json()["errors"]
        assert errors["byType"] == {"not_found": 1}


class TestInvocation:
    """End-to-end hook calls."""

    def test_patient_view(self, client):
        response = client.post(
            "/cds-services/prism-patient-view",
            json=hook_request("patient-view", prefetch=PATIENT_VIEW_PREFETCH),
        )
        assert response.status_code == 200
        body = response.json()
        assert list(body) == ["cards"]
        assert [c["summary"] for c in body["cards"]] == [
            "Hypertension Management Review",
            "Missing Recent Vital Signs",
        ]
        assert body["cards"][0]["links"][0]["label"] == "View JNC Guidelines"

    def test_medication_prescribe(self, client):
        context = {
            "userId": "Practitioner/1",
            "patientId": "pat-1",
            "medications": bundle(medication_request("p1", "Amoxicillin 500 MG", status="draft")),
        }
        prefetch = {
            "patient": patient(),
            "allergies": bundle(allergy("a1", "Penicillin")),
            "medications": bundle(),
            "conditions": bundle(),
            "labResults": bundle(),
        }
        response = client.post(
            "/cds-services/prism-medication-prescribe",
            json=hook_request("medication-prescribe", context=context, prefetch=prefetch),
        )
        assert response.status_code == 200
        cards = response.json()["cards"]
        assert len(cards) == 1
        assert cards[0]["indicator"] == "critical"
        assert cards[0]["suggestions"][0]["actions"][0] == {
            "type": "delete",
            "description": "Remove Amoxicillin 500 MG due to cross-reactive allergy",
            "resourceId": "MedicationRequest/p1",
        }

    def test_order_review_empty(self, client):
        context = {"userId": "u", "patientId": "pat-1", "draftOrders": bundle()}
        prefetch = {"patient": patient(), "conditions": bundle(), "allergies": bundle(), "medications": bundle()}
        response = client.post(
            "/cds-services/prism-order-review",
            json=hook_request("order-review", context=context, prefetch=prefetch),
        )
        assert response.status_code == 200
        assert response.json() == {"cards": []}

    def test_upstream_failure_adds_warning_card(self, client_with_fhir):
        transport = fhir_transport({
            "Patient": patient(birth_date="2000-01-01"),
            "Condition": bundle(),
            "MedicationRequest": bundle(),
            "Observation": 503,
        })
        client = client_with_fhir(transport)
        response = client.post(
            "/cds-services/prism-patient-view",
            json=hook_request("patient-view", fhirServer=FHIR_SERVER),
        )
        assert response.status_code == 200
        cards = response.json()["cards"]
        assert [c["summary"] for c in cards] == ["Data fetch warning"]
        assert "Failed to fetch observations" in cards[0]["detail"]

    def test_metrics_recorded(self, client):
        client.post(
            "/cds-services/prism-patient-view",
            json=hook_request("patient-view", prefetch=PATIENT_VIEW_PREFETCH),
        )
        snapshot = client.get("/metrics").json()
        assert snapshot["requests"] == {"total": 1, "byHook": {"patient-view": 1}}
        assert snapshot["cards"]["byIndicator"] == {"critical": 0, "warning": 0, "info": 2}
        assert snapshot["responseTimes"]["byHook"]["patient-view"]["count"] == 1


class TestHealth:
    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["service"] == "cds-hooks-service"

    def test_ready_without_fhir_server(self, client, monkeypatch):
        monkeypatch.setattr(health_service.settings, "FHIR_BASE_URL", "")
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json()["checks"] == {}

    def test_not_ready_when_fhir_unreachable(self, client_with_fhir, monkeypatch):
        monkeypatch.setattr(health_service.settings, "FHIR_BASE_URL", FHIR_SERVER)

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = client_with_fhir(httpx.MockTransport(refuse))
        response = client.get("/ready")
        assert response.status_code == 503
        assert response.json()["checks"]["fhirServer"]["status"] == "unhealthy"

    def test_degraded_fhir_server_is_still_ready(self, client_with_fhir, monkeypatch):
        monkeypatch.setattr(health_service.settings, "FHIR_BASE_URL", FHIR_SERVER)
        client = client_with_fhir(fhir_transport({"metadata": 500}))
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json()["checks"]["fhirServer"]["status"] == "degraded"
