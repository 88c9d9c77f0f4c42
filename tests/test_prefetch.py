# -*- coding: utf-8 -*-
import asyncio
import time

import httpx
import pytest

from cds_hooks.config.services import PATIENT_VIEW_SERVICE, service_by_id, services_by_hook
from cds_hooks.core.models import HookRequest
from cds_hooks.services import (
    FHIRClient,
    build_hook_context,
    create_fhir_client,
    create_prefetch_warning_card,
    detect_missing_prefetch,
    is_prefetch_incomplete,
    resolve_prefetch,
    should_add_prefetch_warning,
)
from cds_hooks.services.prefetch import substitute_context
from fhir_data import (
    FHIR_SERVER,
    bundle,
    condition,
    delayed_transport,
    fhir_transport,
    hook_request,
    patient,
    raising,
)

SERVICE_ID = PATIENT_VIEW_SERVICE.id

ROUTES = {
    "Patient": patient(),
    "Condition": bundle(condition("c1", "I10", "Hypertension")),
    "MedicationRequest": bundle(),
    "Observation": bundle(),
}

AUTH = {
    "access_token": "secret-token",
    "token_type": "Bearer",
    "expires_in": 300,
    "scope": "patient/*.read",
    "subject": "cds-service",
}


def request(**kwargs):
    return HookRequest.model_validate(hook_request("patient-view", **kwargs))


class TestServiceRegistry:
    def test_lookup(self):
        assert service_by_id("prism-order-review").hook == "order-review"
        assert service_by_id("nope") is None
        assert [s.id for s in services_by_hook("patient-view")] == [SERVICE_ID]


class TestSubstitution:
    def test_placeholders(self):
        assert substitute_context("Patient/{{context.patientId}}", {"patientId": "123"}) == "Patient/123"

    def test_unknown_field_becomes_empty(self):
        assert substitute_context("Encounter/{{context.encounterId}}", {"patientId": "1"}) == "Encounter/"


class TestMissingDetection:
    def test_null_values_count_as_missing(self):
        req = request(prefetch={"patient": patient(), "conditions": None})
        assert detect_missing_prefetch(req, PATIENT_VIEW_SERVICE) == ["conditions", "medications", "observations"]
        assert is_prefetch_incomplete(req, PATIENT_VIEW_SERVICE)

    def test_complete(self):
        req = request(prefetch={k: bundle() for k in PATIENT_VIEW_SERVICE.prefetch})
        assert not is_prefetch_incomplete(req, PATIENT_VIEW_SERVICE)


class TestResolvePrefetch:
    """Prefetch resolution against a mocked FHIR server."""

    def test_complete_prefetch_makes_no_calls(self):
        seen = []
        req = request(prefetch={k: bundle() for k in PATIENT_VIEW_SERVICE.prefetch}, fhir_server=FHIR_SERVER)
        result = asyncio.run(resolve_prefetch(req, SERVICE_ID, transport=fhir_transport(ROUTES, seen)))
        assert result.complete
        assert result.errors == {}
        assert seen == []

    def test_no_fhir_server(self):
        result = asyncio.run(resolve_prefetch(request(), SERVICE_ID))
        assert not result.complete
        assert result.errors == {}
        assert result.data == {k: None for k in PATIENT_VIEW_SERVICE.prefetch}

    def test_fetches_only_missing_keys(self):
        seen = []
        req = request(prefetch={"patient": patient("given")}, fhir_server=FHIR_SERVER)
        result = asyncio.run(resolve_prefetch(req, SERVICE_ID, transport=fhir_transport(ROUTES, seen)))
        assert result.complete
        assert result.data["patient"]["id"] == "given"
        assert sorted(r.url.path for r in seen) == [
            "/r4/Condition", "/r4/MedicationRequest", "/r4/Observation",
        ]
        assert all(r.url.params["patient"] == "pat-1" for r in seen)

    def test_one_failed_key(self):
        routes = dict(ROUTES, Observation=404)
        req = request(fhir_server=FHIR_SERVER)
        result = asyncio.run(resolve_prefetch(req, SERVICE_ID, transport=fhir_transport(routes)))
        assert not result.complete
        assert result.errors == {"observations": "FHIR fetch failed: 404 Not Found"}
        assert result.data["observations"] is None
        assert result.data["patient"]["resourceType"] == "Patient"

    def test_authorization_header_forwarded(self):
        seen = []
        req = request(fhir_server=FHIR_SERVER, fhirAuthorization=AUTH)
        asyncio.run(resolve_prefetch(req, SERVICE_ID, transport=fhir_transport(ROUTES, seen)))
        assert len(seen) == 4
        assert {r.headers["authorization"] for r in seen} == {"Bearer secret-token"}
        assert {r.headers["accept"] for r in seen} == {"application/fhir+json"}

    def test_unknown_service(self):
        result = asyncio.run(resolve_prefetch(request(), "no-such-service"))
        assert result.data == {}
        assert result.errors == {"service": "Unknown service: no-such-service"}

    def test_network_error_and_timeout(self):
        routes = dict(
            ROUTES,
            Condition=raising(lambda r: httpx.ConnectError("connection refused", request=r)),
            MedicationRequest=raising(lambda r: httpx.ReadTimeout("slow", request=r)),
        )
        req = request(fhir_server=FHIR_SERVER)
        result = asyncio.run(resolve_prefetch(req, SERVICE_ID, transport=fhir_transport(routes)))
        assert result.errors["conditions"] == "FHIR fetch failed: connection refused"
        assert result.errors["medications"] == "FHIR fetch timed out"
        assert set(result.errors) == {"conditions", "medications"}

    def test_keys_fetched_concurrently(self):
        delays = {resource_type: 0.5 for resource_type in ROUTES}
        req = request(fhir_server=FHIR_SERVER)
        started = time.perf_counter()
        result = asyncio.run(resolve_prefetch(
            req, SERVICE_ID, transport=delayed_transport(ROUTES, delays), timeout=5.0,
        ))
        elapsed = time.perf_counter() - started
        assert result.complete
        # Four sequential fetches would take at least 2s
        assert elapsed < 1.5

    def test_slow_key_times_out_alone(self):
        req = request(fhir_server=FHIR_SERVER)
        result = asyncio.run(resolve_prefetch(
            req, SERVICE_ID, transport=delayed_transport(ROUTES, {"Observation": 1.0}), timeout=0.3,
        ))
        assert result.errors == {"observations": "FHIR fetch timed out"}
        assert result.data["observations"] is None
        assert all(result.data[k] is not None for k in ("patient", "conditions", "medications"))


class TestHookContext:
    def test_warnings(self):
        routes = dict(ROUTES, Observation=500)
        req = request(fhir_server=FHIR_SERVER)
        ctx = asyncio.run(build_hook_context(req, SERVICE_ID, transport=fhir_transport(routes)))
        assert ctx.warnings == [
            "Failed to fetch observations: FHIR fetch failed: 500 Internal Server Error",
            "Missing prefetch data: observations",
        ]
        assert should_add_prefetch_warning(ctx)

    def test_no_warnings_when_complete(self):
        req = request(prefetch={k: bundle() for k in PATIENT_VIEW_SERVICE.prefetch})
        ctx = asyncio.run(build_hook_context(req, SERVICE_ID))
        assert ctx.complete
        assert not should_add_prefetch_warning(ctx)

    def test_warning_card(self):
        card = create_prefetch_warning_card(["a", "b"])
        assert card.summary == "Data fetch warning"
        assert card.indicator == "info"
        assert card.detail == "a\nb"
        assert card.source.label == "Prism CDS"


class TestFHIRClient:
    def test_must_be_opened(self):
        client = create_fhir_client(FHIR_SERVER)
        with pytest.raises(RuntimeError):
            asyncio.run(client.fetch("Patient/1"))

    def test_build_url(self):
        client = FHIRClient(FHIR_SERVER + "/")
        assert client.build_url("/Patient/1") == "https://fhir.example.org/r4/Patient/1"
        assert client.build_url("https://other.example.org/Patient/1") == "https://other.example.org/Patient/1"

    def test_invalid_json(self):
        transport = fhir_transport({"Patient": lambda r: httpx.Response(200, content=b"not json")})

        async def run():
            async with FHIRClient(FHIR_SERVER, transport=transport) as client:
                return await client.fetch("Patient/1")

        result = asyncio.run(run())
        assert not result.success
        assert result.error == "FHIR fetch failed: invalid JSON response"
