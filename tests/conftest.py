# -*- coding: utf-8 -*-
import pytest
from fastapi.testclient import TestClient

from cds_hooks.main import app
from cds_hooks.services.cds_service import CDSHooksService, get_cds_service
from cds_hooks.utils.metrics import metrics


@pytest.fixture(autouse=True)
def fresh_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def client():
    """TestClient with no upstream FHIR server configured."""
    app.dependency_overrides[get_cds_service] = lambda: CDSHooksService()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_fhir():
    """Factory: TestClient whose hook invocations talk to the given transport."""
    def make(transport):
        service = CDSHooksService(transport=transport)
        app.dependency_overrides[get_cds_service] = lambda: service
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()
