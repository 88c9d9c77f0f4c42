# -*- coding: utf-8 -*-
"""Application settings and configuration."""

import os
from typing import List


class Settings:
    """Application settings loaded from environment variables."""

    # ========= API / Infra =========
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8080"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")

    # CORS - comma separated list; '*' allows everything (EHR iframes in dev)
    CORS_ALLOWED: List[str] = [
        o.strip() for o in os.getenv("CORS_ALLOWED", "*").split(",")
    ]

    # ========= Service metadata =========
    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "cds-hooks-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")

    # ========= FHIR =========
    # Only used by the readiness probe; hook requests carry their own fhirServer
    FHIR_BASE_URL: str = os.getenv("FHIR_BASE_URL", "")
    FHIR_FETCH_TIMEOUT_SEC: float = float(os.getenv("FHIR_FETCH_TIMEOUT_SEC", "10"))
    HEALTH_CHECK_TIMEOUT_SEC: float = float(os.getenv("HEALTH_CHECK_TIMEOUT_SEC", "5"))

    # ========= Responses =========
    MAX_CARDS: int = int(os.getenv("MAX_CARDS", "10"))
    RESPONSE_TIME_TARGET_MS: int = int(os.getenv("RESPONSE_TIME_TARGET_MS", "2500"))


# Singleton instance
settings = Settings()
