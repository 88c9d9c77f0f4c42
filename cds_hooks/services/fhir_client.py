# -*- coding: utf-8 -*-
"""Async client for the upstream FHIR server used to fill missing prefetch."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from cds_hooks.config import settings
from cds_hooks.config.constants import FHIR_JSON
from cds_hooks.core.models import FHIRAuthorization

__all__ = ["FetchResult", "FHIRClient", "create_fhir_client"]

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class FHIRClient:
    """
    Read-only FHIR client.

    ``fetch`` never raises for upstream problems: non-2xx answers, timeouts
    and network errors all come back as an unsuccessful ``FetchResult``.
    Use as an async context manager so the connection pool is closed.
    """

    def __init__(
        self,
        base_url: str,
        authorization: Optional[FHIRAuthorization] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.authorization = authorization
        self.timeout = timeout if timeout is not None else settings.FHIR_FETCH_TIMEOUT_SEC
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "FHIRClient":
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def headers(self) -> Dict[str, str]:
        h = {"Accept": FHIR_JSON, "Content-Type": FHIR_JSON}
        if self.authorization is not None:
            h["Authorization"] = f"{self.authorization.token_type} {self.authorization.access_token}"
        return h

    def build_url(self, resource_url: str) -> str:
        """Relative queries resolve against the base URL; absolute ones pass through."""
        if resource_url.startswith(("http://", "https://")):
            return resource_url
        return f"{self.base_url}/{resource_url.lstrip('/')}"

    async def fetch(self, resource_url: str) -> FetchResult:
        """
        GET one resource or search bundle.

        Args:
            resource_url: e.g. "Patient/123" or "Condition?patient=123"

        Returns:
            FetchResult with the parsed JSON on success
        """
        if self._client is None:
            raise RuntimeError("FHIRClient must be used inside 'async with'")

        url = self.build_url(resource_url)
        try:
            response = await asyncio.wait_for(
                self._client.get(url, headers=self.headers()),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning("FHIR fetch timed out after %.1fs: %s", self.timeout, url)
            return FetchResult(success=False, error="FHIR fetch timed out", status_code=408)
        except httpx.HTTPError as e:
            logger.warning("FHIR fetch error for %s: %s", url, e)
            return FetchResult(success=False, error=f"FHIR fetch failed: {e}")

        if not response.is_success:
            logger.warning("FHIR fetch failed for %s: %s", url, response.status_code)
            return FetchResult(
                success=False,
                error=f"FHIR fetch failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            logger.warning("FHIR server returned invalid JSON for %s", url)
            return FetchResult(
                success=False,
                error="FHIR fetch failed: invalid JSON response",
                status_code=response.status_code,
            )
        return FetchResult(success=True, data=data, status_code=response.status_code)


def create_fhir_client(
    fhir_server: str,
    authorization: Optional[FHIRAuthorization] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FHIRClient:
    return FHIRClient(fhir_server, authorization=authorization, transport=transport)
