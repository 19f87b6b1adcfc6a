"""
Dashboard API client

Used by the dashboard front end and scripts to prefill document numbers and
submit documents. When the next-number endpoint cannot be reached the client
degrades to a placeholder number instead of failing the form.
"""
import logging
from datetime import datetime
from typing import Any

import httpx

from src.core.documents.fallback import fallback_document_number
from src.core.documents.kinds import DocumentKind, resolve_kind

logger = logging.getLogger(__name__)


class DocumentCreateError(Exception):
    """Document submission rejected by the server (non-2xx)."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class DashboardClient:
    """
    Async client for the warehouse dashboard API

    Args:
        base_url: server root, e.g. http://localhost:8000
        token: bearer access token for authenticated endpoints
        transport: optional httpx transport (tests use httpx.MockTransport)
    """

    API_PREFIX = "/api"

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.transport = transport
        self.timeout = timeout

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _build_url(self, kind: DocumentKind, endpoint: str = "") -> str:
        url = f"{self.base_url}{self.API_PREFIX}/{kind.route}"
        return f"{url}/{endpoint}" if endpoint else url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, timeout=self.timeout)

    async def next_number(self, kind: DocumentKind | str, now: datetime | None = None) -> str:
        """
        Next document number for ``kind``.

        Falls back to a non-sequential placeholder when the server cannot be
        reached, answers with an error, or returns an unexpected body.
        """
        kind = resolve_kind(kind)
        url = self._build_url(kind, "next-number")

        try:
            async with self._client() as client:
                response = await client.get(url, headers=self._build_headers())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._fallback(kind, now, f"request failed: {e}")

        if response.status_code != 200:
            return self._fallback(kind, now, f"HTTP {response.status_code}")

        number = _json_object(response).get("next")
        if not isinstance(number, str) or not number:
            return self._fallback(kind, now, "malformed response body")

        return number

    def _fallback(self, kind: DocumentKind, now: datetime | None, reason: str) -> str:
        number = fallback_document_number(kind, now or datetime.now())
        logger.warning(
            "Could not get next %s number (%s); using placeholder %s",
            kind.value, reason, number,
        )
        return number

    async def create_document(
        self, kind: DocumentKind | str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Submit a document and return the created record.

        Raises:
            DocumentCreateError: the server rejected the document, e.g. 409
                when its number is already taken. The caller may retry with a
                fresh number.
        """
        kind = resolve_kind(kind)
        async with self._client() as client:
            response = await client.post(
                self._build_url(kind), headers=self._build_headers(), json=payload
            )

        if not response.is_success:
            raise DocumentCreateError(response.status_code, _error_message(response))

        body = _json_object(response)
        if not body:
            raise DocumentCreateError(response.status_code, "Unexpected response body")
        return body.get("data", body)


def _json_object(response: httpx.Response) -> dict[str, Any]:
    """Response body as a dict; empty for non-JSON or non-object bodies."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(response: httpx.Response) -> str:
    body = _json_object(response)
    message = body.get("message") or body.get("error")
    if isinstance(message, str) and message:
        return message
    return response.text or response.reason_phrase
