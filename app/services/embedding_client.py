"""Async client for the external embedding/vector-index service."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from app.shared.models import EmbeddingOutcome, QueryResult

logger = logging.getLogger(__name__)


class EmbeddingServiceError(RuntimeError):
    """Raised when the read path of the embedding service fails."""


class EmbeddingBackend(Protocol):
    """Capability the orchestrators need from an embedding store."""

    async def add(self, text: str, page_id: Optional[str] = None) -> EmbeddingOutcome: ...

    async def query(self, text: str) -> QueryResult: ...


class EmbedClient:
    """HTTP client for the `/add` and `/query` endpoints of the embedding service."""

    def __init__(
        self,
        base_url: str,
        *,
        request_timeout: int = 50,
        timeout: float = 60.0,
    ) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.request_timeout = request_timeout
        self.timeout = timeout

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Request-Timeout": str(self.request_timeout),
        }

    async def add(self, text: str, page_id: Optional[str] = None) -> EmbeddingOutcome:
        """Index `text`. Failures are returned, never raised."""

        payload: dict[str, object] = {"text": text}
        if page_id is not None:
            payload["pageID"] = page_id

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/add", json=payload, headers=self.headers
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            return EmbeddingOutcome(success=False, error=str(exc) or exc.__class__.__name__)

        if not isinstance(data, dict) or not data.get("success"):
            error = data.get("error") if isinstance(data, dict) else None
            return EmbeddingOutcome(success=False, error=str(error or "add rejected"))

        items = data.get("items")
        if items is not None and (isinstance(items, bool) or not isinstance(items, int)):
            return EmbeddingOutcome(success=False, error=f"unexpected items value: {items!r}")
        return EmbeddingOutcome(success=True, items=items)

    async def query(self, text: str) -> QueryResult:
        """Return the most relevant indexed items for `text`, in backend order."""

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/query", json={"text": text}, headers=self.headers
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise EmbeddingServiceError(f"Embedding query failed: {exc}") from exc
        except ValueError as exc:
            raise EmbeddingServiceError("Embedding service returned malformed payload") from exc

        if not isinstance(data, dict):
            raise EmbeddingServiceError("Embedding service returned malformed payload")
        if not data.get("success"):
            raise EmbeddingServiceError(
                f"Embedding query rejected: {data.get('error') or 'unknown error'}"
            )

        raw_items = data.get("items")
        items: Optional[List[str]] = None
        if isinstance(raw_items, list):
            items = [str(item) for item in raw_items]
        return QueryResult(success=True, items=items, error=data.get("error"))

    async def health(self) -> Dict[str, Any]:
        """Probe the embedding service root and normalize the response."""

        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(3.0)) as client:
                response = await client.get(self.base_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            return {"status": "unhealthy", "endpoint": self.base_url, "error": str(exc)}
        return {"status": "healthy", "endpoint": self.base_url}
