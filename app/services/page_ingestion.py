"""Browse-mode orchestration: ingest a web page's paragraphs and query by topic."""
from __future__ import annotations

import logging
from typing import List

import httpx
from bs4 import BeautifulSoup

from app.services.embedding_client import EmbeddingBackend
from app.services.ingestion_service import IngestionService
from app.shared.models import Fragment

logger = logging.getLogger(__name__)


class PageFetchError(RuntimeError):
    """Raised when the page to browse cannot be retrieved."""


def extract_paragraphs(html: str) -> List[str]:
    """Text of every ``<p>`` element in document order, skipping blank ones."""

    soup = BeautifulSoup(html, "html.parser")
    paragraphs: List[str] = []
    for element in soup.find_all("p"):
        text = element.get_text()
        if text.strip():
            paragraphs.append(text)
    return paragraphs


class PageIngestionService:
    """Fetches a page, ingests all of its paragraphs and queries by topic."""

    def __init__(
        self,
        *,
        embedding_client: EmbeddingBackend,
        ingestion_service: IngestionService,
        timeout: float = 15.0,
    ) -> None:
        self.embedding_client = embedding_client
        self.ingestion_service = ingestion_service
        self.timeout = timeout

    async def _fetch_page(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise PageFetchError(f"Failed to fetch {url}: {exc}") from exc

    async def browse(self, url: str, topic: str) -> List[str]:
        html = await self._fetch_page(url)
        paragraphs = extract_paragraphs(html)

        report = await self.ingestion_service.ingest_all(
            [Fragment(text=paragraph, source_id=url) for paragraph in paragraphs]
        )
        logger.info(
            "Ingested %s/%s paragraphs from %s (failed=%s)",
            report.added,
            len(paragraphs),
            url,
            report.failed,
        )

        answer = await self.embedding_client.query(topic)
        return list(answer.items or [])
