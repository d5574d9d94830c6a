"""Query-mode orchestration: gather sources, ingest, then ask for relevant items."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from app.services.embedding_client import EmbeddingBackend
from app.services.google_search_client import GoogleSearchClient
from app.services.ingestion_service import IngestionBudget, IngestionService
from app.services.wikipedia_client import WikipediaClient
from app.shared.models import RetrievalResult

logger = logging.getLogger(__name__)

NO_RESULTS_PLACEHOLDER = "No results found"
DATE_FORMAT = "%a %d %b %Y %H:%M:%S"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def format_date(value: datetime) -> str:
    """UTC timestamp such as ``Sat 18 Oct 2026 21:04:05``."""

    return value.astimezone(timezone.utc).strftime(DATE_FORMAT)


class RetrievalService:
    """Runs both sources, ingests under one budget and issues a single query."""

    def __init__(
        self,
        *,
        wikipedia_client: WikipediaClient,
        google_client: GoogleSearchClient,
        embedding_client: EmbeddingBackend,
        ingestion_service: IngestionService,
        ingestion_limit: int = 25,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.wikipedia_client = wikipedia_client
        self.google_client = google_client
        self.embedding_client = embedding_client
        self.ingestion_service = ingestion_service
        self.ingestion_limit = ingestion_limit
        self.clock = clock or _now

    async def search(self, query: str) -> RetrievalResult:
        passages, snippet_result = await asyncio.gather(
            self.wikipedia_client.fetch_passages(query),
            self.google_client.fetch_snippets(query),
            return_exceptions=True,
        )
        for outcome in (passages, snippet_result):
            if isinstance(outcome, BaseException):
                raise outcome

        report = await self.ingestion_service.ingest(
            passages,
            snippet_result.fragments(),
            budget=IngestionBudget(self.ingestion_limit),
        )
        logger.info(
            "Ingested %s/%s fragments for %r (failed=%s, budget_exhausted=%s)",
            report.added,
            len(passages) + len(snippet_result.snippets),
            query,
            report.failed,
            report.budget_exhausted,
        )

        answer = await self.embedding_client.query(query)
        return RetrievalResult(
            results=answer.items or [NO_RESULTS_PLACEHOLDER],
            links=list(snippet_result.links),
            date=format_date(self.clock()),
        )
