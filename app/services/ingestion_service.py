"""Budgeted ingestion of text fragments into the embedding service."""
from __future__ import annotations

import asyncio
import logging
from itertools import chain
from typing import Iterable, List, Sequence

from app.services.embedding_client import EmbeddingBackend
from app.services.tokenizer import TokenBudgeter
from app.shared.models import EmbeddingOutcome, Fragment, IngestionReport

logger = logging.getLogger(__name__)


class IngestionBudget:
    """Per-request cap on the number of `add` calls.

    The cap is inclusive: with a limit of 25 at most 25 fragments are sent.
    """

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError("limit must be non-negative")
        self.limit = limit
        self.used = 0

    @property
    def remaining(self) -> int:
        return self.limit - self.used

    @property
    def exhausted(self) -> bool:
        return self.used >= self.limit

    def consume(self) -> bool:
        """Reserve one slot; False once the limit is reached."""

        if self.exhausted:
            return False
        self.used += 1
        return True


class IngestionService:
    """Token-budgets fragments and forwards them to the embedding backend."""

    def __init__(
        self,
        *,
        embedding_client: EmbeddingBackend,
        token_budgeter: TokenBudgeter,
        concurrency: int = 8,
    ) -> None:
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self.embedding_client = embedding_client
        self.token_budgeter = token_budgeter
        self.concurrency = concurrency

    async def _add(self, fragment: Fragment) -> EmbeddingOutcome:
        text = self.token_budgeter.truncate(fragment.text)
        outcome = await self.embedding_client.add(text, fragment.source_id)
        if not outcome.success:
            logger.warning("Embedding add failed, skipping fragment: %s", outcome.error)
        return outcome

    async def ingest(
        self,
        *sources: Iterable[Fragment],
        budget: IngestionBudget,
    ) -> IngestionReport:
        """Add fragments from `sources` in order until supply or budget runs out.

        Sources are consumed in the order given; once the budget is exhausted
        no further fragment from any source is sent.
        """

        report = IngestionReport()
        for fragment in chain.from_iterable(sources):
            if not budget.consume():
                report.budget_exhausted = True
                logger.info("Ingestion budget of %s reached, stopping", budget.limit)
                break
            report.attempted += 1
            outcome = await self._add(fragment)
            if outcome.success:
                report.added += 1
            else:
                report.failed += 1
        return report

    async def ingest_all(self, fragments: Sequence[Fragment]) -> IngestionReport:
        """Add every fragment, at most `concurrency` at a time, and wait for all of them."""

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded_add(fragment: Fragment) -> EmbeddingOutcome:
            async with semaphore:
                return await self._add(fragment)

        outcomes: List[EmbeddingOutcome] = await asyncio.gather(
            *(_bounded_add(fragment) for fragment in fragments)
        )
        added = sum(1 for outcome in outcomes if outcome.success)
        return IngestionReport(
            attempted=len(outcomes),
            added=added,
            failed=len(outcomes) - added,
        )
