"""Request-scoped domain models shared by sources, ingestion and retrieval."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, Field


@dataclass(slots=True)
class Fragment:
    """A unit of candidate text (paragraph or search snippet)."""

    text: str
    source_id: Optional[str] = None


@dataclass(slots=True)
class SnippetResult:
    """Search snippets and their originating links, index-aligned."""

    snippets: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.snippets) != len(self.links):
            raise ValueError(
                f"snippets and links must be aligned ({len(self.snippets)} != {len(self.links)})"
            )

    def fragments(self) -> List[Fragment]:
        """Non-blank snippets as fragments, tagged with their link."""

        return [
            Fragment(text=snippet, source_id=link or None)
            for snippet, link in zip(self.snippets, self.links)
            if snippet.strip()
        ]


@dataclass(slots=True)
class EmbeddingOutcome:
    """Result of a single `add` call; failures are values, not exceptions."""

    success: bool
    items: Optional[int] = None
    error: Optional[str] = None


@dataclass(slots=True)
class QueryResult:
    """Items returned by the embedding service, in backend order."""

    success: bool
    items: Optional[List[str]] = None
    error: Optional[str] = None


@dataclass(slots=True)
class IngestionReport:
    """Counters describing one ingestion pass."""

    attempted: int = 0
    added: int = 0
    failed: int = 0
    budget_exhausted: bool = False


@dataclass(slots=True)
class RetrievalResult:
    """Final payload of a query-mode request."""

    results: List[str]
    links: List[str]
    date: str


class BrowseRequest(BaseModel):
    """Body of `POST /browse`."""

    url: str = Field(..., min_length=1, description="Page to fetch and ingest")
    topic: str = Field(..., min_length=1, description="Relevance query for the ingested page")


class SearchResponse(BaseModel):
    """Body returned by `GET /search`."""

    results: List[str]
    links: List[str]
    date: str
