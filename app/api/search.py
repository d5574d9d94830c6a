"""Retrieval endpoints: query mode (`/search`) and browse mode (`/browse`)."""
from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_page_ingestion_service, get_retrieval_service, require_bearer
from app.services.embedding_client import EmbeddingServiceError
from app.services.page_ingestion import PageFetchError, PageIngestionService
from app.services.retrieval_service import RetrievalService
from app.services.wikipedia_client import SourceError
from app.shared.models import BrowseRequest, SearchResponse

router = APIRouter(tags=["retrieval"], dependencies=[Depends(require_bearer)])


@router.get("/search", response_model=SearchResponse)
async def search(
    q: str = Query(..., min_length=1, description="Search query"),
    service: RetrievalService = Depends(get_retrieval_service),
) -> SearchResponse:
    """Gather sources for `q`, index them and return the most relevant passages."""

    try:
        result = await service.search(q)
    except (SourceError, EmbeddingServiceError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return SearchResponse(**asdict(result))


@router.post("/browse", response_model=List[str])
async def browse(
    request: BrowseRequest,
    service: PageIngestionService = Depends(get_page_ingestion_service),
) -> List[str]:
    """Index the paragraphs of `url` and return the passages most relevant to `topic`."""

    try:
        return await service.browse(request.url, request.topic)
    except (PageFetchError, EmbeddingServiceError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
