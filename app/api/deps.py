"""Shared FastAPI dependencies: bearer auth and lazily built services."""
from __future__ import annotations

import hmac
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException, status

from app.config import get_settings
from app.services.embedding_client import EmbedClient
from app.services.google_search_client import GoogleSearchClient
from app.services.ingestion_service import IngestionService
from app.services.page_ingestion import PageIngestionService
from app.services.retrieval_service import RetrievalService
from app.services.tokenizer import TokenBudgeter
from app.services.wikipedia_client import WikipediaClient

logger = logging.getLogger(__name__)


def require_bearer(authorization: Optional[str] = Header(None)) -> None:
    """Reject requests whose bearer token does not match the shared secret."""

    secret = get_settings().auth_secret
    expected = f"Bearer {secret}"
    if not secret or not authorization or not hmac.compare_digest(authorization.encode(), expected.encode()):
        logger.info("Unauthorized request")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@lru_cache(maxsize=1)
def get_embedding_client() -> EmbedClient:
    settings = get_settings()
    return EmbedClient(
        str(settings.embeddings_base_url),
        request_timeout=settings.embeddings_request_timeout,
        timeout=settings.embeddings_timeout_seconds,
    )


@lru_cache(maxsize=1)
def _get_ingestion_service() -> IngestionService:
    settings = get_settings()
    return IngestionService(
        embedding_client=get_embedding_client(),
        token_budgeter=TokenBudgeter(settings.tokenizer_model, settings.max_embedding_tokens),
        concurrency=settings.ingest_concurrency,
    )


@lru_cache(maxsize=1)
def _get_retrieval_service() -> RetrievalService:
    settings = get_settings()
    return RetrievalService(
        wikipedia_client=WikipediaClient(
            str(settings.wikipedia_api_url),
            user_agent=settings.user_agent,
            timeout=settings.source_timeout_seconds,
        ),
        google_client=GoogleSearchClient(
            settings.google_api_key,
            settings.google_cx,
            base_url=str(settings.google_search_url),
            num=settings.google_result_count,
            user_agent=settings.user_agent,
            timeout=settings.source_timeout_seconds,
        ),
        embedding_client=get_embedding_client(),
        ingestion_service=_get_ingestion_service(),
        ingestion_limit=settings.ingestion_limit,
    )


@lru_cache(maxsize=1)
def _get_page_ingestion_service() -> PageIngestionService:
    return PageIngestionService(
        embedding_client=get_embedding_client(),
        ingestion_service=_get_ingestion_service(),
        timeout=get_settings().page_timeout_seconds,
    )


def get_retrieval_service() -> RetrievalService:
    """Lazy singleton used as a FastAPI dependency."""
    return _get_retrieval_service()


def get_page_ingestion_service() -> PageIngestionService:
    """Lazy singleton used as a FastAPI dependency."""
    return _get_page_ingestion_service()
