"""Entry point for the gptsearch FastAPI application."""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import privacy as privacy_router
from .api import search as search_router
from .api.deps import get_embedding_client
from .config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("gptsearch.access")

app = FastAPI(
    title="gptsearch API",
    version="0.1.0",
    summary="Retrieval augmentation over Wikipedia, Google and web pages",
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One tab-separated line per request: date, method, path, client, host."""

    path = request.url.path
    logger.info(
        "\t".join(
            [
                datetime.now().strftime("%m/%d/%Y %H:%M:%S"),
                request.method,
                (path if len(path) > 8 else f"{path}\t")[:15],
                request.client.host if request.client else "-",
                request.headers.get("host", "-"),
            ]
        )
    )
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def plain_text_errors(_: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


@app.get("/healthz", tags=["meta"])
async def healthz() -> Dict[str, Any]:
    """Aggregate health check for the embedding service."""

    probe = await get_embedding_client().health()
    return {
        "status": "ok",
        "environment": settings.app_env,
        "dependencies": {"embedding_service": probe},
    }


app.include_router(search_router.router)
app.include_router(privacy_router.router)

if Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir), name="static")
