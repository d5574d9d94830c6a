"""Privacy policy page rendered from the bundled markdown document."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import HTMLResponse

from app.config import get_settings
from app.services.privacy_renderer import render_privacy_page

router = APIRouter(tags=["meta"])


@router.get("/privacy", response_class=HTMLResponse)
async def privacy() -> HTMLResponse:
    try:
        page = render_privacy_page(get_settings().privacy_markdown_path)
    except OSError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Privacy policy not available"
        ) from exc
    return HTMLResponse(page)
