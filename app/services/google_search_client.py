"""Snippet source backed by the Google Custom Search JSON API."""
from __future__ import annotations

import logging
from typing import List

import httpx

from app.services.wikipedia_client import SourceError
from app.shared.models import SnippetResult

logger = logging.getLogger(__name__)


class GoogleSearchClient:
    """Returns short result descriptions and their links for a query."""

    def __init__(
        self,
        api_key: str | None,
        cx: str | None,
        *,
        base_url: str = "https://www.googleapis.com/customsearch/v1",
        num: int = 5,
        user_agent: str = "GPTSearch",
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.cx = cx
        self.base_url = str(base_url)
        self.num = num
        self.user_agent = user_agent
        self.timeout = timeout

    async def fetch_snippets(self, query: str) -> SnippetResult:
        """Search for `query`; result i's snippet and link share index i."""

        if not self.api_key or not self.cx:
            raise SourceError("Google search is not configured (api key and cx required)")

        params = {"key": self.api_key, "cx": self.cx, "q": query, "num": str(self.num)}
        headers = {"Accept": "application/json", "User-Agent": self.user_agent}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=params, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise SourceError(f"Google search request failed: {exc}") from exc
        except ValueError as exc:
            raise SourceError("Google search returned malformed payload") from exc

        snippets: List[str] = []
        links: List[str] = []
        for item in data.get("items") or []:
            snippets.append(item.get("snippet") or "")
            links.append(item.get("link") or "")
        if not snippets:
            logger.info("Google search returned no results for %r", query)
        return SnippetResult(snippets=snippets, links=links)
