"""Passage source backed by the MediaWiki action API."""
from __future__ import annotations

import logging
from typing import Any, List, Mapping

import httpx

from app.shared.models import Fragment

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n\n"
SEE_ALSO_MARKER = "== See also ==\n"


class SourceError(RuntimeError):
    """Raised when a content source cannot be reached."""


def split_extract(extract: str, source_id: str | None = None) -> List[Fragment]:
    """Split a plain-text extract into paragraphs, stopping at "See also"."""

    fragments: List[Fragment] = []
    for paragraph in extract.split(PARAGRAPH_SEPARATOR):
        if SEE_ALSO_MARKER in paragraph:
            break
        if not paragraph.strip():
            continue
        fragments.append(Fragment(text=paragraph, source_id=source_id))
    return fragments


class WikipediaClient:
    """Fetches the best-matching article for a topic as paragraph fragments."""

    def __init__(
        self,
        base_url: str = "https://en.wikipedia.org/w/api.php",
        *,
        user_agent: str = "GPTSearch",
        timeout: float = 10.0,
    ) -> None:
        self.base_url = str(base_url)
        self.user_agent = user_agent
        self.timeout = timeout

    def _params(self, topic: str) -> dict[str, str]:
        return {
            "action": "query",
            "generator": "search",
            "gsrlimit": "1",
            "gsrsearch": topic,
            "format": "json",
            "prop": "extracts",
            "exlimit": "1",
            "explaintext": "true",
        }

    async def fetch_passages(self, topic: str) -> List[Fragment]:
        """Return the paragraphs of the top search hit, or [] when nothing matches."""

        headers = {"Accept": "application/json", "User-Agent": self.user_agent}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=self._params(topic), headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise SourceError(f"Wikipedia request failed: {exc}") from exc
        except ValueError as exc:
            raise SourceError("Wikipedia returned malformed payload") from exc

        pages: Mapping[str, Any] = (data.get("query") or {}).get("pages") or {}
        if not pages:
            logger.info("No Wikipedia page found for %r", topic)
            return []

        page_id = next(iter(pages))
        extract = pages[page_id].get("extract") or ""
        return split_extract(extract, source_id=str(page_id))
