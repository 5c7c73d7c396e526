"""Unified web search client for Google results pages."""

from typing import TYPE_CHECKING

from loguru import logger

from heatsearch.websearch.errors import WebSearchError
from heatsearch.websearch.fetch import search_google
from heatsearch.websearch.models import VALID_MODES, SearchMode, SearchQuery, WebSearchResponse

if TYPE_CHECKING:
    from heatsearch.config.schema import Config


class WebSearchClient:
    """Entry point: query text and mode in, ordered results out."""

    def __init__(self, config: "Config | None" = None):
        from heatsearch.config.schema import Config

        self.config = config or Config()

    async def search(self, query: str, mode: SearchMode = "web") -> WebSearchResponse:
        """Search Google in the given mode.

        ``ParseFailure`` and ``MissingContainer`` propagate unchanged so callers
        can tell a markup change from a transport failure.
        """
        text = (query or "").strip()
        if not text:
            raise WebSearchError("query must not be empty")
        if mode not in VALID_MODES:
            raise WebSearchError(f"unknown search mode: {mode}")

        try:
            response = await search_google(SearchQuery(text=text, mode=mode), self.config.search)
        except WebSearchError:
            raise
        except Exception as e:
            raise WebSearchError(f"google search failed: {e}") from e

        logger.info("Search {} {!r}: {} results", mode, text, len(response.results))
        return response

    async def search_web(self, query: str) -> WebSearchResponse:
        return await self.search(query, "web")

    async def search_images(self, query: str) -> WebSearchResponse:
        return await self.search(query, "image")
