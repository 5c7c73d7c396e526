"""Google results page fetching."""

import asyncio
from dataclasses import dataclass

import httpx
from loguru import logger

from heatsearch.config.schema import GoogleSearchConfig
from heatsearch.websearch.google import scrape
from heatsearch.websearch.models import SearchMode, SearchQuery, WebSearchResponse


@dataclass(frozen=True, slots=True)
class FetchedPage:
    """Raw results page plus the URL it was finally served from."""

    content: bytes
    base_url: str


def build_params(query: SearchQuery) -> dict[str, str]:
    params = {"q": query.text}
    if query.mode == "image":
        params["tbm"] = "isch"  # image search
        params["gbv"] = "1"  # basic version, no javascript
    return params


def user_agent_for(mode: SearchMode, config: GoogleSearchConfig) -> str:
    """Google serves different markup per client class; the extractors expect these."""
    if mode == "image":
        return config.mobile_user_agent
    return config.desktop_user_agent


async def fetch_page(query: SearchQuery, config: GoogleSearchConfig) -> FetchedPage:
    """Fetch one results page. A fresh client per call keeps cookies from carrying over."""
    async with httpx.AsyncClient(follow_redirects=True) as client:
        response = await client.get(
            config.base_url,
            params=build_params(query),
            headers={"User-Agent": user_agent_for(query.mode, config)},
            timeout=config.timeout,
        )
        response.raise_for_status()

    return FetchedPage(content=response.content, base_url=str(response.url))


async def search_google(query: SearchQuery, config: GoogleSearchConfig) -> WebSearchResponse:
    """Fetch and extract Google results for ``query``."""
    page = await fetch_page(query, config)
    logger.debug("Fetched {} bytes from {}", len(page.content), page.base_url)
    return await asyncio.to_thread(scrape, page.content, page.base_url, query)
