"""Google results page extraction and search client."""

from heatsearch.websearch.client import WebSearchClient
from heatsearch.websearch.document import Node, ParsedDocument, parse
from heatsearch.websearch.errors import MissingContainer, ParseFailure, WebSearchError
from heatsearch.websearch.google import (
    assemble,
    extract_image_response,
    extract_image_results,
    extract_video_results,
    extract_web_response,
    extract_web_results,
    scrape,
)
from heatsearch.websearch.models import SearchQuery, SearchResult, WebSearchResponse

__all__ = [
    "WebSearchClient",
    "Node",
    "ParsedDocument",
    "parse",
    "WebSearchError",
    "ParseFailure",
    "MissingContainer",
    "assemble",
    "extract_web_results",
    "extract_video_results",
    "extract_image_results",
    "extract_web_response",
    "extract_image_response",
    "scrape",
    "SearchQuery",
    "SearchResult",
    "WebSearchResponse",
]
