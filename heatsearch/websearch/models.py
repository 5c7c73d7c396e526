"""Shared web search models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from heatsearch.websearch.document import Node

SearchMode = Literal["web", "image"]

VALID_MODES: tuple[SearchMode, ...] = ("web", "image")


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Query text plus the kind of results page to request."""

    text: str
    mode: SearchMode = "web"

    def __post_init__(self) -> None:
        if self.mode not in VALID_MODES:
            raise ValueError(f"mode must be one of {list(VALID_MODES)}")


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Normalized search result item.

    Web results always carry ``url``; image results carry both ``url`` (the
    hosting page) and ``image_url``.
    """

    url: str
    title: str | None = None
    image_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url}
        if self.title is not None:
            data["title"] = self.title
        if self.image_url is not None:
            data["image_url"] = self.image_url
        return data


@dataclass(frozen=True, slots=True)
class CandidateAnchor:
    """Anchor accepted during extraction, before conversion to a result."""

    node: Node
    url: str
    title: str | None = None

    def to_result(self) -> SearchResult:
        return SearchResult(url=self.url, title=self.title)


@dataclass(frozen=True, slots=True)
class WebSearchResponse:
    """Ordered results extracted from one results page."""

    query: str
    results: tuple[SearchResult, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "results": [result.to_dict() for result in self.results],
        }
