"""Result extraction for Google search pages.

Everything here is a pure function of the response content and base URL:
no I/O, no module state beyond constants.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import parse_qs, urljoin, urlsplit

from loguru import logger

from heatsearch.websearch.document import Node, NodePredicate, ParsedDocument, clean_text, parse
from heatsearch.websearch.errors import MissingContainer
from heatsearch.websearch.models import (
    CandidateAnchor,
    SearchQuery,
    SearchResult,
    WebSearchResponse,
)

CONTAINER_ID = "main"
HEADING_TAG = "h3"
VIDEO_CAROUSEL_TAGS = ("g-scrolling-carousel", "video-voyager")
# Google renders the video carousel just below the top organic result.
VIDEO_INSERT_INDEX = 1
IMAGE_REDIRECT_PREFIX = "/imgres"

_VALID_SCHEMES = ("http", "https")


def is_decorative(node: Node) -> bool:
    """Headings that label page sections rather than title a result."""
    role = (node.attr("role") or "").strip().lower()
    hidden = (node.attr("aria-hidden") or "").strip().lower()
    return role == "header" or hidden == "true"


def is_valid_url(url: str | None) -> bool:
    if not url:
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in _VALID_SCHEMES and bool(parts.hostname)


def resolve_url(href: str | None, base_url: str) -> str | None:
    """Resolve ``href`` against ``base_url``; None unless the result is absolute http(s)."""
    if not href or not href.strip():
        return None
    try:
        url = urljoin(base_url, href.strip())
    except ValueError:
        return None
    return url if is_valid_url(url) else None


def _is_result_heading(node: Node) -> bool:
    return node.tag == HEADING_TAG and not is_decorative(node)


def _is_video_heading(node: Node) -> bool:
    if is_decorative(node):
        return False
    return node.tag == HEADING_TAG or node.attr("role") == "heading"


def _candidate(anchor: Node, base_url: str, is_title: NodePredicate) -> CandidateAnchor | None:
    heading = anchor.find(predicate=is_title)
    if heading is None:
        return None
    href = anchor.attr("href")
    url = resolve_url(href, base_url)
    if url is None:
        logger.debug("Skipping anchor with unresolvable href: {!r}", href)
        return None
    return CandidateAnchor(node=anchor, url=url, title=clean_text(heading.text_content()) or None)


def candidate_from_anchor(anchor: Node, base_url: str) -> CandidateAnchor | None:
    """Organic result candidate for ``anchor``, or None if it does not qualify."""
    return _candidate(anchor, base_url, _is_result_heading)


def video_candidate_from_anchor(anchor: Node, base_url: str) -> CandidateAnchor | None:
    return _candidate(anchor, base_url, _is_video_heading)


def _collect(candidates: Sequence[CandidateAnchor | None]) -> list[SearchResult]:
    return [candidate.to_result() for candidate in candidates if candidate is not None]


def find_container(doc: ParsedDocument) -> Node:
    container = doc.find(predicate=lambda node: node.attr("id") == CONTAINER_ID)
    if container is None:
        raise MissingContainer(CONTAINER_ID)
    return container


def extract_organic_results(container: Node, base_url: str) -> list[SearchResult]:
    anchors = container.find_all("a")
    return _collect([candidate_from_anchor(anchor, base_url) for anchor in anchors])


def extract_web_results(doc: ParsedDocument, base_url: str) -> list[SearchResult]:
    """Organic results from the primary container, in document order.

    Raises:
        MissingContainer: the document has no ``id="main"`` element.
    """
    return extract_organic_results(find_container(doc), base_url)


def _find_with_parent(root: Node, predicate: NodePredicate) -> tuple[Node, Node] | None:
    """First descendant of ``root`` matching ``predicate``, with its parent."""
    stack = [(child, root) for child in reversed(root.children)]
    while stack:
        node, parent = stack.pop()
        if predicate(node):
            return node, parent
        stack.extend((child, node) for child in reversed(node.children))
    return None


def _has_video_id(node: Node) -> bool:
    return node.attr("data-vid") is not None


def find_video_carousel(container: Node) -> Node | None:
    """Carousel-tagged element, else the parent of the first ``data-vid`` entry.

    When the entries sit directly in the container, the block holds only the
    ``data-vid`` siblings so organic anchors stay out of the enrichment.
    """
    block = container.find(predicate=lambda node: node.tag in VIDEO_CAROUSEL_TAGS)
    if block is not None:
        return block
    found = _find_with_parent(container, _has_video_id)
    if found is None:
        return None
    _, parent = found
    if parent is container:
        entries = tuple(child for child in container.children if _has_video_id(child))
        return Node(tag=container.tag, attrs=container.attrs, children=entries)
    return parent


def extract_video_results(container: Node, base_url: str) -> list[SearchResult] | None:
    """Results of the video carousel, or None when the page has no carousel."""
    block = find_video_carousel(container)
    if block is None:
        return None
    anchors = block.find_all("a")
    results = _collect([video_candidate_from_anchor(anchor, base_url) for anchor in anchors])
    logger.debug("Video carousel <{}>: {} of {} anchors kept", block.tag, len(results), len(anchors))
    return results


def assemble(
    organic: Sequence[SearchResult],
    enrichment: Sequence[SearchResult] | None,
) -> list[SearchResult]:
    """Splice ``enrichment`` into ``organic`` after the first result."""
    results = list(organic)
    if enrichment is None:
        return results
    index = min(VIDEO_INSERT_INDEX, len(results))
    results[index:index] = enrichment
    return results


def image_result_from_anchor(anchor: Node) -> SearchResult | None:
    href = anchor.attr("href") or ""
    if not href.startswith(IMAGE_REDIRECT_PREFIX):
        return None
    try:
        params = parse_qs(urlsplit(href).query)
    except ValueError:
        return None
    image_url = next(iter(params.get("imgurl", [])), None)
    page_url = next(iter(params.get("imgrefurl", [])), None)
    if not is_valid_url(image_url) or not is_valid_url(page_url):
        logger.debug("Skipping image anchor without usable imgurl/imgrefurl: {!r}", href)
        return None
    return SearchResult(url=page_url, image_url=image_url)


def extract_image_results(doc: ParsedDocument) -> list[SearchResult]:
    """Decode image redirect anchors. Zero matches is an empty list, not an error."""
    anchors = doc.find_all(
        "a", predicate=lambda node: (node.attr("href") or "").startswith(IMAGE_REDIRECT_PREFIX)
    )
    results = [image_result_from_anchor(anchor) for anchor in anchors]
    return [result for result in results if result is not None]


def extract_web_response(data: bytes | str, base_url: str, query: str) -> WebSearchResponse:
    doc = parse(data)
    container = find_container(doc)
    organic = extract_organic_results(container, base_url)
    videos = extract_video_results(container, base_url)
    results = assemble(organic, videos)
    logger.debug(
        "Web results for {!r}: {} organic, {} video",
        query,
        len(organic),
        len(videos) if videos is not None else 0,
    )
    return WebSearchResponse(query=query, results=tuple(results))


def extract_image_response(data: bytes | str, base_url: str, query: str) -> WebSearchResponse:
    # Image redirect anchors carry their targets in the query string, so
    # base_url takes no part in resolution.
    doc = parse(data)
    results = extract_image_results(doc)
    logger.debug("Image results for {!r}: {}", query, len(results))
    return WebSearchResponse(query=query, results=tuple(results))


def scrape(data: bytes | str, base_url: str, query: SearchQuery) -> WebSearchResponse:
    """Extract the response for ``query`` from a fetched results page."""
    if query.mode == "image":
        return extract_image_response(data, base_url, query.text)
    return extract_web_response(data, base_url, query.text)
