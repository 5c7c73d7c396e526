from types import MappingProxyType

from heatsearch.websearch.document import Node, parse
from heatsearch.websearch.google import (
    extract_image_response,
    extract_image_results,
    image_result_from_anchor,
)
from heatsearch.websearch.models import SearchResult

BASE_URL = "https://www.google.com/search?q=cats&tbm=isch&gbv=1"

IMAGE_PAGE = b"""<html><body>
<div class="header"><a href="/search?q=cats">All</a></div>
<table>
  <tr>
    <td><a href="/imgres?imgurl=https://cats.example/1.jpg&amp;imgrefurl=https://cats.example/page1&amp;h=100&amp;w=200"><img src="https://encrypted-tbn0.gstatic.com/a"></a></td>
    <td><a href="/imgres?imgurl=https://cats.example/2.jpg"><img src="https://encrypted-tbn0.gstatic.com/b"></a></td>
    <td><a href="/imgres?imgurl=not-a-url&amp;imgrefurl=https://cats.example/page3"><img></a></td>
    <td><a href="/imgres?imgurl=https%3A%2F%2Fcats.example%2F4.png&amp;imgrefurl=https%3A%2F%2Fblog.example%2Fcats%3Fp%3D4"><img></a></td>
    <td><a href="https://www.google.com/imgres?imgurl=https://cats.example/5.jpg&amp;imgrefurl=https://cats.example/5"><img></a></td>
    <td><a href="/imgres?imgurl=https://cats.example/1.jpg&amp;imgrefurl=https://cats.example/page1"><img></a></td>
  </tr>
</table>
</body></html>
"""


def _anchor(href: str) -> Node:
    return Node(tag="a", attrs=MappingProxyType({"href": href}))


def test_image_redirect_anchor_is_decoded() -> None:
    result = image_result_from_anchor(
        _anchor("/imgres?imgurl=https://x.com/i.png&imgrefurl=https://x.com/page")
    )

    assert result == SearchResult(url="https://x.com/page", image_url="https://x.com/i.png")


def test_image_anchor_missing_imgrefurl_is_dropped() -> None:
    assert image_result_from_anchor(_anchor("/imgres?imgurl=https://x.com/i.png")) is None
    assert image_result_from_anchor(_anchor("/imgres?imgrefurl=https://x.com/page")) is None
    assert image_result_from_anchor(_anchor("/imgres?imgurl=&imgrefurl=https://x.com/page")) is None


def test_non_redirect_anchor_is_ignored() -> None:
    assert image_result_from_anchor(_anchor("/search?q=cats")) is None
    assert image_result_from_anchor(Node(tag="a")) is None


def test_extract_image_results_filters_and_keeps_order() -> None:
    results = extract_image_results(parse(IMAGE_PAGE))

    assert results == [
        SearchResult(url="https://cats.example/page1", image_url="https://cats.example/1.jpg"),
        SearchResult(url="https://blog.example/cats?p=4", image_url="https://cats.example/4.png"),
        SearchResult(url="https://cats.example/page1", image_url="https://cats.example/1.jpg"),
    ]
    assert all(r.title is None for r in results)


def test_no_matching_anchors_is_empty_not_an_error() -> None:
    page = b'<html><body><div id="other"><a href="/search?q=x">x</a></div></body></html>'
    assert extract_image_results(parse(page)) == []


def test_image_mode_does_not_require_results_container() -> None:
    page = b'<div id="rso"><a href="https://a.example/"><h3>A</h3></a></div>'

    response = extract_image_response(page, BASE_URL, "cats")

    assert response.query == "cats"
    assert response.results == ()


def test_image_extraction_is_idempotent() -> None:
    first = extract_image_response(IMAGE_PAGE, BASE_URL, "cats")
    second = extract_image_response(IMAGE_PAGE, BASE_URL, "cats")

    assert first == second
    assert first.to_dict() == {
        "query": "cats",
        "results": [
            {"url": "https://cats.example/page1", "image_url": "https://cats.example/1.jpg"},
            {"url": "https://blog.example/cats?p=4", "image_url": "https://cats.example/4.png"},
            {"url": "https://cats.example/page1", "image_url": "https://cats.example/1.jpg"},
        ],
    }
