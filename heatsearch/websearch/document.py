"""Lenient HTML parsing into an immutable node tree."""

from __future__ import annotations

import codecs
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from bs4 import BeautifulSoup, NavigableString, Tag, UnicodeDammit
from bs4.builder import ParserRejectedMarkup
from bs4.element import PreformattedString
from loguru import logger

from heatsearch.websearch.errors import ParseFailure

DOCUMENT_TAG = "#document"

NodePredicate = Callable[["Node"], bool]

_WHITESPACE_RE = re.compile(r"\s+")
_UNICODE_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE, codecs.BOM_UTF32_LE, codecs.BOM_UTF32_BE)


def clean_text(s: str | None) -> str:
    """Collapse runs of whitespace and strip."""
    return _WHITESPACE_RE.sub(" ", s or "").strip()


@dataclass(frozen=True, slots=True, eq=False)
class Node:
    """Single element of a parsed document.

    ``text`` is the character data before the first child element and
    ``tail`` the character data between this element's end tag and the next
    sibling, following the lxml text/tail model.
    """

    tag: str
    attrs: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    children: tuple["Node", ...] = ()
    text: str | None = None
    tail: str | None = None

    def attr(self, name: str) -> str | None:
        return self.attrs.get(name)

    def children_by_tag(self, tag: str) -> list["Node"]:
        return [child for child in self.children if child.tag == tag]

    def iter_descendants(self) -> Iterator["Node"]:
        """Yield descendants in document order, excluding self."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_all(
        self,
        tag: str | None = None,
        predicate: NodePredicate | None = None,
    ) -> list["Node"]:
        """Descendants matching ``tag`` and ``predicate``, in document order."""
        return [
            node
            for node in self.iter_descendants()
            if (tag is None or node.tag == tag) and (predicate is None or predicate(node))
        ]

    def find(
        self,
        tag: str | None = None,
        predicate: NodePredicate | None = None,
    ) -> "Node | None":
        for node in self.iter_descendants():
            if (tag is None or node.tag == tag) and (predicate is None or predicate(node)):
                return node
        return None

    def text_content(self) -> str:
        """Concatenated character data of the subtree, without own tail."""
        parts: list[str] = []
        stack: list[Node | str] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            if item.text:
                parts.append(item.text)
            for child in reversed(item.children):
                if child.tail:
                    stack.append(child.tail)
                stack.append(child)
        return "".join(parts)


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Read-only parse result. ``root`` is a synthetic document node."""

    root: Node
    element_count: int

    def find_all(
        self,
        tag: str | None = None,
        predicate: NodePredicate | None = None,
    ) -> list[Node]:
        return self.root.find_all(tag, predicate)

    def find(
        self,
        tag: str | None = None,
        predicate: NodePredicate | None = None,
    ) -> Node | None:
        return self.root.find(tag, predicate)

    def iter_descendants(self) -> Iterator[Node]:
        return self.root.iter_descendants()


class _Frame:
    """Mutable build state for one element while its contents are walked."""

    __slots__ = ("tag", "attrs", "contents", "index", "text", "children")

    def __init__(self, tag: str, attrs: dict[str, Any], contents: list[Any]):
        self.tag = tag
        self.attrs = attrs
        self.contents = contents
        self.index = 0
        self.text: list[str] = []
        self.children: list[tuple[Node, list[str]]] = []

    def add_text(self, s: str) -> None:
        if self.children:
            self.children[-1][1].append(s)
        else:
            self.text.append(s)

    def add_child(self, node: Node) -> None:
        self.children.append((node, []))

    def freeze(self) -> Node:
        children = tuple(
            replace(node, tail="".join(tail)) if tail else node
            for node, tail in self.children
        )
        return Node(
            tag=self.tag,
            attrs=MappingProxyType(_normalize_attrs(self.attrs)),
            children=children,
            text="".join(self.text) or None,
        )


def _normalize_attrs(attrs: dict[str, Any]) -> dict[str, str]:
    normalized: dict[str, str] = {}
    for name, value in attrs.items():
        key = str(name).lower()
        if key in normalized:
            continue
        if isinstance(value, (list, tuple)):
            value = " ".join(str(v) for v in value)
        normalized[key] = "" if value is None else str(value)
    return normalized


def _is_character_data(item: Any) -> bool:
    # Comments, doctypes, CDATA and processing instructions are PreformattedString.
    return isinstance(item, NavigableString) and not isinstance(item, PreformattedString)


def _freeze_tree(soup: BeautifulSoup) -> tuple[Node, int]:
    count = 0
    stack = [_Frame(DOCUMENT_TAG, {}, list(soup.contents))]
    while True:
        frame = stack[-1]
        if frame.index < len(frame.contents):
            item = frame.contents[frame.index]
            frame.index += 1
            if isinstance(item, Tag):
                stack.append(_Frame((item.name or "").lower(), item.attrs, list(item.contents)))
            elif _is_character_data(item):
                frame.add_text(str(item))
            continue

        stack.pop()
        node = frame.freeze()
        if not stack:
            return node, count
        count += 1
        stack[-1].add_child(node)


def _decode(data: bytes | bytearray | str) -> str:
    if isinstance(data, str):
        return data
    data = bytes(data)
    # NUL bytes only belong in UTF-16/32 payloads, which announce themselves with a BOM.
    if b"\x00" in data and not data.startswith(_UNICODE_BOMS):
        data = data.replace(b"\x00", b"")
    dammit = UnicodeDammit(data, is_html=True)
    if dammit.unicode_markup is None:
        raise ParseFailure("could not decode document bytes")
    return dammit.unicode_markup


def parse(data: bytes | bytearray | str) -> ParsedDocument:
    """Parse raw response content into a :class:`ParsedDocument`.

    Malformed markup yields a best-effort tree. ``ParseFailure`` is raised
    only for input that cannot be read as HTML at all.
    """
    if not isinstance(data, (bytes, bytearray, str)):
        raise ParseFailure(f"expected bytes or str, got {type(data).__name__}")
    if not data.strip():
        raise ParseFailure("empty document")

    markup = _decode(data)
    # Stray NULs are dropped; the rest of the markup is still parsed.
    markup = markup.replace("\x00", "")
    try:
        soup = BeautifulSoup(markup, "lxml", multi_valued_attributes=None)
    except ParserRejectedMarkup as e:
        raise ParseFailure(f"parser rejected document: {e}") from e
    root, count = _freeze_tree(soup)
    if count == 0:
        raise ParseFailure("no elements found in document")

    logger.debug("Parsed document: {} chars, {} elements", len(markup), count)
    return ParsedDocument(root=root, element_count=count)
