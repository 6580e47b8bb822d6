"""
BeautifulSoup implementation of the page-access capability.

Wraps a parsed HTML snapshot so the extraction engine can query it with
CSS selectors (soupsieve, including ``:has()`` and attribute substring
matches). Geometry comes from ``data-rendered-width``/``-height``
attributes written by the browser snapshot, or from plain ``width`` and
``height`` attributes.
"""

import re
from pathlib import Path
from typing import Callable, Iterator

from bs4 import BeautifulSoup, NavigableString, Tag

from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)

_DIMENSION = re.compile(r"^\s*(\d+(?:\.\d+)?)")

_HIDDEN_STYLE_PATTERNS = [
    re.compile(r"display\s*:\s*none", re.IGNORECASE),
    re.compile(r"visibility\s*:\s*hidden", re.IGNORECASE),
]


def _parse_dimension(value: str | None) -> float | None:
    if not value:
        return None
    match = _DIMENSION.match(value)
    return float(match.group(1)) if match else None


class SoupElement:
    """PageElement backed by a bs4 Tag."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __eq__(self, other: object) -> bool:
        # bs4 compares tags structurally; elements are identities
        return isinstance(other, SoupElement) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        classes = " ".join(self._tag.get("class", []))
        return f"SoupElement(<{self._tag.name} class={classes!r}>)"

    @property
    def tag(self) -> Tag:
        """The wrapped bs4 Tag."""
        return self._tag

    @property
    def tag_name(self) -> str:
        return (self._tag.name or "").lower()

    @property
    def text(self) -> str:
        return self._tag.get_text()

    @property
    def parent(self) -> "SoupElement | None":
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return SoupElement(parent)

    @property
    def size(self) -> tuple[float, float] | None:
        width = _parse_dimension(
            self._tag.get("data-rendered-width") or self._tag.get("width")
        )
        height = _parse_dimension(
            self._tag.get("data-rendered-height") or self._tag.get("height")
        )
        if width is None or height is None:
            return None
        return width, height

    @property
    def is_hidden(self) -> bool:
        if self._tag.has_attr("hidden"):
            return True
        style = self._tag.get("style", "")
        return bool(style) and any(p.search(style) for p in _HIDDEN_STYLE_PATTERNS)

    def select(self, selector: str) -> list["SoupElement"]:
        return [SoupElement(tag) for tag in self._tag.select(selector)]

    def select_one(self, selector: str) -> "SoupElement | None":
        tag = self._tag.select_one(selector)
        return SoupElement(tag) if tag is not None else None

    def get_attribute(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        # bs4 returns multi-valued attributes (class, rel) as lists
        if isinstance(value, list):
            return " ".join(value)
        return value

    def closest(self, selector: str) -> "SoupElement | None":
        tag = self._tag.css.closest(selector)
        return SoupElement(tag) if tag is not None else None

    def matches(self, selector: str) -> bool:
        return bool(self._tag.css.match(selector))

    def text_nodes(
        self,
        prune: Callable[["SoupElement"], bool] | None = None,
    ) -> Iterator[tuple[str, "SoupElement"]]:
        stack: list = [iter(self._tag.children)]
        parents: list[Tag] = [self._tag]

        while stack:
            node = next(stack[-1], None)
            if node is None:
                stack.pop()
                parents.pop()
                continue

            if isinstance(node, Tag):
                if prune is not None and prune(SoupElement(node)):
                    continue
                stack.append(iter(node.children))
                parents.append(node)
            elif type(node) is NavigableString:
                # Comments, script and style strings are NavigableString
                # subclasses and are excluded here
                yield str(node), SoupElement(parents[-1])


class SoupDocument:
    """
    PageDocument backed by a BeautifulSoup parse of an HTML snapshot.

    Example:
        >>> doc = SoupDocument(html, url="https://www.google.com/search?q=python")
        >>> doc.select("div.g")
    """

    def __init__(
        self,
        html: str,
        url: str,
        title: str | None = None,
        parser: str = "html.parser",
    ) -> None:
        self._soup = BeautifulSoup(html, parser)
        self._url = url
        if title is None:
            title_tag = self._soup.find("title")
            title = title_tag.get_text(strip=True) if title_tag else ""
        self._title = title

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        url: str,
        title: str | None = None,
    ) -> "SoupDocument":
        """Load a saved HTML page from disk."""
        html = Path(path).read_text(encoding="utf-8", errors="replace")
        logger.debug(f"Loaded {len(html)} chars of HTML from {path}")
        return cls(html, url=url, title=title)

    @property
    def url(self) -> str:
        return self._url

    @property
    def title(self) -> str:
        return self._title

    @property
    def root(self) -> SoupElement:
        body = self._soup.find("body")
        return SoupElement(body if isinstance(body, Tag) else self._soup)

    def select(self, selector: str) -> list[SoupElement]:
        return [SoupElement(tag) for tag in self._soup.select(selector)]

    def select_one(self, selector: str) -> SoupElement | None:
        tag = self._soup.select_one(selector)
        return SoupElement(tag) if tag is not None else None
