"""
Page-access capability consumed by the extraction engine.

The engine never loads pages itself. It reads a PageDocument (title, URL,
selector queries) whose elements expose text, attributes, sub-queries and,
where the producer measured it, rendered geometry. dom.soup provides the
BeautifulSoup implementation; other producers only need to satisfy these
protocols.
"""

from typing import Callable, Iterator, Protocol, runtime_checkable


@runtime_checkable
class PageElement(Protocol):
    """One element of the page tree."""

    @property
    def tag_name(self) -> str:
        """Lower-case tag name."""
        ...

    @property
    def text(self) -> str:
        """Concatenated text of all descendant text nodes."""
        ...

    @property
    def parent(self) -> "PageElement | None":
        ...

    @property
    def size(self) -> tuple[float, float] | None:
        """Rendered (width, height) if known, else None."""
        ...

    @property
    def is_hidden(self) -> bool:
        """True when the element is hidden by inline style or attribute."""
        ...

    def select(self, selector: str) -> list["PageElement"]:
        ...

    def select_one(self, selector: str) -> "PageElement | None":
        ...

    def get_attribute(self, name: str) -> str | None:
        ...

    def closest(self, selector: str) -> "PageElement | None":
        """Nearest ancestor-or-self matching ``selector``."""
        ...

    def matches(self, selector: str) -> bool:
        ...

    def text_nodes(
        self,
        prune: Callable[["PageElement"], bool] | None = None,
    ) -> Iterator[tuple[str, "PageElement"]]:
        """
        Yield (text, parent element) for every text node in document order.

        Subtrees rooted at a descendant for which ``prune`` returns True
        are skipped entirely.
        """
        ...


@runtime_checkable
class PageDocument(Protocol):
    """The currently loaded page."""

    @property
    def url(self) -> str:
        ...

    @property
    def title(self) -> str:
        ...

    @property
    def root(self) -> PageElement:
        """Element used for whole-page text walks (usually <body>)."""
        ...

    def select(self, selector: str) -> list[PageElement]:
        ...

    def select_one(self, selector: str) -> PageElement | None:
        ...
