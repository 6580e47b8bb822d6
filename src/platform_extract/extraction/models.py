"""
Result types produced by platform extractors.

ExtractedItem and ExtractionResult are created fresh per extraction call
and handed to the caller; nothing in the engine keeps references to them.
to_dict() renders the camelCase wire shape consumed by the chat/summary
side of the system.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from platform_extract.extraction.full_content import parse_full_content_marker


@dataclass
class ItemMetadata:
    """Best-effort metadata. Every field is optional."""

    author: str | None = None
    publish_date: str | None = None
    view_count: str | None = None
    like_count: str | None = None
    tags: list[str] = field(default_factory=list)
    source: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.author
            or self.publish_date
            or self.view_count
            or self.like_count
            or self.tags
            or self.source
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.author:
            data["author"] = self.author
        if self.publish_date:
            data["publishDate"] = self.publish_date
        if self.view_count:
            data["viewCount"] = self.view_count
        if self.like_count:
            data["likeCount"] = self.like_count
        if self.tags:
            data["tags"] = list(self.tags)
        if self.source:
            data["source"] = self.source
        return data


@dataclass
class ExtractedItem:
    """
    One post or search result.

    Attributes:
        index: 1-based position of the source element among the discovered
            candidates. Items dropped for short content leave gaps.
        title: Title text, at most 200 characters
        content: Cleaned preview or full content, or a full-content marker
        link: Absolute URL or empty string
        image: Absolute URL or empty string
        metadata: None when nothing was found
    """

    index: int
    title: str
    content: str
    link: str = ""
    image: str = ""
    metadata: ItemMetadata | None = None

    @property
    def full_content_url(self) -> str | None:
        """Detail URL still waiting to be fetched, if content is a marker."""
        return parse_full_content_marker(self.content)

    def with_content(self, content: str) -> "ExtractedItem":
        return replace(self, content=content)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "index": self.index,
            "title": self.title,
            "content": self.content,
            "link": self.link,
            "image": self.image,
        }
        if self.metadata is not None and not self.metadata.is_empty:
            data["metadata"] = self.metadata.to_dict()
        return data


@dataclass
class ExtractionResult:
    """
    Outcome of one extraction call.

    A successful result may hold zero items (nothing found is not an
    error). Failed results carry ``error`` and best-effort page details.
    """

    items: list[ExtractedItem]
    total_found: int
    page_url: str
    page_title: str
    platform: str
    success: bool = True
    error: str | None = None

    @classmethod
    def failure(
        cls,
        error: str,
        platform: str,
        page_url: str = "",
        page_title: str = "",
    ) -> "ExtractionResult":
        """Structured result for a batch that could not be extracted."""
        return cls(
            items=[],
            total_found=0,
            page_url=page_url,
            page_title=page_title,
            platform=platform,
            success=False,
            error=error,
        )

    @classmethod
    def unsupported(cls, page_url: str, page_title: str = "") -> "ExtractionResult":
        """Result returned when no extractor handles the page."""
        return cls.failure(
            error=f"No extractor available for this page: {page_url}",
            platform="unknown",
            page_url=page_url,
            page_title=page_title,
        )

    @property
    def pending_full_content(self) -> list[ExtractedItem]:
        """Items whose content is a full-content marker."""
        return [item for item in self.items if item.full_content_url]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "items": [item.to_dict() for item in self.items],
            "totalFound": self.total_found,
            "pageUrl": self.page_url,
            "pageTitle": self.page_title,
            "platform": self.platform,
        }
        if self.error is not None:
            data["error"] = self.error
        return data
