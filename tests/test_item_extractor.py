"""
Tests for single-item extraction.

Tests title, link, image, content and metadata extraction on small
hand-written cards.
"""

import pytest

from platform_extract.config import ExtractionSettings
from platform_extract.core.exceptions import ItemExtractionError
from platform_extract.dom import SoupDocument
from platform_extract.extraction.full_content import FULL_CONTENT_MARKER
from platform_extract.extraction.item_extractor import (
    ItemExtractor,
    SelectorProfile,
    dedupe_overlapping,
)

ORIGIN = "https://www.example.com"
PAGE_URL = "https://www.example.com/feed/today"


def make_card(html: str) -> tuple[SoupDocument, object]:
    document = SoupDocument(
        f'<html><body><div class="card">{html}</div></body></html>', url=PAGE_URL
    )
    return document, document.select_one("div.card")


@pytest.fixture
def extractor() -> ItemExtractor:
    return ItemExtractor(
        SelectorProfile(origin=ORIGIN, content_selectors=(".desc",)),
        ExtractionSettings(),
    )


class TestDedupe:
    """Tests for overlapping candidate removal."""

    def test_keeps_longest_of_overlapping(self):
        texts = ["pasta recipe", "easy pasta recipe for two", "unrelated text"]

        assert dedupe_overlapping(texts) == ["easy pasta recipe for two", "unrelated text"]

    def test_exact_duplicates_collapse(self):
        assert dedupe_overlapping(["same text", "same text"]) == ["same text"]


class TestTitle:
    """Tests for title extraction."""

    def test_heading_title(self, extractor: ItemExtractor):
        _, card = make_card("<h3>  Sunset over the bay  </h3><p>body</p>")

        assert extractor.extract_title(card, 1) == "Sunset over the bay"

    def test_title_attribute_when_text_empty(self, extractor: ItemExtractor):
        _, card = make_card('<a title="Weekend hiking guide" href="/x"></a>')

        assert extractor.extract_title(card, 1) == "Weekend hiking guide"

    def test_too_short_falls_through(self, extractor: ItemExtractor):
        """A heading under five characters is skipped for the next selector."""
        _, card = make_card('<h2>Hi</h2><div class="post-title">Morning coffee notes</div>')

        assert extractor.extract_title(card, 1) == "Morning coffee notes"

    def test_placeholder_title(self, extractor: ItemExtractor):
        _, card = make_card("<p>no title anywhere</p>")

        assert extractor.extract_title(card, 7) == "Item 7"

    def test_title_length_bounds(self, extractor: ItemExtractor):
        """Accepted titles are between 5 and 199 characters."""
        _, card = make_card(f"<h1>{'x' * 200}</h1>")

        assert extractor.extract_title(card, 2) == "Item 2"


class TestLinks:
    """Tests for link extraction and URL resolution."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("https://other.com/a", "https://other.com/a"),
            ("//cdn.example.com/img.jpg", "https://cdn.example.com/img.jpg"),
            ("/explore/42", "https://www.example.com/explore/42"),
            ("next/page", "https://www.example.com/feed/next/page"),
            ("javascript:void(0)", ""),
            ("", ""),
        ],
    )
    def test_make_absolute_url(self, extractor: ItemExtractor, raw: str, expected: str):
        assert extractor.make_absolute_url(raw, PAGE_URL) == expected

    def test_profile_selector_priority(self):
        extractor = ItemExtractor(
            SelectorProfile(origin=ORIGIN, link_selectors=('a[href*="/explore/"]', "a[href]"))
        )
        _, card = make_card('<a href="/user/1">user</a><a href="/explore/9">note</a>')

        assert extractor.extract_link(card) == "/explore/9"

    def test_any_href_fallback(self, extractor: ItemExtractor):
        _, card = make_card('<div href="/odd/markup">x</div>')

        assert extractor.extract_link(card) == "/odd/markup"

    def test_no_link(self, extractor: ItemExtractor):
        _, card = make_card("<p>nothing</p>")

        assert extractor.extract_link(card) == ""


class TestImages:
    """Tests for content image selection."""

    def test_skips_small_measured_images(self, extractor: ItemExtractor):
        _, card = make_card(
            '<img src="https://x.com/badge.png" width="24" height="24">'
            '<img src="https://x.com/photo.jpg" width="300" height="200">'
        )

        assert extractor.extract_image(card) == "https://x.com/photo.jpg"

    def test_fifty_pixels_is_too_small(self, extractor: ItemExtractor):
        _, card = make_card('<img src="https://x.com/p.jpg" width="50" height="400">')

        assert extractor.extract_image(card) == ""

    def test_unmeasured_ui_images_rejected_by_url(self, extractor: ItemExtractor):
        _, card = make_card(
            '<img src="https://x.com/user-avatar.png">'
            '<img src="https://x.com/cover.jpg">'
        )

        assert extractor.extract_image(card) == "https://x.com/cover.jpg"

    def test_background_image_fallback(self, extractor: ItemExtractor):
        _, card = make_card(
            "<div style=\"background-image: url('https://x.com/bg.jpg')\"></div>"
        )

        assert extractor.extract_image(card) == "https://x.com/bg.jpg"


class TestContent:
    """Tests for preview and full content modes."""

    def test_profile_selector_content(self, extractor: ItemExtractor):
        _, card = make_card(
            '<p class="desc">A slow morning with fresh bread and strong coffee.'
            ' <a class="tag" href="/t">#breakfast</a></p>'
        )

        content = extractor.extract_preview_content(card)

        assert content == "A slow morning with fresh bread and strong coffee."

    def test_candidate_heuristic_keeps_longest(self, extractor: ItemExtractor):
        """Nested candidates collapse to the outermost text."""
        _, card = make_card(
            '<div class="summary">Day one of the coast trip '
            "<span>We drove along the cliffs all afternoon</span></div>"
        )

        content = extractor.extract_preview_content(card)

        assert content == (
            "Day one of the coast trip We drove along the cliffs all afternoon"
        )

    def test_aggressive_mode_skips_noise(self, extractor: ItemExtractor):
        _, card = make_card(
            "<b>1234567890123</b><i>点赞 跟大家分享一下</i><u>Harbour lights</u>"
        )

        assert extractor.extract_preview_content(card) == "Harbour lights"

    def test_full_mode_emits_marker(self, extractor: ItemExtractor):
        document, card = make_card('<a href="/explore/5">Open note</a>')

        content = extractor.extract_content(
            card, document, True, False, link="https://www.example.com/explore/5"
        )

        assert content == FULL_CONTENT_MARKER + "https://www.example.com/explore/5"

    def test_full_mode_without_link_uses_preview(self, extractor: ItemExtractor):
        document, card = make_card('<p class="desc">Notes from the farmers market today.</p>')

        content = extractor.extract_content(card, document, True, False, link="")

        assert content == "Notes from the farmers market today."

    def test_full_mode_on_detail_page(self, extractor: ItemExtractor):
        document = SoupDocument(
            "<html><body><main><p>The whole article body lives here.</p>"
            '<p style="display:none">hidden</p></main></body></html>',
            url=PAGE_URL,
        )

        content = extractor.extract_content(document.root, document, True, True)

        assert content == "The whole article body lives here."

    def test_detail_page_card_linking_to_itself_gets_page_content(self):
        extractor = ItemExtractor(
            SelectorProfile(origin=ORIGIN, detail_link_selector='a[href*="/explore/"]')
        )
        document = SoupDocument(
            '<html><body><main><a href="/explore/9?xsec=1">Permalink</a>'
            "<p>The whole article body lives here.</p></main></body></html>",
            url="https://www.example.com/explore/9",
        )
        card = document.select_one("main")

        assert extractor.other_detail_link(card, document) is None
        content = extractor.extract_content(card, document, True, True)
        assert "The whole article body lives here." in content

    def test_detail_page_card_linking_elsewhere_gets_marker(self):
        extractor = ItemExtractor(
            SelectorProfile(origin=ORIGIN, detail_link_selector='a[href*="/explore/"]')
        )
        document = SoupDocument(
            "<html><body><main><p>The whole article body lives here.</p></main>"
            '<div class="card"><a href="/explore/10">Another note entirely</a></div>'
            "</body></html>",
            url="https://www.example.com/explore/9",
        )
        card = document.select_one("div.card")

        content = extractor.extract_content(card, document, True, True)

        assert content == FULL_CONTENT_MARKER + "https://www.example.com/explore/10"


class TestExtractItem:
    """Tests for whole-item assembly."""

    def test_complete_item(self, extractor: ItemExtractor):
        document, card = make_card(
            '<a class="cover" href="/explore/77"><img src="//img.example.com/c.jpg"'
            ' width="200" height="200"></a>'
            "<h3>Rainy day ramen spots</h3>"
            '<p class="desc">Three small shops that are worth the queue in the rain.</p>'
            '<span class="author">Kenji</span>'
            '<span class="view-count">2.5万</span>'
            '<span class="like-count">3k</span>'
            '<a class="tag" href="/t/ramen">#ramen</a>'
        )

        item = extractor.extract_item(card, 4, False, document)

        assert item is not None
        assert item.index == 4
        assert item.title == "Rainy day ramen spots"
        assert item.link == "https://www.example.com/explore/77"
        assert item.image == "https://img.example.com/c.jpg"
        assert item.content == "Three small shops that are worth the queue in the rain."
        assert item.metadata.author == "Kenji"
        assert item.metadata.view_count == "2.5万"
        assert item.metadata.like_count == "3k"
        assert item.metadata.tags == ["ramen"]

    def test_no_metadata_is_none(self, extractor: ItemExtractor):
        document, card = make_card('<p class="desc">Only a description and nothing else.</p>')

        item = extractor.extract_item(card, 1, False, document)

        assert item is not None
        assert item.metadata is None

    @pytest.mark.parametrize("length", range(0, 21))
    def test_content_length_threshold(self, extractor: ItemExtractor, length: int):
        """Items survive exactly when their content is longer than 10 characters."""
        document, card = make_card(f'<p class="desc">{"a" * length}</p>')

        item = extractor.extract_item(card, 1, False, document)

        assert (item is not None) == (length > 10)
        if item is not None:
            assert len(item.content) > 10

    def test_unexpected_errors_are_wrapped(self, extractor: ItemExtractor):
        document, card = make_card("<p>x</p>")

        class Broken:
            def __getattr__(self, name):
                raise RuntimeError("element detached")

        with pytest.raises(ItemExtractionError) as exc_info:
            extractor.extract_item(Broken(), 3, False, document)

        assert exc_info.value.index == 3
