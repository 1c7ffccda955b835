"""
Rule-based extractors for the four page types the site serves.

Each extract_* method takes an already-parsed document and returns schema
records. Missing markup never raises: titles default to "Unknown", text
fields to "", statuses to UNKNOWN, and list items without a usable link or
title are dropped.

Input:  BeautifulSoup document + SiteConfig (selectors, base URL)
Output: ListingPage | WorkDetail | list[SubUnit] | list[ContentPage]
"""

from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .schemas import (
    SiteConfig, ListingPage, WorkSummary, WorkDetail, SubUnit, ContentPage
)
from .selectors import SelectorResolver
from .normalizers import (
    resolve_url, trim_text, pick_image_url, first_attribute, classify_status,
    parse_chapter_date, parse_chapter_number
)
from .logger import get_module_logger

logger = get_module_logger("extractor")

# Reader images use only these two attributes, unlike covers
PAGE_IMAGE_ATTRIBUTES = ("data-src", "src")

UNKNOWN_TITLE = "Unknown"


class Extractor:
    """Extracts catalog records from RavenScans documents."""

    def __init__(self, config: SiteConfig, resolver: Optional[SelectorResolver] = None):
        self.config = config
        self.selectors = config.selectors
        self.resolver = resolver or SelectorResolver()

    def _absolute(self, href: Optional[str]) -> str:
        return resolve_url(href or "", self.config.base_url)

    # --- Listing / search pages ---

    def extract_listing(self, doc: BeautifulSoup) -> ListingPage:
        """
        Extract the work summaries of a listing or search results page.

        Items missing a title or a link are skipped.
        """
        works = []
        items = self.resolver.resolve(doc, self.selectors.list_item)

        for item in items:
            title = trim_text(self.resolver.resolve_first(item, self.selectors.title))
            link = self.resolver.resolve_first(item, self.selectors.href)
            href = self._absolute(first_attribute(link, ("href",)))

            if not title or not href:
                logger.debug(f"Skipping listing item (title={title!r}, href={href!r})")
                continue

            cover_node = self.resolver.resolve_first(item, self.selectors.cover)
            cover = self._absolute(pick_image_url(cover_node))

            works.append(WorkSummary(id=href, title=title, cover=cover, url=href))

        has_more = self._has_more(doc)
        logger.info(f"Extracted {len(works)} of {len(items)} listing item(s)")
        return ListingPage(works=works, has_more=has_more)

    def _has_more(self, doc: BeautifulSoup) -> bool:
        # Without inference the host is always told to keep paging
        if not self.config.infer_has_more:
            return True
        return self.resolver.resolve_first(doc, self.selectors.pagination_next) is not None

    # --- Work detail pages ---

    def extract_detail(self, doc: BeautifulSoup, source_url: str) -> WorkDetail:
        """
        Extract the full metadata record of a work.

        Args:
            doc: Parsed work page
            source_url: Address the page was fetched from; used as both id and url

        Returns:
            WorkDetail with every field filled or defaulted
        """
        title = trim_text(self.resolver.resolve_first(doc, self.selectors.detail_title))
        meta = self.resolver.resolve_first(doc, self.selectors.manga_meta)

        description = trim_text(self.resolver.resolve_first(meta, self.selectors.summary))

        categories = []
        for genre in self.resolver.resolve(meta, self.selectors.genres):
            name = trim_text(genre)
            if name:
                categories.append(name)

        status = classify_status(trim_text(self.resolver.resolve_first(meta, self.selectors.status)))

        og_image = self.resolver.resolve_first(doc, self.selectors.og_image)
        cover = self._absolute(first_attribute(og_image, ("content",)))

        logger.info(f"Extracted detail for {source_url}: {len(categories)} categories, status={status.value}")
        return WorkDetail(
            id=source_url,
            title=title or UNKNOWN_TITLE,
            cover=cover,
            description=description,
            categories=categories,
            status=status,
            url=source_url,
        )

    # --- Chapter lists ---

    def _chapter_anchor(self, node: Tag) -> Optional[Tag]:
        if node.name == "a":
            return node
        return node.find("a", href=True)

    def _chapter_title(self, node: Tag, anchor: Tag, date_node: Optional[Tag]) -> str:
        if not self.config.clean_chapter_titles:
            return trim_text(node)
        if date_node is None or not any(parent is anchor for parent in date_node.parents):
            return trim_text(anchor)
        # The date sits inside the link on some themes
        date_strings = {id(s) for s in date_node.strings}
        parts = [s for s in anchor.strings if id(s) not in date_strings]
        return " ".join(" ".join(parts).split())

    def extract_chapters(self, doc: BeautifulSoup, now: Optional[datetime] = None) -> list[SubUnit]:
        """
        Extract a work's chapters in document order (newest first on the site).

        Args:
            doc: Parsed work page
            now: Reference time for relative dates ("2 days ago")

        Returns:
            SubUnit list; nodes without a link are skipped
        """
        chapters = []

        for node in self.resolver.resolve(doc, self.selectors.chapter_list):
            anchor = self._chapter_anchor(node)
            href = self._absolute(first_attribute(anchor, ("href",)))
            if not href:
                logger.debug("Skipping chapter node without href")
                continue

            date_node = self.resolver.resolve_first(node, self.selectors.chapter_date)
            title = self._chapter_title(node, anchor, date_node)
            volume, number = parse_chapter_number(title)

            chapters.append(SubUnit(
                id=href,
                title=title,
                volume=volume,
                chapter=number,
                url=href,
                date_updated=parse_chapter_date(trim_text(date_node), now=now) if date_node is not None else None,
            ))

        logger.info(f"Extracted {len(chapters)} chapter(s)")
        return chapters

    # --- Reader pages ---

    def extract_pages(self, doc: BeautifulSoup) -> list[ContentPage]:
        """
        Extract the page images of a chapter in reading order.

        Images with neither data-src nor src are skipped and do not use up an
        index, so indices are always 0..n-1.
        """
        pages = []

        for img in self.resolver.resolve(doc, self.selectors.page_image):
            url = first_attribute(img, PAGE_IMAGE_ATTRIBUTES)
            if not url:
                continue
            pages.append(ContentPage(index=len(pages), url=self._absolute(url)))

        logger.info(f"Extracted {len(pages)} page(s)")
        return pages
