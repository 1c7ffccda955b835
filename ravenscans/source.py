"""
Host-facing operations of the RavenScans source.

Wires Fetcher → parse → Extractor for each operation. Every operation makes
at most one request and keeps no state between calls.
"""

from datetime import datetime
from typing import Iterable, Optional
from urllib.parse import quote

from .schemas import (
    SiteConfig, Filter, FilterKind, ListingKind, ListingPage, WorkDetail, SubUnit, ContentPage
)
from .config import load_config
from .fetcher import Fetcher
from .extractor import Extractor
from .router import classify_url
from .logger import get_module_logger, setup_logger

logger = get_module_logger("source")

# m_orderby values of the WordPress manga search endpoint
LISTING_ORDER = {
    ListingKind.LATEST: "latest",
    ListingKind.POPULAR: "trending",
}

POPULAR_SORT_VALUES = ("popular", "trending")


def clamp_page(page: int) -> int:
    """Pages are 1-based; anything lower is treated as the first page."""
    return page if page >= 1 else 1


def listing_kind(filters: Optional[Iterable[Filter]]) -> ListingKind:
    """
    Pick the listing endpoint requested by the host.

    The host sends the listing name as a TITLE filter ("Popular"); a SORT
    filter of "popular"/"trending" selects the same endpoint.
    """
    for f in filters or ():
        if f.kind == FilterKind.TITLE and f.value == "Popular":
            return ListingKind.POPULAR
        if f.kind == FilterKind.SORT and f.value.strip().lower() in POPULAR_SORT_VALUES:
            return ListingKind.POPULAR
    return ListingKind.LATEST


def search_term(filters: Optional[Iterable[Filter]]) -> str:
    """Return the free-text query; only TITLE filters carry one, the last wins."""
    term = ""
    for f in filters or ():
        if f.kind == FilterKind.TITLE:
            term = f.value
        else:
            logger.debug(f"Ignoring {f.kind.value} filter {f.name!r} in search")
    return term


class RavenScansSource:
    """
    Catalog source for RavenScans.

    Operations:
    1. list_works / search: one listing page of WorkSummary records
    2. get_detail: WorkDetail for a work URL
    3. get_sub_units: chapters of a work, newest first
    4. get_pages: page images of a chapter
    5. classify_url: work/chapter deep-link classification (no I/O)
    """

    def __init__(
        self,
        config: Optional[SiteConfig] = None,
        fetcher: Optional[Fetcher] = None,
        log_level: int = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        self.config = config or load_config()
        self.fetcher = fetcher or Fetcher(self.config)
        self.extractor = Extractor(self.config)

        logger.info(f"RavenScansSource initialized for {self.config.base_url}")

    # --- URL construction ---

    def listing_url(self, kind: ListingKind, page: int) -> str:
        return (
            f"{self.config.base_url}/?s=&post_type=wp-manga"
            f"&m_orderby={LISTING_ORDER[kind]}&page={clamp_page(page)}"
        )

    def search_url(self, term: str, page: int) -> str:
        return (
            f"{self.config.base_url}/?s={quote(term, safe='')}"
            f"&post_type=wp-manga&page={clamp_page(page)}"
        )

    # --- Operations ---

    def list_works(self, filters: Optional[Iterable[Filter]] = None, page: int = 1) -> ListingPage:
        """
        Fetch one page of the latest or popular listing.

        Raises:
            TransportError: if the listing page cannot be fetched
            ParseError: if it cannot be parsed
        """
        kind = listing_kind(filters)
        doc = self.fetcher.fetch_document(self.listing_url(kind, page))
        return self.extractor.extract_listing(doc)

    def search(self, filters: Optional[Iterable[Filter]] = None, page: int = 1) -> ListingPage:
        """
        Search by title. Non-text filters are accepted and ignored; an empty
        term still issues the request.
        """
        term = search_term(filters)
        doc = self.fetcher.fetch_document(self.search_url(term, page))
        return self.extractor.extract_listing(doc)

    def get_detail(self, work_id: str) -> WorkDetail:
        """Fetch a work page; work_id is its absolute URL."""
        doc = self.fetcher.fetch_document(work_id)
        return self.extractor.extract_detail(doc, work_id)

    def get_sub_units(self, work_id: str, now: Optional[datetime] = None) -> list[SubUnit]:
        """Fetch a work page and return its chapters in page order."""
        doc = self.fetcher.fetch_document(work_id)
        return self.extractor.extract_chapters(doc, now=now)

    def get_pages(self, sub_unit_id: str) -> list[ContentPage]:
        """Fetch a chapter page and return its images in reading order."""
        doc = self.fetcher.fetch_document(sub_unit_id)
        return self.extractor.extract_pages(doc)

    def classify_url(self, url: str) -> dict:
        """Classify a deep link; returns {"type", "id", "url"}."""
        return classify_url(url).to_host()

    def close(self):
        self.fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def list_works(filters: Optional[Iterable[Filter]] = None, page: int = 1) -> ListingPage:
    """Convenience function to list works with the default configuration."""
    with RavenScansSource() as source:
        return source.list_works(filters, page)


def search(filters: Optional[Iterable[Filter]] = None, page: int = 1) -> ListingPage:
    """Convenience function to search with the default configuration."""
    with RavenScansSource() as source:
        return source.search(filters, page)


def get_detail(work_id: str) -> WorkDetail:
    """Convenience function to fetch a work's details."""
    with RavenScansSource() as source:
        return source.get_detail(work_id)


def get_sub_units(work_id: str) -> list[SubUnit]:
    """Convenience function to fetch a work's chapters."""
    with RavenScansSource() as source:
        return source.get_sub_units(work_id)


def get_pages(sub_unit_id: str) -> list[ContentPage]:
    """Convenience function to fetch a chapter's pages."""
    with RavenScansSource() as source:
        return source.get_pages(sub_unit_id)
