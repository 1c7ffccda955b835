"""
Pydantic schemas for everything the source hands to the host, plus the
static selector/site configuration every extractor reads.

Data flow:
  SiteConfig (built once) → Fetcher / SelectorResolver / Extractor
  Extractor → ListingPage | WorkDetail | list[SubUnit] | list[ContentPage]
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Enumerations ---

class WorkStatus(Enum):
    """Publication status of a work."""
    ONGOING = "ongoing"
    COMPLETED = "completed"
    UNKNOWN = "unknown"


class ContentRating(Enum):
    """Audience rating; every work from this site is rated MATURE."""
    SAFE = "safe"
    SUGGESTIVE = "suggestive"
    MATURE = "mature"


class ViewerMode(Enum):
    """Reader layout the host should use."""
    RTL = "rtl"
    LTR = "ltr"
    VERTICAL = "vertical"
    SCROLL = "scroll"


class ListingKind(Enum):
    """The two catalog endpoints exposed by the site."""
    LATEST = "latest"
    POPULAR = "popular"


class FilterKind(Enum):
    """Filter kinds the host may send with a listing or search request."""
    TITLE = "title"
    GENRE = "genre"
    SELECT = "select"
    SORT = "sort"
    CHECK = "check"
    GROUP = "group"


class UrlKind(Enum):
    """Result of classifying a deep link."""
    WORK = "work"
    CHAPTER = "chapter"


# --- Selector configuration ---

class SelectorSet(BaseModel):
    """
    A named extraction target and its ordered CSS alternatives.

    The resolver tries alternatives in order and keeps the first one that
    matches anything; matches are never merged across alternatives.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    selectors: tuple[str, ...]

    @field_validator("selectors")
    @classmethod
    def _not_empty(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        cleaned = tuple(s.strip() for s in value if s and s.strip())
        if not cleaned:
            raise ValueError("a SelectorSet needs at least one selector")
        return cleaned

    @classmethod
    def of(cls, name: str, *selectors: str) -> "SelectorSet":
        return cls(name=name, selectors=selectors)


class SelectorTable(BaseModel):
    """One SelectorSet per named extraction target."""
    model_config = ConfigDict(frozen=True)

    # Listing pages
    list_item: SelectorSet
    title: SelectorSet
    cover: SelectorSet
    href: SelectorSet
    pagination_next: SelectorSet

    # Work detail pages
    detail_title: SelectorSet
    og_image: SelectorSet
    manga_meta: SelectorSet
    summary: SelectorSet
    genres: SelectorSet
    status: SelectorSet

    # Chapter lists and reader pages
    chapter_list: SelectorSet
    chapter_date: SelectorSet
    page_image: SelectorSet


class SiteConfig(BaseModel):
    """Process-wide, read-only configuration handed to every component."""
    model_config = ConfigDict(frozen=True)

    base_url: str
    user_agent: str
    selectors: SelectorTable
    timeout: Optional[float] = 30.0     # Seconds; None leaves the transport unbounded
    infer_has_more: bool = False        # Derive ListingPage.has_more from pagination links
    clean_chapter_titles: bool = False  # Chapter title from the link text only, without the date

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


# --- Host filter input ---

class Filter(BaseModel):
    """A single filter value sent by the host."""
    kind: FilterKind
    name: str = ""
    value: str = ""


# --- Records returned to the host ---

class WorkSummary(BaseModel):
    """A work as it appears on a listing or search page."""
    id: str
    title: str
    cover: str = ""
    url: str


class ListingPage(BaseModel):
    """One page of listing or search results."""
    works: list[WorkSummary] = Field(default_factory=list)
    has_more: bool = True


class WorkDetail(BaseModel):
    """Full metadata for a single work."""
    id: str
    title: str
    cover: str = ""
    author: str = ""
    artist: str = ""
    description: str = ""
    categories: list[str] = Field(default_factory=list)
    status: WorkStatus = WorkStatus.UNKNOWN
    content_rating: ContentRating = ContentRating.MATURE
    viewer: ViewerMode = ViewerMode.SCROLL
    url: str


class SubUnit(BaseModel):
    """
    A chapter of a work.

    volume/chapter are position hints and stay blank when the title does not
    carry them. date_updated is None when the page shows no date or shows one
    that could not be parsed.
    """
    id: str
    title: str
    volume: str = ""
    chapter: str = ""
    url: str
    date_updated: Optional[datetime] = None
    scanlator: str = ""
    lang: str = "en"


class ContentPage(BaseModel):
    """A single image of a chapter, in reading order."""
    index: int = Field(ge=0)
    url: str
    base64: str = ""
    text: str = ""


class UrlMatch(BaseModel):
    """Deep-link classification of an arbitrary URL."""
    type: UrlKind
    id: str
    url: str

    def to_host(self) -> dict:
        return {"type": self.type.value, "id": self.id, "url": self.url}
