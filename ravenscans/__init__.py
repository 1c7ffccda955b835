"""
RavenScans catalog source.

Extracts works, work details, chapter lists and page images from the
RavenScans site into the schema records a reader host consumes.

Public API surface:
  Source        : RavenScansSource and module-level convenience functions
  Pipeline parts: Fetcher, parse_document, SelectorResolver, Extractor, classify_url
  Configuration : SiteConfig, SelectorSet, SelectorTable, load_config, DEFAULT_SELECTORS
  Data models   : WorkSummary, WorkDetail, SubUnit, ContentPage, ListingPage, Filter, UrlMatch
  Error types   : SourceError, TransportError, ParseError, ConfigError
"""

# --- Host-facing operations ---
from .source import (
    RavenScansSource, list_works, search, get_detail, get_sub_units, get_pages
)

# --- Pipeline components ---
from .fetcher import Fetcher, parse_document
from .selectors import SelectorResolver
from .extractor import Extractor
from .router import classify_url

# --- Configuration ---
from .config import load_config, DEFAULT_SELECTORS
from .schemas import SiteConfig, SelectorSet, SelectorTable

# --- Data models ---
from .schemas import (
    WorkSummary, WorkDetail, SubUnit, ContentPage, ListingPage, Filter, UrlMatch,
    WorkStatus, ContentRating, ViewerMode, ListingKind, FilterKind, UrlKind
)

# --- Exceptions ---
from .exceptions import SourceError, TransportError, ParseError, ConfigError

__version__ = "0.1.0"
__all__ = [
    "RavenScansSource",
    "list_works",
    "search",
    "get_detail",
    "get_sub_units",
    "get_pages",
    "Fetcher",
    "parse_document",
    "SelectorResolver",
    "Extractor",
    "classify_url",
    "load_config",
    "DEFAULT_SELECTORS",
    "SiteConfig",
    "SelectorSet",
    "SelectorTable",
    "WorkSummary",
    "WorkDetail",
    "SubUnit",
    "ContentPage",
    "ListingPage",
    "Filter",
    "UrlMatch",
    "WorkStatus",
    "ContentRating",
    "ViewerMode",
    "ListingKind",
    "FilterKind",
    "UrlKind",
    "SourceError",
    "TransportError",
    "ParseError",
    "ConfigError",
]
