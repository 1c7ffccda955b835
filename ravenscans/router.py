"""
Deep-link classification: decides whether a URL points at a work or a chapter.
"""

from urllib.parse import urlparse

from .schemas import UrlKind, UrlMatch

# Path fragments that only appear in chapter (reader) URLs
CHAPTER_MARKERS = ("/chapter/", "/ch/", "/chapter-")


def classify_url(url: str) -> UrlMatch:
    """Classify url as a CHAPTER if its path carries a chapter marker, else as a WORK."""
    path = urlparse(url).path
    kind = UrlKind.CHAPTER if any(marker in path for marker in CHAPTER_MARKERS) else UrlKind.WORK
    return UrlMatch(type=kind, id=url, url=url)
