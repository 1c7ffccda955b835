"""
Field normalizers: pure functions that turn raw markup fragments into the
canonical values stored on the schema records.

None of these raise on missing or odd input. An absent node, an empty
attribute or an unrecognized string maps to "", None or WorkStatus.UNKNOWN.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from bs4 import Tag

from .schemas import WorkStatus

# Lazy-loading themes put the real image in data-src and a placeholder in src
IMAGE_ATTRIBUTES = ("data-src", "data-lazy-src", "src")

# Absolute formats seen in chapter lists ("March 5, 2024", "2024-03-05", ...)
DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%Y-%m-%d", "%d/%m/%Y")

RELATIVE_DATE_PATTERN = re.compile(
    r"(\d+)\s*(second|sec|minute|min|hour|day|week|month|year)s?\s+ago",
    re.IGNORECASE
)

# Length of one unit; months and years are approximate
RELATIVE_UNITS = {
    "second": timedelta(seconds=1),
    "sec": timedelta(seconds=1),
    "minute": timedelta(minutes=1),
    "min": timedelta(minutes=1),
    "hour": timedelta(hours=1),
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}

CHAPTER_NUMBER_PATTERN = re.compile(r"\b(?:chapter|ch\.?|episode|ep\.?)\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
VOLUME_NUMBER_PATTERN = re.compile(r"\b(?:volume|vol\.?)\s*(\d+(?:\.\d+)?)", re.IGNORECASE)


def resolve_url(href: str, base_url: str) -> str:
    """
    Turn an href into an absolute URL on the site.

    Absolute hrefs come back unchanged; protocol-relative ones get "https:";
    everything else is joined onto base_url. Applying the function twice gives
    the same result as applying it once.
    """
    href = (href or "").strip()
    if not href:
        return ""
    if re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*:", href):
        return href
    if href.startswith("//"):
        return f"https:{href}"
    origin = base_url.rstrip("/")
    if not href.startswith("/"):
        href = f"/{href}"
    return f"{origin}{href}"


def trim_text(node: Optional[Tag]) -> str:
    """Return the node's visible text with surrounding whitespace removed."""
    if node is None:
        return ""
    return node.get_text().strip()


def _attribute(node: Tag, name: str) -> Optional[str]:
    value = node.get(name)
    if isinstance(value, list):
        # Multi-valued attributes come back as lists from BeautifulSoup
        value = " ".join(value)
    if value is None:
        return None
    value = value.strip()
    return value or None


def first_attribute(node: Optional[Tag], names: tuple[str, ...]) -> Optional[str]:
    """Return the first present, non-empty attribute value among names."""
    if node is None:
        return None
    for name in names:
        value = _attribute(node, name)
        if value:
            return value
    return None


def pick_image_url(node: Optional[Tag]) -> Optional[str]:
    """
    Pick the real image URL of an <img>.

    Checks data-src, then data-lazy-src, then src. Containers are searched for
    their first <img>. Returns None when no candidate attribute has a value.
    """
    if node is None:
        return None
    if node.name != "img":
        node = node.find("img")
        if node is None:
            return None
    return first_attribute(node, IMAGE_ATTRIBUTES)


def classify_status(raw: Optional[str]) -> WorkStatus:
    """Map a free-form status label onto WorkStatus."""
    text = (raw or "").lower()
    if "ongoing" in text:
        return WorkStatus.ONGOING
    if "complete" in text:
        return WorkStatus.COMPLETED
    return WorkStatus.UNKNOWN


def parse_chapter_date(raw: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a chapter release date.

    Understands the absolute formats in DATE_FORMATS and relative labels such
    as "3 hours ago", "yesterday" or "just now". Returns an aware UTC datetime,
    or None when the text is empty or unrecognized.
    """
    text = " ".join((raw or "").split())
    if not text:
        return None

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    lowered = text.lower()
    if lowered in ("just now", "now", "today"):
        return now
    if lowered == "yesterday":
        return now - timedelta(days=1)

    match = RELATIVE_DATE_PATTERN.search(text)
    if match:
        amount = int(match.group(1))
        unit = match.group(2).lower()
        return now - RELATIVE_UNITS[unit] * amount

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)
    return None


def parse_chapter_number(title: Optional[str]) -> tuple[str, str]:
    """
    Pull (volume, chapter) position hints out of a chapter title.

    "Vol. 2 Chapter 12.5" gives ("2", "12.5"); either element is "" when the
    title does not carry it.
    """
    title = title or ""
    volume = VOLUME_NUMBER_PATTERN.search(title)
    chapter = CHAPTER_NUMBER_PATTERN.search(title)
    return (
        volume.group(1) if volume else "",
        chapter.group(1) if chapter else "",
    )
