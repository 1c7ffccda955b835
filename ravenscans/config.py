"""
Static configuration: site origin, client identity and the selector table.

The selector alternatives cover the Madara theme and the older MangaReader
("bsx"/"infox"/"eplister") theme, both of which still serve pages on the site.
Environment variables (loaded from .env by the runner scripts) can override
the scalar settings:

  RAVENSCANS_BASE_URL              site origin
  RAVENSCANS_USER_AGENT            client identity header
  RAVENSCANS_TIMEOUT               transport timeout in seconds ("none" disables it)
  RAVENSCANS_INFER_HAS_MORE        "1"/"true" to derive has_more from pagination links
  RAVENSCANS_CLEAN_CHAPTER_TITLES  "1"/"true" to title chapters by link text alone
"""

import os
from typing import Optional

from .schemas import SelectorSet, SelectorTable, SiteConfig
from .exceptions import ConfigError
from .logger import get_module_logger

logger = get_module_logger("config")

DEFAULT_BASE_URL = "https://ravenscans.com"

# Mobile client identity; the site serves the lightweight theme to it
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Mobile/15E148 Aidoku"
)

DEFAULT_TIMEOUT = 30.0

DEFAULT_SELECTORS = SelectorTable(
    list_item=SelectorSet.of(
        "list_item", "div.page-item-detail", "div.col-6.col-md-3 div.item", "div.bsx"
    ),
    title=SelectorSet.of("title", "h3 a", ".post-title a", ".tt"),
    cover=SelectorSet.of("cover", "img"),
    href=SelectorSet.of("href", "a"),
    pagination_next=SelectorSet.of("pagination_next", "a.next", "a.r", "a.nav-previous"),
    detail_title=SelectorSet.of("detail_title", "h1", ".entry-title", ".post-title h1"),
    og_image=SelectorSet.of("og_image", "meta[property='og:image']"),
    manga_meta=SelectorSet.of("manga_meta", "div.post-content", ".infox"),
    summary=SelectorSet.of("summary", ".summary__content", ".entry-content", ".desc"),
    genres=SelectorSet.of("genres", ".genres a", ".wd-full .mgen a"),
    status=SelectorSet.of(
        "status",
        ".post-status .summary-content",
        ".imptdt:-soup-contains('Status') i",
        ".tsinfo .imptdt:nth-child(2) i",
    ),
    chapter_list=SelectorSet.of(
        "chapter_list", "li.wp-manga-chapter", "ul.main .lch a", ".cl li a", ".eplister ul li a"
    ),
    chapter_date=SelectorSet.of(
        "chapter_date", "span.chapter-release-date", ".chapter-time", ".right i", ".chapterdate"
    ),
    page_image=SelectorSet.of(
        "page_image", "div.reading-content img", ".entry-content img", ".read-content img"
    ),
)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _parse_timeout(raw: str) -> Optional[float]:
    if raw.strip().lower() in ("none", "off", "0"):
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(
            f"RAVENSCANS_TIMEOUT must be a number of seconds, got {raw!r}",
            details={"RAVENSCANS_TIMEOUT": raw}
        )
    if timeout < 0:
        raise ConfigError(
            "RAVENSCANS_TIMEOUT must not be negative",
            details={"RAVENSCANS_TIMEOUT": raw}
        )
    return timeout


def _parse_flag(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean flag, got {raw!r}", details={name: raw})


def load_config(
    base_url: Optional[str] = None,
    user_agent: Optional[str] = None,
    timeout: Optional[float] = None,
    infer_has_more: Optional[bool] = None,
    clean_chapter_titles: Optional[bool] = None,
    selectors: Optional[SelectorTable] = None
) -> SiteConfig:
    """
    Build the SiteConfig for this process.

    Explicit arguments win over environment variables, which win over the
    module defaults.

    Raises:
        ConfigError: if an environment variable holds an unusable value
    """
    if base_url is None:
        base_url = os.getenv("RAVENSCANS_BASE_URL") or DEFAULT_BASE_URL
    if user_agent is None:
        user_agent = os.getenv("RAVENSCANS_USER_AGENT") or DEFAULT_USER_AGENT

    if timeout is None:
        raw_timeout = os.getenv("RAVENSCANS_TIMEOUT")
        timeout = _parse_timeout(raw_timeout) if raw_timeout is not None else DEFAULT_TIMEOUT

    if infer_has_more is None:
        raw_flag = os.getenv("RAVENSCANS_INFER_HAS_MORE")
        infer_has_more = (
            _parse_flag("RAVENSCANS_INFER_HAS_MORE", raw_flag) if raw_flag is not None else False
        )

    if clean_chapter_titles is None:
        raw_flag = os.getenv("RAVENSCANS_CLEAN_CHAPTER_TITLES")
        clean_chapter_titles = (
            _parse_flag("RAVENSCANS_CLEAN_CHAPTER_TITLES", raw_flag) if raw_flag is not None else False
        )

    if not base_url.startswith(("http://", "https://")):
        raise ConfigError(
            f"Base URL must be absolute, got {base_url!r}",
            details={"base_url": base_url}
        )

    config = SiteConfig(
        base_url=base_url,
        user_agent=user_agent,
        timeout=timeout,
        infer_has_more=infer_has_more,
        clean_chapter_titles=clean_chapter_titles,
        selectors=selectors or DEFAULT_SELECTORS,
    )
    logger.debug(f"Loaded config for {config.base_url} (timeout={config.timeout})")
    return config
