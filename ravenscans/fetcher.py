"""
Fetcher and document parser.

Fetcher.fetch() issues one GET with the configured client identity and
returns the body bytes. parse_document() turns those bytes into a
BeautifulSoup tree, decoding with the charset the page declares.
"""

import codecs
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup

from .schemas import SiteConfig
from .exceptions import TransportError, ParseError
from .logger import get_module_logger

logger = get_module_logger("fetcher")

# WHATWG encoding spec: browsers silently remap these labels
# https://encoding.spec.whatwg.org/#names-and-labels
WHATWG_CHARSET_MAP = {
    'iso-8859-1': 'windows-1252',
    'iso8859-1': 'windows-1252',
    'latin-1': 'windows-1252',
    'latin1': 'windows-1252',
    'us-ascii': 'windows-1252',
    'ascii': 'windows-1252',
    'iso-8859-9': 'windows-1254',
    'iso-8859-11': 'windows-874',
}

META_CHARSET_PATTERN = re.compile(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', re.IGNORECASE)


def detect_charset(raw_bytes: bytes) -> str:
    """
    Detect the declared charset from the first 2048 bytes of an HTML page.

    Handles both <meta charset="..."> and the http-equiv Content-Type form,
    applies the WHATWG label mapping and defaults to utf-8.
    """
    head = raw_bytes[:2048].decode('ascii', errors='ignore')
    match = META_CHARSET_PATTERN.search(head)
    if not match:
        return 'utf-8'
    charset = match.group(1).strip().lower()
    return WHATWG_CHARSET_MAP.get(charset, charset)


def parse_document(raw_bytes: bytes) -> BeautifulSoup:
    """
    Decode and parse an HTML byte stream.

    Undecodable bytes are replaced rather than rejected.

    Raises:
        ParseError: if the declared charset is unknown or the tree builder fails
    """
    charset = detect_charset(raw_bytes)
    try:
        codecs.lookup(charset)
    except LookupError:
        raise ParseError(
            f"Unknown charset declared by document: {charset}",
            details={"charset": charset}
        )

    html = raw_bytes.decode(charset, errors='replace')
    try:
        return BeautifulSoup(html, 'html5lib')
    except Exception as e:
        logger.error(f"HTML parsing failed: {e}")
        raise ParseError(f"HTML parsing failed: {e}", details={"charset": charset})


class Fetcher:
    """
    Blocking HTTP GET with a fixed User-Agent.

    Failures are raised as TransportError and never retried here.
    """

    def __init__(self, config: SiteConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        # Sent with every request; the session's own headers are left alone
        self.headers = {"User-Agent": config.user_agent}

    def fetch(self, url: str) -> bytes:
        """
        GET url and return the response body.

        Raises:
            TransportError: on connection failure, timeout or a non-2xx status
        """
        logger.info(f"GET {url}")
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.config.timeout)
        except requests.Timeout as e:
            logger.error(f"Timed out fetching {url}: {e}")
            raise TransportError(f"Request timed out: {e}", url=url)
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise TransportError(f"Request failed: {e}", url=url)

        if not 200 <= response.status_code < 300:
            logger.error(f"{url} answered HTTP {response.status_code}")
            raise TransportError(
                f"HTTP {response.status_code} for {url}",
                url=url,
                status_code=response.status_code,
                details={"reason": response.reason}
            )

        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    def fetch_document(self, url: str) -> BeautifulSoup:
        """Fetch url and parse the body into a document tree."""
        return parse_document(self.fetch(url))

    def close(self):
        self.session.close()
