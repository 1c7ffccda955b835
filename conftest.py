"""Shared fixtures for the RavenScans source tests."""

import pytest

from ravenscans.config import load_config
from ravenscans.fetcher import parse_document
from ravenscans.extractor import Extractor

BASE_URL = "https://ravenscans.com"


class StubFetcher:
    """Serves canned HTML instead of touching the network."""

    def __init__(self, pages=None, default=b"<html><body></body></html>"):
        self.pages = pages or {}
        self.default = default
        self.requested = []
        self.closed = False

    def fetch_document(self, url):
        self.requested.append(url)
        body = self.pages.get(url, self.default)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return parse_document(body)

    def close(self):
        self.closed = True


@pytest.fixture
def config(monkeypatch):
    for name in ("RAVENSCANS_BASE_URL", "RAVENSCANS_USER_AGENT",
                 "RAVENSCANS_TIMEOUT", "RAVENSCANS_INFER_HAS_MORE",
                 "RAVENSCANS_CLEAN_CHAPTER_TITLES"):
        monkeypatch.delenv(name, raising=False)
    return load_config()


@pytest.fixture
def extractor(config):
    return Extractor(config)


@pytest.fixture
def doc():
    def _parse(html: str):
        return parse_document(html.encode("utf-8"))
    return _parse
