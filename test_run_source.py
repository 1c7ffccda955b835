"""Tests for the command-line runner."""

import json
import logging
import sys

import pytest

import run_source
from conftest import StubFetcher
from test_extractor import LISTING_HTML
from test_fetcher import FakeSession, FakeResponse
from ravenscans.fetcher import Fetcher
from ravenscans.logger import setup_logger
from ravenscans.source import RavenScansSource
from ravenscans.exceptions import TransportError


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    # Rebind without flushing: the per-test capture stream is already closed
    for handler in logging.getLogger("ravenscans").handlers:
        if type(handler) is logging.StreamHandler:
            handler.stream = sys.__stdout__
    setup_logger(level=logging.INFO, stream=sys.__stdout__)


def use_fetcher(monkeypatch, config, fetcher):
    monkeypatch.setattr(
        run_source, "RavenScansSource", lambda: RavenScansSource(config=config, fetcher=fetcher)
    )


def test_classify_prints_host_record(config, monkeypatch, capsys):
    use_fetcher(monkeypatch, config, StubFetcher())
    url = "https://ravenscans.com/manga/foo/chapter-3"

    assert run_source.main(["classify", url]) == 0

    assert json.loads(capsys.readouterr().out) == {"type": "chapter", "id": url, "url": url}


def test_list_popular(config, monkeypatch, capsys):
    fetcher = StubFetcher(default=LISTING_HTML)
    use_fetcher(monkeypatch, config, fetcher)

    assert run_source.main(["list", "--popular", "--page", "2"]) == 0

    result = json.loads(capsys.readouterr().out)
    assert fetcher.requested == [
        "https://ravenscans.com/?s=&post_type=wp-manga&m_orderby=trending&page=2"
    ]
    assert [w["title"] for w in result["works"]] == ["Alpha", "Beta"]
    assert result["has_more"] is True


def test_search_writes_output_file(config, monkeypatch, tmp_path, capsys):
    fetcher = StubFetcher(default=LISTING_HTML)
    use_fetcher(monkeypatch, config, fetcher)
    output = tmp_path / "result.json"

    assert run_source.main(["--output", str(output), "search", "alpha"]) == 0

    assert fetcher.requested == ["https://ravenscans.com/?s=alpha&post_type=wp-manga&page=1"]
    assert len(json.loads(output.read_text(encoding="utf-8"))["works"]) == 2


def test_transport_error_exit_code(config, monkeypatch, capsys):
    class FailingFetcher(StubFetcher):
        def fetch_document(self, url):
            raise TransportError("HTTP 404 for " + url, url=url, status_code=404)

    use_fetcher(monkeypatch, config, FailingFetcher())

    assert run_source.main(["detail", "https://ravenscans.com/manga/gone/"]) == 1

    result = json.loads(capsys.readouterr().out)
    assert result["error"] == "TransportError"
    assert result["status_code"] == 404


def test_command_is_required():
    with pytest.raises(SystemExit):
        run_source.main([])


def test_failed_fetch_keeps_stdout_json(config, monkeypatch, capsys):
    fetcher = Fetcher(config, session=FakeSession(FakeResponse(status_code=404, reason="Not Found")))
    use_fetcher(monkeypatch, config, fetcher)

    assert run_source.main(["detail", "https://ravenscans.com/manga/gone/"]) == 1

    captured = capsys.readouterr()
    result = json.loads(captured.out)
    assert result["error"] == "TransportError"
    assert result["status_code"] == 404
    assert "answered HTTP 404" in captured.err
