"""Tests for configuration loading and selector resolution."""

import re
from pathlib import Path

import pytest
from pydantic import ValidationError

from ravenscans.config import load_config, DEFAULT_SELECTORS, DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from ravenscans.selectors import SelectorResolver
from ravenscans.schemas import SelectorSet
from ravenscans.exceptions import ConfigError


def test_defaults(config):
    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.infer_has_more is False
    assert config.selectors is DEFAULT_SELECTORS


def test_environment_overrides(config, monkeypatch):
    monkeypatch.setenv("RAVENSCANS_BASE_URL", "https://mirror.example.org/")
    monkeypatch.setenv("RAVENSCANS_TIMEOUT", "none")
    monkeypatch.setenv("RAVENSCANS_INFER_HAS_MORE", "yes")

    loaded = load_config()

    assert loaded.base_url == "https://mirror.example.org"
    assert loaded.timeout is None
    assert loaded.infer_has_more is True


def test_explicit_arguments_win(config, monkeypatch):
    monkeypatch.setenv("RAVENSCANS_BASE_URL", "https://mirror.example.org")

    loaded = load_config(base_url="https://other.example.org", timeout=5)

    assert loaded.base_url == "https://other.example.org"
    assert loaded.timeout == 5


@pytest.mark.parametrize("name, value", [
    ("RAVENSCANS_TIMEOUT", "soon"),
    ("RAVENSCANS_TIMEOUT", "-1"),
    ("RAVENSCANS_INFER_HAS_MORE", "maybe"),
    ("RAVENSCANS_BASE_URL", "ravenscans.com"),
])
def test_invalid_environment(config, monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError):
        load_config()


def test_config_is_frozen(config):
    with pytest.raises(ValidationError):
        config.base_url = "https://elsewhere.example.org"


def test_selector_set_requires_selectors():
    with pytest.raises(ValidationError):
        SelectorSet.of("empty")
    with pytest.raises(ValidationError):
        SelectorSet.of("blank", "  ", "")


# --- Selector resolution ---

def test_resolve_first_non_empty_alternative(doc):
    page = doc('<div class="b">one</div><div class="b">two</div><div class="c">three</div>')
    resolver = SelectorResolver()

    matches = resolver.resolve(page, SelectorSet.of("t", ".a", ".b", ".c"))

    assert [m.get_text() for m in matches] == ["one", "two"]


def test_resolve_no_match_is_empty(doc):
    resolver = SelectorResolver()

    assert resolver.resolve(doc("<p>x</p>"), SelectorSet.of("t", ".a", "#b")) == []
    assert resolver.resolve_first(doc("<p>x</p>"), SelectorSet.of("t", ".a")) is None
    assert resolver.resolve(None, SelectorSet.of("t", "p")) == []


def test_resolve_skips_invalid_selector(doc):
    resolver = SelectorResolver()

    matches = resolver.resolve(doc("<p>x</p>"), SelectorSet.of("t", "div[", "p"))

    assert [m.get_text() for m in matches] == ["x"]


def test_resolve_within_sub_node(doc):
    page = doc('<div id="one"><span>a</span></div><div id="two"><span>b</span></div>')
    resolver = SelectorResolver()

    scope = page.find(id="two")

    assert [m.get_text() for m in resolver.resolve(scope, SelectorSet.of("t", "span"))] == ["b"]


def test_pyproject_readme_is_not_a_design_document():
    pyproject = Path(__file__).parent / "pyproject.toml"
    readme = re.search(r'^readme\s*=\s*"([^"]+)"', pyproject.read_text(encoding="utf-8"), re.M)

    assert readme is None or readme.group(1).upper().startswith("README")
