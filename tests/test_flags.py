"""Tests des feature flags head tags."""

from headtags.config.flags import ff_headtags_enabled, ff_page_cache_enabled


def test_defaults() -> None:
    assert ff_headtags_enabled() is True
    assert ff_page_cache_enabled() is False


def test_env_override(monkeypatch) -> None:
    monkeypatch.setenv("FF_HEADTAGS_ENABLED", "0")
    monkeypatch.setenv("PAGE_CACHE_ENABLED", "yes")
    assert ff_headtags_enabled() is False
    assert ff_page_cache_enabled() is True


def test_ff_prefix_wins(monkeypatch) -> None:
    monkeypatch.setenv("FF_HEADTAGS_PAGE_CACHE", "off")
    monkeypatch.setenv("PAGE_CACHE_ENABLED", "true")
    assert ff_page_cache_enabled() is False


def test_page_cache_strategy_follows_flag(monkeypatch, container) -> None:
    assert container.page_cache_strategy("page").get_cache_key() == "null_cache_strategy"
    monkeypatch.setenv("FF_HEADTAGS_PAGE_CACHE", "1")
    assert container.page_cache_strategy("page").get_cache_key() == "headtags_page_page"
    assert container.page_cache_strategy(None).get_cache_key() == "null_cache_strategy"
