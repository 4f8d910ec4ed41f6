"""Tests du détecteur de statut de cache des fragments."""

import pytest
from structlog.testing import capture_logs

from headtags.fragments.detector import FragmentCacheDetector


@pytest.mark.parametrize(
    "lifetime,expected",
    [
        (3600, True),
        (True, True),
        ("120", True),
        (None, False),
        (False, False),
        (0, False),
        ("0", False),
        (-5, False),
        ("-1", False),
    ],
)
def test_is_cacheable_follows_lifetime(container, make_fragment, lifetime, expected) -> None:
    fragment = make_fragment("block", lifetime=lifetime)
    assert container.detector.is_cacheable(fragment) is expected


def test_lifetime_is_evaluated_on_each_call(container, make_fragment) -> None:
    """La durée de vie peut changer pendant le rendu: rien n'est mémorisé."""
    fragment = make_fragment("late", lifetime=None)
    assert container.detector.is_cacheable(fragment) is False
    fragment.lifetime = 60
    assert container.detector.is_cacheable(fragment) is True


def test_lifetime_accessor_failure_is_not_cacheable(container, make_fragment) -> None:
    fragment = make_fragment("broken")

    def boom():
        raise RuntimeError("lifetime unavailable")

    fragment.get_cache_lifetime = boom
    with capture_logs() as logs:
        detector = FragmentCacheDetector(container.content_cache)
        assert detector.is_cacheable(fragment) is False
    failed = [e for e in logs if e["event"] == "fragment_cacheability_check_failed"]
    assert failed and failed[0]["fragment"] == "broken"
    assert failed[0]["log_level"] == "warning"


def test_invalid_lifetime_string_is_not_cacheable(container, make_fragment) -> None:
    assert container.detector.is_cacheable(make_fragment("x", lifetime="soon")) is False


def test_is_cached_requires_content_entry(container, make_fragment) -> None:
    fragment = make_fragment("product", cache_key="product_1")
    assert container.detector.is_cached(fragment) is False
    container.content_cache.save("<p>cached</p>", "product_1")
    assert container.detector.is_cached(fragment) is True


def test_is_cached_false_when_not_cacheable(container, make_fragment) -> None:
    fragment = make_fragment("product", cache_key="product_1", lifetime=0)
    container.content_cache.save("<p>cached</p>", "product_1")
    assert container.detector.is_cached(fragment) is False


def test_is_cached_swallows_storage_errors(container, make_fragment) -> None:
    class BrokenContentCache:
        def load(self, cache_key):
            raise ConnectionError("store down")

    with capture_logs() as logs:
        detector = FragmentCacheDetector(BrokenContentCache())
        assert detector.is_cached(make_fragment("product")) is False
    assert any(e["event"] == "fragment_cached_check_failed" for e in logs)


def test_removed_content_is_no_longer_cached(container, make_fragment) -> None:
    fragment = make_fragment("product", cache_key="product_2")
    container.content_cache.save("<p>cached</p>", "product_2", ["product_2"], 60)
    assert container.content_cache.remove("product_2") is True
    assert container.detector.is_cached(fragment) is False


def test_empty_cached_content_counts_as_cached(container, make_fragment) -> None:
    fragment = make_fragment("spacer", cache_key="spacer_1")
    container.content_cache.save("", "spacer_1")
    assert container.detector.is_cached(fragment) is True
