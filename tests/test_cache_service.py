"""Tests for cache service."""

from unittest.mock import patch

from jobtrack.integrations.cache import NullCacheService, cache_key, create_cache_service


class TestNullCacheService:
    def test_get_json_returns_none(self):
        assert NullCacheService().get_json("any_key") is None

    def test_set_json_does_nothing(self):
        NullCacheService().set_json("key", {"data": "test"}, 60)  # Should not raise


class TestCacheKey:
    def test_stable_and_namespaced(self):
        assert cache_key("job-analysis", "m", "text") == cache_key("job-analysis", "m", "text")
        assert cache_key("job-analysis", "m", "text").startswith("jobtrack:job-analysis:")

    def test_parts_are_separated(self):
        assert cache_key("ns", "ab", "c") != cache_key("ns", "a", "bc")


class TestCreateCacheService:
    def test_no_redis_url_gives_null_cache(self):
        with patch("jobtrack.integrations.cache.settings") as mock_settings:
            mock_settings.redis_url = ""
            assert isinstance(create_cache_service(), NullCacheService)
