"""
Tests for backend selection in the cache, event store and geolocation factories.
"""

import pytest

from linkstats_app.cache.factory import CacheBackend, CacheFactory
from linkstats_app.cache.strategies import InMemoryCache, NullCache
from linkstats_app.config import settings
from linkstats_app.enrichment.factory import GeoLocationBackend, GeoLocationFactory
from linkstats_app.enrichment.geolocation import IpApiGeoLocation, NullGeoLocation, StaticGeoLocation
from linkstats_app.storage.factory import EventStoreBackend, EventStoreFactory
from linkstats_app.storage.strategies import InMemoryEventStore, SQLAlchemyEventStore


@pytest.fixture(autouse=True)
def fresh_factories():
    """Every test starts and ends without cached instances."""
    factories = (CacheFactory, EventStoreFactory, GeoLocationFactory)
    for factory in factories:
        factory.clear_instance()
    yield
    for factory in factories:
        factory.clear_instance()


class TestGeoLocationFactory:

    @pytest.mark.parametrize("backend, expected", [
        (GeoLocationBackend.IPAPI, IpApiGeoLocation),
        (GeoLocationBackend.STATIC, StaticGeoLocation),
        (GeoLocationBackend.NULL, NullGeoLocation),
    ])
    def test_backend_selection(self, backend, expected):
        assert isinstance(GeoLocationFactory.create(backend), expected)

    def test_instance_is_reused_until_cleared(self):
        first = GeoLocationFactory.create(GeoLocationBackend.STATIC)
        assert GeoLocationFactory.create(GeoLocationBackend.NULL) is first

        GeoLocationFactory.clear_instance()

        assert isinstance(GeoLocationFactory.create(GeoLocationBackend.NULL), NullGeoLocation)

    def test_ipapi_uses_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "geolocation_base_url", "https://geo.example/")
        monkeypatch.setattr(settings, "geolocation_timeout", 0.5)

        provider = GeoLocationFactory.create(GeoLocationBackend.IPAPI)

        assert provider.base_url == "https://geo.example"
        assert provider.timeout == 0.5


class TestEventStoreFactory:

    def test_backend_selection(self):
        assert isinstance(EventStoreFactory.create(EventStoreBackend.SQLALCHEMY), SQLAlchemyEventStore)

        EventStoreFactory.clear_instance()

        assert isinstance(EventStoreFactory.create(EventStoreBackend.MEMORY), InMemoryEventStore)

    def test_instance_is_reused(self):
        first = EventStoreFactory.create(EventStoreBackend.MEMORY)
        assert EventStoreFactory.create(EventStoreBackend.MEMORY) is first


class TestCacheFactory:

    @pytest.mark.parametrize("backend, expected", [
        (CacheBackend.MEMORY, InMemoryCache),
        (CacheBackend.NULL, NullCache),
    ])
    def test_backend_selection(self, backend, expected):
        assert isinstance(CacheFactory.create(backend), expected)

    def test_unreachable_redis_falls_back_to_null_cache(self, monkeypatch):
        monkeypatch.setattr(settings, "redis_url", "redis://127.0.0.1:1/0")

        assert isinstance(CacheFactory.create(CacheBackend.REDIS), NullCache)
