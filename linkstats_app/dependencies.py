"""
FastAPI dependencies for dependency injection.

Provides singleton collaborators (cache, event store, geolocation provider,
user-agent parser) and per-request services built on top of them. Tests
swap any of these through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from linkstats_app.cache.factory import CacheFactory, CacheBackend
from linkstats_app.cache.strategies import CacheStrategy
from linkstats_app.config import settings
from linkstats_app.database.connection import get_db
from linkstats_app.enrichment.extractor import DimensionExtractor
from linkstats_app.enrichment.factory import GeoLocationFactory, GeoLocationBackend
from linkstats_app.enrichment.geolocation import GeoLocationStrategy
from linkstats_app.enrichment.user_agent import UserAgentParserStrategy, UserAgentsParser
from linkstats_app.services.analytics_service import AnalyticsService
from linkstats_app.services.event_recorder import EventRecorder
from linkstats_app.services.link_service import LinkService
from linkstats_app.storage.factory import EventStoreFactory, EventStoreBackend
from linkstats_app.storage.strategies import EventStoreStrategy


@lru_cache()
def get_cache() -> CacheStrategy:
    """Cache instance (singleton), backend from settings."""
    return CacheFactory.create(CacheBackend(settings.cache_backend))


@lru_cache()
def get_event_store() -> EventStoreStrategy:
    """Event store instance (singleton), backend from settings."""
    return EventStoreFactory.create(EventStoreBackend(settings.event_store_backend))


@lru_cache()
def get_geolocation() -> GeoLocationStrategy:
    """Geolocation provider (singleton), backend from settings."""
    return GeoLocationFactory.create(GeoLocationBackend(settings.geolocation_backend))


@lru_cache()
def get_user_agent_parser() -> UserAgentParserStrategy:
    return UserAgentsParser()


def get_dimension_extractor(
    geolocation: GeoLocationStrategy = Depends(get_geolocation),
    user_agent_parser: UserAgentParserStrategy = Depends(get_user_agent_parser)
) -> DimensionExtractor:
    return DimensionExtractor(geolocation=geolocation, user_agent_parser=user_agent_parser)


def get_link_service(
    db: Session = Depends(get_db),
    cache: CacheStrategy = Depends(get_cache),
    store: EventStoreStrategy = Depends(get_event_store)
) -> LinkService:
    return LinkService(db=db, cache=cache, store=store)


def get_event_recorder(
    links: LinkService = Depends(get_link_service),
    extractor: DimensionExtractor = Depends(get_dimension_extractor),
    store: EventStoreStrategy = Depends(get_event_store)
) -> EventRecorder:
    return EventRecorder(links=links, extractor=extractor, store=store)


def get_analytics_service(
    store: EventStoreStrategy = Depends(get_event_store)
) -> AnalyticsService:
    return AnalyticsService(store=store)
