"""
Test configuration and fixtures.
This centralizes all test setup, making individual tests clean.
"""

import os

# Must be set before linkstats_app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("EVENT_STORE_BACKEND", "sqlalchemy")
os.environ.setdefault("GEOLOCATION_BACKEND", "null")

from datetime import datetime, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from linkstats_app.cache.strategies import InMemoryCache
from linkstats_app.database.connection import Base, get_db
from linkstats_app.dependencies import get_cache, get_event_store, get_geolocation
from linkstats_app.enrichment.geolocation import GeoLocationStrategy, GeoLookupError
from linkstats_app.enrichment.models import GeoLocation, ParsedUserAgent
from linkstats_app.enrichment.user_agent import UserAgentParserStrategy
from linkstats_app.schemas.analytics import AnalyticsEvent, EventType
from linkstats_app.storage.strategies import InMemoryEventStore, SQLAlchemyEventStore

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)  # a Wednesday

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
SAFARI_IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"

GEO_BY_IP = {
    "1.1.1.1": GeoLocation(country="US", region="California", city="San Francisco",
                           latitude=37.7749, longitude=-122.4194, timezone="America/Los_Angeles"),
    "2.2.2.2": GeoLocation(country="CA", region="Ontario", city="Toronto",
                           latitude=43.65, longitude=-79.38, timezone="America/Toronto"),
}


class MappingGeoLocation(GeoLocationStrategy):
    """Resolves known IPs from a dict and fails for everything else."""

    def __init__(self, mapping=None):
        self.mapping = GEO_BY_IP if mapping is None else mapping

    async def lookup(self, ip: str) -> GeoLocation:
        if ip not in self.mapping:
            raise GeoLookupError(f"unknown ip {ip}")
        return self.mapping[ip]


class FailingGeoLocation(GeoLocationStrategy):
    async def lookup(self, ip: str) -> GeoLocation:
        raise ConnectionError("geolocation service unreachable")


class StubUserAgentParser(UserAgentParserStrategy):
    """Returns a fixed ParsedUserAgent and remembers what it was asked."""

    def __init__(self, parsed: ParsedUserAgent = None):
        self.parsed = parsed or ParsedUserAgent()
        self.calls = []

    def parse(self, user_agent: str) -> ParsedUserAgent:
        self.calls.append(user_agent)
        return self.parsed


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(params=["memory", "sqlalchemy"])
def event_store(request):
    """Every store-backed test runs against both event store implementations."""
    if request.param == "memory":
        return InMemoryEventStore()
    request.getfixturevalue("db_session")
    return SQLAlchemyEventStore(session_factory=TestingSessionLocal)


@pytest.fixture
def event_factory():
    """
    Build AnalyticsEvent objects with sensible defaults.

    A desktop Chrome click from the US at NOW unless overridden.
    """
    ids = count(1)

    def make(link_id: int = 1, timestamp: datetime = NOW, ip: str = "1.1.1.1", **overrides) -> AnalyticsEvent:
        device = overrides.pop("device", "Desktop")
        fields = dict(
            id=f"evt{next(ids):05d}",
            link_id=link_id,
            event_type=EventType.CLICK,
            timestamp=timestamp,
            ip=ip,
            user_agent=CHROME_WINDOWS,
            country="US",
            device=device,
            os="Windows",
            os_version="10",
            browser="Chrome",
            browser_version="120.0.0",
            is_mobile=device == "Mobile",
            is_tablet=device == "Tablet",
            is_desktop=device == "Desktop",
            is_bot=False,
        )
        fields.update(overrides)
        return AnalyticsEvent(**fields)

    return make


@pytest.fixture(scope="function")
def memory_store():
    return InMemoryEventStore()


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database, cache, event store and geolocation
    overridden. This is the main fixture HTTP tests use.
    """
    def override_get_db():
        yield db_session

    cache = InMemoryCache()
    store = SQLAlchemyEventStore(session_factory=TestingSessionLocal)
    geolocation = MappingGeoLocation()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_event_store] = lambda: store
    app.dependency_overrides[get_geolocation] = lambda: geolocation

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
