"""
Geolocation lookup strategies using Strategy Pattern.

Allows switching between providers keyed by IP:
- ipapi: HTTP JSON lookup (ipapi.co or any compatible endpoint)
- static: fixed record for development, no network
- null: never resolves anything

Lookups may raise; the Dimension Extractor is the one place that turns
a failure into an all-null GeoLocation.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

import requests
from pydantic import ValidationError

from .models import GeoLocation

logger = logging.getLogger(__name__)


class GeoLookupError(Exception):
    """The provider could not resolve an IP (network, provider error, bad payload)."""


class GeoLocationStrategy(ABC):
    """
    Abstract base class for geolocation providers.

    Async because real providers do network I/O.
    """

    @abstractmethod
    async def lookup(self, ip: str) -> GeoLocation:
        """
        Resolve an IP address.

        Args:
            ip: IPv4 or IPv6 address as a string

        Returns:
            GeoLocation (any field may be None)

        Raises:
            GeoLookupError (or any other exception) on failure
        """
        pass


class IpApiGeoLocation(GeoLocationStrategy):
    """
    Lookup against an ipapi.co-style endpoint: GET {base_url}/{ip}/json/

    The provider reports lookup failures as ``{"error": true, "reason": ...}``
    with a 200 status, so the payload is checked as well as the status.
    """

    def __init__(self, base_url: str = "https://ipapi.co", timeout: float = 2.0, session=None):
        """
        Args:
            base_url: Provider root URL (no trailing slash needed)
            timeout: Per-request timeout in seconds
            session: Optional requests.Session (shared connection pool)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    async def lookup(self, ip: str) -> GeoLocation:
        url = f"{self.base_url}/{ip}/json/"
        try:
            # requests blocks; keep it off the event loop
            response = await asyncio.to_thread(self.session.get, url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise GeoLookupError(f"Geolocation request failed for {ip}: {e}") from e

        if not isinstance(data, dict):
            raise GeoLookupError(f"Unexpected geolocation payload for {ip}")
        if data.get("error"):
            raise GeoLookupError(f"Geolocation lookup error for {ip}: {data.get('reason')}")

        try:
            return GeoLocation(
                country=data.get("country_name"),
                region=data.get("region"),
                city=data.get("city"),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                timezone=data.get("timezone"),
            )
        except ValidationError as e:
            raise GeoLookupError(f"Unparseable geolocation payload for {ip}") from e


class StaticGeoLocation(GeoLocationStrategy):
    """
    Returns the same record for every IP.

    Used in development so visits carry realistic-looking geo data without
    calling a paid provider.
    """

    DEFAULT = GeoLocation(
        country="US",
        region="California",
        city="San Francisco",
        latitude=37.7749,
        longitude=-122.4194,
        timezone="America/Los_Angeles",
    )

    def __init__(self, location: GeoLocation = None):
        self.location = location or self.DEFAULT

    async def lookup(self, ip: str) -> GeoLocation:
        return self.location


class NullGeoLocation(GeoLocationStrategy):
    """Null Object Pattern - never resolves anything."""

    async def lookup(self, ip: str) -> GeoLocation:
        return GeoLocation.empty()
