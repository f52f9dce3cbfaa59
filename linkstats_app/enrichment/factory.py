"""
Factory for creating geolocation providers.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum

from .geolocation import GeoLocationStrategy, IpApiGeoLocation, StaticGeoLocation, NullGeoLocation
from linkstats_app.config import settings

logger = logging.getLogger(__name__)


class GeoLocationBackend(Enum):
    """Available geolocation backends"""
    IPAPI = "ipapi"
    STATIC = "static"
    NULL = "null"


class GeoLocationFactory:
    """
    Simple factory for creating geolocation providers.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: GeoLocationStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: GeoLocationBackend) -> GeoLocationStrategy:
        """
        Create or return cached geolocation provider.

        Args:
            backend: Type of provider (from enum)

        Returns:
            Singleton provider instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == GeoLocationBackend.IPAPI:
            cls._instance = IpApiGeoLocation(
                base_url=settings.geolocation_base_url,
                timeout=settings.geolocation_timeout,
            )
            logger.info("✅ ipapi geolocation initialized (%s)", settings.geolocation_base_url)

        elif backend == GeoLocationBackend.STATIC:
            cls._instance = StaticGeoLocation()
            logger.info("✅ Static geolocation initialized")

        elif backend == GeoLocationBackend.NULL:
            cls._instance = NullGeoLocation()
            logger.info("✅ Null geolocation initialized")

        else:
            raise ValueError(f"Unknown geolocation backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
