"""
Visit enrichment: the Dimension Extractor and its pluggable collaborators
(user-agent parser, geolocation lookup).
"""

from .bot_detection import BOT_SIGNATURES, detect_bot
from .extractor import DimensionExtractor
from .factory import GeoLocationBackend, GeoLocationFactory
from .geolocation import (
    GeoLocationStrategy,
    GeoLookupError,
    IpApiGeoLocation,
    NullGeoLocation,
    StaticGeoLocation,
)
from .models import DeviceClass, DeviceInfo, GeoLocation, ParsedUserAgent, VisitDimensions
from .user_agent import UserAgentParserStrategy, UserAgentsParser

__all__ = [
    "BOT_SIGNATURES",
    "detect_bot",
    "DimensionExtractor",
    "GeoLocationBackend",
    "GeoLocationFactory",
    "GeoLocationStrategy",
    "GeoLookupError",
    "IpApiGeoLocation",
    "NullGeoLocation",
    "StaticGeoLocation",
    "DeviceClass",
    "DeviceInfo",
    "GeoLocation",
    "ParsedUserAgent",
    "VisitDimensions",
    "UserAgentParserStrategy",
    "UserAgentsParser",
]
