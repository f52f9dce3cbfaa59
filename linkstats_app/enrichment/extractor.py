"""
Dimension Extractor.

Turns a raw visit (source IP + user-agent string) into the normalized
attributes stored on an analytics event: device class, OS, browser,
geolocation and the bot flag.

Both external lookups are injected, so any concrete provider can be used
without touching ingestion or aggregation.
"""

import logging

from .bot_detection import detect_bot
from .geolocation import GeoLocationStrategy
from .models import DeviceClass, DeviceInfo, GeoLocation, VisitDimensions
from .user_agent import UserAgentParserStrategy

logger = logging.getLogger(__name__)


class DimensionExtractor:
    """
    Derives VisitDimensions from (ip, user_agent). No side effects.

    Geolocation is best-effort: a failing lookup degrades to an all-null
    GeoLocation and never fails the caller. A failing user-agent parser is
    not expected (parsers report unknowns as None) and propagates.
    """

    def __init__(self, geolocation: GeoLocationStrategy, user_agent_parser: UserAgentParserStrategy):
        self.geolocation = geolocation
        self.user_agent_parser = user_agent_parser

    async def extract(self, ip: str, user_agent: str) -> VisitDimensions:
        return VisitDimensions(
            geolocation=await self.locate(ip),
            device=self.device_info(user_agent),
            is_bot=detect_bot(user_agent),
        )

    def device_info(self, user_agent: str) -> DeviceInfo:
        parsed = self.user_agent_parser.parse(user_agent)
        return DeviceInfo(
            device=DeviceClass.from_device_type(parsed.device_type),
            os=parsed.os_name or "Unknown",
            os_version=parsed.os_version or "",
            browser=parsed.browser_name or "Unknown",
            browser_version=parsed.browser_version or "",
        )

    async def locate(self, ip: str) -> GeoLocation:
        try:
            location = await self.geolocation.lookup(ip)
        except Exception as e:
            logger.warning("Location parsing error for %s: %s", ip, e)
            return GeoLocation.empty()
        if not isinstance(location, GeoLocation):
            logger.warning("Geolocation provider returned %r for %s", type(location).__name__, ip)
            return GeoLocation.empty()
        return location
