"""
Data models for visit enrichment.

These are what the Dimension Extractor and its two collaborators
(user-agent parser, geolocation lookup) pass between each other.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DeviceClass(str, Enum):
    """
    The three device classes an event can have.

    Every visit is exactly one of these; the is_mobile / is_tablet /
    is_desktop flags are derived from it and never set independently.
    """
    MOBILE = "Mobile"
    TABLET = "Tablet"
    DESKTOP = "Desktop"

    @classmethod
    def from_device_type(cls, device_type: Optional[str]) -> "DeviceClass":
        """Map a parser device type to a class; anything unrecognised is Desktop."""
        normalized = (device_type or "").strip().lower()
        if normalized == "mobile":
            return cls.MOBILE
        if normalized == "tablet":
            return cls.TABLET
        return cls.DESKTOP


class ParsedUserAgent(BaseModel):
    """Best-effort result of a user-agent parser. Unknown fields are None."""
    device_type: Optional[str] = None
    os_name: Optional[str] = None
    os_version: Optional[str] = None
    browser_name: Optional[str] = None
    browser_version: Optional[str] = None


class DeviceInfo(BaseModel):
    device: DeviceClass
    os: str = "Unknown"
    os_version: str = ""
    browser: str = "Unknown"
    browser_version: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def is_mobile(self) -> bool:
        return self.device is DeviceClass.MOBILE

    @property
    def is_tablet(self) -> bool:
        return self.device is DeviceClass.TABLET

    @property
    def is_desktop(self) -> bool:
        return self.device is DeviceClass.DESKTOP


class GeoLocation(BaseModel):
    """
    Geolocation for an IP. Any field may be None.

    Built in one piece from one lookup so a record never mixes values from
    a failed and a successful lookup.
    """
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls) -> "GeoLocation":
        return cls()


class VisitDimensions(BaseModel):
    """Everything derived from (ip, user_agent)."""
    geolocation: GeoLocation = Field(default_factory=GeoLocation.empty)
    device: DeviceInfo
    is_bot: bool = False

    model_config = ConfigDict(frozen=True)
