"""
Schemas for the analytics core: the stored event, the record operation and
the aggregate result sets.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Kinds of analytics event. Only clicks are recorded today."""
    CLICK = "click"
    VIEW = "view"


class Period(str, Enum):
    """Overview windows, relative to now."""
    LAST_24H = "24h"
    LAST_7D = "7d"
    LAST_30D = "30d"
    LAST_90D = "90d"
    LAST_YEAR = "1y"
    ALL = "all"

    @property
    def lookback(self) -> Optional[timedelta]:
        """Fixed duration back from now, or None for no lower bound."""
        return _PERIOD_LOOKBACK[self]


_PERIOD_LOOKBACK = {
    Period.LAST_24H: timedelta(hours=24),
    Period.LAST_7D: timedelta(days=7),
    Period.LAST_30D: timedelta(days=30),
    Period.LAST_90D: timedelta(days=90),
    Period.LAST_YEAR: timedelta(days=365),
    Period.ALL: None,
}


class GroupBy(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class BreakdownDimension(str, Enum):
    """Categorical dimensions an event can be grouped by (values are column names)."""
    COUNTRY = "country"
    DEVICE = "device"
    BROWSER = "browser"
    OS = "os"
    REFERER = "referer"


class AnalyticsEvent(BaseModel):
    """
    One recorded visit to a link.

    Immutable once created: stores append it and aggregation only ever
    reads it back.
    """

    id: str
    link_id: int
    event_type: EventType = EventType.CLICK
    timestamp: datetime

    # Raw visitor data
    ip: str
    user_agent: str
    referer: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None

    # Geolocation (all six set together, or all None)
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None

    # Device
    device: str
    os: Optional[str] = None
    os_version: Optional[str] = None
    browser: Optional[str] = None
    browser_version: Optional[str] = None
    is_mobile: bool
    is_desktop: bool
    is_tablet: bool

    is_bot: bool = False

    model_config = ConfigDict(frozen=True, from_attributes=True)


class RecordVisitRequest(BaseModel):
    """A raw visit as handed over by the transport layer."""

    short_code: str = Field(..., min_length=1)
    ip: str
    user_agent: str
    referer: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "short_code": "abc123",
                "ip": "203.0.113.7",
                "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0",
                "referer": "https://twitter.com",
                "utm_source": "newsletter",
            }
        }
    )


class RecordResult(BaseModel):
    success: bool = True
    redirect_url: str
    analytics_id: str


class DimensionCount(BaseModel):
    value: str
    clicks: int


class OverviewResult(BaseModel):
    total_clicks: int
    unique_clicks: int
    top_countries: List[DimensionCount]
    top_devices: List[DimensionCount]
    top_browsers: List[DimensionCount]
    top_referrers: List[DimensionCount]


class TimeSeriesPoint(BaseModel):
    period: datetime = Field(..., description="Bucket start (UTC)")
    clicks: int
    unique_clicks: int


class BreakdownRow(DimensionCount):
    pass
