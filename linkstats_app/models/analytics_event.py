from sqlalchemy import Column, Integer, String, DateTime, Boolean, Float, ForeignKey, Index
from linkstats_app.database.connection import Base


class AnalyticsEventRow(Base):
    """
    One recorded visit, flat.

    Rows are inserted once and never updated or deleted; every aggregate
    is a grouped count over this table. Dimensions are plain indexed
    columns instead of separate dimension tables.
    """
    __tablename__ = "analytics_events"

    id = Column(String(32), primary_key=True)
    link_id = Column(Integer, ForeignKey("links.id"), nullable=False)
    event_type = Column(String(16), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)

    # Raw visitor data
    ip = Column(String(45), nullable=False)
    user_agent = Column(String, nullable=False)
    referer = Column(String, nullable=True)
    utm_source = Column(String, nullable=True)
    utm_medium = Column(String, nullable=True)
    utm_campaign = Column(String, nullable=True)
    utm_term = Column(String, nullable=True)
    utm_content = Column(String, nullable=True)

    # Geolocation
    country = Column(String, nullable=True)
    region = Column(String, nullable=True)
    city = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    timezone = Column(String, nullable=True)

    # Device
    device = Column(String(16), nullable=False)
    os = Column(String, nullable=True)
    os_version = Column(String, nullable=True)
    browser = Column(String, nullable=True)
    browser_version = Column(String, nullable=True)
    is_mobile = Column(Boolean, nullable=False)
    is_desktop = Column(Boolean, nullable=False)
    is_tablet = Column(Boolean, nullable=False)

    is_bot = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_analytics_events_link_id_timestamp", "link_id", "timestamp"),
        Index("ix_analytics_events_is_bot", "is_bot"),
    )
