"""
Database models.

Links are transactional data; analytics events are an append-only log in
their own flat table. Services never hand ORM rows for events around:
stores convert them to the pydantic ``AnalyticsEvent`` schema.
"""

from .link import Link
from .analytics_event import AnalyticsEventRow

__all__ = ["Link", "AnalyticsEventRow"]
