"""
Event store strategies using Strategy Pattern.

The event store is an append-only log of AnalyticsEvent records that
answers grouped-count reads. Switching stores never touches ingestion or
aggregation logic:
- SQLAlchemy: flat indexed table in the relational DB (SQLite/PostgreSQL)
- In-memory: list of events, for tests and throwaway demos
"""

import logging
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Set, Tuple

from sqlalchemy import func, literal_column, select
from sqlalchemy.orm import Session

from linkstats_app.clock import as_utc
from linkstats_app.models.analytics_event import AnalyticsEventRow
from linkstats_app.schemas.analytics import AnalyticsEvent, GroupBy

logger = logging.getLogger(__name__)

# Columns a grouped count may run over
GROUPABLE_COLUMNS = frozenset({
    "country", "region", "city", "timezone",
    "device", "os", "browser", "referer",
    "utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content",
})


def truncate(timestamp: datetime, group_by: GroupBy) -> datetime:
    """
    Start of the UTC bucket containing ``timestamp``.

    day: midnight; week: Monday midnight (ISO week); month: the 1st.
    """
    timestamp = as_utc(timestamp)
    day_start = timestamp.replace(hour=0, minute=0, second=0, microsecond=0)
    if group_by == GroupBy.DAY:
        return day_start
    if group_by == GroupBy.WEEK:
        return day_start - timedelta(days=day_start.weekday())
    if group_by == GroupBy.MONTH:
        return day_start.replace(day=1)
    raise ValueError(f"Unknown time grouping: {group_by}")


def _bucket_start(value) -> datetime:
    # SQLite date functions return text, PostgreSQL returns a naive timestamp
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    return as_utc(value)


@dataclass(frozen=True)
class EventFilter:
    """
    Row filter shared by every read.

    Bounds are inclusive; None means unbounded. ``is_bot`` is a plain
    equality filter (None = don't filter).
    """
    link_id: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    is_bot: Optional[bool] = None

    def matches(self, event: AnalyticsEvent) -> bool:
        if event.link_id != self.link_id:
            return False
        if self.is_bot is not None and event.is_bot != self.is_bot:
            return False
        timestamp = as_utc(event.timestamp)
        if self.start is not None and timestamp < as_utc(self.start):
            return False
        if self.end is not None and timestamp > as_utc(self.end):
            return False
        return True


class EventStoreStrategy(ABC):
    """
    Abstract base class for event stores.

    Only atomic single-event insert and consistent grouped reads are
    required; no multi-row transactions.
    """

    @abstractmethod
    async def append(self, event: AnalyticsEvent) -> None:
        """
        Insert one event. Never updates an existing one.

        Raises:
            Any storage exception on failure (callers decide how to surface it)
        """
        pass

    @abstractmethod
    async def get(self, event_id: str) -> Optional[AnalyticsEvent]:
        """Exact-match read by id."""
        pass

    @abstractmethod
    async def count(self, event_filter: EventFilter) -> int:
        """Number of events matching the filter"""
        pass

    @abstractmethod
    async def count_distinct_ips(self, event_filter: EventFilter) -> int:
        """Number of distinct source IPs among matching events"""
        pass

    @abstractmethod
    async def group_count(
        self,
        event_filter: EventFilter,
        column: str,
        limit: Optional[int] = None
    ) -> List[Tuple[str, int]]:
        """
        Grouped counts over the non-null values of one column.

        Returns:
            (value, count) pairs, count descending then value ascending,
            truncated to ``limit`` when given
        """
        pass

    @abstractmethod
    async def time_buckets(self, event_filter: EventFilter, group_by: GroupBy) -> List[Tuple[datetime, int, int]]:
        """
        Events grouped by truncated timestamp.

        Returns:
            (bucket start in UTC, clicks, distinct IPs) for buckets that have
            events, oldest bucket first
        """
        pass


def _check_column(column: str) -> None:
    if column not in GROUPABLE_COLUMNS:
        raise ValueError(f"Cannot group events by {column!r}")


class SQLAlchemyEventStore(EventStoreStrategy):
    """
    Event store on the relational DB via SQLAlchemy.

    Each call opens its own short-lived session from the factory, so the
    store can be shared across requests.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        """
        Args:
            session_factory: Callable returning a new Session (e.g. SessionLocal)
        """
        self.session_factory = session_factory

    def _conditions(self, event_filter: EventFilter) -> list:
        conditions = [AnalyticsEventRow.link_id == event_filter.link_id]
        if event_filter.is_bot is not None:
            conditions.append(AnalyticsEventRow.is_bot == event_filter.is_bot)
        if event_filter.start is not None:
            conditions.append(AnalyticsEventRow.timestamp >= as_utc(event_filter.start))
        if event_filter.end is not None:
            conditions.append(AnalyticsEventRow.timestamp <= as_utc(event_filter.end))
        return conditions

    async def append(self, event: AnalyticsEvent) -> None:
        data = event.model_dump()
        data["event_type"] = event.event_type.value
        data["timestamp"] = as_utc(event.timestamp)
        row = AnalyticsEventRow(**data)

        db = self.session_factory()
        try:
            db.add(row)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def get(self, event_id: str) -> Optional[AnalyticsEvent]:
        db = self.session_factory()
        try:
            row = db.get(AnalyticsEventRow, event_id)
            if row is None:
                return None
            event = AnalyticsEvent.model_validate(row)
            return event.model_copy(update={"timestamp": as_utc(event.timestamp)})
        finally:
            db.close()

    async def count(self, event_filter: EventFilter) -> int:
        stmt = select(func.count(AnalyticsEventRow.id)).where(*self._conditions(event_filter))
        db = self.session_factory()
        try:
            return db.execute(stmt).scalar_one()
        finally:
            db.close()

    async def count_distinct_ips(self, event_filter: EventFilter) -> int:
        stmt = (
            select(func.count(func.distinct(AnalyticsEventRow.ip)))
            .where(*self._conditions(event_filter))
        )
        db = self.session_factory()
        try:
            return db.execute(stmt).scalar_one()
        finally:
            db.close()

    async def group_count(
        self,
        event_filter: EventFilter,
        column: str,
        limit: Optional[int] = None
    ) -> List[Tuple[str, int]]:
        _check_column(column)
        group_col = getattr(AnalyticsEventRow, column)
        clicks = func.count(AnalyticsEventRow.id).label("clicks")

        stmt = (
            select(group_col, clicks)
            .where(*self._conditions(event_filter), group_col.is_not(None))
            .group_by(group_col)
            .order_by(clicks.desc(), group_col.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        db = self.session_factory()
        try:
            return [(row[0], row[1]) for row in db.execute(stmt).all()]
        finally:
            db.close()

    def _bucket_expression(self, dialect: str, group_by: GroupBy):
        timestamp = AnalyticsEventRow.timestamp
        if dialect == "postgresql":
            # Literals: bound parameters would differ between SELECT and GROUP BY
            unit = literal_column(f"'{group_by.value}'")
            return func.date_trunc(unit, func.timezone(literal_column("'UTC'"), timestamp))
        if dialect == "sqlite":
            # Timestamps are stored as UTC text; 'weekday 0' moves to Sunday, -6 days back to Monday
            if group_by == GroupBy.DAY:
                return func.date(timestamp)
            if group_by == GroupBy.WEEK:
                return func.date(timestamp, "weekday 0", "-6 days")
            return func.strftime("%Y-%m-01", timestamp)
        raise ValueError(f"Time buckets are not supported on {dialect}")

    async def time_buckets(self, event_filter: EventFilter, group_by: GroupBy) -> List[Tuple[datetime, int, int]]:
        group_by = GroupBy(group_by)
        db = self.session_factory()
        try:
            bucket = self._bucket_expression(db.get_bind().dialect.name, group_by).label("bucket")
            stmt = (
                select(
                    bucket,
                    func.count(AnalyticsEventRow.id),
                    func.count(func.distinct(AnalyticsEventRow.ip)),
                )
                .where(*self._conditions(event_filter))
                .group_by(bucket)
                .order_by(bucket.asc())
            )
            return [
                (_bucket_start(row[0]), row[1], row[2])
                for row in db.execute(stmt).all()
            ]
        finally:
            db.close()


class InMemoryEventStore(EventStoreStrategy):
    """
    Event store backed by a Python list.

    Pros:
    - No setup, very fast
    - Good for tests and demos

    Cons:
    - Lost on restart
    - Not shared between processes
    """

    def __init__(self):
        self._events: List[AnalyticsEvent] = []
        self._ids = set()

    async def append(self, event: AnalyticsEvent) -> None:
        if event.id in self._ids:
            raise ValueError(f"Event {event.id} already recorded")
        self._events.append(event)
        self._ids.add(event.id)

    async def get(self, event_id: str) -> Optional[AnalyticsEvent]:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def _matching(self, event_filter: EventFilter) -> List[AnalyticsEvent]:
        return [event for event in self._events if event_filter.matches(event)]

    async def count(self, event_filter: EventFilter) -> int:
        return len(self._matching(event_filter))

    async def count_distinct_ips(self, event_filter: EventFilter) -> int:
        return len({event.ip for event in self._matching(event_filter)})

    async def group_count(
        self,
        event_filter: EventFilter,
        column: str,
        limit: Optional[int] = None
    ) -> List[Tuple[str, int]]:
        _check_column(column)
        counts = Counter(
            value
            for value in (getattr(event, column) for event in self._matching(event_filter))
            if value is not None
        )
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        if limit is not None:
            ordered = ordered[:limit]
        return ordered

    async def time_buckets(self, event_filter: EventFilter, group_by: GroupBy) -> List[Tuple[datetime, int, int]]:
        group_by = GroupBy(group_by)
        clicks: Dict[datetime, int] = {}
        ips: Dict[datetime, Set[str]] = {}
        for event in self._matching(event_filter):
            bucket = truncate(event.timestamp, group_by)
            clicks[bucket] = clicks.get(bucket, 0) + 1
            ips.setdefault(bucket, set()).add(event.ip)
        return [(bucket, clicks[bucket], len(ips[bucket])) for bucket in sorted(clicks)]

    def clear(self) -> None:
        """Drop everything (for testing)"""
        self._events.clear()
        self._ids.clear()
