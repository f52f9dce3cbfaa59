"""
Aggregation Engine: read-only queries over the analytics event log.

Rules shared by every query:
- Bot events are never counted. The filter is applied in the store,
  before any grouping, and is not optional.
- Top-N lists are ordered by clicks descending, ties by value ascending,
  so a fixed data set always yields the same list.
- A link with no (matching) events yields zeros / empty lists.
"""

from datetime import datetime
from typing import Callable, List, Optional

from linkstats_app.clock import utcnow
from linkstats_app.schemas.analytics import (
    BreakdownDimension,
    BreakdownRow,
    DimensionCount,
    GroupBy,
    OverviewResult,
    Period,
    TimeSeriesPoint,
)
from linkstats_app.storage.strategies import EventFilter, EventStoreStrategy

TOP_LIMIT = 10
BREAKDOWN_LIMIT = 50


class AnalyticsService:
    """
    Overview, time series and breakdown queries for one link.

    The event store is injected; the clock only matters for ``overview``
    windows.
    """

    def __init__(self, store: EventStoreStrategy, clock: Callable = utcnow):
        self.store = store
        self.clock = clock

    def _filter(self, link_id: int, start: Optional[datetime] = None, end: Optional[datetime] = None) -> EventFilter:
        return EventFilter(link_id=link_id, start=start, end=end, is_bot=False)

    async def _top(self, event_filter: EventFilter, column: str, limit: Optional[int]) -> List[DimensionCount]:
        rows = await self.store.group_count(event_filter, column, limit=limit)
        return [DimensionCount(value=value, clicks=clicks) for value, clicks in rows]

    async def overview(self, link_id: int, period: Period = Period.LAST_30D) -> OverviewResult:
        """
        Totals and top lists for the window ``period`` back from now.

        There is no upper bound: the window always runs to the present.
        Devices are not truncated (there are only three classes).
        """
        lookback = Period(period).lookback
        start = self.clock() - lookback if lookback is not None else None
        event_filter = self._filter(link_id, start=start)

        return OverviewResult(
            total_clicks=await self.store.count(event_filter),
            unique_clicks=await self.store.count_distinct_ips(event_filter),
            top_countries=await self._top(event_filter, "country", TOP_LIMIT),
            top_devices=await self._top(event_filter, "device", None),
            top_browsers=await self._top(event_filter, "browser", TOP_LIMIT),
            top_referrers=await self._top(event_filter, "referer", TOP_LIMIT),
        )

    async def time_series(
        self,
        link_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        group_by: GroupBy = GroupBy.DAY
    ) -> List[TimeSeriesPoint]:
        """
        Clicks and unique IPs per bucket, oldest bucket first.

        Both bounds are inclusive and optional. Grouping runs in the store;
        buckets without events are not emitted.
        """
        group_by = GroupBy(group_by)
        rows = await self.store.time_buckets(self._filter(link_id, start_date, end_date), group_by)
        return [
            TimeSeriesPoint(period=bucket, clicks=clicks, unique_clicks=unique_clicks)
            for bucket, clicks, unique_clicks in rows
        ]

    async def breakdown(
        self,
        link_id: int,
        dimension: BreakdownDimension,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> List[BreakdownRow]:
        """Top 50 values of one dimension; events where it is null are skipped."""
        dimension = BreakdownDimension(dimension)
        rows = await self.store.group_count(
            self._filter(link_id, start_date, end_date),
            dimension.value,
            limit=BREAKDOWN_LIMIT,
        )
        return [BreakdownRow(value=value, clicks=clicks) for value, clicks in rows]
