from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from linkstats_app.api.errors import http_error
from linkstats_app.schemas.analytics import (
    BreakdownDimension,
    BreakdownRow,
    GroupBy,
    OverviewResult,
    Period,
    RecordResult,
    RecordVisitRequest,
    TimeSeriesPoint,
)
from linkstats_app.services.analytics_service import AnalyticsService
from linkstats_app.services.errors import AnalyticsError
from linkstats_app.services.event_recorder import EventRecorder
from linkstats_app.dependencies import get_analytics_service, get_event_recorder

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/record", response_model=RecordResult, status_code=status.HTTP_201_CREATED)
async def record_visit(
    visit: RecordVisitRequest,
    recorder: EventRecorder = Depends(get_event_recorder)
):
    """
    Record one click for a short code.

    404 for unknown/inactive links, 403 for expired ones, 500 (opaque)
    when the event could not be stored.
    """
    try:
        return await recorder.record(visit)
    except AnalyticsError as e:
        raise http_error(e)


@router.get("/{link_id}/overview", response_model=OverviewResult)
async def get_overview(
    link_id: int,
    period: Period = Query(Period.LAST_30D, description="Window back from now"),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    return await analytics.overview(link_id, period)


@router.get("/{link_id}/timeseries", response_model=List[TimeSeriesPoint])
async def get_time_series(
    link_id: int,
    start_date: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end_date: Optional[datetime] = Query(None, description="Inclusive upper bound"),
    group_by: GroupBy = Query(GroupBy.DAY),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    return await analytics.time_series(link_id, start_date, end_date, group_by)


@router.get("/{link_id}/breakdown/{dimension}", response_model=List[BreakdownRow])
async def get_breakdown(
    link_id: int,
    dimension: BreakdownDimension,
    start_date: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end_date: Optional[datetime] = Query(None, description="Inclusive upper bound"),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    return await analytics.breakdown(link_id, dimension, start_date, end_date)
