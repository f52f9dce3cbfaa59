"""
Event Recorder: turns one visit to a short link into one analytics event.

Flow:
1. Look up the link by short code (NotFound if missing or inactive,
   Forbidden if expired)
2. Derive dimensions with the Dimension Extractor
3. Append one immutable click event to the event store
4. Return the destination URL and the new event id

Every call is a distinct visit: identical input records a new event.
"""

import logging
import uuid
from typing import Callable

from linkstats_app.clock import utcnow
from linkstats_app.enrichment.extractor import DimensionExtractor
from linkstats_app.enrichment.models import VisitDimensions
from linkstats_app.schemas.analytics import AnalyticsEvent, EventType, RecordResult, RecordVisitRequest
from linkstats_app.services.errors import EventRecordingError, LinkExpiredError, LinkNotFoundError
from linkstats_app.storage.strategies import EventStoreStrategy

logger = logging.getLogger(__name__)


def new_event_id() -> str:
    return uuid.uuid4().hex


class EventRecorder:
    """
    Records click events.

    Dependencies are injected:
    - links: anything with ``async get_link_for_visit(short_code)``
      returning a LinkSnapshot or None (LinkService in the app)
    - extractor: DimensionExtractor
    - store: EventStoreStrategy
    - clock / id_factory: overridable for tests
    """

    def __init__(
        self,
        links,
        extractor: DimensionExtractor,
        store: EventStoreStrategy,
        clock: Callable = utcnow,
        id_factory: Callable[[], str] = new_event_id
    ):
        self.links = links
        self.extractor = extractor
        self.store = store
        self.clock = clock
        self.id_factory = id_factory

    async def record(self, visit: RecordVisitRequest) -> RecordResult:
        """
        Record one click.

        Raises:
            LinkNotFoundError: unknown or inactive link
            LinkExpiredError: link expired before now
            EventRecordingError: lookup, extraction or persistence failed
                (cause is logged, not exposed)
        """
        try:
            link = await self.links.get_link_for_visit(visit.short_code)
        except Exception as e:
            logger.exception("Link lookup failed for %s", visit.short_code)
            raise EventRecordingError() from e

        if link is None or not link.is_active:
            raise LinkNotFoundError()

        now = self.clock()
        if link.is_expired(now):
            raise LinkExpiredError()

        try:
            dimensions = await self.extractor.extract(visit.ip, visit.user_agent)
            event = self._build_event(link.id, visit, dimensions, now)
            await self.store.append(event)
        except Exception as e:
            logger.exception("Analytics recording error for %s", visit.short_code)
            raise EventRecordingError() from e

        logger.debug("Recorded %s event %s for link %s", event.event_type.value, event.id, link.id)
        return RecordResult(redirect_url=link.original_url, analytics_id=event.id)

    def _build_event(self, link_id: int, visit: RecordVisitRequest, dimensions: VisitDimensions, now) -> AnalyticsEvent:
        geo = dimensions.geolocation
        device = dimensions.device
        return AnalyticsEvent(
            id=self.id_factory(),
            link_id=link_id,
            event_type=EventType.CLICK,
            timestamp=now,
            ip=visit.ip,
            user_agent=visit.user_agent,
            referer=visit.referer,
            utm_source=visit.utm_source,
            utm_medium=visit.utm_medium,
            utm_campaign=visit.utm_campaign,
            utm_term=visit.utm_term,
            utm_content=visit.utm_content,
            country=geo.country,
            region=geo.region,
            city=geo.city,
            latitude=geo.latitude,
            longitude=geo.longitude,
            timezone=geo.timezone,
            device=device.device.value,
            os=device.os,
            os_version=device.os_version,
            browser=device.browser,
            browser_version=device.browser_version,
            is_mobile=device.is_mobile,
            is_desktop=device.is_desktop,
            is_tablet=device.is_tablet,
            is_bot=dimensions.is_bot,
        )
