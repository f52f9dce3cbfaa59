import logging
from datetime import datetime
from typing import List, Optional

from pydantic import HttpUrl, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkstats_app.cache.strategies import CacheStrategy
from linkstats_app.clock import as_utc
from linkstats_app.config import settings
from linkstats_app.models.link import Link
from linkstats_app.schemas.link import LinkResponse, LinkSnapshot
from linkstats_app.services.errors import ShortCodeConflictError
from linkstats_app.services.short_code_factory import ShortCodeFactory, ShortCodeStrategyType
from linkstats_app.services.short_code_strategies import ShortCodeStrategy, code_taken
from linkstats_app.storage.strategies import EventFilter, EventStoreStrategy

logger = logging.getLogger(__name__)


def _cache_key(short_code: str) -> str:
    return f"link:{short_code}"


class LinkService:
    """
    Link management and the link lookup used on the visit path.

    The DB session and the cache are injected; DB calls are sync, cache
    calls are async (Redis I/O).
    """

    def __init__(
        self,
        db: Session,
        cache: Optional[CacheStrategy] = None,
        short_code_strategy: Optional[ShortCodeStrategy] = None,
        store: Optional[EventStoreStrategy] = None
    ):
        """
        Args:
            db: Database session
            cache: Cache strategy for link snapshots (optional)
            short_code_strategy: Code generator; defaults to the configured one
            store: Event store used for per-link click counts (optional)
        """
        self.db = db
        self.cache = cache
        self.short_code_strategy = short_code_strategy or ShortCodeFactory.create_strategy()
        self.store = store

    async def create_link(
        self,
        original_url: HttpUrl,
        custom_code: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        title: Optional[str] = None,
        description: Optional[str] = None
    ) -> Link:
        """
        Create a new link.

        Without a custom code the link is inserted first to get its id,
        then the generated code is written in the same transaction.

        Raises:
            ShortCodeConflictError: custom code already in use
        """
        if custom_code and code_taken(self.db, custom_code):
            raise ShortCodeConflictError()

        link = Link(
            original_url=str(original_url),
            short_code=custom_code,
            title=title,
            description=description,
            expires_at=as_utc(expires_at) if expires_at else None,
        )
        self.db.add(link)
        try:
            self.db.flush()
            if not custom_code:
                link.short_code = self._generate_code(link.id)
            self.db.commit()
        except IntegrityError as e:
            # Lost a race for the same custom code
            self.db.rollback()
            raise ShortCodeConflictError() from e

        self.db.refresh(link)
        logger.info("Created link %s -> %s", link.short_code, link.original_url)
        return link

    def _generate_code(self, link_id: int) -> str:
        code = self.short_code_strategy.generate(link_id, self.db)
        if code_taken(self.db, code):
            # Generated code collides with an earlier custom code
            fallback = ShortCodeFactory.create_strategy(ShortCodeStrategyType.RANDOM)
            code = fallback.generate(link_id, self.db)
        return code

    async def get_link(self, short_code: str) -> Optional[Link]:
        return self.db.query(Link).filter(Link.short_code == short_code).first()

    async def list_links(self) -> List[Link]:
        """All links, newest first."""
        return self.db.query(Link).order_by(Link.created_at.desc(), Link.id.desc()).all()

    async def click_count(self, link_id: int) -> int:
        """Clicks recorded for a link, bots excluded (0 without an event store)."""
        if self.store is None:
            return 0
        return await self.store.count(EventFilter(link_id=link_id, is_bot=False))

    async def to_response(self, link: Link) -> LinkResponse:
        response = LinkResponse.model_validate(link)
        return response.model_copy(update={"clicks": await self.click_count(link.id)})

    async def deactivate_link(self, short_code: str) -> bool:
        """
        Deactivate a link (soft delete) and drop its cached snapshot.

        Returns:
            False if no such link
        """
        link = await self.get_link(short_code)
        if not link:
            return False

        link.is_active = False
        self.db.commit()

        if self.cache:
            await self.cache.delete(_cache_key(short_code))
        return True

    async def get_link_for_visit(self, short_code: str) -> Optional[LinkSnapshot]:
        """
        Look up a link for a visit using Cache-Aside.

        Returns the snapshot whatever its state; the caller applies the
        active/expiry policy. Inactive links are cached too, the cache entry
        is dropped on deactivation.
        """
        key = _cache_key(short_code)

        if self.cache:
            cached = await self.cache.get(key)
            if cached:
                try:
                    return LinkSnapshot.model_validate_json(cached)
                except ValidationError:
                    logger.warning("Dropping unreadable cache entry %s", key)
                    await self.cache.delete(key)

        link = await self.get_link(short_code)
        if not link:
            return None

        snapshot = LinkSnapshot.model_validate(link)
        if self.cache:
            await self.cache.set(key, snapshot.model_dump_json(), ttl=settings.cache_ttl)
        return snapshot
