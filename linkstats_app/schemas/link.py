from pydantic import BaseModel, HttpUrl, Field, computed_field, ConfigDict
from typing import Optional
from datetime import datetime, timezone
from linkstats_app.config import settings


class LinkCreate(BaseModel):
    original_url: HttpUrl = Field(..., description="The destination URL to be shortened")
    custom_code: Optional[str] = Field(
        None,
        pattern=r"^[0-9a-zA-Z]+$",
        max_length=settings.custom_code_max_length,
        description="Vanity short code (Base62 only)",
    )
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    expires_at: Optional[datetime] = Field(None, description="Visits after this instant are rejected")


class LinkResponse(BaseModel):
    """Serializes the SQLAlchemy Link model (from_attributes=True)."""
    id: int
    short_code: str
    original_url: str
    title: Optional[str] = None
    description: Optional[str] = None
    is_active: bool
    expires_at: Optional[datetime] = None
    clicks: int = Field(0, description="Recorded clicks, bots excluded")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def short_url(self) -> str:
        return f"{settings.base_url}/{self.short_code}"

    model_config = ConfigDict(from_attributes=True)


class LinkSnapshot(BaseModel):
    """
    What the visit path needs to know about a link.

    This is also the shape cached for link lookups, so it must round-trip
    through JSON.
    """
    id: int
    short_code: str
    original_url: str
    is_active: bool
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def is_expired(self, now: datetime) -> bool:
        """True when the link has an expiry strictly earlier than ``now``."""
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        # SQLite hands back naive datetimes; everything is stored as UTC
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at < now
