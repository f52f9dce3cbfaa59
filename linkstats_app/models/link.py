from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.sql import func
from linkstats_app.database.connection import Base


class Link(Base):
    """
    Short link (transactional data).

    The analytics core only reads this table to validate a visit:
    short_code lookup, is_active and expires_at.
    """
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    original_url = Column(String, nullable=False)
    title = Column(String(200), nullable=True)
    description = Column(String, nullable=True)
    # Nullable=True allows two-step creation: first get ID, then generate short_code
    short_code = Column(String(32), unique=True, nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
