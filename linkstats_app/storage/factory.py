"""
Factory for creating event store instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum

from .strategies import EventStoreStrategy, SQLAlchemyEventStore, InMemoryEventStore
from linkstats_app.database.connection import SessionLocal

logger = logging.getLogger(__name__)


class EventStoreBackend(Enum):
    """Available event store backends"""
    SQLALCHEMY = "sqlalchemy"
    MEMORY = "memory"


class EventStoreFactory:
    """
    Simple factory for creating event store instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: EventStoreStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: EventStoreBackend) -> EventStoreStrategy:
        """
        Create or return cached event store instance.

        Args:
            backend: Type of store backend (from enum)

        Returns:
            Singleton event store instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == EventStoreBackend.SQLALCHEMY:
            cls._instance = SQLAlchemyEventStore(session_factory=SessionLocal)
            logger.info("✅ SQLAlchemy event store initialized")

        elif backend == EventStoreBackend.MEMORY:
            cls._instance = InMemoryEventStore()
            logger.info("✅ In-memory event store initialized")

        else:
            raise ValueError(f"Unknown event store backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
