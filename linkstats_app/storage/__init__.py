"""
Event store module for analytics data.

This module implements the Strategy Pattern for a pluggable append-only
event log with grouped-count reads.
"""

from .strategies import EventFilter, EventStoreStrategy, SQLAlchemyEventStore, InMemoryEventStore
from .factory import EventStoreFactory, EventStoreBackend

__all__ = [
    "EventFilter",
    "EventStoreStrategy",
    "SQLAlchemyEventStore",
    "InMemoryEventStore",
    "EventStoreFactory",
    "EventStoreBackend",
]
