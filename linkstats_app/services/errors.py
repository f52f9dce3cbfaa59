"""
Service-level errors.

Routers translate these into HTTP status codes; messages are safe to show
to callers (internal causes are logged, never put in a message).
"""


class AnalyticsError(Exception):
    """Base class for errors raised by link and analytics services."""

    message = "Analytics error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class LinkNotFoundError(AnalyticsError):
    """No link with the short code, or the link is inactive."""

    message = "Link not found or inactive"


class LinkExpiredError(AnalyticsError):
    """The link's expiry is in the past."""

    message = "Link has expired"


class EventRecordingError(AnalyticsError):
    """Lookup, extraction or persistence failed while recording a visit."""

    message = "Failed to record analytics"


class ShortCodeConflictError(AnalyticsError):
    """A custom short code is already taken."""

    message = "Custom short code already exists"
