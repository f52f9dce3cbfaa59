from fastapi import HTTPException, status

from linkstats_app.services.errors import (
    AnalyticsError,
    EventRecordingError,
    LinkExpiredError,
    LinkNotFoundError,
    ShortCodeConflictError,
)

_STATUS_CODES = {
    LinkNotFoundError: status.HTTP_404_NOT_FOUND,
    LinkExpiredError: status.HTTP_403_FORBIDDEN,
    ShortCodeConflictError: status.HTTP_409_CONFLICT,
    EventRecordingError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_error(error: AnalyticsError) -> HTTPException:
    """Map a service error to an HTTPException carrying only its public message."""
    status_code = _STATUS_CODES.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=error.message)
