from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from linkstats_app.api.errors import http_error
from linkstats_app.schemas.analytics import RecordVisitRequest
from linkstats_app.services.errors import AnalyticsError
from linkstats_app.services.event_recorder import EventRecorder
from linkstats_app.dependencies import get_event_recorder

router = APIRouter(tags=["redirect"])

UTM_PARAMS = ("utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content")


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


@router.get("/{short_code}")
async def redirect_to_original_url(
    short_code: str,
    request: Request,
    recorder: EventRecorder = Depends(get_event_recorder)
):
    """
    Record a click and redirect to the original URL.

    The click is stored before redirecting, so the event id exists by the
    time the browser follows the Location header.
    """
    visit = RecordVisitRequest(
        short_code=short_code,
        ip=_client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
        referer=request.headers.get("referer"),
        **{param: request.query_params.get(param) for param in UTM_PARAMS},
    )

    try:
        result = await recorder.record(visit)
    except AnalyticsError as e:
        raise http_error(e)

    return RedirectResponse(url=result.redirect_url, status_code=status.HTTP_302_FOUND)
