from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from linkstats_app.api.errors import http_error
from linkstats_app.schemas.link import LinkCreate, LinkResponse
from linkstats_app.services.errors import ShortCodeConflictError
from linkstats_app.services.link_service import LinkService
from linkstats_app.dependencies import get_link_service

router = APIRouter(prefix="/links", tags=["links"])


@router.post("/", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    link_data: LinkCreate,
    link_service: LinkService = Depends(get_link_service)
):
    """Create a short link, optionally with a custom code and an expiry"""
    try:
        link = await link_service.create_link(
            link_data.original_url,
            custom_code=link_data.custom_code,
            expires_at=link_data.expires_at,
            title=link_data.title,
            description=link_data.description,
        )
    except ShortCodeConflictError as e:
        raise http_error(e)
    return await link_service.to_response(link)


@router.get("/", response_model=List[LinkResponse])
async def list_links(link_service: LinkService = Depends(get_link_service)):
    """All links, newest first, with their click counts"""
    return [await link_service.to_response(link) for link in await link_service.list_links()]


@router.get("/{short_code}", response_model=LinkResponse)
async def get_link(
    short_code: str,
    link_service: LinkService = Depends(get_link_service)
):
    link = await link_service.get_link(short_code)
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )
    return await link_service.to_response(link)


@router.delete("/{short_code}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_link(
    short_code: str,
    link_service: LinkService = Depends(get_link_service)
):
    """Deactivate a link (soft delete); later visits get 404"""
    success = await link_service.deactivate_link(short_code)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )
