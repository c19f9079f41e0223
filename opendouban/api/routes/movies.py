"""
Movie API Routes

Metadata resolution, candidate search, secondary lookups and the image
passthrough.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from loguru import logger

from opendouban.api.dependencies import get_provider
from opendouban.api.middleware.error_handler import NotFoundError
from opendouban.api.schemas import (
    CelebrityResponse,
    ErrorResponse,
    MetadataResponse,
    PhotoResponse,
    SearchResponse,
    SearchResultResponse,
)
from opendouban.identification.api_client import SearchMode
from opendouban.identification.resolver import MovieQuery
from opendouban.identification.service import MovieMetadataProvider


router = APIRouter(tags=["movies"])

_UPSTREAM_ERROR = {502: {"model": ErrorResponse, "description": "Upstream API failure"}}


def _query(sid: Optional[str], title: Optional[str]) -> MovieQuery:
    return MovieQuery(sid=sid or None, title=title or None)


@router.get(
    "/metadata",
    response_model=MetadataResponse,
    responses=_UPSTREAM_ERROR,
)
async def get_metadata(
    sid: Optional[str] = Query(None, description="Open Douban subject id"),
    title: Optional[str] = Query(None, description="Free-text title"),
    provider: MovieMetadataProvider = Depends(get_provider),
):
    """
    Resolve a movie to its full metadata.

    An unmatched query is not an error: the response has
    ``has_metadata: false`` and no record.
    """
    result = await provider.resolve_metadata(_query(sid, title))
    if not result.has_metadata:
        logger.info(f"No metadata found for sid={sid!r} title={title!r}")
    return MetadataResponse.model_validate(result.to_dict())


@router.get(
    "/search",
    response_model=SearchResponse,
    responses=_UPSTREAM_ERROR,
)
async def list_search_results(
    sid: Optional[str] = Query(None, description="Open Douban subject id"),
    title: Optional[str] = Query(None, description="Free-text title"),
    provider: MovieMetadataProvider = Depends(get_provider),
):
    """List candidates for an id or title, without enrichment."""
    results = await provider.list_search_results(_query(sid, title))
    return SearchResponse(
        results=[SearchResultResponse.model_validate(r.to_dict()) for r in results],
        total=len(results),
    )


@router.get(
    "/search/full",
    response_model=SearchResponse,
    responses=_UPSTREAM_ERROR,
)
async def full_search(
    q: str = Query("", description="Search keyword"),
    provider: MovieMetadataProvider = Depends(get_provider),
):
    """Full-text search in upstream order."""
    results = await provider.search(q, SearchMode.FULL)
    return SearchResponse(
        results=[SearchResultResponse.model_validate(r.to_dict()) for r in results],
        total=len(results),
    )


@router.get(
    "/movies/{sid}/photos",
    response_model=list[PhotoResponse],
    responses={404: {"model": ErrorResponse, "description": "No photos"}, **_UPSTREAM_ERROR},
)
async def get_photos(
    sid: str,
    provider: MovieMetadataProvider = Depends(get_provider),
):
    """Photos of a subject."""
    photos = await provider.get_photos(sid)
    if photos is None:
        raise NotFoundError("Photos", sid)
    return [PhotoResponse.model_validate(p.model_dump()) for p in photos]


@router.get(
    "/celebrities/{cid}",
    response_model=CelebrityResponse,
    responses={404: {"model": ErrorResponse, "description": "Celebrity not found"}, **_UPSTREAM_ERROR},
)
async def get_celebrity(
    cid: str,
    provider: MovieMetadataProvider = Depends(get_provider),
):
    """Details of one person."""
    celebrity = await provider.get_celebrity(cid)
    if celebrity is None:
        raise NotFoundError("Celebrity", cid)
    return CelebrityResponse.model_validate(celebrity.model_dump())


@router.get(
    "/image",
    responses=_UPSTREAM_ERROR,
)
async def get_image(
    url: str = Query(..., description="Absolute image URL"),
    provider: MovieMetadataProvider = Depends(get_provider),
):
    """Fetch a remote image and return its bytes."""
    image = await provider.fetch_image(url)
    return Response(content=image.content, media_type=image.content_type)
