"""Tag API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.v1.dependencies import get_tag_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.tag import (
    TagCreate,
    TagListResponse,
    TagResponse,
    TagStatsResponse,
    TagUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get(
    "",
    response_model=TagListResponse,
    response_model_exclude_none=True,
    summary="List all tags",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_tags(
    request: Request,
    with_counts: bool = Query(False, description="Include the number of tickets per tag"),
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    """Get all tags ordered by name, optionally with usage counts."""
    if with_counts:
        counted = await service.list_with_counts()
        data = [TagResponse.from_count(item) for item in counted]
    else:
        tags = await service.list_tags()
        data = [TagResponse.from_entity(tag) for tag in tags]
    return TagListResponse(data=data, total=len(data))


@router.post(
    "",
    response_model=TagResponse,
    response_model_exclude_none=True,
    summary="Create a tag",
    responses={
        200: {"description": "Tag created successfully"},
        409: {"model": ErrorResponse, "description": "Tag with this name already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_tag(
    request: Request,
    body: TagCreate,
    service: TagService = Depends(get_tag_service),
) -> TagResponse:
    """Create a new tag. Tag names are unique; color defaults to blue."""
    tag = await service.create(name=body.name, color=body.color)
    return TagResponse.from_entity(tag)


@router.get(
    "/search",
    response_model=TagListResponse,
    response_model_exclude_none=True,
    summary="Search tags by name",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def search_tags(
    request: Request,
    q: str = Query(..., min_length=1, description="Case-insensitive name fragment"),
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    tags = await service.search(q)
    return TagListResponse(data=[TagResponse.from_entity(tag) for tag in tags], total=len(tags))


@router.get(
    "/popular",
    response_model=TagListResponse,
    summary="Most used tags",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def popular_tags(
    request: Request,
    limit: int = Query(10, ge=1, le=100),
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    """Tags attached to at least one ticket, most used first."""
    counted = await service.get_popular(limit)
    return TagListResponse(
        data=[TagResponse.from_count(item) for item in counted],
        total=len(counted),
    )


@router.get(
    "/stats",
    response_model=TagStatsResponse,
    summary="Tag usage statistics",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def tag_stats(
    request: Request,
    service: TagService = Depends(get_tag_service),
) -> TagStatsResponse:
    stats = await service.get_stats()
    return TagStatsResponse.from_entity(stats)


@router.get(
    "/{tag_id}",
    response_model=TagResponse,
    response_model_exclude_none=True,
    summary="Get a tag",
    responses={404: {"model": ErrorResponse, "description": "Tag not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_tag(
    request: Request,
    tag_id: UUID,
    service: TagService = Depends(get_tag_service),
) -> TagResponse:
    tag = await service.get_by_id(tag_id)
    return TagResponse.from_entity(tag)


@router.put(
    "/{tag_id}",
    response_model=TagResponse,
    response_model_exclude_none=True,
    summary="Update a tag",
    responses={
        200: {"description": "Tag updated successfully"},
        404: {"model": ErrorResponse, "description": "Tag not found"},
        409: {"model": ErrorResponse, "description": "Tag with this name already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_tag(
    request: Request,
    tag_id: UUID,
    body: TagUpdate,
    service: TagService = Depends(get_tag_service),
) -> TagResponse:
    """Update an existing tag's name or color. Omitted fields are kept."""
    tag = await service.update(tag_id, name=body.name, color=body.color)
    return TagResponse.from_entity(tag)


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a tag",
    responses={
        204: {"description": "Tag deleted successfully"},
        404: {"model": ErrorResponse, "description": "Tag not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_tag(
    request: Request,
    tag_id: UUID,
    service: TagService = Depends(get_tag_service),
) -> None:
    """Delete a tag. Automatically detaches it from all tickets."""
    await service.delete(tag_id)
    return None
