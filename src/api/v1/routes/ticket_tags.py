"""Ticket-Tag association routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_tag_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.tag import TagListResponse, TagResponse, TicketTagsReplace
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.tag import Tag
from domain.services.tag_service import TagService

router = APIRouter(prefix="/tickets/{ticket_id}/tags", tags=["ticket-tags"])


def _tag_list(tags: list[Tag]) -> TagListResponse:
    return TagListResponse(data=[TagResponse.from_entity(tag) for tag in tags], total=len(tags))


@router.get(
    "",
    response_model=TagListResponse,
    response_model_exclude_none=True,
    summary="Get tags for a ticket",
    responses={404: {"model": ErrorResponse, "description": "Ticket not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_ticket_tags(
    request: Request,
    ticket_id: UUID,
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    tags = await service.get_tags_for_ticket(ticket_id)
    return _tag_list(tags)


@router.put(
    "",
    response_model=TagListResponse,
    response_model_exclude_none=True,
    summary="Replace the tags of a ticket",
    responses={404: {"model": ErrorResponse, "description": "Ticket or tag not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def replace_ticket_tags(
    request: Request,
    ticket_id: UUID,
    body: TicketTagsReplace,
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    """The body's `tag_ids` become the ticket's complete tag set."""
    tags = await service.replace_ticket_tags(ticket_id, body.tag_ids)
    return _tag_list(tags)


@router.post(
    "/{tag_id}",
    response_model=TagListResponse,
    response_model_exclude_none=True,
    summary="Attach a tag to a ticket",
    responses={404: {"model": ErrorResponse, "description": "Ticket or tag not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_ticket_tag(
    request: Request,
    ticket_id: UUID,
    tag_id: UUID,
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    """Idempotent if already attached. Returns the ticket's tags."""
    tags = await service.add_ticket_tag(ticket_id, tag_id)
    return _tag_list(tags)


@router.delete(
    "/{tag_id}",
    response_model=TagListResponse,
    response_model_exclude_none=True,
    summary="Detach a tag from a ticket",
    responses={404: {"model": ErrorResponse, "description": "Ticket not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_ticket_tag(
    request: Request,
    ticket_id: UUID,
    tag_id: UUID,
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    """Idempotent if not attached. Returns the ticket's remaining tags."""
    tags = await service.remove_ticket_tag(ticket_id, tag_id)
    return _tag_list(tags)
