"""Ticket API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.v1.dependencies import get_ticket_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.ticket import (
    BulkStatusUpdate,
    BulkUpdateResponse,
    TicketCreate,
    TicketDetailResponse,
    TicketListResponse,
    TicketResponse,
    TicketSearchResponse,
    TicketStatsResponse,
    TicketUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.ticket_filter import DEFAULT_PAGE_SIZE, TicketFilter
from domain.services.ticket_service import TicketService

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get(
    "",
    response_model=TicketListResponse,
    summary="List tickets",
    responses={
        200: {"description": "One page of tickets with their tags"},
        400: {
            "model": ErrorResponse,
            "description": "Invalid filter, sort field or pagination value",
        },
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_tickets(
    request: Request,
    status_filter: str | None = Query(None, alias="status"),
    priority: str | None = Query(None),
    assignee_id: UUID | None = Query(None),
    reporter_id: UUID | None = Query(None),
    tag_id: UUID | None = Query(None, description="Only tickets carrying this tag"),
    search: str | None = Query(None, description="Substring of title or description"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, description="Page size, capped at 100"),
    offset: int = Query(0, ge=0),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    service: TicketService = Depends(get_ticket_service),
) -> TicketListResponse:
    """
    Get one page of tickets matching every supplied filter.

    `total` counts all matches regardless of `limit` and `offset`.
    """
    criteria = TicketFilter(
        status=status_filter,  # type: ignore[arg-type]
        priority=priority,  # type: ignore[arg-type]
        assignee_id=assignee_id,
        reporter_id=reporter_id,
        tag_id=tag_id,
        search=search,
        limit=limit,
        offset=offset,
        sort_by=sort_by,  # type: ignore[arg-type]
        sort_order=sort_order,  # type: ignore[arg-type]
    )
    page = await service.list_tickets(criteria)
    return TicketListResponse.from_page(page)


@router.post(
    "",
    response_model=TicketResponse,
    summary="Create a ticket",
    responses={
        200: {"description": "Ticket created in the open state"},
        404: {"model": ErrorResponse, "description": "One of the tag ids does not exist"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_ticket(
    request: Request,
    body: TicketCreate,
    service: TicketService = Depends(get_ticket_service),
) -> TicketResponse:
    created = await service.create(
        title=body.title,
        description=body.description,
        priority=body.priority,
        assignee_id=body.assignee_id,
        reporter_id=body.reporter_id,
        tag_ids=body.tag_ids,
    )
    return TicketResponse.from_tagged(created)


@router.get(
    "/search",
    response_model=TicketSearchResponse,
    summary="Search tickets",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def search_tickets(
    request: Request,
    q: str = Query(..., min_length=1),
    service: TicketService = Depends(get_ticket_service),
) -> TicketSearchResponse:
    """Case-insensitive search on title and description, newest first."""
    tickets = await service.search(q)
    return TicketSearchResponse(
        data=[TicketResponse.from_entity(ticket) for ticket in tickets],
        total=len(tickets),
    )


@router.get(
    "/stats",
    response_model=TicketStatsResponse,
    summary="Ticket counts by status and priority",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def ticket_stats(
    request: Request,
    assignee_id: UUID | None = Query(None),
    service: TicketService = Depends(get_ticket_service),
) -> TicketStatsResponse:
    stats = await service.get_stats(assignee_id)
    return TicketStatsResponse.from_entity(stats)


@router.post(
    "/bulk-status",
    response_model=BulkUpdateResponse,
    response_model_exclude_none=True,
    summary="Change the status of several tickets",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def bulk_update_status(
    request: Request,
    body: BulkStatusUpdate,
    service: TicketService = Depends(get_ticket_service),
) -> BulkUpdateResponse:
    """Missing tickets are listed in `errors`; the rest are still updated."""
    result = await service.bulk_update_status(body.ticket_ids, body.status)
    return BulkUpdateResponse.from_entity(result)


@router.get(
    "/{ticket_id}",
    response_model=TicketDetailResponse,
    summary="Get a ticket",
    responses={
        200: {"description": "Ticket with tags and comments"},
        404: {"model": ErrorResponse, "description": "Ticket not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_ticket(
    request: Request,
    ticket_id: UUID,
    service: TicketService = Depends(get_ticket_service),
) -> TicketDetailResponse:
    details = await service.get_with_details(ticket_id)
    return TicketDetailResponse.from_details(details)


@router.put(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Update a ticket",
    responses={
        200: {"description": "Ticket updated successfully"},
        404: {"model": ErrorResponse, "description": "Ticket or tag not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_ticket(
    request: Request,
    ticket_id: UUID,
    body: TicketUpdate,
    service: TicketService = Depends(get_ticket_service),
) -> TicketResponse:
    """
    Apply the fields present in the body.

    Sending `tag_ids` replaces the whole tag set; `[]` removes every tag.
    """
    changes = body.model_dump(exclude_unset=True)
    tag_ids = changes.pop("tag_ids", None)
    updated = await service.update(ticket_id, changes, tag_ids=tag_ids)
    return TicketResponse.from_tagged(updated)


@router.delete(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a ticket",
    responses={
        204: {"description": "Ticket deleted with its comments and tag links"},
        404: {"model": ErrorResponse, "description": "Ticket not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_ticket(
    request: Request,
    ticket_id: UUID,
    service: TicketService = Depends(get_ticket_service),
) -> None:
    await service.delete(ticket_id)
    return None
