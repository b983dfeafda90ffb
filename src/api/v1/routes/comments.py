"""Ticket comment routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.v1.dependencies import get_comment_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.comment import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.comment_service import CommentService

router = APIRouter(prefix="/tickets/{ticket_id}/comments", tags=["comments"])


@router.get(
    "",
    response_model=CommentListResponse,
    summary="List comments on a ticket",
    responses={404: {"model": ErrorResponse, "description": "Ticket not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_comments(
    request: Request,
    ticket_id: UUID,
    service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    """Comments in the order they were written."""
    comments = await service.list_for_ticket(ticket_id)
    return CommentListResponse(
        data=[CommentResponse.model_validate(c) for c in comments],
        total=len(comments),
    )


@router.post(
    "",
    response_model=CommentResponse,
    summary="Comment on a ticket",
    responses={404: {"model": ErrorResponse, "description": "Ticket not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_comment(
    request: Request,
    ticket_id: UUID,
    body: CommentCreate,
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    comment = await service.add(ticket_id, body.content, author_id=body.author_id)
    return CommentResponse.model_validate(comment)


@router.put(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Edit a comment",
    responses={404: {"model": ErrorResponse, "description": "Ticket or comment not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_comment(
    request: Request,
    ticket_id: UUID,
    comment_id: UUID,
    body: CommentUpdate,
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    comment = await service.update(ticket_id, comment_id, body.content)
    return CommentResponse.model_validate(comment)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    responses={404: {"model": ErrorResponse, "description": "Ticket or comment not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_comment(
    request: Request,
    ticket_id: UUID,
    comment_id: UUID,
    service: CommentService = Depends(get_comment_service),
) -> None:
    await service.delete(ticket_id, comment_id)
    return None
