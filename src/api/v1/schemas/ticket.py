"""Pydantic schemas for Ticket API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.comment import CommentResponse
from api.v1.schemas.tag import TagResponse
from domain.entities.tag import Tag
from domain.entities.ticket import (
    BulkUpdateResult,
    Ticket,
    TicketPriority,
    TicketStats,
    TicketStatus,
    TicketWithDetails,
    TicketWithTags,
)
from domain.entities.ticket_filter import Page


class TicketCreate(BaseModel):
    """Schema for creating a Ticket. New tickets always start ``open``."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    priority: TicketPriority = TicketPriority.MEDIUM
    assignee_id: UUID | None = None
    reporter_id: UUID | None = None
    tag_ids: list[UUID] | None = None


class TicketUpdate(BaseModel):
    """Schema for updating a Ticket (all fields optional).

    Only fields present in the request body are applied. ``tag_ids``, when
    present, replaces the ticket's whole tag set.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    assignee_id: UUID | None = None
    tag_ids: list[UUID] | None = None


class TicketResponse(BaseModel):
    """Schema for Ticket response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Login page returns 500",
                "description": "Happens on Safari only",
                "status": "open",
                "priority": "high",
                "assignee_id": None,
                "reporter_id": None,
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
                "resolved_at": None,
                "tags": [
                    {
                        "id": "456e4567-e89b-12d3-a456-426614174000",
                        "name": "frontend",
                        "color": "#10B981",
                        "created_at": "2026-01-28T10:00:00",
                        "updated_at": "2026-01-28T10:00:00",
                    }
                ],
            }
        },
    )

    id: UUID
    title: str
    description: str | None
    status: TicketStatus
    priority: TicketPriority
    assignee_id: UUID | None
    reporter_id: UUID | None
    created_at: datetime
    updated_at: datetime
    resolved_at: datetime | None
    tags: list[TagResponse] = []

    @classmethod
    def from_entity(cls, ticket: Ticket, tags: list[Tag] | None = None) -> "TicketResponse":
        return cls(
            id=ticket.id,
            title=ticket.title,
            description=ticket.description,
            status=ticket.status,
            priority=ticket.priority,
            assignee_id=ticket.assignee_id,
            reporter_id=ticket.reporter_id,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
            resolved_at=ticket.resolved_at,
            tags=[TagResponse.from_entity(tag) for tag in tags or []],
        )

    @classmethod
    def from_tagged(cls, item: TicketWithTags) -> "TicketResponse":
        return cls.from_entity(item.ticket, item.tags)


class TicketDetailResponse(TicketResponse):
    """A ticket with its tags and comments."""

    comments: list[CommentResponse] = []

    @classmethod
    def from_details(cls, item: TicketWithDetails) -> "TicketDetailResponse":
        base = TicketResponse.from_entity(item.ticket, item.tags)
        return cls(
            **base.model_dump(exclude={"tags"}),
            tags=base.tags,
            comments=[CommentResponse.model_validate(c) for c in item.comments],
        )


class TicketListResponse(BaseModel):
    """One page of tickets. ``total`` counts every match."""

    data: list[TicketResponse]
    total: int
    limit: int
    offset: int

    @classmethod
    def from_page(cls, page: Page[TicketWithTags]) -> "TicketListResponse":
        return cls(
            data=[TicketResponse.from_tagged(item) for item in page.data],
            total=page.total,
            limit=page.limit,
            offset=page.offset,
        )


class TicketSearchResponse(BaseModel):
    """Schema for ticket search results."""

    data: list[TicketResponse]
    total: int


class TicketStatsResponse(BaseModel):
    """Ticket counts per status and per priority."""

    total_by_status: dict[TicketStatus, int]
    total_by_priority: dict[TicketPriority, int]

    @classmethod
    def from_entity(cls, stats: TicketStats) -> "TicketStatsResponse":
        return cls(
            total_by_status=stats.total_by_status,
            total_by_priority=stats.total_by_priority,
        )


class BulkStatusUpdate(BaseModel):
    """Schema for moving several tickets to one status."""

    ticket_ids: list[UUID] = Field(..., min_length=1, max_length=100)
    status: TicketStatus


class BulkUpdateResponse(BaseModel):
    """Outcome of a bulk status change."""

    updated_count: int
    total_count: int
    errors: list[str] | None = None

    @classmethod
    def from_entity(cls, result: BulkUpdateResult) -> "BulkUpdateResponse":
        return cls(
            updated_count=result.updated_count,
            total_count=result.total_count,
            errors=result.errors or None,
        )
