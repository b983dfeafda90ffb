"""Pydantic schemas for Tag API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.tag import DEFAULT_TAG_COLOR, Tag, TagStats, TagWithCount

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class TagCreate(BaseModel):
    """Schema for creating a Tag."""

    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(DEFAULT_TAG_COLOR, pattern=COLOR_PATTERN)


class TagUpdate(BaseModel):
    """Schema for updating a Tag."""

    name: str | None = Field(None, min_length=1, max_length=50)
    color: str | None = Field(None, pattern=COLOR_PATTERN)


class TagResponse(BaseModel):
    """Schema for Tag response.

    ``ticket_count`` is only present on listings that aggregate usage.
    """

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "456e4567-e89b-12d3-a456-426614174000",
                "name": "backend",
                "color": "#3B82F6",
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    color: str
    created_at: datetime
    updated_at: datetime
    ticket_count: int | None = None

    @classmethod
    def from_entity(cls, tag: Tag) -> "TagResponse":
        return cls.model_validate(tag)

    @classmethod
    def from_count(cls, item: TagWithCount) -> "TagResponse":
        return cls.model_validate(item.tag).model_copy(
            update={"ticket_count": item.ticket_count}
        )


class TagListResponse(BaseModel):
    """Schema for list of Tags."""

    data: list[TagResponse]
    total: int


class TagStatsResponse(BaseModel):
    """Aggregate tag usage."""

    total_tags: int
    total_usage: int
    unused_tags: int
    most_used_tags: list[TagResponse]

    @classmethod
    def from_entity(cls, stats: TagStats) -> "TagStatsResponse":
        return cls(
            total_tags=stats.total_tags,
            total_usage=stats.total_usage,
            unused_tags=stats.unused_tags,
            most_used_tags=[TagResponse.from_count(item) for item in stats.most_used_tags],
        )


class TicketTagsReplace(BaseModel):
    """Schema for replacing the complete tag set of a ticket."""

    tag_ids: list[UUID]
