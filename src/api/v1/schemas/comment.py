"""Pydantic schemas for Comment API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CommentBase(BaseModel):
    """Base schema for Comment."""

    content: str = Field(..., min_length=1, max_length=10000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class CommentCreate(CommentBase):
    """Schema for adding a Comment to a ticket."""

    author_id: UUID | None = None


class CommentUpdate(CommentBase):
    """Schema for editing a Comment."""


class CommentResponse(BaseModel):
    """Schema for Comment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    ticket_id: UUID
    author_id: UUID | None
    content: str
    created_at: datetime
    updated_at: datetime


class CommentListResponse(BaseModel):
    """Schema for list of Comments."""

    data: list[CommentResponse]
    total: int
