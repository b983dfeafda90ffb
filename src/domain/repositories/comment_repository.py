"""Comment repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.comment import Comment


class ICommentRepository(Protocol):
    """Repository interface for Comment entities."""

    async def get(self, id: UUID) -> Comment | None:
        """Get a comment by ID."""
        ...

    async def get_for_ticket(self, ticket_id: UUID) -> list[Comment]:
        """Get a ticket's comments, oldest first."""
        ...

    async def create(self, comment: Comment) -> Comment:
        """Create a new comment."""
        ...

    async def update(self, comment: Comment) -> Comment:
        """Update an existing comment."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a comment and return success status."""
        ...
