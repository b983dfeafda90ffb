"""Comment service layer with business logic."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import BadRequestError, CommentNotFoundError, TicketNotFoundError
from domain.entities.comment import Comment
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class CommentService:
    """Service layer for ticket comments."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def add(
        self, ticket_id: UUID, content: str, author_id: UUID | None = None
    ) -> Comment:
        """Add a comment to an existing ticket."""
        content = self._require_content(content)
        async with self._uow_factory() as uow:
            await self._require_ticket(uow, ticket_id)

            comment = Comment(ticket_id=ticket_id, content=content, author_id=author_id)
            created = await uow.comments.create(comment)
            await uow.commit()

        logger.info("comment_added", ticket_id=str(ticket_id), comment_id=str(created.id))
        return created

    async def list_for_ticket(self, ticket_id: UUID) -> list[Comment]:
        """Get a ticket's comments, oldest first."""
        async with self._uow_factory() as uow:
            await self._require_ticket(uow, ticket_id)
            return await uow.comments.get_for_ticket(ticket_id)

    async def update(self, ticket_id: UUID, comment_id: UUID, content: str) -> Comment:
        content = self._require_content(content)
        async with self._uow_factory() as uow:
            comment = await self._require_comment(uow, ticket_id, comment_id)
            comment.edit(content)
            updated = await uow.comments.update(comment)
            await uow.commit()
            return updated

    async def delete(self, ticket_id: UUID, comment_id: UUID) -> None:
        async with self._uow_factory() as uow:
            await self._require_comment(uow, ticket_id, comment_id)
            await uow.comments.delete(comment_id)
            await uow.commit()

        logger.info("comment_deleted", ticket_id=str(ticket_id), comment_id=str(comment_id))

    def _require_content(self, content: str) -> str:
        """Reject blank content; the text is stored exactly as sent."""
        if not content.strip():
            raise BadRequestError("Comment content must not be blank")
        return content

    async def _require_ticket(self, uow: IUnitOfWork, ticket_id: UUID) -> None:
        if not await uow.tickets.get(ticket_id):
            raise TicketNotFoundError(str(ticket_id))

    async def _require_comment(
        self, uow: IUnitOfWork, ticket_id: UUID, comment_id: UUID
    ) -> Comment:
        """Fetch a comment, treating one that belongs to another ticket as missing."""
        await self._require_ticket(uow, ticket_id)
        comment = await uow.comments.get(comment_id)
        if not comment or comment.ticket_id != ticket_id:
            raise CommentNotFoundError(str(comment_id))
        return comment
