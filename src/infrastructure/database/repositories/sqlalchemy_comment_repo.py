"""SQLAlchemy implementation of Comment repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.comment import Comment
from infrastructure.database.models import CommentModel


class SQLAlchemyCommentRepository:
    """SQLAlchemy implementation of ICommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Comment | None:
        """Get a comment by ID."""
        stmt = select(CommentModel).where(CommentModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_ticket(self, ticket_id: UUID) -> list[Comment]:
        """Get a ticket's comments, oldest first."""
        stmt = (
            select(CommentModel)
            .where(CommentModel.ticket_id == ticket_id)
            .order_by(CommentModel.created_at, CommentModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, comment: Comment) -> Comment:
        """Create a new comment."""
        model = self._to_model(comment)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, comment: Comment) -> Comment:
        """Update an existing comment."""
        stmt = select(CommentModel).where(CommentModel.id == comment.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Comment {comment.id} not found")

        model.content = comment.content
        model.updated_at = comment.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a comment."""
        stmt = select(CommentModel).where(CommentModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: CommentModel) -> Comment:
        """Convert ORM model to domain entity."""
        return Comment(
            id=model.id,
            ticket_id=model.ticket_id,
            author_id=model.author_id,
            content=model.content,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Comment) -> CommentModel:
        """Convert domain entity to ORM model."""
        return CommentModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            author_id=entity.author_id,
            content=entity.content,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
