"""SQLAlchemy implementation of Tag repository."""

from collections import defaultdict
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import utcnow
from domain.entities.tag import Tag, TagStats, TagWithCount
from infrastructure.database.models import TagModel, TicketTagModel


class SQLAlchemyTagRepository:
    """SQLAlchemy implementation of ITagRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Tag | None:
        """Get a tag by ID."""
        stmt = select(TagModel).where(TagModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_name(self, name: str) -> Tag | None:
        """Get a tag by its exact name."""
        stmt = select(TagModel).where(TagModel.name == name)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def name_exists(self, name: str, exclude_id: UUID | None = None) -> bool:
        """Check whether a tag other than ``exclude_id`` is called ``name``."""
        stmt = select(func.count()).select_from(TagModel).where(TagModel.name == name)
        if exclude_id is not None:
            stmt = stmt.where(TagModel.id != exclude_id)
        result = await self._session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def get_existing_ids(self, ids: list[UUID]) -> set[UUID]:
        """Return the subset of ``ids`` that belong to stored tags."""
        if not ids:
            return set()
        stmt = select(TagModel.id).where(TagModel.id.in_(set(ids)))
        result = await self._session.execute(stmt)
        return set(result.scalars())

    async def get_all(self) -> list[Tag]:
        """Get all tags ordered by name."""
        stmt = select(TagModel).order_by(TagModel.name)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_all_with_counts(self) -> list[TagWithCount]:
        """Get all tags with the number of tickets using each, unused tags included."""
        usage = self._usage_subquery()
        stmt = (
            select(TagModel, func.coalesce(usage.c.ticket_count, 0))
            .outerjoin(usage, TagModel.id == usage.c.tag_id)
            .order_by(TagModel.name)
        )
        result = await self._session.execute(stmt)
        return [
            TagWithCount(tag=self._to_entity(model), ticket_count=count)
            for model, count in result
        ]

    async def get_for_ticket(self, ticket_id: UUID) -> list[Tag]:
        """Get all tags attached to a ticket."""
        stmt = (
            select(TagModel)
            .join(TicketTagModel, TagModel.id == TicketTagModel.tag_id)
            .where(TicketTagModel.ticket_id == ticket_id)
            .order_by(TagModel.name)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_tickets_batch(self, ticket_ids: list[UUID]) -> dict[UUID, list[Tag]]:
        """Get tags for multiple tickets in a single query."""
        if not ticket_ids:
            return {}

        stmt = (
            select(TicketTagModel.ticket_id, TagModel)
            .join(TagModel, TicketTagModel.tag_id == TagModel.id)
            .where(TicketTagModel.ticket_id.in_(ticket_ids))
            .order_by(TagModel.name)
        )
        result = await self._session.execute(stmt)

        tags_by_ticket: dict[UUID, list[Tag]] = defaultdict(list)
        for ticket_id, tag_model in result:
            tags_by_ticket[ticket_id].append(self._to_entity(tag_model))

        return dict(tags_by_ticket)

    async def search(self, term: str, limit: int = 20) -> list[Tag]:
        """Case-insensitive substring search on tag names."""
        stmt = (
            select(TagModel)
            .where(TagModel.name.icontains(term, autoescape=True))
            .order_by(TagModel.name)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_popular(self, limit: int = 10) -> list[TagWithCount]:
        """Get tags in use, most used first."""
        usage = self._usage_subquery()
        stmt = (
            select(TagModel, usage.c.ticket_count)
            .join(usage, TagModel.id == usage.c.tag_id)
            .where(usage.c.ticket_count > 0)
            .order_by(usage.c.ticket_count.desc(), TagModel.name)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [
            TagWithCount(tag=self._to_entity(model), ticket_count=count)
            for model, count in result
        ]

    async def get_stats(self, top: int = 5) -> TagStats:
        """Get aggregate usage figures."""
        total_tags = await self._session.scalar(select(func.count()).select_from(TagModel))
        total_usage = await self._session.scalar(
            select(func.count()).select_from(TicketTagModel)
        )
        unused_tags = await self._session.scalar(
            select(func.count())
            .select_from(TagModel)
            .where(TagModel.id.not_in(select(TicketTagModel.tag_id)))
        )
        return TagStats(
            total_tags=total_tags or 0,
            total_usage=total_usage or 0,
            unused_tags=unused_tags or 0,
            most_used_tags=await self.get_popular(top),
        )

    async def create(self, tag: Tag) -> Tag:
        """Create a new tag."""
        model = self._to_model(tag)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(
        self, id: UUID, name: str | None = None, color: str | None = None
    ) -> Tag | None:
        """Patch the supplied fields of a tag.

        With neither field supplied this is a plain read and leaves
        ``updated_at`` untouched.
        """
        stmt = select(TagModel).where(TagModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None
        if name is None and color is None:
            return self._to_entity(model)

        if name is not None:
            model.name = name
        if color is not None:
            model.color = color
        model.updated_at = utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a tag after purging its ticket associations."""
        await self._session.execute(delete(TicketTagModel).where(TicketTagModel.tag_id == id))
        result = await self._session.execute(delete(TagModel).where(TagModel.id == id))
        await self._session.flush()
        return bool(result.rowcount)  # type: ignore[attr-defined]

    def _usage_subquery(self):  # type: ignore[no-untyped-def]
        return (
            select(
                TicketTagModel.tag_id,
                func.count().label("ticket_count"),
            )
            .group_by(TicketTagModel.tag_id)
            .subquery()
        )

    def _to_entity(self, model: TagModel) -> Tag:
        """Convert ORM model to domain entity."""
        return Tag(
            id=model.id,
            name=model.name,
            color=model.color,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Tag) -> TagModel:
        """Convert domain entity to ORM model."""
        return TagModel(
            id=entity.id,
            name=entity.name,
            color=entity.color,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
