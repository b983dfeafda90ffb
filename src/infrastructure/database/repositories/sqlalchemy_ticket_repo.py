"""SQLAlchemy implementation of Ticket repository."""

from collections.abc import Mapping
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import utcnow
from domain.entities.ticket import Ticket, TicketPriority, TicketStatus
from domain.entities.ticket_filter import TicketFilter
from infrastructure.database.models import CommentModel, TicketModel, TicketTagModel
from infrastructure.database.ticket_query import build_ticket_queries, text_search

# Both dialects support INSERT ... ON CONFLICT DO NOTHING
_DIALECT_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}

_PATCHABLE = frozenset(
    {"title", "description", "status", "priority", "assignee_id", "resolved_at"}
)


class SQLAlchemyTicketRepository:
    """SQLAlchemy implementation of ITicketRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Ticket | None:
        """Get a ticket by ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def find(self, criteria: TicketFilter) -> tuple[list[Ticket], int]:
        """Get one page of matching tickets and the total number of matches."""
        page_stmt, count_stmt = build_ticket_queries(criteria)

        total = await self._session.scalar(count_stmt)
        result = await self._session.execute(page_stmt)
        tickets = [self._to_entity(model) for model in result.scalars()]

        return tickets, total or 0

    async def search(self, term: str, limit: int = 50) -> list[Ticket]:
        """Case-insensitive substring search on title and description, newest first."""
        stmt = (
            select(TicketModel)
            .where(text_search(term))
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, ticket: Ticket) -> Ticket:
        """Create a new ticket."""
        model = self._to_model(ticket)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, id: UUID, changes: Mapping[str, Any]) -> Ticket | None:
        """Patch the given columns of a ticket.

        An empty ``changes`` mapping is a plain read and leaves ``updated_at``
        untouched.
        """
        unknown = set(changes) - _PATCHABLE
        if unknown:
            raise ValueError(f"Cannot patch ticket fields: {sorted(unknown)}")

        model = await self._get_model(id)
        if not model:
            return None
        if not changes:
            return self._to_entity(model)

        for name, value in changes.items():
            setattr(model, name, value.value if isinstance(value, Enum) else value)
        model.updated_at = utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a ticket together with its tag associations and comments."""
        await self._session.execute(
            delete(TicketTagModel).where(TicketTagModel.ticket_id == id)
        )
        await self._session.execute(delete(CommentModel).where(CommentModel.ticket_id == id))
        result = await self._session.execute(delete(TicketModel).where(TicketModel.id == id))
        await self._session.flush()
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def add_tags(self, ticket_id: UUID, tag_ids: list[UUID]) -> None:
        """Attach tags to a ticket, skipping pairs that already exist."""
        wanted = list(dict.fromkeys(tag_ids))
        if not wanted:
            return

        insert = _DIALECT_INSERTS[self._session.bind.dialect.name]  # type: ignore[union-attr]
        attached_at = utcnow()
        stmt = (
            insert(TicketTagModel)
            .values(
                [
                    {"ticket_id": ticket_id, "tag_id": tag_id, "attached_at": attached_at}
                    for tag_id in wanted
                ]
            )
            .on_conflict_do_nothing(index_elements=["ticket_id", "tag_id"])
        )
        await self._session.execute(stmt)

    async def replace_tags(self, ticket_id: UUID, tag_ids: list[UUID]) -> None:
        """Make ``tag_ids`` the complete tag set of a ticket."""
        await self._session.execute(
            delete(TicketTagModel).where(TicketTagModel.ticket_id == ticket_id)
        )
        await self._session.flush()
        await self.add_tags(ticket_id, tag_ids)

    async def remove_tag(self, ticket_id: UUID, tag_id: UUID) -> None:
        """Detach a tag from a ticket."""
        stmt = delete(TicketTagModel).where(
            TicketTagModel.ticket_id == ticket_id,
            TicketTagModel.tag_id == tag_id,
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def count_by_status(self, assignee_id: UUID | None = None) -> dict[TicketStatus, int]:
        """Count tickets per status, every status present."""
        counts = await self._count_grouped(TicketModel.status, assignee_id)
        return {status: counts.get(status.value, 0) for status in TicketStatus}

    async def count_by_priority(
        self, assignee_id: UUID | None = None
    ) -> dict[TicketPriority, int]:
        """Count tickets per priority, every priority present."""
        counts = await self._count_grouped(TicketModel.priority, assignee_id)
        return {priority: counts.get(priority.value, 0) for priority in TicketPriority}

    async def _count_grouped(self, column: Any, assignee_id: UUID | None) -> dict[str, int]:
        stmt = select(column, func.count()).group_by(column)
        if assignee_id is not None:
            stmt = stmt.where(TicketModel.assignee_id == assignee_id)
        result = await self._session.execute(stmt)
        return {value: count for value, count in result}

    async def _get_model(self, id: UUID) -> TicketModel | None:
        stmt = select(TicketModel).where(TicketModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: TicketModel) -> Ticket:
        """Convert ORM model to domain entity."""
        return Ticket(
            id=model.id,
            title=model.title,
            description=model.description,
            status=TicketStatus(model.status),
            priority=TicketPriority(model.priority),
            assignee_id=model.assignee_id,
            reporter_id=model.reporter_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
            resolved_at=model.resolved_at,
        )

    def _to_model(self, entity: Ticket) -> TicketModel:
        """Convert domain entity to ORM model."""
        return TicketModel(
            id=entity.id,
            title=entity.title,
            description=entity.description,
            status=entity.status.value,
            priority=entity.priority.value,
            assignee_id=entity.assignee_id,
            reporter_id=entity.reporter_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            resolved_at=entity.resolved_at,
        )
