"""Tag service layer with business logic."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import DuplicateTagError, TagNotFoundError, TicketNotFoundError
from domain.entities.tag import DEFAULT_TAG_COLOR, Tag, TagStats, TagWithCount
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

SEARCH_LIMIT = 20


class TagService:
    """Service layer for Tag business logic and ticket/tag associations."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def list_tags(self) -> list[Tag]:
        """Get all tags ordered by name."""
        async with self._uow_factory() as uow:
            return await uow.tags.get_all()

    async def list_with_counts(self) -> list[TagWithCount]:
        """Get all tags with the number of tickets using each."""
        async with self._uow_factory() as uow:
            return await uow.tags.get_all_with_counts()

    async def get_by_id(self, tag_id: UUID) -> Tag:
        async with self._uow_factory() as uow:
            tag = await uow.tags.get(tag_id)
            if not tag:
                raise TagNotFoundError(str(tag_id))
            return tag

    async def get_by_name(self, name: str) -> Tag:
        async with self._uow_factory() as uow:
            tag = await uow.tags.get_by_name(name)
            if not tag:
                raise TagNotFoundError(name)
            return tag

    async def create(self, name: str, color: str | None = None) -> Tag:
        """Create a new tag.

        Raises DuplicateTagError when the name is taken, including when a
        concurrent insert wins the race on the unique constraint.
        """
        async with self._uow_factory() as uow:
            if await uow.tags.name_exists(name):
                raise DuplicateTagError(name)

            tag = Tag(name=name, color=color or DEFAULT_TAG_COLOR)
            try:
                created = await uow.tags.create(tag)
                await uow.commit()
            except IntegrityError:
                raise DuplicateTagError(name) from None

            logger.info("tag_created", tag_id=str(created.id), name=created.name)
            return created

    async def update(
        self,
        tag_id: UUID,
        name: str | None = None,
        color: str | None = None,
    ) -> Tag:
        """Patch a tag's name and/or color."""
        async with self._uow_factory() as uow:
            tag = await uow.tags.get(tag_id)
            if not tag:
                raise TagNotFoundError(str(tag_id))

            if name is not None and name != tag.name:
                if await uow.tags.name_exists(name, exclude_id=tag_id):
                    raise DuplicateTagError(name)

            try:
                updated = await uow.tags.update(tag_id, name=name, color=color)
                await uow.commit()
            except IntegrityError:
                raise DuplicateTagError(name or tag.name) from None

            if not updated:
                raise TagNotFoundError(str(tag_id))
            return updated

    async def delete(self, tag_id: UUID) -> None:
        """Delete a tag, detaching it from every ticket."""
        async with self._uow_factory() as uow:
            deleted = await uow.tags.delete(tag_id)
            if not deleted:
                raise TagNotFoundError(str(tag_id))
            await uow.commit()

        logger.info("tag_deleted", tag_id=str(tag_id))

    async def search(self, term: str) -> list[Tag]:
        """Case-insensitive substring search on tag names."""
        term = term.strip()
        if not term:
            return []
        async with self._uow_factory() as uow:
            return await uow.tags.search(term, limit=SEARCH_LIMIT)

    async def get_popular(self, limit: int = 10) -> list[TagWithCount]:
        """Get the most used tags."""
        async with self._uow_factory() as uow:
            return await uow.tags.get_popular(limit)

    async def get_stats(self) -> TagStats:
        async with self._uow_factory() as uow:
            return await uow.tags.get_stats()

    async def get_tags_for_ticket(self, ticket_id: UUID) -> list[Tag]:
        """Get all tags attached to a ticket."""
        async with self._uow_factory() as uow:
            await self._require_ticket(uow, ticket_id)
            return await uow.tags.get_for_ticket(ticket_id)

    async def replace_ticket_tags(self, ticket_id: UUID, tag_ids: list[UUID]) -> list[Tag]:
        """Make ``tag_ids`` the complete tag set of a ticket; ``[]`` clears it."""
        async with self._uow_factory() as uow:
            await self._require_ticket(uow, ticket_id)
            await self._require_tags(uow, tag_ids)

            await uow.tickets.replace_tags(ticket_id, tag_ids)
            tags = await uow.tags.get_for_ticket(ticket_id)
            await uow.commit()

        logger.info(
            "ticket_tags_replaced",
            ticket_id=str(ticket_id),
            tag_count=len(tags),
        )
        return tags

    async def add_ticket_tag(self, ticket_id: UUID, tag_id: UUID) -> list[Tag]:
        """Attach one tag to a ticket; attaching twice is a no-op."""
        async with self._uow_factory() as uow:
            await self._require_ticket(uow, ticket_id)
            await self._require_tags(uow, [tag_id])

            await uow.tickets.add_tags(ticket_id, [tag_id])
            tags = await uow.tags.get_for_ticket(ticket_id)
            await uow.commit()
            return tags

    async def remove_ticket_tag(self, ticket_id: UUID, tag_id: UUID) -> list[Tag]:
        """Detach one tag from a ticket; detaching an absent tag is a no-op."""
        async with self._uow_factory() as uow:
            await self._require_ticket(uow, ticket_id)

            await uow.tickets.remove_tag(ticket_id, tag_id)
            tags = await uow.tags.get_for_ticket(ticket_id)
            await uow.commit()
            return tags

    async def _require_ticket(self, uow: IUnitOfWork, ticket_id: UUID) -> None:
        if not await uow.tickets.get(ticket_id):
            raise TicketNotFoundError(str(ticket_id))

    async def _require_tags(self, uow: IUnitOfWork, tag_ids: list[UUID]) -> None:
        """Raise TagNotFoundError for the first id that has no tag row."""
        existing = await uow.tags.get_existing_ids(tag_ids)
        for tag_id in tag_ids:
            if tag_id not in existing:
                raise TagNotFoundError(str(tag_id))
