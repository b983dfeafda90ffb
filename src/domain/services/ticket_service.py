"""Ticket service layer with business logic."""

from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID

import structlog

from core.exceptions import TagNotFoundError, TicketNotFoundError
from domain.entities.ticket import (
    BulkUpdateResult,
    Ticket,
    TicketPriority,
    TicketStats,
    TicketStatus,
    TicketWithDetails,
    TicketWithTags,
)
from domain.entities.ticket_filter import Page, TicketFilter
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

SEARCH_LIMIT = 50

# Nullable columns may be cleared with an explicit None; the others ignore it.
_CLEARABLE = frozenset({"description", "assignee_id"})
_UPDATABLE = frozenset({"title", "status", "priority"}) | _CLEARABLE


class TicketService:
    """Service layer for Ticket business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def create(
        self,
        title: str,
        description: str | None = None,
        priority: TicketPriority | str = TicketPriority.MEDIUM,
        assignee_id: UUID | None = None,
        reporter_id: UUID | None = None,
        tag_ids: list[UUID] | None = None,
    ) -> TicketWithTags:
        """Create a new ticket in the ``open`` state, optionally tagged."""
        async with self._uow_factory() as uow:
            if tag_ids:
                await self._require_tags(uow, tag_ids)

            ticket = Ticket(
                title=title,
                description=description,
                priority=TicketPriority(priority),
                assignee_id=assignee_id,
                reporter_id=reporter_id,
            )
            created = await uow.tickets.create(ticket)

            if tag_ids:
                await uow.tickets.add_tags(created.id, tag_ids)
            tags = await uow.tags.get_for_ticket(created.id)
            await uow.commit()

        logger.info(
            "ticket_created",
            ticket_id=str(created.id),
            priority=created.priority.value,
            tag_count=len(tags),
        )
        return TicketWithTags(ticket=created, tags=tags)

    async def get_by_id(self, ticket_id: UUID) -> Ticket:
        async with self._uow_factory() as uow:
            return await self._require_ticket(uow, ticket_id)

    async def get_with_tags(self, ticket_id: UUID) -> TicketWithTags:
        """Get a ticket with its tags ordered by name."""
        async with self._uow_factory() as uow:
            ticket = await self._require_ticket(uow, ticket_id)
            tags = await uow.tags.get_for_ticket(ticket_id)
            return TicketWithTags(ticket=ticket, tags=tags)

    async def get_with_details(self, ticket_id: UUID) -> TicketWithDetails:
        """Get a ticket with its tags and its comments, oldest comment first."""
        async with self._uow_factory() as uow:
            ticket = await self._require_ticket(uow, ticket_id)
            tags = await uow.tags.get_for_ticket(ticket_id)
            comments = await uow.comments.get_for_ticket(ticket_id)
            return TicketWithDetails(ticket=ticket, tags=tags, comments=comments)

    async def update(
        self,
        ticket_id: UUID,
        changes: Mapping[str, Any],
        tag_ids: list[UUID] | None = None,
    ) -> TicketWithTags:
        """Patch a ticket and optionally replace its tag set.

        ``changes`` holds only the fields the caller actually sent. An explicit
        None clears ``description`` or ``assignee_id`` and is ignored for the
        other fields. When ``tag_ids`` is not None (even ``[]``) it becomes the
        ticket's complete tag set. Moving into resolved/closed stamps
        ``resolved_at``; moving back to open/in_progress clears it.
        """
        patch = self._normalize_changes(changes)

        async with self._uow_factory() as uow:
            ticket = await self._require_ticket(uow, ticket_id)

            if "status" in patch:
                patch["resolved_at"] = ticket.resolved_at_for(patch["status"])
            if tag_ids is not None:
                await self._require_tags(uow, tag_ids)

            updated = await uow.tickets.update(ticket_id, patch)
            if not updated:
                raise TicketNotFoundError(str(ticket_id))

            if tag_ids is not None:
                await uow.tickets.replace_tags(ticket_id, tag_ids)
            tags = await uow.tags.get_for_ticket(ticket_id)
            await uow.commit()

        if patch:
            logger.info(
                "ticket_updated",
                ticket_id=str(ticket_id),
                fields=sorted(patch),
            )
        if tag_ids is not None:
            logger.info(
                "ticket_tags_replaced",
                ticket_id=str(ticket_id),
                tag_count=len(tags),
            )
        return TicketWithTags(ticket=updated, tags=tags)

    async def delete(self, ticket_id: UUID) -> None:
        """Delete a ticket with its comments and tag associations."""
        async with self._uow_factory() as uow:
            deleted = await uow.tickets.delete(ticket_id)
            if not deleted:
                raise TicketNotFoundError(str(ticket_id))
            await uow.commit()

        logger.info("ticket_deleted", ticket_id=str(ticket_id))

    async def list_tickets(self, criteria: TicketFilter) -> Page[TicketWithTags]:
        """Get one filtered, sorted page of tickets, each with its tags."""
        async with self._uow_factory() as uow:
            tickets, total = await uow.tickets.find(criteria)
            tags_by_ticket = await uow.tags.get_for_tickets_batch(
                [ticket.id for ticket in tickets]
            )

        return Page(
            data=[
                TicketWithTags(ticket=ticket, tags=tags_by_ticket.get(ticket.id, []))
                for ticket in tickets
            ],
            total=total,
            limit=criteria.limit,
            offset=criteria.offset,
        )

    async def search(self, term: str) -> list[Ticket]:
        """Substring search on title and description, newest first."""
        term = term.strip()
        if not term:
            return []
        async with self._uow_factory() as uow:
            return await uow.tickets.search(term, limit=SEARCH_LIMIT)

    async def get_stats(self, assignee_id: UUID | None = None) -> TicketStats:
        """Count tickets by status and by priority."""
        async with self._uow_factory() as uow:
            return TicketStats(
                total_by_status=await uow.tickets.count_by_status(assignee_id),
                total_by_priority=await uow.tickets.count_by_priority(assignee_id),
            )

    async def bulk_update_status(
        self, ticket_ids: list[UUID], status: TicketStatus | str
    ) -> BulkUpdateResult:
        """Move several tickets to ``status``.

        Missing tickets are reported in ``errors``; the others are still
        updated.
        """
        status = TicketStatus(status)
        outcome = BulkUpdateResult(total_count=len(ticket_ids))

        async with self._uow_factory() as uow:
            for ticket_id in ticket_ids:
                ticket = await uow.tickets.get(ticket_id)
                if not ticket:
                    outcome.errors.append(f"Ticket not found: {ticket_id}")
                    continue
                await uow.tickets.update(
                    ticket_id,
                    {"status": status, "resolved_at": ticket.resolved_at_for(status)},
                )
                outcome.updated_count += 1
            await uow.commit()

        logger.info(
            "tickets_bulk_status_updated",
            status=status.value,
            updated_count=outcome.updated_count,
            total_count=outcome.total_count,
        )
        return outcome

    def _normalize_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported ticket fields: {sorted(unknown)}")

        patch = {
            name: value
            for name, value in changes.items()
            if value is not None or name in _CLEARABLE
        }
        if "status" in patch:
            patch["status"] = TicketStatus(patch["status"])
        if "priority" in patch:
            patch["priority"] = TicketPriority(patch["priority"])
        return patch

    async def _require_ticket(self, uow: IUnitOfWork, ticket_id: UUID) -> Ticket:
        ticket = await uow.tickets.get(ticket_id)
        if not ticket:
            raise TicketNotFoundError(str(ticket_id))
        return ticket

    async def _require_tags(self, uow: IUnitOfWork, tag_ids: list[UUID]) -> None:
        existing = await uow.tags.get_existing_ids(tag_ids)
        for tag_id in tag_ids:
            if tag_id not in existing:
                raise TagNotFoundError(str(tag_id))
