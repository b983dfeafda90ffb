"""Ticket repository protocol."""

from collections.abc import Mapping
from typing import Any, Protocol
from uuid import UUID

from domain.entities.ticket import Ticket, TicketPriority, TicketStatus
from domain.entities.ticket_filter import TicketFilter


class ITicketRepository(Protocol):
    """Repository interface for Ticket entities."""

    async def get(self, id: UUID) -> Ticket | None:
        """Get a ticket by ID."""
        ...

    async def find(self, criteria: TicketFilter) -> tuple[list[Ticket], int]:
        """Get one page of matching tickets and the total number of matches."""
        ...

    async def search(self, term: str, limit: int = 50) -> list[Ticket]:
        """Case-insensitive substring search on title and description."""
        ...

    async def create(self, ticket: Ticket) -> Ticket:
        """Create a new ticket."""
        ...

    async def update(self, id: UUID, changes: Mapping[str, Any]) -> Ticket | None:
        """Patch the given columns of a ticket."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a ticket with its associations and comments."""
        ...

    async def add_tags(self, ticket_id: UUID, tag_ids: list[UUID]) -> None:
        """Attach tags to a ticket, skipping pairs that already exist."""
        ...

    async def replace_tags(self, ticket_id: UUID, tag_ids: list[UUID]) -> None:
        """Make ``tag_ids`` the complete tag set of a ticket."""
        ...

    async def remove_tag(self, ticket_id: UUID, tag_id: UUID) -> None:
        """Detach a tag from a ticket (no-op if not attached)."""
        ...

    async def count_by_status(self, assignee_id: UUID | None = None) -> dict[TicketStatus, int]:
        """Count tickets per status."""
        ...

    async def count_by_priority(
        self, assignee_id: UUID | None = None
    ) -> dict[TicketPriority, int]:
        """Count tickets per priority."""
        ...
