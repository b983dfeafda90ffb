"""Tag repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.tag import Tag, TagStats, TagWithCount


class ITagRepository(Protocol):
    """Repository interface for Tag entities and their ticket associations."""

    async def get(self, id: UUID) -> Tag | None:
        """Get a tag by ID."""
        ...

    async def get_by_name(self, name: str) -> Tag | None:
        """Get a tag by its exact name."""
        ...

    async def name_exists(self, name: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another tag already uses ``name``."""
        ...

    async def get_existing_ids(self, ids: list[UUID]) -> set[UUID]:
        """Return the subset of ``ids`` that exist."""
        ...

    async def get_all(self) -> list[Tag]:
        """Get all tags ordered by name."""
        ...

    async def get_all_with_counts(self) -> list[TagWithCount]:
        """Get all tags ordered by name with their ticket counts."""
        ...

    async def get_for_ticket(self, ticket_id: UUID) -> list[Tag]:
        """Get all tags attached to a ticket."""
        ...

    async def get_for_tickets_batch(self, ticket_ids: list[UUID]) -> dict[UUID, list[Tag]]:
        """Get tags for multiple tickets in a single query (batch fetch)."""
        ...

    async def search(self, term: str, limit: int = 20) -> list[Tag]:
        """Case-insensitive substring search on tag names."""
        ...

    async def get_popular(self, limit: int = 10) -> list[TagWithCount]:
        """Get the most used tags."""
        ...

    async def get_stats(self, top: int = 5) -> TagStats:
        """Get aggregate usage figures."""
        ...

    async def create(self, tag: Tag) -> Tag:
        """Create a new tag."""
        ...

    async def update(
        self, id: UUID, name: str | None = None, color: str | None = None
    ) -> Tag | None:
        """Patch the supplied fields of a tag."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a tag and its associations, returning success status."""
        ...
