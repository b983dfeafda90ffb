"""Comment domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from core.clock import utcnow


@dataclass
class Comment:
    """A comment owned by exactly one ticket."""

    ticket_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    author_id: UUID | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def edit(self, content: str) -> None:
        """Replace the comment body."""
        self.content = content
        self.updated_at = utcnow()
