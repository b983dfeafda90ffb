"""Ticket domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from core.clock import utcnow
from domain.entities.comment import Comment
from domain.entities.tag import Tag


class TicketStatus(StrEnum):
    """Lifecycle states of a ticket."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        """Resolved and closed tickets carry a resolution timestamp."""
        return self in (TicketStatus.RESOLVED, TicketStatus.CLOSED)

    @property
    def rank(self) -> int:
        return list(TicketStatus).index(self)


class TicketPriority(StrEnum):
    """Ticket priority, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return list(TicketPriority).index(self)


@dataclass
class Ticket:
    """Domain entity for a Ticket."""

    title: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    status: TicketStatus = TicketStatus.OPEN
    priority: TicketPriority = TicketPriority.MEDIUM
    assignee_id: UUID | None = None
    reporter_id: UUID | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    resolved_at: datetime | None = None

    def resolved_at_for(self, status: TicketStatus) -> datetime | None:
        """Resolution timestamp the ticket should carry after moving to ``status``.

        An already resolved ticket keeps its original timestamp when it is
        closed; reopening clears it.
        """
        if not status.is_terminal:
            return None
        return self.resolved_at or utcnow()


@dataclass(frozen=True, slots=True)
class TicketWithTags:
    """A ticket together with its tags, ordered by tag name."""

    ticket: Ticket
    tags: list[Tag] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class TicketWithDetails:
    """A ticket with its tags and its comments, oldest comment first."""

    ticket: Ticket
    tags: list[Tag] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class TicketStats:
    """Ticket counts per status and per priority, zero-filled."""

    total_by_status: dict[TicketStatus, int]
    total_by_priority: dict[TicketPriority, int]


@dataclass
class BulkUpdateResult:
    """Outcome of a bulk status change."""

    total_count: int
    updated_count: int = 0
    errors: list[str] = field(default_factory=list)
