"""Tag domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from core.clock import utcnow

DEFAULT_TAG_COLOR = "#3B82F6"  # blue


@dataclass
class Tag:
    """Domain entity for a Tag.

    Names are unique across the store. The color is kept exactly as supplied.
    """

    name: str
    id: UUID = field(default_factory=uuid4)
    color: str = DEFAULT_TAG_COLOR
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True, slots=True)
class TagWithCount:
    """Read-only value object: a Tag bundled with the number of tickets using it."""

    tag: Tag
    ticket_count: int


@dataclass(frozen=True, slots=True)
class TagStats:
    """Aggregate tag usage figures."""

    total_tags: int
    total_usage: int
    unused_tags: int
    most_used_tags: list[TagWithCount]
