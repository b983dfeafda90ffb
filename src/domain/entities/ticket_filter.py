"""Ticket listing criteria and paginated results."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar
from uuid import UUID

from core.exceptions import InvalidFilterError
from domain.entities.ticket import TicketPriority, TicketStatus

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

T = TypeVar("T")
E = TypeVar("E", bound=StrEnum)


class TicketSortField(StrEnum):
    """Columns a ticket listing may be ordered by."""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"
    STATUS = "status"
    PRIORITY = "priority"
    RESOLVED_AT = "resolved_at"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


def _coerce(enum_type: type[E], value: object, field_name: str) -> E:
    """Turn a raw value into a member of ``enum_type`` or reject it."""
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).strip().lower())
    except ValueError:
        raise InvalidFilterError(
            field_name, value, [member.value for member in enum_type]
        ) from None


@dataclass
class TicketFilter:
    """Criteria for listing tickets.

    Every supplied predicate narrows the result (logical AND); ``None`` means
    "no constraint". Raw strings are accepted for the enum-valued fields so
    that callers outside the HTTP layer get the same allow-list checks.
    ``limit`` is clamped to ``MAX_PAGE_SIZE``.
    """

    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    assignee_id: UUID | None = None
    reporter_id: UUID | None = None
    tag_id: UUID | None = None
    search: str | None = None
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0
    sort_by: TicketSortField = TicketSortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    def __post_init__(self) -> None:
        if self.status is not None:
            self.status = _coerce(TicketStatus, self.status, "status")
        if self.priority is not None:
            self.priority = _coerce(TicketPriority, self.priority, "priority")
        self.sort_by = _coerce(TicketSortField, self.sort_by, "sort_by")
        self.sort_order = _coerce(SortOrder, self.sort_order, "sort_order")

        if self.search is not None:
            self.search = self.search.strip() or None

        if self.limit < 1:
            raise InvalidFilterError("limit", self.limit, [f"1..{MAX_PAGE_SIZE}"])
        if self.offset < 0:
            raise InvalidFilterError("offset", self.offset, [">= 0"])
        self.limit = min(self.limit, MAX_PAGE_SIZE)


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """One page of an offset-paginated listing.

    ``total`` counts every matching row, independent of limit and offset.
    """

    data: list[T]
    total: int
    limit: int
    offset: int
