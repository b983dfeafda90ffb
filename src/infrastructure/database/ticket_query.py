"""Filter, sort and pagination expressions for ticket listings.

Every criterion is turned into a SQLAlchemy expression, so user-supplied
values always travel as bound parameters. Sort columns come from a fixed
mapping keyed by ``TicketSortField``; nothing from the request is ever
spliced into the statement text.
"""

from typing import Any

from sqlalchemy import ColumnElement, Select, asc, case, desc, func, or_, select

from domain.entities.ticket import TicketPriority, TicketStatus
from domain.entities.ticket_filter import SortOrder, TicketFilter, TicketSortField
from infrastructure.database.models import TicketModel, TicketTagModel

# Enum-valued columns sort by their natural rank rather than alphabetically
_STATUS_RANK = case(
    {status.value: status.rank for status in TicketStatus},
    value=TicketModel.status,
    else_=len(TicketStatus),
)
_PRIORITY_RANK = case(
    {priority.value: priority.rank for priority in TicketPriority},
    value=TicketModel.priority,
    else_=len(TicketPriority),
)

SORT_COLUMNS: dict[TicketSortField, ColumnElement[Any]] = {
    TicketSortField.CREATED_AT: TicketModel.created_at,
    TicketSortField.UPDATED_AT: TicketModel.updated_at,
    TicketSortField.TITLE: TicketModel.title,
    TicketSortField.STATUS: _STATUS_RANK,
    TicketSortField.PRIORITY: _PRIORITY_RANK,
    TicketSortField.RESOLVED_AT: TicketModel.resolved_at,
}


def text_search(term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on title OR description.

    LIKE wildcards inside ``term`` are escaped and match literally.
    """
    return or_(
        TicketModel.title.icontains(term, autoescape=True),
        TicketModel.description.icontains(term, autoescape=True),
    )


def ticket_predicates(criteria: TicketFilter) -> list[ColumnElement[bool]]:
    """One predicate per supplied criterion; the caller ANDs them together."""
    predicates: list[ColumnElement[bool]] = []

    if criteria.status is not None:
        predicates.append(TicketModel.status == criteria.status.value)
    if criteria.priority is not None:
        predicates.append(TicketModel.priority == criteria.priority.value)
    if criteria.assignee_id is not None:
        predicates.append(TicketModel.assignee_id == criteria.assignee_id)
    if criteria.reporter_id is not None:
        predicates.append(TicketModel.reporter_id == criteria.reporter_id)
    if criteria.tag_id is not None:
        tagged = select(TicketTagModel.ticket_id).where(
            TicketTagModel.tag_id == criteria.tag_id
        )
        predicates.append(TicketModel.id.in_(tagged))
    if criteria.search:
        predicates.append(text_search(criteria.search))

    return predicates


def ticket_ordering(criteria: TicketFilter) -> list[ColumnElement[Any]]:
    """ORDER BY terms: the requested column, then ``id`` as a stable tie-breaker."""
    direction = asc if criteria.sort_order is SortOrder.ASC else desc
    primary = direction(SORT_COLUMNS[criteria.sort_by])
    if criteria.sort_by is TicketSortField.RESOLVED_AT:
        primary = primary.nulls_last()
    return [primary, direction(TicketModel.id)]


def build_ticket_queries(
    criteria: TicketFilter,
) -> tuple[Select[tuple[TicketModel]], Select[tuple[int]]]:
    """Build the page query and the matching COUNT query.

    Both share the same predicate list, so ``total`` always reflects the full
    filtered set regardless of limit and offset.
    """
    predicates = ticket_predicates(criteria)

    page_stmt = (
        select(TicketModel)
        .where(*predicates)
        .order_by(*ticket_ordering(criteria))
        .limit(criteria.limit)
        .offset(criteria.offset)
    )
    count_stmt = select(func.count()).select_from(TicketModel).where(*predicates)

    return page_stmt, count_stmt
