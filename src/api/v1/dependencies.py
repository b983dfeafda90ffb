"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.comment_service import CommentService
from domain.services.tag_service import TagService
from domain.services.ticket_service import TicketService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_ticket_service() -> TicketService:
    """Get Ticket service instance."""
    return TicketService(get_uow_factory())


@lru_cache
def get_tag_service() -> TagService:
    """Get Tag service instance."""
    return TagService(get_uow_factory())


@lru_cache
def get_comment_service() -> CommentService:
    """Get Comment service instance."""
    return CommentService(get_uow_factory())
