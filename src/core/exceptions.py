"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Validation / bad input errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    INVALID_FILTER = "INVALID_FILTER"

    # Not found errors (404)
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    TAG_NOT_FOUND = "TAG_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"

    # Conflict errors (409)
    DUPLICATE_TAG = "DUPLICATE_TAG"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class BadRequestError(AppException):
    """Malformed input that passed schema validation."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.BAD_REQUEST,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=400,
            details=details,
        )


class InvalidFilterError(BadRequestError):
    """Unsupported ticket list filter, sort field or sort direction."""

    def __init__(self, field: str, value: object, allowed: list[str]) -> None:
        super().__init__(
            message=f"Invalid value for {field}: {value}",
            error_code=ErrorCode.INVALID_FILTER,
            details={"field": field, "value": str(value), "allowed": allowed},
        )


class TicketNotFoundError(AppException):
    """Ticket not found."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TICKET_NOT_FOUND,
            message=f"Ticket not found: {ticket_id}",
            status_code=404,
            details={"ticket_id": ticket_id},
        )


class TagNotFoundError(AppException):
    """Tag not found."""

    def __init__(self, tag_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TAG_NOT_FOUND,
            message=f"Tag not found: {tag_id}",
            status_code=404,
            details={"tag_id": tag_id},
        )


class CommentNotFoundError(AppException):
    """Comment not found on the given ticket."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COMMENT_NOT_FOUND,
            message=f"Comment not found: {comment_id}",
            status_code=404,
            details={"comment_id": comment_id},
        )


class DuplicateTagError(AppException):
    """A tag with this name already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_TAG,
            message=f"Tag '{name}' already exists",
            status_code=409,
            details={"name": name},
        )
