"""Static Strawberry types the generated headless schema builds on."""

from datetime import datetime

import strawberry
from strawberry.scalars import JSON

from headless_cms.config import settings


@strawberry.type(name="User")
class UserType:
    """A CMS user; referenced by entries as createdBy / updatedBy."""

    id: strawberry.ID
    username: str | None
    email: str
    created_at: datetime | None = None


@strawberry.type(name="Error")
class ErrorType:
    """Error returned inside a response wrapper instead of data."""

    code: str | None = None
    message: str | None = None
    data: JSON | None = None


@strawberry.type(name="ListMeta")
class ListMeta:
    """Pagination metadata of a list response."""

    total_count: int
    total_pages: int
    page: int
    per_page: int
    previous_page: int | None = None
    next_page: int | None = None


@strawberry.type(name="DeleteResponse")
class DeleteResponse:
    data: bool | None = None
    error: ErrorType | None = None


@strawberry.type
class Query:
    """Root query type; headless entry points are added by schema generation."""

    @strawberry.field(description="Version of the headless CMS API.")
    def cms_version(self) -> str:
        return settings.app_version


base_schema = strawberry.Schema(query=Query, types=[UserType, ErrorType, ListMeta, DeleteResponse])


def error_from_exception(exc) -> ErrorType:
    """Convert a CMSException into the Error object of a response wrapper."""
    return ErrorType(code=exc.error_code, message=exc.message, data=exc.details or None)
