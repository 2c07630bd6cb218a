from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class VersusValidationError(DomainException):
    """Malformed or out-of-bounds input; raised before any write."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=422,
            title="Invalid versus",
            detail=detail,
            code="versus_invalid",
        )


class ConflictError(DomainException):
    """Duplicate membership or an edit that would leave no commissioner."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=409,
            title="Conflict",
            detail=detail,
            code="versus_conflict",
        )


class PartialWriteError(DomainException):
    """A later creation step failed; the partial Versus has been removed."""

    def __init__(self, detail: str = "failed to create, no Versus was created") -> None:
        super().__init__(
            status_code=500,
            title="Versus creation failed",
            detail=detail,
            code="versus_create_failed",
        )


class RollbackFailure(DomainException):
    """The compensating delete failed and left an orphaned Versus row."""

    def __init__(self, versus_id: str) -> None:
        super().__init__(
            status_code=500,
            title="Versus creation failed",
            detail="failed to create Versus; please try again later",
            code="versus_rollback_failed",
        )
        # Kept for operators; not part of the problem response.
        self.versus_id = versus_id


class AuthorizationError(DomainException):
    def __init__(self, detail: str = "forbidden") -> None:
        super().__init__(
            status_code=403,
            title="Forbidden",
            detail=detail,
            code="versus_forbidden",
        )


class NotFoundError(DomainException):
    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            status_code=404,
            title=f"{entity.capitalize()} not found",
            detail=f"{entity} '{entity_id}' not found",
            code=f"{entity}_not_found",
        )


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
