"""Helpers for working with database/SQLAlchemy errors."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

_UNIQUE_VIOLATION_SQLSTATES = {"23505"}
_FOREIGN_KEY_VIOLATION_SQLSTATES = {"23503"}


def _sqlstate(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(
    exc: SQLAlchemyError, constraint_identifier: str | None = None
) -> bool:
    """Return ``True`` if ``exc`` was caused by a unique constraint.

    Parameters
    ----------
    exc:
        The SQLAlchemy exception to inspect.
    constraint_identifier:
        Optional substring (such as ``"versus_player"``) that must be present
        in the original database error message. When omitted, any unique
        violation will match.
    """

    orig = getattr(exc, "orig", None)
    if orig is None:
        return False

    message = str(orig).lower()
    if constraint_identifier and constraint_identifier.lower() not in message:
        return False

    if _sqlstate(exc) in _UNIQUE_VIOLATION_SQLSTATES:
        return True

    return "unique constraint" in message or "duplicate key" in message


def is_foreign_key_violation(exc: SQLAlchemyError) -> bool:
    """Return ``True`` if ``exc`` references a missing parent row."""

    orig = getattr(exc, "orig", None)
    if orig is None:
        return False

    if _sqlstate(exc) in _FOREIGN_KEY_VIOLATION_SQLSTATES:
        return True

    message = str(orig).lower()
    return "foreign key" in message
