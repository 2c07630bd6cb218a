import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError

from versus_api.db import normalize_database_url
from versus_api.db_errors import is_unique_violation


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@db/versus", "postgresql+asyncpg://u:p@db/versus"),
        ("postgresql+asyncpg://db/versus", "postgresql+asyncpg://db/versus"),
        ("sqlite:///./versus.db", "sqlite+aiosqlite:///./versus.db"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
    ids=["postgres", "asyncpg", "sqlite-file", "aiosqlite-memory"],
)
def test_normalize_database_url(url, expected):
    assert normalize_database_url(url) == expected


@pytest.mark.parametrize("url", [None, ""], ids=["unset", "empty"])
def test_normalize_database_url_requires_a_value(url):
    with pytest.raises(RuntimeError):
        normalize_database_url(url)


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, sqlite3.IntegrityError(message))


def test_unique_violation_can_be_scoped_to_a_table():
    membership = _integrity_error(
        "UNIQUE constraint failed: versus_player.versus_id, versus_player.player_id"
    )
    email = _integrity_error("UNIQUE constraint failed: index 'uq_player_email_lower'")

    assert is_unique_violation(membership, "versus_player")
    assert not is_unique_violation(email, "versus_player")
    assert is_unique_violation(email)
