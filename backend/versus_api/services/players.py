"""Player identity lookups (``player_id`` <-> ``email`` <-> ``display_name``)."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Player
from .validation import PlayerEntry, ValidationError


def display_name_for(player: Player, nickname: str | None = None) -> str:
    """Return the name shown for ``player``: nickname, then display name, then email."""

    if nickname:
        return nickname
    if player.display_name:
        return player.display_name
    return (player.email or "").split("@")[0]


async def get_player(session: AsyncSession, player_id: str) -> Player | None:
    return await session.get(Player, player_id)


async def resolve_player_by_email(session: AsyncSession, email: str) -> Player | None:
    normalized = (email or "").strip().lower()
    if not normalized:
        return None
    return (
        await session.execute(
            select(Player).where(func.lower(Player.email) == normalized)
        )
    ).scalar_one_or_none()


async def search_players(
    session: AsyncSession, query: str, *, limit: int = 10
) -> list[Player]:
    stmt = select(Player).order_by(Player.email)
    q = (query or "").strip()
    if q:
        pattern = f"%{q.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Player.email).like(pattern),
                func.lower(Player.display_name).like(pattern),
            )
        )
    return list((await session.execute(stmt.limit(limit))).scalars().all())


async def resolve_player_entries(
    session: AsyncSession, entries: Sequence[PlayerEntry]
) -> list[PlayerEntry]:
    """Fill in ``player_id`` for entries given by email and check every player exists.

    Raises ``ValidationError`` for unknown players or when two entries resolve
    to the same player. Only reads from the database.
    """

    emails = sorted({e.email for e in entries if e.player_id is None and e.email})
    by_email: dict[str, str] = {}
    if emails:
        rows = (
            await session.execute(
                select(Player.id, func.lower(Player.email)).where(
                    func.lower(Player.email).in_(emails)
                )
            )
        ).all()
        by_email = {email: pid for pid, email in rows}
        missing = [email for email in emails if email not in by_email]
        if missing:
            raise ValidationError(
                "No account found for: "
                + ", ".join(missing)
                + ". Players must sign up first."
            )

    resolved: list[PlayerEntry] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries, start=1):
        player_id = entry.player_id or by_email[entry.email]
        if player_id in seen:
            raise ValidationError(f"Player #{index} is listed more than once.")
        seen.add(player_id)
        resolved.append(replace(entry, player_id=player_id))

    ids = [entry.player_id for entry in resolved]
    registered = set(
        (await session.execute(select(Player.id).where(Player.id.in_(ids))))
        .scalars()
        .all()
    )
    missing_ids = sorted(set(ids) - registered)
    if missing_ids:
        raise ValidationError(f"unknown players: {', '.join(missing_ids)}")
    return resolved
