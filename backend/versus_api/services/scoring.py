"""Scoreboard and history computation for a Versus.

Scores are never stored. Every read loads the current objectives, memberships
and completions and runs :func:`compute_scoreboard`, so an edit to an
objective's points is visible on the next read without touching completions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Completion, Objective, Player, VersusPlayer
from ..time_utils import coerce_utc
from .access import get_versus_or_404
from .players import display_name_for


@dataclass(frozen=True)
class Member:
    player_id: str
    display_name: str = ""
    is_commissioner: bool = False


@dataclass(frozen=True)
class ScoreboardEntry:
    player_id: str
    score: int
    rank: int
    display_name: str = ""
    is_commissioner: bool = False


@dataclass(frozen=True)
class Scoreboard:
    entries: list[ScoreboardEntry]
    total_players: int
    reverse_ranking: bool = False


@dataclass(frozen=True)
class HistoryEntry:
    completion_id: str
    objective_id: str
    objective_title: str
    points: int
    completed_at: datetime | None


def compute_scoreboard(
    members: Sequence[Member],
    objective_points: Mapping[str, int],
    completions: Iterable[tuple[str, str]],
    *,
    reverse_ranking: bool = False,
) -> Scoreboard:
    """Rank every member of a Versus by total points.

    ``completions`` yields ``(player_id, objective_id)`` pairs. A player's
    score is the sum of the points of the objectives they completed, or 0.
    Players are ordered by score descending, or ascending when
    ``reverse_ranking`` is set, and ranked with competition ranking: tied
    scores share a rank and the next distinct score is ranked one past the
    number of players ahead of it (1, 2, 2, 4).
    """

    scores: dict[str, int] = {m.player_id: 0 for m in members}
    for player_id, objective_id in completions:
        if player_id not in scores or objective_id not in objective_points:
            continue
        scores[player_id] += objective_points[objective_id]

    direction = 1 if reverse_ranking else -1
    ordered = sorted(
        members,
        key=lambda m: (direction * scores[m.player_id], m.display_name.lower(), m.player_id),
    )

    entries: list[ScoreboardEntry] = []
    rank = 0
    previous: int | None = None
    for position, member in enumerate(ordered, start=1):
        score = scores[member.player_id]
        if previous is None or score != previous:
            rank = position
            previous = score
        entries.append(
            ScoreboardEntry(
                player_id=member.player_id,
                score=score,
                rank=rank,
                display_name=member.display_name,
                is_commissioner=member.is_commissioner,
            )
        )

    return Scoreboard(
        entries=entries,
        total_players=len(members),
        reverse_ranking=reverse_ranking,
    )


def get_player_standing(
    scoreboard: Scoreboard, player_id: str
) -> ScoreboardEntry | None:
    for entry in scoreboard.entries:
        if entry.player_id == player_id:
            return entry
    return None


async def get_scoreboard(session: AsyncSession, versus_id: str) -> Scoreboard:
    versus = await get_versus_or_404(session, versus_id)

    member_rows = (
        await session.execute(
            select(VersusPlayer, Player)
            .join(Player, Player.id == VersusPlayer.player_id)
            .where(VersusPlayer.versus_id == versus_id)
        )
    ).all()
    members = [
        Member(
            player_id=vp.player_id,
            display_name=display_name_for(player, vp.nickname),
            is_commissioner=vp.is_commissioner,
        )
        for vp, player in member_rows
    ]

    objective_points = {
        oid: points
        for oid, points in (
            await session.execute(
                select(Objective.id, Objective.points).where(
                    Objective.versus_id == versus_id
                )
            )
        ).all()
    }

    completions = (
        await session.execute(
            select(Completion.player_id, Completion.objective_id).where(
                Completion.versus_id == versus_id
            )
        )
    ).all()

    return compute_scoreboard(
        members,
        objective_points,
        [(pid, oid) for pid, oid in completions],
        reverse_ranking=bool(versus.reverse_ranking),
    )


async def get_history(
    session: AsyncSession, versus_id: str, player_id: str
) -> list[HistoryEntry]:
    """Return ``player_id``'s completions in a Versus, most recent first."""

    rows = (
        await session.execute(
            select(Completion, Objective)
            .join(Objective, Objective.id == Completion.objective_id)
            .where(
                Completion.versus_id == versus_id,
                Completion.player_id == player_id,
            )
            .order_by(Completion.completed_at.desc(), Completion.id.desc())
        )
    ).all()
    return [
        HistoryEntry(
            completion_id=completion.id,
            objective_id=objective.id,
            objective_title=objective.title,
            points=objective.points,
            completed_at=coerce_utc(completion.completed_at),
        )
        for completion, objective in rows
    ]
