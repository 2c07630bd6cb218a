"""Commissioner edits to an existing Versus.

Player and objective lists are replaced by diffing the desired list against
the stored rows: rows in both are updated in place (keeping their ids, so
completions stay attached), new rows are inserted and missing rows are
deleted. Each edit is committed as one unit; when it fails the previously
committed state is left untouched.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db_errors import is_unique_violation
from ..exceptions import ConflictError, VersusValidationError
from ..models import Completion, Objective, Versus, VersusPlayer
from .access import get_versus_or_404
from .players import resolve_player_entries
from .validation import (
    ObjectiveEntry,
    PlayerEntry,
    ValidationError,
    VersusConfig,
    has_commissioner,
    validate_objective_entries,
    validate_player_entries,
    validate_versus_config,
)

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = ("name", "type", "reverse_ranking")


@dataclass(frozen=True)
class PlayerDiff:
    to_insert: list[PlayerEntry] = field(default_factory=list)
    to_update: list[PlayerEntry] = field(default_factory=list)
    to_remove: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ObjectiveDiff:
    to_insert: list[ObjectiveEntry] = field(default_factory=list)
    to_update: list[ObjectiveEntry] = field(default_factory=list)
    to_remove: list[str] = field(default_factory=list)


def diff_players(
    current_player_ids: Iterable[str], desired: Sequence[PlayerEntry]
) -> PlayerDiff:
    """Split ``desired`` into inserts and updates; list current players to remove."""

    current = list(current_player_ids)
    current_set = set(current)
    desired_ids = {entry.player_id for entry in desired}
    return PlayerDiff(
        to_insert=[e for e in desired if e.player_id not in current_set],
        to_update=[e for e in desired if e.player_id in current_set],
        to_remove=[pid for pid in current if pid not in desired_ids],
    )


def diff_objectives(
    current_objective_ids: Iterable[str], desired: Sequence[ObjectiveEntry]
) -> ObjectiveDiff:
    """Split ``desired`` into inserts (no id) and updates (known id).

    Raises ``ValidationError`` when an entry names an id that does not belong
    to the Versus.
    """

    current = list(current_objective_ids)
    current_set = set(current)
    for entry in desired:
        if entry.id is not None and entry.id not in current_set:
            raise ValidationError(f"Objective {entry.id} not found")
    kept = {entry.id for entry in desired if entry.id is not None}
    return ObjectiveDiff(
        to_insert=[e for e in desired if e.id is None],
        to_update=[e for e in desired if e.id is not None],
        to_remove=[oid for oid in current if oid not in kept],
    )


async def update_versus_players(
    session: AsyncSession, versus_id: str, desired: Sequence[PlayerEntry]
) -> PlayerDiff:
    await get_versus_or_404(session, versus_id)
    try:
        desired = validate_player_entries(desired)
        desired = await resolve_player_entries(session, desired)
    except ValidationError as exc:
        raise VersusValidationError(exc.detail) from exc

    if not has_commissioner(desired):
        raise ConflictError("Cannot remove the last commissioner")

    current = (
        await session.execute(
            select(VersusPlayer).where(VersusPlayer.versus_id == versus_id)
        )
    ).scalars().all()
    plan = diff_players([row.player_id for row in current], desired)
    rows_by_player = {row.player_id: row for row in current}

    try:
        for entry in plan.to_update:
            row = rows_by_player[entry.player_id]
            row.is_commissioner = entry.is_commissioner
            row.nickname = entry.nickname
        for entry in plan.to_insert:
            session.add(
                VersusPlayer(
                    id=uuid.uuid4().hex,
                    versus_id=versus_id,
                    player_id=entry.player_id,
                    is_commissioner=entry.is_commissioner,
                    nickname=entry.nickname,
                )
            )
        if plan.to_remove:
            # Completions reference the player and the Versus, not the membership row.
            await session.execute(
                delete(Completion).where(
                    Completion.versus_id == versus_id,
                    Completion.player_id.in_(plan.to_remove),
                )
            )
            await session.execute(
                delete(VersusPlayer).where(
                    VersusPlayer.versus_id == versus_id,
                    VersusPlayer.player_id.in_(plan.to_remove),
                )
            )
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.error("Updating players of versus %s failed", versus_id, exc_info=True)
        if is_unique_violation(exc, "versus_player"):
            raise ConflictError("A player is already a member of this versus") from exc
        raise

    logger.info(
        "Updated players of versus %s: %d added, %d updated, %d removed",
        versus_id,
        len(plan.to_insert),
        len(plan.to_update),
        len(plan.to_remove),
    )
    return plan


async def update_versus_objectives(
    session: AsyncSession, versus_id: str, desired: Sequence[ObjectiveEntry]
) -> ObjectiveDiff:
    await get_versus_or_404(session, versus_id)
    current = (
        await session.execute(
            select(Objective).where(Objective.versus_id == versus_id)
        )
    ).scalars().all()
    try:
        desired = validate_objective_entries(desired, allow_ids=True)
        plan = diff_objectives([row.id for row in current], desired)
    except ValidationError as exc:
        raise VersusValidationError(exc.detail) from exc

    rows_by_id = {row.id: row for row in current}
    try:
        for entry in plan.to_update:
            row = rows_by_id[entry.id]
            row.title = entry.title
            row.points = entry.points
            row.description = entry.description
        for entry in plan.to_insert:
            session.add(
                Objective(
                    id=uuid.uuid4().hex,
                    versus_id=versus_id,
                    title=entry.title,
                    points=entry.points,
                    description=entry.description,
                )
            )
        if plan.to_remove:
            # Cascades to the completions of the removed objectives only.
            await session.execute(
                delete(Objective).where(
                    Objective.versus_id == versus_id,
                    Objective.id.in_(plan.to_remove),
                )
            )
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.error("Updating objectives of versus %s failed", versus_id, exc_info=True)
        raise

    logger.info(
        "Updated objectives of versus %s: %d added, %d updated, %d removed",
        versus_id,
        len(plan.to_insert),
        len(plan.to_update),
        len(plan.to_remove),
    )
    return plan


async def update_versus_settings(
    session: AsyncSession, versus_id: str, changes: Mapping[str, Any]
) -> Versus:
    """Apply ``name``, ``type`` and ``reverse_ranking`` changes to a Versus."""

    versus = await get_versus_or_404(session, versus_id)
    unknown = set(changes) - set(SETTINGS_FIELDS)
    if unknown:
        raise VersusValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

    merged = VersusConfig(
        name=changes.get("name", versus.name),
        type=changes.get("type", versus.type),
        reverse_ranking=changes.get("reverse_ranking", versus.reverse_ranking),
    )
    try:
        config = validate_versus_config(merged)
    except ValidationError as exc:
        raise VersusValidationError(exc.detail) from exc

    versus.name = config.name
    versus.type = config.type
    versus.reverse_ranking = config.reverse_ranking
    await session.commit()
    await session.refresh(versus)
    return versus


async def delete_versus(session: AsyncSession, versus_id: str) -> None:
    """Delete a Versus; memberships, objectives and completions cascade."""

    await get_versus_or_404(session, versus_id)
    await session.execute(delete(Versus).where(Versus.id == versus_id))
    await session.commit()
    logger.info("Deleted versus %s", versus_id)
