"""Create a Versus together with its memberships and objectives.

A Versus is only ever visible with at least one membership (the creator, as
commissioner) and at least one objective. Creation runs three ordered steps:

1. insert the ``versus`` row and capture its id
2. insert one ``versus_player`` row per player
3. insert one ``objective`` row per objective

With the default ``transaction`` strategy the three steps share one database
transaction. The ``compensate`` strategy commits each step on its own and,
when step 2 or 3 fails, deletes the Versus row; foreign-key cascades remove
any memberships or objectives already written. A failed compensating delete
is reported as :class:`~versus_api.exceptions.RollbackFailure` and needs
manual cleanup.

Retrying after a failure creates a new Versus; there is no idempotency key.
"""

from __future__ import annotations

import logging
import uuid
from typing import Sequence

import anyio
import anyio.lowlevel
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_create_strategy
from ..exceptions import PartialWriteError, RollbackFailure, VersusValidationError
from ..models import Objective, Versus, VersusPlayer
from ..utils.sentry import report_orphaned_versus
from .players import resolve_player_entries
from .validation import (
    ObjectiveEntry,
    PlayerEntry,
    ValidationError,
    VersusConfig,
    validate_objective_entries,
    validate_player_entries,
    validate_versus_config,
)

logger = logging.getLogger(__name__)

CreateRequest = tuple[VersusConfig, list[PlayerEntry], list[ObjectiveEntry]]


async def prepare_create_request(
    session: AsyncSession,
    creator_id: str,
    config: VersusConfig,
    players: Sequence[PlayerEntry],
    objectives: Sequence[ObjectiveEntry],
) -> CreateRequest:
    """Validate creation input. Reads players but never writes."""

    try:
        config = validate_versus_config(config)
        objectives = validate_objective_entries(objectives)
        players = validate_player_entries(players)
        players = await resolve_player_entries(session, players)
        players = validate_player_entries(players, creator_id=creator_id)
    except ValidationError as exc:
        raise VersusValidationError(exc.detail) from exc
    return config, players, objectives


def _versus_row(versus_id: str, creator_id: str, config: VersusConfig) -> Versus:
    return Versus(
        id=versus_id,
        name=config.name,
        type=config.type,
        reverse_ranking=config.reverse_ranking,
        created_by=creator_id,
    )


def _membership_rows(
    versus_id: str, players: Sequence[PlayerEntry]
) -> list[VersusPlayer]:
    return [
        VersusPlayer(
            id=uuid.uuid4().hex,
            versus_id=versus_id,
            player_id=entry.player_id,
            is_commissioner=entry.is_commissioner,
            nickname=entry.nickname,
        )
        for entry in players
    ]


def _objective_rows(
    versus_id: str, objectives: Sequence[ObjectiveEntry]
) -> list[Objective]:
    return [
        Objective(
            id=uuid.uuid4().hex,
            versus_id=versus_id,
            title=entry.title,
            points=entry.points,
            description=entry.description,
        )
        for entry in objectives
    ]


async def _safe_rollback(session: AsyncSession) -> None:
    try:
        if session.in_transaction():
            await session.rollback()
    except SQLAlchemyError:
        logger.warning("Session rollback failed", exc_info=True)


async def _create_in_transaction(
    session: AsyncSession,
    creator_id: str,
    config: VersusConfig,
    players: Sequence[PlayerEntry],
    objectives: Sequence[ObjectiveEntry],
) -> Versus:
    versus_id = uuid.uuid4().hex
    versus = _versus_row(versus_id, creator_id, config)
    step = "versus"
    try:
        session.add(versus)
        await session.flush()
        step = "players"
        session.add_all(_membership_rows(versus_id, players))
        await session.flush()
        step = "objectives"
        session.add_all(_objective_rows(versus_id, objectives))
        await session.flush()
        step = "commit"
        await session.commit()
    except Exception as exc:
        logger.error(
            "Versus creation failed at %s step; rolling back transaction",
            step,
            exc_info=True,
        )
        await _safe_rollback(session)
        raise PartialWriteError() from exc
    return versus


async def _delete_partial_versus(session: AsyncSession, versus_id: str) -> None:
    try:
        await session.execute(delete(Versus).where(Versus.id == versus_id))
        await session.commit()
    except Exception as exc:
        await _safe_rollback(session)
        logger.critical(
            "Rollback of versus %s failed; MANUAL CLEANUP REQUIRED",
            versus_id,
            exc_info=True,
        )
        report_orphaned_versus(exc, versus_id)
        raise RollbackFailure(versus_id) from exc
    logger.info("Rolled back partially created versus %s", versus_id)


async def _create_with_compensation(
    session: AsyncSession,
    creator_id: str,
    config: VersusConfig,
    players: Sequence[PlayerEntry],
    objectives: Sequence[ObjectiveEntry],
) -> Versus:
    versus_id = uuid.uuid4().hex
    versus = _versus_row(versus_id, creator_id, config)
    try:
        session.add(versus)
        await session.commit()
    except Exception as exc:
        logger.error("Versus creation failed at versus step", exc_info=True)
        await _safe_rollback(session)
        raise PartialWriteError() from exc

    step = "players"
    try:
        session.add_all(_membership_rows(versus_id, players))
        await session.commit()
        step = "objectives"
        session.add_all(_objective_rows(versus_id, objectives))
        await session.commit()
    except Exception as exc:
        logger.error(
            "Versus %s creation failed at %s step; deleting partial versus",
            versus_id,
            step,
            exc_info=True,
        )
        await _safe_rollback(session)
        await _delete_partial_versus(session, versus_id)
        raise PartialWriteError() from exc
    return versus


_WRITERS = {
    "transaction": _create_in_transaction,
    "compensate": _create_with_compensation,
}


async def create_versus(
    session: AsyncSession,
    creator_id: str,
    config: VersusConfig,
    players: Sequence[PlayerEntry],
    objectives: Sequence[ObjectiveEntry],
    *,
    strategy: str | None = None,
) -> Versus:
    """Create a Versus with its players and objectives as one unit.

    Raises ``VersusValidationError`` before any write when the input is
    invalid, ``PartialWriteError`` when a write step failed and nothing was
    left behind, and ``RollbackFailure`` when the cleanup itself failed.
    Cancellation is honoured until the first write; after that the steps and
    any cleanup run to completion.
    """

    config, players, objectives = await prepare_create_request(
        session, creator_id, config, players, objectives
    )
    writer = _WRITERS[get_create_strategy(strategy)]

    logger.info(
        "Creating versus %r for %s with %d players and %d objectives",
        config.name,
        creator_id,
        len(players),
        len(objectives),
    )
    await anyio.lowlevel.checkpoint_if_cancelled()
    with anyio.CancelScope(shield=True):
        versus = await writer(session, creator_id, config, players, objectives)
    logger.info("Created versus %s", versus.id)
    return versus
