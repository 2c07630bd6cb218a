"""Recording and deleting objective completions."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db_errors import is_foreign_key_violation
from ..exceptions import AuthorizationError, ConflictError, NotFoundError
from ..models import Completion, Objective
from ..time_utils import utcnow
from .access import require_member

logger = logging.getLogger(__name__)


async def record_completion(
    session: AsyncSession,
    versus_id: str,
    player_id: str,
    objective_id: str,
    *,
    acting_player_id: str | None = None,
) -> Completion:
    """Record that ``player_id`` completed ``objective_id`` once more.

    Completions are events: the same objective may be completed any number of
    times and every completion counts. Players may only record their own
    completions.
    """

    if acting_player_id is not None and acting_player_id != player_id:
        raise AuthorizationError("You can only record your own completions")
    await require_member(session, versus_id, player_id)

    objective = (
        await session.execute(
            select(Objective).where(
                Objective.id == objective_id, Objective.versus_id == versus_id
            )
        )
    ).scalar_one_or_none()
    if objective is None:
        raise NotFoundError("objective", objective_id)

    completion = Completion(
        id=uuid.uuid4().hex,
        versus_id=versus_id,
        player_id=player_id,
        objective_id=objective_id,
        completed_at=utcnow(),
    )
    session.add(completion)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_foreign_key_violation(exc):
            # The objective or the Versus was deleted concurrently.
            raise ConflictError("The objective is no longer part of this versus") from exc
        raise

    logger.info(
        "Player %s completed objective %s in versus %s",
        player_id,
        objective_id,
        versus_id,
    )
    return completion


async def delete_completion(
    session: AsyncSession, completion_id: str, player_id: str
) -> Completion:
    """Delete one of ``player_id``'s own completions and return it."""

    completion = await session.get(Completion, completion_id)
    if completion is None:
        raise NotFoundError("completion", completion_id)
    if completion.player_id != player_id:
        raise AuthorizationError("You can only delete your own completions")

    await session.delete(completion)
    await session.commit()
    logger.info("Deleted completion %s", completion_id)
    return completion
