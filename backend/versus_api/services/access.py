"""Membership and commissioner checks for a Versus."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AuthorizationError, NotFoundError
from ..models import Versus, VersusPlayer


async def get_membership(
    session: AsyncSession, versus_id: str, player_id: str
) -> VersusPlayer | None:
    return (
        await session.execute(
            select(VersusPlayer).where(
                VersusPlayer.versus_id == versus_id,
                VersusPlayer.player_id == player_id,
            )
        )
    ).scalar_one_or_none()


async def is_member(session: AsyncSession, versus_id: str, player_id: str) -> bool:
    return await get_membership(session, versus_id, player_id) is not None


async def is_commissioner(
    session: AsyncSession, versus_id: str, player_id: str
) -> bool:
    membership = await get_membership(session, versus_id, player_id)
    return bool(membership and membership.is_commissioner)


async def get_versus_or_404(session: AsyncSession, versus_id: str) -> Versus:
    versus = await session.get(Versus, versus_id)
    if versus is None:
        raise NotFoundError("versus", versus_id)
    return versus


async def require_member(
    session: AsyncSession, versus_id: str, player_id: str
) -> VersusPlayer:
    await get_versus_or_404(session, versus_id)
    membership = await get_membership(session, versus_id, player_id)
    if membership is None:
        raise AuthorizationError("You don't have access to this versus")
    return membership


async def require_commissioner(
    session: AsyncSession, versus_id: str, player_id: str
) -> VersusPlayer:
    membership = await require_member(session, versus_id, player_id)
    if not membership.is_commissioner:
        raise AuthorizationError("Only commissioners can edit this versus")
    return membership
