from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..models import Player
from ..schemas import PlayerOut, PlayerUpdate
from ..exceptions import NotFoundError, ProblemDetail
from ..services.players import display_name_for, resolve_player_by_email, search_players
from .auth import get_current_player

router = APIRouter(
    prefix="/players",
    tags=["players"],
    responses={401: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)


def _player_out(player: Player) -> PlayerOut:
    return PlayerOut(
        id=player.id,
        email=player.email,
        display_name=display_name_for(player),
    )


@router.get("", response_model=list[PlayerOut])
async def find_players(
    q: str = "",
    limit: int = Query(10, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
    current: Player = Depends(get_current_player),
):
    """Search registered players by email or display name, for adding to a Versus."""

    rows = await search_players(session, q, limit=limit)
    return [_player_out(p) for p in rows]


@router.get("/lookup", response_model=PlayerOut)
async def lookup_player(
    email: str = Query(..., min_length=1),
    session: AsyncSession = Depends(get_session),
    current: Player = Depends(get_current_player),
):
    player = await resolve_player_by_email(session, email)
    if player is None:
        raise NotFoundError("player", email.strip().lower())
    return _player_out(player)


@router.get("/me", response_model=PlayerOut)
async def get_me(current: Player = Depends(get_current_player)):
    return _player_out(current)


@router.patch("/me", response_model=PlayerOut)
async def update_me(
    body: PlayerUpdate,
    session: AsyncSession = Depends(get_session),
    current: Player = Depends(get_current_player),
):
    current.display_name = body.display_name
    await session.commit()
    await session.refresh(current)
    return _player_out(current)
