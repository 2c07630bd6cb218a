from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..models import Objective, Player, Versus, VersusPlayer
from ..schemas import (
    HistoryEntryOut,
    ObjectiveIn,
    ObjectiveOut,
    ScoreboardEntryOut,
    ScoreboardOut,
    VersusCreate,
    VersusDetailOut,
    VersusObjectivesUpdate,
    VersusOut,
    VersusPlayerIn,
    VersusPlayerOut,
    VersusPlayersUpdate,
    VersusSummaryOut,
    VersusUpdate,
)
from ..exceptions import NotFoundError
from ..services.access import get_membership, require_commissioner, require_member
from ..services.creation import create_versus
from ..services.editing import (
    delete_versus,
    update_versus_objectives,
    update_versus_players,
    update_versus_settings,
)
from ..services.players import display_name_for
from ..services.scoring import (
    HistoryEntry,
    Scoreboard,
    ScoreboardEntry,
    get_history,
    get_player_standing,
    get_scoreboard,
)
from ..services.validation import ObjectiveEntry, PlayerEntry, VersusConfig
from ..time_utils import coerce_utc
from .auth import create_versus_rate_limit, get_current_player, limiter

router = APIRouter(prefix="/versus", tags=["versus"])


def _versus_out(versus: Versus) -> VersusOut:
    return VersusOut(
        id=versus.id,
        name=versus.name,
        type=versus.type,
        reverse_ranking=bool(versus.reverse_ranking),
        created_by=versus.created_by,
        created_at=coerce_utc(versus.created_at),
    )


def _entry_out(entry: ScoreboardEntry) -> ScoreboardEntryOut:
    return ScoreboardEntryOut(
        player_id=entry.player_id,
        display_name=entry.display_name,
        score=entry.score,
        rank=entry.rank,
        is_commissioner=entry.is_commissioner,
    )


def _scoreboard_out(versus_id: str, scoreboard: Scoreboard) -> ScoreboardOut:
    return ScoreboardOut(
        versus_id=versus_id,
        reverse_ranking=scoreboard.reverse_ranking,
        total_players=scoreboard.total_players,
        entries=[_entry_out(e) for e in scoreboard.entries],
    )


def _history_out(entry: HistoryEntry) -> HistoryEntryOut:
    return HistoryEntryOut(
        completion_id=entry.completion_id,
        objective_id=entry.objective_id,
        objective_title=entry.objective_title,
        points=entry.points,
        completed_at=entry.completed_at,
    )


def _player_entry(body: VersusPlayerIn) -> PlayerEntry:
    return PlayerEntry(
        player_id=body.player_id,
        email=body.email,
        is_commissioner=body.is_commissioner,
        nickname=body.nickname,
    )


def _objective_entry(body: ObjectiveIn) -> ObjectiveEntry:
    return ObjectiveEntry(
        id=body.id,
        title=body.title,
        points=body.points,
        description=body.description,
    )


async def _list_memberships(
    session: AsyncSession, versus_id: str
) -> list[VersusPlayerOut]:
    rows = (
        await session.execute(
            select(VersusPlayer, Player)
            .join(Player, Player.id == VersusPlayer.player_id)
            .where(VersusPlayer.versus_id == versus_id)
            .order_by(VersusPlayer.joined_at, VersusPlayer.id)
        )
    ).all()
    return [
        VersusPlayerOut(
            id=vp.id,
            player_id=vp.player_id,
            display_name=display_name_for(player, vp.nickname),
            nickname=vp.nickname,
            is_commissioner=vp.is_commissioner,
            joined_at=coerce_utc(vp.joined_at),
        )
        for vp, player in rows
    ]


async def _list_objectives(
    session: AsyncSession, versus_id: str
) -> list[ObjectiveOut]:
    rows = (
        await session.execute(
            select(Objective)
            .where(Objective.versus_id == versus_id)
            .order_by(Objective.created_at, Objective.id)
        )
    ).scalars().all()
    return [
        ObjectiveOut(
            id=o.id, title=o.title, points=o.points, description=o.description
        )
        for o in rows
    ]


@router.post("", response_model=VersusOut, status_code=201)
@limiter.limit(create_versus_rate_limit)
async def create_versus_route(
    request: Request,
    body: VersusCreate,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    versus = await create_versus(
        session,
        player.id,
        VersusConfig(
            name=body.name, type=body.type, reverse_ranking=body.reverse_ranking
        ),
        [_player_entry(p) for p in body.players],
        [_objective_entry(o) for o in body.objectives],
    )
    # created_at is a server default
    await session.refresh(versus)
    return _versus_out(versus)


@router.get("", response_model=list[VersusSummaryOut])
async def list_my_versus(
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    rows = (
        await session.execute(
            select(Versus, VersusPlayer.is_commissioner)
            .join(VersusPlayer, VersusPlayer.versus_id == Versus.id)
            .where(VersusPlayer.player_id == player.id)
            .order_by(Versus.created_at.desc(), Versus.id)
        )
    ).all()
    result = []
    for versus, is_commissioner in rows:
        scoreboard = await get_scoreboard(session, versus.id)
        standing = get_player_standing(scoreboard, player.id)
        result.append(
            VersusSummaryOut(
                **_versus_out(versus).model_dump(),
                score=standing.score if standing else 0,
                rank=standing.rank if standing else scoreboard.total_players,
                total_players=scoreboard.total_players,
                is_commissioner=bool(is_commissioner),
            )
        )
    return result


@router.get("/{versus_id}", response_model=VersusDetailOut)
async def get_versus_detail(
    versus_id: str,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    membership = await require_member(session, versus_id, player.id)
    versus = await session.get(Versus, versus_id)
    scoreboard = await get_scoreboard(session, versus_id)
    standing = get_player_standing(scoreboard, player.id)
    history = await get_history(session, versus_id, player.id)
    return VersusDetailOut(
        versus=_versus_out(versus),
        scoreboard=_scoreboard_out(versus_id, scoreboard),
        objectives=await _list_objectives(session, versus_id),
        my_standing=_entry_out(standing) if standing else None,
        my_history=[_history_out(h) for h in history],
        is_commissioner=membership.is_commissioner,
    )


@router.patch("/{versus_id}", response_model=VersusOut)
async def update_versus_route(
    versus_id: str,
    body: VersusUpdate,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await require_commissioner(session, versus_id, player.id)
    versus = await update_versus_settings(
        session, versus_id, body.model_dump(exclude_unset=True)
    )
    return _versus_out(versus)


@router.delete("/{versus_id}", status_code=204)
async def delete_versus_route(
    versus_id: str,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await require_commissioner(session, versus_id, player.id)
    await delete_versus(session, versus_id)
    return Response(status_code=204)


@router.get("/{versus_id}/players", response_model=list[VersusPlayerOut])
async def list_versus_players(
    versus_id: str,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await require_commissioner(session, versus_id, player.id)
    return await _list_memberships(session, versus_id)


@router.put("/{versus_id}/players", response_model=list[VersusPlayerOut])
async def replace_versus_players(
    versus_id: str,
    body: VersusPlayersUpdate,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await require_commissioner(session, versus_id, player.id)
    await update_versus_players(
        session, versus_id, [_player_entry(p) for p in body.players]
    )
    return await _list_memberships(session, versus_id)


@router.get("/{versus_id}/objectives", response_model=list[ObjectiveOut])
async def list_versus_objectives(
    versus_id: str,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await require_member(session, versus_id, player.id)
    return await _list_objectives(session, versus_id)


@router.put("/{versus_id}/objectives", response_model=list[ObjectiveOut])
async def replace_versus_objectives(
    versus_id: str,
    body: VersusObjectivesUpdate,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await require_commissioner(session, versus_id, player.id)
    await update_versus_objectives(
        session, versus_id, [_objective_entry(o) for o in body.objectives]
    )
    return await _list_objectives(session, versus_id)


@router.get("/{versus_id}/scoreboard", response_model=ScoreboardOut)
async def versus_scoreboard(
    versus_id: str,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await require_member(session, versus_id, player.id)
    scoreboard = await get_scoreboard(session, versus_id)
    return _scoreboard_out(versus_id, scoreboard)


@router.get(
    "/{versus_id}/players/{player_id}/history",
    response_model=list[HistoryEntryOut],
)
async def player_history(
    versus_id: str,
    player_id: str,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await require_member(session, versus_id, player.id)
    if await get_membership(session, versus_id, player_id) is None:
        raise NotFoundError("player", player_id)
    history = await get_history(session, versus_id, player_id)
    return [_history_out(h) for h in history]
