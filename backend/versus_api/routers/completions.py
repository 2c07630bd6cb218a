from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..models import Player
from ..schemas import CompletionCreate, CompletionOut
from ..services.completions import delete_completion, record_completion
from ..time_utils import coerce_utc
from .auth import get_current_player, limiter, record_completion_rate_limit

router = APIRouter(tags=["completions"])


@router.post(
    "/versus/{versus_id}/completions",
    response_model=CompletionOut,
    status_code=201,
)
@limiter.limit(record_completion_rate_limit)
async def create_completion(
    request: Request,
    versus_id: str,
    body: CompletionCreate,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    completion = await record_completion(
        session,
        versus_id,
        body.player_id or player.id,
        body.objective_id,
        acting_player_id=player.id,
    )
    return CompletionOut(
        id=completion.id,
        versus_id=completion.versus_id,
        player_id=completion.player_id,
        objective_id=completion.objective_id,
        completed_at=coerce_utc(completion.completed_at),
    )


@router.delete("/completions/{completion_id}", status_code=204)
async def remove_completion(
    completion_id: str,
    session: AsyncSession = Depends(get_session),
    player: Player = Depends(get_current_player),
):
    await delete_completion(session, completion_id, player.id)
    return Response(status_code=204)
