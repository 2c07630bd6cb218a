from typing import Optional

from fastapi import APIRouter, Query

from ..config import MAX_OBJECTIVES
from ..exceptions import VersusValidationError
from ..schemas import SuggestedObjectiveOut
from ..services.suggestions import DEFAULT_SUGGESTION_COUNT, suggest_objectives
from ..services.validation import ValidationError

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@router.get("/objectives", response_model=list[SuggestedObjectiveOut])
async def objective_suggestions(
    versus_type: Optional[str] = Query(None, alias="type"),
    count: int = Query(DEFAULT_SUGGESTION_COUNT, ge=1, le=MAX_OBJECTIVES),
):
    try:
        suggestions = suggest_objectives(versus_type, count)
    except ValidationError as exc:
        raise VersusValidationError(exc.detail) from exc
    return [
        SuggestedObjectiveOut(
            title=s.title, points=s.points, description=s.description
        )
        for s in suggestions
    ]
