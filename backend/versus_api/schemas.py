from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator

# Limits are enforced by the services so that every Versus rule violation is
# reported the same way; these models only check shapes and types.


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PlayerOut(CamelModel):
    id: str
    email: str
    display_name: str = Field(alias="displayName")


class PlayerUpdate(CamelModel):
    display_name: str = Field(..., alias="displayName", min_length=1, max_length=100)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("display_name", mode="before")
    @classmethod
    def _validate_display_name(cls, value: str) -> str:
        if not isinstance(value, str):
            raise TypeError("displayName must be a string")
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("displayName must not be empty")
        return trimmed


class VersusPlayerIn(CamelModel):
    player_id: Optional[str] = Field(default=None, alias="playerId")
    email: Optional[str] = None
    is_commissioner: bool = Field(default=False, alias="isCommissioner")
    nickname: Optional[str] = None


class ObjectiveIn(CamelModel):
    id: Optional[str] = None
    title: str
    points: int
    description: Optional[str] = None


class VersusCreate(CamelModel):
    name: str
    type: Optional[str] = None
    reverse_ranking: bool = Field(default=False, alias="reverseRanking")
    players: List[VersusPlayerIn]
    objectives: List[ObjectiveIn]


class VersusUpdate(CamelModel):
    name: Optional[str] = None
    type: Optional[str] = None
    reverse_ranking: Optional[bool] = Field(default=None, alias="reverseRanking")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class VersusPlayersUpdate(CamelModel):
    players: List[VersusPlayerIn]


class VersusObjectivesUpdate(CamelModel):
    objectives: List[ObjectiveIn]


class VersusOut(CamelModel):
    id: str
    name: str
    type: Optional[str] = None
    reverse_ranking: bool = Field(alias="reverseRanking")
    created_by: str = Field(alias="createdBy")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class VersusPlayerOut(CamelModel):
    id: str
    player_id: str = Field(alias="playerId")
    display_name: str = Field(alias="displayName")
    nickname: Optional[str] = None
    is_commissioner: bool = Field(alias="isCommissioner")
    joined_at: Optional[datetime] = Field(default=None, alias="joinedAt")


class ObjectiveOut(CamelModel):
    id: str
    title: str
    points: int
    description: Optional[str] = None


class ScoreboardEntryOut(CamelModel):
    player_id: str = Field(alias="playerId")
    display_name: str = Field(alias="displayName")
    score: int
    rank: int
    is_commissioner: bool = Field(alias="isCommissioner")


class ScoreboardOut(CamelModel):
    versus_id: str = Field(alias="versusId")
    reverse_ranking: bool = Field(alias="reverseRanking")
    total_players: int = Field(alias="totalPlayers")
    entries: List[ScoreboardEntryOut] = Field(default_factory=list)


class HistoryEntryOut(CamelModel):
    completion_id: str = Field(alias="completionId")
    objective_id: str = Field(alias="objectiveId")
    objective_title: str = Field(alias="objectiveTitle")
    points: int
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")


class VersusSummaryOut(VersusOut):
    """A Versus in the current player's list, with their standing."""

    score: int
    rank: int
    total_players: int = Field(alias="totalPlayers")
    is_commissioner: bool = Field(alias="isCommissioner")


class VersusDetailOut(CamelModel):
    versus: VersusOut
    scoreboard: ScoreboardOut
    objectives: List[ObjectiveOut] = Field(default_factory=list)
    my_standing: Optional[ScoreboardEntryOut] = Field(default=None, alias="myStanding")
    my_history: List[HistoryEntryOut] = Field(default_factory=list, alias="myHistory")
    is_commissioner: bool = Field(alias="isCommissioner")


class CompletionCreate(CamelModel):
    objective_id: str = Field(alias="objectiveId")
    player_id: Optional[str] = Field(default=None, alias="playerId")


class CompletionOut(CamelModel):
    id: str
    versus_id: str = Field(alias="versusId")
    player_id: str = Field(alias="playerId")
    objective_id: str = Field(alias="objectiveId")
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")


class SuggestedObjectiveOut(CamelModel):
    title: str
    points: int
    description: Optional[str] = None
