"""Internal application services."""

from .validation import (
    ObjectiveEntry,
    PlayerEntry,
    ValidationError,
    VersusConfig,
    validate_objective_entries,
    validate_player_entries,
    validate_versus_config,
)
from .scoring import compute_scoreboard, get_player_standing
from .drafts import VersusDraft
from .suggestions import suggest_objectives

__all__ = [
    "ObjectiveEntry",
    "PlayerEntry",
    "ValidationError",
    "VersusConfig",
    "validate_objective_entries",
    "validate_player_entries",
    "validate_versus_config",
    "compute_scoreboard",
    "get_player_standing",
    "VersusDraft",
    "suggest_objectives",
]
