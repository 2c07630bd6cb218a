"""Immutable draft carried through the steps of creating a Versus.

Each ``with_*`` method returns a new draft; nothing is shared between steps,
so a client can go back and forward without earlier steps leaking state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from .validation import (
    ObjectiveEntry,
    PlayerEntry,
    ValidationError,
    VersusConfig,
    validate_objective_entries,
    validate_player_entries,
    validate_versus_config,
)


@dataclass(frozen=True)
class VersusDraft:
    creator_id: str
    settings: Optional[VersusConfig] = None
    players: tuple[PlayerEntry, ...] = ()
    objectives: tuple[ObjectiveEntry, ...] = ()

    @classmethod
    def start(cls, creator_id: str) -> "VersusDraft":
        """Begin a draft with the creator already listed as commissioner."""

        return cls(
            creator_id=creator_id,
            players=(PlayerEntry(player_id=creator_id, is_commissioner=True),),
        )

    def with_settings(self, settings: VersusConfig) -> "VersusDraft":
        return replace(self, settings=settings)

    def with_players(self, players: Iterable[PlayerEntry]) -> "VersusDraft":
        return replace(self, players=tuple(players))

    def with_objectives(self, objectives: Iterable[ObjectiveEntry]) -> "VersusDraft":
        return replace(self, objectives=tuple(objectives))

    def to_create_request(
        self,
    ) -> tuple[VersusConfig, list[PlayerEntry], list[ObjectiveEntry]]:
        """Return the arguments for ``create_versus`` once every step is filled in.

        Checks what can be checked without the database; player lookups by
        email happen when the Versus is created.
        """

        if self.settings is None:
            raise ValidationError("Versus settings are required.")
        config = validate_versus_config(self.settings)
        players = validate_player_entries(self.players)
        if not any(entry.player_id == self.creator_id for entry in players):
            raise ValidationError("The player list must include the creator.")
        objectives = validate_objective_entries(self.objectives)
        return config, players, objectives
