from dataclasses import dataclass, replace
from typing import Any, List, Optional, Sequence

from ..config import (
    MAX_NICKNAME_LENGTH,
    MAX_OBJECTIVE_DESCRIPTION_LENGTH,
    MAX_OBJECTIVE_POINTS,
    MAX_OBJECTIVE_TITLE_LENGTH,
    MAX_OBJECTIVES,
    MAX_PLAYERS,
    MAX_VERSUS_NAME_LENGTH,
    VERSUS_TYPES,
)


class ValidationError(Exception):
    """Raised when submitted Versus data is invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


@dataclass(frozen=True)
class VersusConfig:
    name: str
    type: Optional[str] = None
    reverse_ranking: bool = False


@dataclass(frozen=True)
class PlayerEntry:
    """A desired membership. Either ``player_id`` or ``email`` identifies the player."""

    player_id: Optional[str] = None
    email: Optional[str] = None
    is_commissioner: bool = False
    nickname: Optional[str] = None


@dataclass(frozen=True)
class ObjectiveEntry:
    """A desired objective. ``id`` is only set when editing an existing row."""

    title: str
    points: int
    description: Optional[str] = None
    id: Optional[str] = None


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def validate_versus_config(config: VersusConfig) -> VersusConfig:
    """Validate and normalise Versus settings.

    Rules:
    - ``name`` is required and at most 100 characters once trimmed
    - ``type`` is ``None`` or one of the known Versus types
    - ``reverse_ranking`` must be a boolean
    """

    name = (config.name or "").strip() if isinstance(config.name, str) else ""
    if not name:
        raise ValidationError("Versus name is required.")
    if len(name) > MAX_VERSUS_NAME_LENGTH:
        raise ValidationError(
            f"Versus name must be at most {MAX_VERSUS_NAME_LENGTH} characters."
        )

    versus_type = _optional_text(config.type)
    if versus_type is not None and versus_type not in VERSUS_TYPES:
        raise ValidationError(
            f"Unknown Versus type {versus_type!r}. Expected one of: "
            + ", ".join(VERSUS_TYPES)
            + "."
        )

    if not isinstance(config.reverse_ranking, bool):
        raise ValidationError("reverse_ranking must be a boolean.")

    return VersusConfig(
        name=name, type=versus_type, reverse_ranking=config.reverse_ranking
    )


def validate_player_entries(
    entries: Sequence[PlayerEntry],
    *,
    creator_id: Optional[str] = None,
    max_players: int = MAX_PLAYERS,
) -> List[PlayerEntry]:
    """Validate a desired player list.

    Rules:
    - At least one player and at most ``max_players``
    - Every entry names a player by id or by email
    - No player appears twice (ids compared exactly, emails case-insensitively)
    - Nicknames are at most 50 characters; blank nicknames become ``None``
    - When ``creator_id`` is given, exactly one entry is the creator and that
      entry is always a commissioner
    """

    if not isinstance(entries, (list, tuple)) or len(entries) == 0:
        raise ValidationError("At least one player is required.")
    if len(entries) > max_players:
        raise ValidationError(f"Too many players. Max allowed is {max_players}.")

    seen_ids: set[str] = set()
    seen_emails: set[str] = set()
    normalized: List[PlayerEntry] = []
    creator_entries = 0

    for i, entry in enumerate(entries, start=1):
        player_id = _optional_text(entry.player_id)
        email = _optional_text(entry.email)
        if email is not None:
            email = email.lower()
        if player_id is None and email is None:
            raise ValidationError(f"Player #{i} must include a player id or email.")

        if player_id is not None:
            if player_id in seen_ids:
                raise ValidationError(f"Player #{i} is listed more than once.")
            seen_ids.add(player_id)
        if email is not None:
            if email in seen_emails:
                raise ValidationError(f"Player #{i} is listed more than once.")
            seen_emails.add(email)

        nickname = _optional_text(entry.nickname)
        if nickname is not None and len(nickname) > MAX_NICKNAME_LENGTH:
            raise ValidationError(
                f"Player #{i} nickname must be at most {MAX_NICKNAME_LENGTH} characters."
            )

        if not isinstance(entry.is_commissioner, bool):
            raise ValidationError(f"Player #{i} commissioner flag must be a boolean.")
        is_commissioner = entry.is_commissioner

        if creator_id is not None and player_id == creator_id:
            creator_entries += 1
            is_commissioner = True

        normalized.append(
            PlayerEntry(
                player_id=player_id,
                email=email,
                is_commissioner=is_commissioner,
                nickname=nickname,
            )
        )

    if creator_id is not None and creator_entries != 1:
        raise ValidationError("The player list must include the creator exactly once.")

    return normalized


def has_commissioner(entries: Sequence[PlayerEntry]) -> bool:
    return any(entry.is_commissioner for entry in entries)


def _validate_points(raw: Any, index: int) -> int:
    # Reject booleans explicitly (bool is a subclass of int in Python)
    if isinstance(raw, bool):
        raise ValidationError(f"Objective #{index} points must be an integer (not a boolean).")
    if isinstance(raw, float) and not raw.is_integer():
        raise ValidationError(f"Objective #{index} points must be an integer.")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Objective #{index} points must be an integer.")

    if abs(value) > MAX_OBJECTIVE_POINTS:
        raise ValidationError(
            f"Objective #{index} points must be between -{MAX_OBJECTIVE_POINTS:,} "
            f"and {MAX_OBJECTIVE_POINTS:,}."
        )
    return value


def validate_objective_entries(
    entries: Sequence[ObjectiveEntry],
    *,
    allow_ids: bool = False,
    max_objectives: int = MAX_OBJECTIVES,
) -> List[ObjectiveEntry]:
    """Validate a desired objective list.

    Rules:
    - At least one objective and at most ``max_objectives``
    - Titles are required and at most 100 characters
    - Points are integers with a magnitude of at most 999,999 (0 is allowed)
    - Descriptions are at most 500 characters; blank descriptions become ``None``
    - Existing objective ids are only accepted when ``allow_ids`` is set and
      may not repeat
    """

    if not isinstance(entries, (list, tuple)) or len(entries) == 0:
        raise ValidationError("At least one objective is required.")
    if len(entries) > max_objectives:
        raise ValidationError(f"Too many objectives. Max allowed is {max_objectives}.")

    seen_ids: set[str] = set()
    normalized: List[ObjectiveEntry] = []
    for i, entry in enumerate(entries, start=1):
        title = entry.title.strip() if isinstance(entry.title, str) else ""
        if not title:
            raise ValidationError(f"Objective #{i} title is required.")
        if len(title) > MAX_OBJECTIVE_TITLE_LENGTH:
            raise ValidationError(
                f"Objective #{i} title must be at most {MAX_OBJECTIVE_TITLE_LENGTH} characters."
            )

        points = _validate_points(entry.points, i)

        description = _optional_text(entry.description)
        if description is not None and len(description) > MAX_OBJECTIVE_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Objective #{i} description must be at most "
                f"{MAX_OBJECTIVE_DESCRIPTION_LENGTH} characters."
            )

        objective_id = _optional_text(entry.id)
        if objective_id is not None:
            if not allow_ids:
                raise ValidationError(f"Objective #{i} must not include an id.")
            if objective_id in seen_ids:
                raise ValidationError(f"Objective #{i} is listed more than once.")
            seen_ids.add(objective_id)

        normalized.append(
            replace(
                entry,
                title=title,
                points=points,
                description=description,
                id=objective_id,
            )
        )

    return normalized
