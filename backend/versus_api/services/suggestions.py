"""Canned objective suggestions offered while creating a Versus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import MAX_OBJECTIVES, VERSUS_TYPES
from .validation import ValidationError

DEFAULT_SUGGESTION_COUNT = 4


@dataclass(frozen=True)
class SuggestedObjective:
    title: str
    points: int
    description: Optional[str] = None


# Ordered most generally useful first; callers take a prefix.
_SUGGESTIONS: dict[str, tuple[SuggestedObjective, ...]] = {
    "Fitness Challenge": (
        SuggestedObjective("Run 5 miles", 10, "Complete a 5-mile run (outdoor or treadmill)"),
        SuggestedObjective("Do 20 pushups", 5, "Perform 20 consecutive pushups with proper form"),
        SuggestedObjective("Attend yoga class", 8, "Attend a full yoga class (in-person or virtual)"),
        SuggestedObjective("Bike 15 miles", 15, "Complete a 15-mile bike ride (outdoor or stationary)"),
        SuggestedObjective("Walk 10,000 steps", 4, "Hit 10,000 steps in a single day"),
        SuggestedObjective("Swim 20 laps", 12, "Swim 20 laps in any stroke"),
        SuggestedObjective("Plank for 2 minutes", 3, "Hold a plank for 2 minutes without a break"),
    ),
    "Scavenger Hunt": (
        SuggestedObjective("Find a red door", 5, "Photograph a red front door"),
        SuggestedObjective("Spot a vintage car", 10, "Photograph a car older than you are"),
        SuggestedObjective("Find a four-leaf clover", 25),
        SuggestedObjective("Selfie with a statue", 8, "Take a selfie next to any public statue"),
        SuggestedObjective("Find a street musician", 12, "Record ten seconds of a busker"),
        SuggestedObjective("Collect a restaurant menu", 3),
    ),
    "Chore Competition": (
        SuggestedObjective("Do the dishes", 5, "Wash, dry and put away every dish"),
        SuggestedObjective("Take out the trash", 2, "Empty every bin and take the bags out"),
        SuggestedObjective("Vacuum the living room", 6),
        SuggestedObjective("Do a load of laundry", 8, "Wash, dry and fold one full load"),
        SuggestedObjective("Clean the bathroom", 12, "Scrub the sink, toilet and shower"),
        SuggestedObjective("Mow the lawn", 15),
    ),
    "Swear Jar": (
        SuggestedObjective("Said a curse word", -5),
        SuggestedObjective("Interrupted someone", -3),
        SuggestedObjective("Complained about work", -2),
        SuggestedObjective("Checked phone at dinner", -4, "Looked at a phone during a shared meal"),
        SuggestedObjective("Was late", -6, "Showed up more than ten minutes late"),
        SuggestedObjective("Forgot to reply", -1, "Left a message unanswered for a full day"),
    ),
    "Other": (
        SuggestedObjective("Read a chapter", 4, "Finish one chapter of any book"),
        SuggestedObjective("Try a new recipe", 10),
        SuggestedObjective("Call a friend", 5, "Catch up with someone for at least 15 minutes"),
        SuggestedObjective("Learn a new word", 2),
        SuggestedObjective("Go to bed before 11pm", 6),
    ),
}


def suggest_objectives(
    versus_type: Optional[str] = None, count: int = DEFAULT_SUGGESTION_COUNT
) -> list[SuggestedObjective]:
    """Return up to ``count`` suggestions for ``versus_type``.

    Without a type the fitness suggestions are returned. Swear Jar suggestions
    carry negative points.
    """

    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError("count must be an integer.")
    if count < 1 or count > MAX_OBJECTIVES:
        raise ValidationError(f"count must be between 1 and {MAX_OBJECTIVES}.")
    if versus_type is not None and versus_type not in VERSUS_TYPES:
        raise ValidationError(f"Unknown Versus type {versus_type!r}.")

    return list(_SUGGESTIONS[versus_type or "Fitness Challenge"][:count])
