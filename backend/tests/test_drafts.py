import dataclasses

import pytest

from versus_api.services.drafts import VersusDraft
from versus_api.services.validation import (
    ObjectiveEntry,
    PlayerEntry,
    ValidationError,
    VersusConfig,
)


def test_each_step_returns_a_new_draft() -> None:
    start = VersusDraft.start("alice")
    with_settings = start.with_settings(VersusConfig(name="Chores"))
    with_players = with_settings.with_players(
        list(start.players) + [PlayerEntry(email="bob@example.com")]
    )

    assert start.settings is None
    assert len(start.players) == 1
    assert with_settings.players == start.players
    assert len(with_players.players) == 2
    with pytest.raises(dataclasses.FrozenInstanceError):
        start.settings = VersusConfig(name="x")  # type: ignore[misc]


def test_start_lists_creator_as_commissioner() -> None:
    [creator] = VersusDraft.start("alice").players
    assert creator.player_id == "alice"
    assert creator.is_commissioner is True


def test_to_create_request_returns_validated_input() -> None:
    draft = (
        VersusDraft.start("alice")
        .with_settings(VersusConfig(name="  Chores  ", type="Chore Competition"))
        .with_objectives([ObjectiveEntry(title="Dishes", points=5)])
    )
    config, players, objectives = draft.to_create_request()

    assert config.name == "Chores"
    assert [p.player_id for p in players] == ["alice"]
    assert objectives[0].points == 5


@pytest.mark.parametrize(
    "draft, msg",
    [
        (
            VersusDraft.start("alice").with_objectives([ObjectiveEntry(title="x", points=1)]),
            "settings are required",
        ),
        (
            VersusDraft.start("alice").with_settings(VersusConfig(name="Chores")),
            "at least one objective",
        ),
        (
            VersusDraft.start("alice")
            .with_settings(VersusConfig(name="Chores"))
            .with_players([PlayerEntry(player_id="bob")])
            .with_objectives([ObjectiveEntry(title="x", points=1)]),
            "creator",
        ),
    ],
    ids=["no-settings", "no-objectives", "creator-dropped"],
)
def test_incomplete_drafts_are_rejected(draft, msg) -> None:
    with pytest.raises(ValidationError) as exc:
        draft.to_create_request()
    assert msg in str(exc.value).lower()


def test_dropped_creator_message_names_the_missing_creator() -> None:
    draft = (
        VersusDraft.start("alice")
        .with_settings(VersusConfig(name="Chores"))
        .with_players([PlayerEntry(player_id="bob")])
        .with_objectives([ObjectiveEntry(title="x", points=1)])
    )
    with pytest.raises(ValidationError) as exc:
        draft.to_create_request()
    assert str(exc.value) == "The player list must include the creator."
