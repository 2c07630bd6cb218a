import pytest
from versus_api.services.validation import (
    ObjectiveEntry,
    PlayerEntry,
    ValidationError,
    VersusConfig,
    has_commissioner,
    validate_objective_entries,
    validate_player_entries,
    validate_versus_config,
)


def test_accepts_valid_config() -> None:
    config = validate_versus_config(
        VersusConfig(name="  Office Swear Jar ", type="Swear Jar", reverse_ranking=True)
    )
    assert config.name == "Office Swear Jar"
    assert config.type == "Swear Jar"
    assert config.reverse_ranking is True


def test_blank_type_becomes_none() -> None:
    assert validate_versus_config(VersusConfig(name="Chores", type="  ")).type is None


@pytest.mark.parametrize(
    "config, msg",
    [
        (VersusConfig(name="   "), "name is required"),
        (VersusConfig(name="x" * 101), "at most 100"),
        (VersusConfig(name="Ok", type="Chess"), "unknown versus type"),
        (VersusConfig(name="Ok", reverse_ranking="yes"), "boolean"),
    ],
    ids=["blank-name", "long-name", "unknown-type", "non-bool-reverse"],
)
def test_rejects_invalid_config(config, msg) -> None:
    with pytest.raises(ValidationError) as exc:
        validate_versus_config(config)
    assert msg in str(exc.value).lower()


def test_creator_is_forced_to_commissioner() -> None:
    entries = validate_player_entries(
        [PlayerEntry(player_id="alice"), PlayerEntry(email="Bob@Example.com ")],
        creator_id="alice",
    )
    assert entries[0].is_commissioner is True
    assert entries[1].email == "bob@example.com"
    assert entries[1].is_commissioner is False
    assert has_commissioner(entries)


def test_blank_nickname_becomes_none() -> None:
    [entry] = validate_player_entries([PlayerEntry(player_id="alice", nickname="  ")])
    assert entry.nickname is None


@pytest.mark.parametrize(
    "entries, msg",
    [
        ([], "at least one player"),
        ([PlayerEntry(player_id=str(i)) for i in range(13)], "max allowed is 12"),
        ([PlayerEntry()], "player id or email"),
        ([PlayerEntry(player_id="a"), PlayerEntry(player_id="a")], "more than once"),
        (
            [PlayerEntry(email="b@example.com"), PlayerEntry(email="B@EXAMPLE.COM")],
            "more than once",
        ),
        ([PlayerEntry(player_id="a", nickname="n" * 51)], "at most 50"),
        ([PlayerEntry(player_id="a", is_commissioner="yes")], "boolean"),
    ],
    ids=[
        "empty",
        "too-many",
        "no-identity",
        "duplicate-id",
        "duplicate-email-case",
        "long-nickname",
        "non-bool-commissioner",
    ],
)
def test_rejects_invalid_players(entries, msg) -> None:
    with pytest.raises(ValidationError) as exc:
        validate_player_entries(entries)
    assert msg in str(exc.value).lower()


@pytest.mark.parametrize(
    "entries",
    [
        [PlayerEntry(player_id="bob")],
        [PlayerEntry(player_id="alice"), PlayerEntry(player_id="alice")],
    ],
    ids=["creator-missing", "creator-twice"],
)
def test_requires_creator_exactly_once(entries) -> None:
    with pytest.raises(ValidationError):
        validate_player_entries(entries, creator_id="alice")


def test_accepts_signed_and_zero_points() -> None:
    entries = validate_objective_entries(
        [
            ObjectiveEntry(title="Run", points=999_999),
            ObjectiveEntry(title="Swear", points=-999_999),
            ObjectiveEntry(title="Show up", points=0, description="  "),
        ]
    )
    assert [e.points for e in entries] == [999_999, -999_999, 0]
    assert entries[2].description is None


@pytest.mark.parametrize(
    "entries, msg",
    [
        ([], "at least one objective"),
        ([ObjectiveEntry(title="x", points=1)] * 13, "max allowed is 12"),
        ([ObjectiveEntry(title=" ", points=1)], "title is required"),
        ([ObjectiveEntry(title="x" * 101, points=1)], "at most 100"),
        ([ObjectiveEntry(title="x", points=1_000_000)], "between"),
        ([ObjectiveEntry(title="x", points=True)], "not a boolean"),
        ([ObjectiveEntry(title="x", points=1.5)], "integer"),
        ([ObjectiveEntry(title="x", points="ten")], "integer"),
        ([ObjectiveEntry(title="x", points=1, description="d" * 501)], "at most 500"),
        ([ObjectiveEntry(title="x", points=1, id="obj-1")], "must not include an id"),
    ],
    ids=[
        "empty",
        "too-many",
        "blank-title",
        "long-title",
        "points-out-of-range",
        "bool-points",
        "fractional-points",
        "text-points",
        "long-description",
        "id-on-create",
    ],
)
def test_rejects_invalid_objectives(entries, msg) -> None:
    with pytest.raises(ValidationError) as exc:
        validate_objective_entries(entries)
    assert msg in str(exc.value).lower()


def test_objective_ids_allowed_when_editing() -> None:
    entries = validate_objective_entries(
        [ObjectiveEntry(title="x", points=1, id="obj-1")], allow_ids=True
    )
    assert entries[0].id == "obj-1"

    with pytest.raises(ValidationError):
        validate_objective_entries(
            [
                ObjectiveEntry(title="x", points=1, id="obj-1"),
                ObjectiveEntry(title="y", points=2, id="obj-1"),
            ],
            allow_ids=True,
        )
