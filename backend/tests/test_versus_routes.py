import pytest
from fastapi.testclient import TestClient

from versus_api import db
from versus_api.config import API_PREFIX
from versus_api.main import app
from versus_api.models import Player
from versus_api.routers import auth

BASE = f"{API_PREFIX}/v0"


async def _seed_players(*player_ids):
    async with db.get_sessionmaker()() as session:
        for pid in player_ids:
            session.add(
                Player(id=pid, email=f"{pid}@example.com", display_name=pid.title())
            )
        await session.commit()


def _auth(player_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {auth.create_access_token(player_id)}"}


def _create_payload(**overrides):
    payload = {
        "name": "Chore Wars",
        "type": "Chore Competition",
        "players": [
            {"playerId": "alice", "isCommissioner": True},
            {"email": "bob@example.com", "nickname": "Bobby"},
        ],
        "objectives": [
            {"title": "Dishes", "points": 10},
            {"title": "Trash", "points": 5, "description": "Take the bins out"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.anyio
async def test_versus_lifecycle():
    await _seed_players("alice", "bob")

    with TestClient(app) as client:
        resp = client.post(f"{BASE}/versus", json=_create_payload(), headers=_auth("alice"))
        assert resp.status_code == 201, resp.text
        versus = resp.json()
        vid = versus["id"]
        assert versus["createdBy"] == "alice"
        assert versus["reverseRanking"] is False

        resp = client.get(f"{BASE}/versus/{vid}/objectives", headers=_auth("bob"))
        objectives = {o["title"]: o for o in resp.json()}
        dishes = objectives["Dishes"]["id"]

        resp = client.post(
            f"{BASE}/versus/{vid}/completions",
            json={"objectiveId": dishes},
            headers=_auth("bob"),
        )
        assert resp.status_code == 201
        completion_id = resp.json()["id"]
        assert resp.json()["playerId"] == "bob"

        resp = client.get(f"{BASE}/versus/{vid}/scoreboard", headers=_auth("alice"))
        board = resp.json()
        assert board["totalPlayers"] == 2
        assert [(e["playerId"], e["score"], e["rank"]) for e in board["entries"]] == [
            ("bob", 10, 1),
            ("alice", 0, 2),
        ]
        assert board["entries"][0]["displayName"] == "Bobby"

        resp = client.get(f"{BASE}/versus", headers=_auth("alice"))
        [summary] = resp.json()
        assert summary["id"] == vid
        assert (summary["score"], summary["rank"], summary["totalPlayers"]) == (0, 2, 2)
        assert summary["isCommissioner"] is True

        resp = client.put(
            f"{BASE}/versus/{vid}/objectives",
            json={"objectives": [{"id": dishes, "title": "Dishes", "points": 15}]},
            headers=_auth("alice"),
        )
        assert resp.status_code == 200
        assert [o["points"] for o in resp.json()] == [15]

        resp = client.get(f"{BASE}/versus/{vid}", headers=_auth("bob"))
        detail = resp.json()
        assert detail["isCommissioner"] is False
        assert detail["myStanding"]["score"] == 15
        assert [h["completionId"] for h in detail["myHistory"]] == [completion_id]

        resp = client.get(
            f"{BASE}/versus/{vid}/players/bob/history", headers=_auth("alice")
        )
        assert resp.json()[0]["objectiveTitle"] == "Dishes"

        resp = client.delete(f"{BASE}/completions/{completion_id}", headers=_auth("alice"))
        assert resp.status_code == 403
        resp = client.delete(f"{BASE}/completions/{completion_id}", headers=_auth("bob"))
        assert resp.status_code == 204

        resp = client.patch(
            f"{BASE}/versus/{vid}", json={"reverseRanking": True}, headers=_auth("alice")
        )
        assert resp.json()["reverseRanking"] is True

        resp = client.delete(f"{BASE}/versus/{vid}", headers=_auth("alice"))
        assert resp.status_code == 204
        resp = client.get(f"{BASE}/versus/{vid}", headers=_auth("alice"))
        assert resp.status_code == 404
        assert resp.json()["code"] == "versus_not_found"


@pytest.mark.anyio
async def test_invalid_create_is_a_problem_response():
    await _seed_players("alice", "bob")

    with TestClient(app) as client:
        resp = client.post(
            f"{BASE}/versus", json=_create_payload(objectives=[]), headers=_auth("alice")
        )
        assert resp.status_code == 422
        assert resp.headers["content-type"].startswith("application/problem+json")
        body = resp.json()
        assert body["code"] == "versus_invalid"
        assert "objective" in body["detail"].lower()

        resp = client.post(
            f"{BASE}/versus",
            json=_create_payload(
                players=[
                    {"playerId": "alice"},
                    {"email": "bob@example.com"},
                    {"email": "Bob@Example.com"},
                ]
            ),
            headers=_auth("alice"),
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == "versus_invalid"

        resp = client.get(f"{BASE}/versus", headers=_auth("alice"))
        assert resp.json() == []


@pytest.mark.anyio
async def test_commissioner_only_edits():
    await _seed_players("alice", "bob", "carol")

    with TestClient(app) as client:
        vid = client.post(
            f"{BASE}/versus", json=_create_payload(), headers=_auth("alice")
        ).json()["id"]

        resp = client.get(f"{BASE}/versus/{vid}/players", headers=_auth("bob"))
        assert resp.status_code == 403
        resp = client.get(f"{BASE}/versus/{vid}/players", headers=_auth("alice"))
        assert resp.status_code == 200
        assert {p["playerId"] for p in resp.json()} == {"alice", "bob"}

        resp = client.put(
            f"{BASE}/versus/{vid}/players",
            json={"players": [{"playerId": "bob", "isCommissioner": True}]},
            headers=_auth("bob"),
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == "versus_forbidden"

        resp = client.put(
            f"{BASE}/versus/{vid}/players",
            json={"players": [{"playerId": "alice"}, {"playerId": "bob"}]},
            headers=_auth("alice"),
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == "versus_conflict"

        resp = client.put(
            f"{BASE}/versus/{vid}/players",
            json={
                "players": [
                    {"playerId": "alice", "isCommissioner": True},
                    {"email": "carol@example.com"},
                ]
            },
            headers=_auth("alice"),
        )
        assert resp.status_code == 200
        assert {p["playerId"] for p in resp.json()} == {"alice", "carol"}

        resp = client.get(f"{BASE}/versus/{vid}", headers=_auth("bob"))
        assert resp.status_code == 403


@pytest.mark.anyio
async def test_players_record_only_their_own_completions():
    await _seed_players("alice", "bob")

    with TestClient(app) as client:
        vid = client.post(
            f"{BASE}/versus", json=_create_payload(), headers=_auth("alice")
        ).json()["id"]
        objective_id = client.get(
            f"{BASE}/versus/{vid}/objectives", headers=_auth("alice")
        ).json()[0]["id"]

        resp = client.post(
            f"{BASE}/versus/{vid}/completions",
            json={"objectiveId": objective_id, "playerId": "bob"},
            headers=_auth("alice"),
        )
        assert resp.status_code == 403

        resp = client.post(
            f"{BASE}/versus/{vid}/completions",
            json={"objectiveId": "missing"},
            headers=_auth("alice"),
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == "objective_not_found"


@pytest.mark.anyio
async def test_player_profile_and_lookup():
    await _seed_players("alice", "bob")

    with TestClient(app) as client:
        resp = client.get(f"{BASE}/players/me", headers=_auth("alice"))
        assert resp.json() == {"id": "alice", "email": "alice@example.com", "displayName": "Alice"}

        resp = client.patch(
            f"{BASE}/players/me", json={"displayName": "  Ali  "}, headers=_auth("alice")
        )
        assert resp.json()["displayName"] == "Ali"

        resp = client.get(
            f"{BASE}/players/lookup", params={"email": "BOB@example.com"}, headers=_auth("alice")
        )
        assert resp.json()["id"] == "bob"

        resp = client.get(
            f"{BASE}/players/lookup", params={"email": "nobody@example.com"}, headers=_auth("alice")
        )
        assert resp.status_code == 404

        resp = client.get(f"{BASE}/players", params={"q": "bo"}, headers=_auth("alice"))
        assert [p["id"] for p in resp.json()] == ["bob"]


def test_missing_or_invalid_token_is_rejected():
    with TestClient(app) as client:
        resp = client.get(f"{BASE}/versus")
        assert resp.status_code == 401
        assert resp.json()["code"] == "auth_missing_token"

        resp = client.get(f"{BASE}/versus", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401
        assert resp.json()["code"] == "auth_invalid_token"

        expired = auth.create_access_token("alice", expires_in=-60)
        resp = client.get(f"{BASE}/versus", headers={"Authorization": f"Bearer {expired}"})
        assert resp.json()["code"] == "auth_token_expired"

        resp = client.get(f"{BASE}/versus", headers=_auth("ghost"))
        assert resp.json()["code"] == "auth_player_not_found"


def test_objective_suggestions_route():
    with TestClient(app) as client:
        resp = client.get(
            f"{BASE}/suggestions/objectives", params={"type": "Swear Jar", "count": 2}
        )
        assert resp.status_code == 200
        assert len(resp.json()) == 2
        assert all(s["points"] < 0 for s in resp.json())

        resp = client.get(f"{BASE}/suggestions/objectives", params={"type": "Chess"})
        assert resp.status_code == 422
        assert resp.json()["code"] == "versus_invalid"


def test_health_checks():
    with TestClient(app) as client:
        assert client.get("/healthz").json() == {"status": "ok"}
        assert client.get(f"{API_PREFIX}/healthz").json() == {"status": "ok"}


@pytest.mark.anyio
async def test_create_versus_is_rate_limited(monkeypatch):
    await _seed_players("alice", "bob")
    monkeypatch.setenv("DISABLE_RATE_LIMITS", "false")
    monkeypatch.setenv("CREATE_VERSUS_RATE_LIMIT", "1/minute")
    auth.limiter.reset()

    with TestClient(app) as client:
        resp = client.post(f"{BASE}/versus", json=_create_payload(), headers=_auth("alice"))
        assert resp.status_code == 201
        resp = client.post(f"{BASE}/versus", json=_create_payload(), headers=_auth("alice"))
        assert resp.status_code == 429
        assert resp.json()["code"] == "rate_limit_exceeded"
    auth.limiter.reset()
