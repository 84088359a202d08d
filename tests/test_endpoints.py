"""Endpoint tests: FastAPI app via httpx."""

from __future__ import annotations

import pytest

from app.config import settings


class TestGoalsEndpoints:
    @pytest.mark.asyncio
    async def test_list_seeded_goals(self, client):
        resp = await client.get("/quest/goals")
        assert resp.status_code == 200
        data = resp.json()
        assert [g["name"] for g in data] == ["Run a marathon", "Read scriptures", "Temple visits"]
        assert data[2]["progress"] == {"target": 10, "bonus": 500, "times_completed": 0}
        assert data[0]["progress"] == {"completed": False}

    @pytest.mark.asyncio
    async def test_create_checklist(self, client, override_engine):
        resp = await client.post(
            "/quest/goals",
            json={"kind": "checklist", "name": "Fast", "description": "Monthly", "points": 20, "target": 12, "bonus": 200},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["index"] == 4
        assert body["kind"] == "Checklist"
        assert body["status"] == "Completed 0/12"
        assert len(override_engine.goals) == 4

    @pytest.mark.asyncio
    async def test_create_unknown_kind_422(self, client):
        resp = await client.post("/quest/goals", json={"kind": "negative", "name": "X", "points": 1})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_empty_name_422(self, client):
        resp = await client.post("/quest/goals", json={"kind": "simple", "name": "", "points": 1})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_non_numeric_points_422(self, client):
        resp = await client.post("/quest/goals", json={"kind": "simple", "name": "X", "points": "lots"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_blank_name_rejected_by_engine(self, client):
        resp = await client.post("/quest/goals", json={"kind": "simple", "name": "   ", "points": 1})
        assert resp.status_code == 422
        assert "empty" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_create_multiline_name_422(self, client, override_engine):
        resp = await client.post("/quest/goals", json={"kind": "simple", "name": "Run\nEternal|Evil|x|1|0", "points": 1})
        assert resp.status_code == 422
        assert "single line" in resp.json()["detail"]
        assert len(override_engine.goals) == 3


class TestEventsEndpoint:
    @pytest.mark.asyncio
    async def test_record_simple(self, client):
        resp = await client.post("/quest/goals/1/events")
        assert resp.status_code == 200
        body = resp.json()
        assert body["earned"] == 1000
        assert body["goal"]["complete"] is True
        assert [n["kind"] for n in body["notifications"]] == ["level_up", "badge"]

    @pytest.mark.asyncio
    async def test_record_again_earns_nothing(self, client):
        await client.post("/quest/goals/1/events")
        resp = await client.post("/quest/goals/1/events")
        assert resp.json()["earned"] == 0

    @pytest.mark.asyncio
    async def test_invalid_index_404(self, client):
        resp = await client.post("/quest/goals/9/events")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_zero_index_404(self, client):
        resp = await client.post("/quest/goals/0/events")
        assert resp.status_code == 404


class TestScoreEndpoint:
    @pytest.mark.asyncio
    async def test_fresh_score(self, client):
        resp = await client.get("/quest/score")
        assert resp.status_code == 200
        assert resp.json() == {"score": 0, "level": 1, "badges": []}

    @pytest.mark.asyncio
    async def test_score_after_checklist(self, client):
        for _ in range(10):
            await client.post("/quest/goals/3/events")
        resp = await client.get("/quest/score")
        assert resp.json() == {"score": 1000, "level": 2, "badges": ["Getting Started"]}


class TestSaveLoadEndpoints:
    @pytest.mark.asyncio
    async def test_save_then_load(self, client, override_engine, tmp_path):
        await client.post("/quest/goals/2/events")

        resp = await client.post("/quest/save", params={"path": "quest.txt"})
        assert resp.status_code == 200
        assert resp.json() == {"path": str(tmp_path / "quest.txt"), "goals_saved": 3}
        assert (tmp_path / "quest.txt").is_file()

        await client.post("/quest/goals", json={"kind": "simple", "name": "Extra", "points": 5})
        resp = await client.post("/quest/load", params={"path": "quest.txt"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["goals_loaded"] == 3
        assert body["score"] == 100
        assert len(override_engine.goals) == 3

    @pytest.mark.asyncio
    async def test_save_into_subdirectory(self, client, tmp_path):
        (tmp_path / "saves").mkdir()
        resp = await client.post("/quest/save", params={"path": "saves/quest.txt"})
        assert resp.status_code == 200
        assert (tmp_path / "saves" / "quest.txt").is_file()

    @pytest.mark.asyncio
    async def test_save_default_path(self, client, override_engine):
        resp = await client.post("/quest/save")
        assert resp.status_code == 200
        assert resp.json()["path"] == override_engine.default_path

    @pytest.mark.asyncio
    async def test_load_missing_404(self, client):
        resp = await client.post("/quest/load", params={"path": "missing.txt"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_load_skips_undecodable_line(self, client, override_engine, tmp_path):
        (tmp_path / "mixed.txt").write_bytes(b"Player|100\nEternal|Read|Daily|5|0\nSimple|Bad\xff|x|1|False\n")
        resp = await client.post("/quest/load", params={"path": "mixed.txt"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["goals_loaded"] == 1
        assert body["lines_skipped"] == 1
        assert [g.name for g in override_engine.goals] == ["Read"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("endpoint", ["/quest/save", "/quest/load"])
    @pytest.mark.parametrize("path", ["/tmp/pwned.txt", "../outside.txt", "saves/../../outside.txt", ""])
    async def test_path_outside_save_dir_422(self, client, tmp_path, endpoint, path):
        resp = await client.post(endpoint, params={"path": path})
        assert resp.status_code == 422
        assert not (tmp_path.parent / "outside.txt").exists()


class TestApiKey:
    @pytest.mark.asyncio
    async def test_open_when_unset(self, client):
        resp = await client.post("/quest/goals/1/events")
        assert resp.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("endpoint", ["/quest/goals/1/events", "/quest/save", "/quest/load"])
    async def test_missing_key_401(self, client, monkeypatch, endpoint):
        monkeypatch.setattr(settings, "api_key", "s3cret")
        resp = await client.post(endpoint)
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_key_401(self, client, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "s3cret")
        resp = await client.post("/quest/save", headers={"X-API-Key": "nope"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_header_key_accepted(self, client, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "s3cret")
        resp = await client.post("/quest/save", headers={"X-API-Key": "s3cret"})
        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_bearer_key_accepted(self, client, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "s3cret")
        resp = await client.post("/quest/goals/1/events", headers={"Authorization": "Bearer s3cret"})
        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_reads_stay_open(self, client, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "s3cret")
        resp = await client.get("/quest/score")
        assert resp.status_code == 200


class TestMiscEndpoints:
    @pytest.mark.asyncio
    async def test_presets(self, client):
        resp = await client.get("/quest/presets")
        assert resp.status_code == 200
        assert {p["name"] for p in resp.json()} == {"Run a marathon", "Read scriptures", "Temple visits"}

    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_root_lists_quest_routes(self, client):
        resp = await client.get("/")
        assert resp.json()["quest"]["score"] == "/quest/score"
