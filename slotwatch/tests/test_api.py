"""
Tests for API layer.

Tests:
- API service methods
- Webhook processing over HTTP
- Read-only views
- Error handling
"""

import pytest
from fastapi.testclient import TestClient

from ..api import APIService, create_app, ErrorCode, ErrorResponse
from ..integrations import HighlightDispatcher, MockHighlightSink
from ..session import MatchManager
from .conftest import AXE, LINA


@pytest.fixture
def sink():
    return MockHighlightSink()


@pytest.fixture
def service(sink):
    """Fresh service with a deterministic manager and a recording sink."""
    return APIService(
        manager=MatchManager(seed=11),
        dispatcher=HighlightDispatcher(sink=sink),
    )


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


class TestAPIService:
    """Tests for APIService."""

    def test_outside_match_not_processed(self, service, make_payload):
        payload = make_payload(0.0, game_state="DOTA_GAMERULES_STATE_STRATEGY_TIME")
        response, highlights = service.process_payload(payload)

        assert not response.processed
        assert response.match_id is None
        assert highlights == []

    def test_views_without_match(self, service):
        mappings = service.get_mappings()
        assert isinstance(mappings, ErrorResponse)
        assert mappings.error_code == ErrorCode.NO_ACTIVE_MATCH
        assert isinstance(service.get_summary(), ErrorResponse)

    def test_kill_produces_highlight(self, service, make_payload):
        service.process_payload(make_payload(10.0, visible={AXE: (0, 0)}, kills={}))
        response, highlights = service.process_payload(make_payload(10.2, visible={}, kills={3: 1}))

        assert response.processed
        assert response.kills == 1
        assert response.disappearances == 1
        assert [c.type for c in response.changes] == ["created", "confirmed"]
        assert response.messages == ["Killed possible Axe (victim 3, 1 total)"]
        assert [h.enemy_name for h in highlights] == ["axe"]

    def test_mappings_view(self, service, make_payload):
        service.process_payload(make_payload(10.0, visible={AXE: (0, 0)}, kills={}))
        service.process_payload(make_payload(10.2, visible={}, kills={3: 1}))

        view = service.get_mappings()

        assert view.match_id == "match_1"
        assert view.game_time == 10.2
        assert [(m.victim_id, m.hero_name, m.display_name, m.kills) for m in view.mappings] == [
            (3, AXE, "Axe", 1),
        ]
        assert view.unmapped_victims == [0, 1, 2, 4]

    def test_summary_view(self, service, make_payload):
        service.process_payload(make_payload(75.0, visible={AXE: (0, 0), LINA: (5, 5)}))

        summary = service.get_summary()

        assert summary.total_kills == 0
        assert [h.hero_name for h in summary.heroes] == [AXE, LINA]
        assert summary.lines[0] == "Summary at 1:15 - 0 total kills"

    def test_health(self, service, make_payload):
        assert service.health().match_id is None
        service.process_payload(make_payload(1.0))
        health = service.health()
        assert health.status == "ok"
        assert health.match_id == "match_1"
        assert health.ticks == 1


class TestWebhook:
    """Tests for the HTTP app."""

    def test_post_snapshot(self, client, make_payload):
        response = client.post("/", json=make_payload(5.0, visible={AXE: (1, 2)}))

        assert response.status_code == 200
        body = response.json()
        assert body["processed"] is True
        assert body["discovered"] == [AXE]
        assert body["skipped"] == ["hero", "kill_list"]

    def test_highlights_dispatched_after_response(self, client, sink, make_payload):
        client.post("/", json=make_payload(10.0, visible={AXE: (0, 0)}, kills={}))
        client.post("/", json=make_payload(10.2, visible={}, kills={1: 1}))

        assert [r.to_dict()["enemyName"] for r in sink.requests] == ["axe"]
        assert sink.requests[0].match_id == "match_1"

    def test_sink_failure_does_not_fail_request(self, make_payload):
        service = APIService(
            manager=MatchManager(seed=1),
            dispatcher=HighlightDispatcher(sink=MockHighlightSink(error=RuntimeError("boom"))),
        )
        client = TestClient(create_app(service))

        client.post("/", json=make_payload(10.0, visible={AXE: (0, 0)}, kills={}))
        response = client.post("/", json=make_payload(10.2, visible={}, kills={1: 1}))

        assert response.status_code == 200
        assert response.json()["kills"] == 1

    def test_invalid_json(self, client):
        response = client.post("/", content=b"{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_PAYLOAD"

    def test_non_object_body(self, client):
        response = client.post("/", json=[1, 2, 3])

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INVALID_PAYLOAD"
        assert body["details"] == {"received": "list"}

    @pytest.mark.parametrize("game_state", [["x"], {"state": "in_progress"}])
    def test_malformed_game_state_is_not_processed(self, client, game_state):
        response = client.post("/", json={"map": {"game_state": game_state, "game_time": 1}})

        assert response.status_code == 200
        assert response.json()["processed"] is False

    def test_non_finite_game_time_is_survivable(self, client, make_payload):
        client.post("/", json=make_payload(10.0, visible={AXE: (0, 0)}))
        nan_string = make_payload(11.0)
        nan_string["map"]["game_time"] = "nan"

        response = client.post("/", json=nan_string)
        assert response.status_code == 200
        assert response.json()["game_time"] == 0.0

        literal = b'{"map": {"matchid": "match_1", "game_state": "DOTA_GAMERULES_STATE_GAME_IN_PROGRESS", "game_time": Infinity}}'
        response = client.post("/", content=literal, headers={"Content-Type": "application/json"})
        assert response.status_code == 200
        assert response.json()["game_time"] == 0.0

        # Summary cadence still works on the game clock afterwards
        later = client.post("/", json=make_payload(75.0)).json()
        assert later["messages"][0].startswith("Summary at 1:15")

    def test_empty_object_is_accepted(self, client):
        response = client.post("/", json={})
        assert response.status_code == 200
        assert response.json()["processed"] is False

    def test_views_404_before_match(self, client):
        for path in ("/api/v1/mappings", "/api/v1/summary"):
            response = client.get(path)
            assert response.status_code == 404
            assert response.json()["error_code"] == "NO_ACTIVE_MATCH"

    def test_mappings_after_kill(self, client, make_payload):
        client.post("/", json=make_payload(10.0, visible={AXE: (0, 0)}, kills={}))
        client.post("/", json=make_payload(10.2, visible={}, kills={4: 1}))

        body = client.get("/api/v1/mappings").json()

        assert body["mappings"][0]["victim_id"] == 4
        assert body["mappings"][0]["hero_name"] == AXE
        assert body["mappings"][0]["confidence"] == pytest.approx(0.3)

    def test_health_endpoint(self, client):
        body = client.get("/api/v1/health").json()
        assert body["status"] == "ok"
        assert body["ticks"] == 0
