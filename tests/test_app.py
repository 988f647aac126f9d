"""Tests for the Flask web shell.

Tests: page render, intent routes, pointer routes, frame polling,
error statuses.
Focus: the shell forwards to the controller and reports running /
invalid input as 409 / 400.
"""

import pytest

import main
from config import ServerConfig
from conftest import ManualTime


@pytest.fixture
def app_time() -> ManualTime:
    return ManualTime()


@pytest.fixture
def client(app_time: ManualTime):
    main.app.config["TESTING"] = True
    main.app.config["CLOCK_TIME_FN"] = app_time
    main.app.config["WORKSPACE_IDLE_SECONDS"] = 600.0
    main.app.config["MAX_WORKSPACES"] = 4
    main.WORKSPACES.clear()
    with main.app.test_client() as client:
        yield client
    main.WORKSPACES.clear()
    main.app.config["WORKSPACE_IDLE_SECONDS"] = ServerConfig.WORKSPACE_IDLE_SECONDS
    main.app.config["MAX_WORKSPACES"] = ServerConfig.MAX_WORKSPACES


def build_triangle(client) -> None:
    """Three nodes via the draw tool, joined by weighted edges A–B, B–C."""
    for x, y in ((100, 100), (300, 100), (200, 300)):
        assert client.post("/api/pointer/down", json={"x": x, "y": y}).get_json()["accepted"]
    client.post("/api/edge-kind", json={"kind": "weighted"})
    for (x1, y1), (x2, y2) in (((100, 100), (300, 100)), ((300, 100), (200, 300))):
        client.post("/api/pointer/down", json={"x": x1, "y": y1})
        assert client.post("/api/pointer/up", json={"x": x2, "y": y2}).get_json()["accepted"]


# =============================================================================
# PAGE
# =============================================================================


class TestIndex:
    def test_index_renders_widgets_and_board(self, client) -> None:
        res = client.get("/")
        assert res.status_code == 200
        html = res.get_data(as_text=True)
        assert '<svg id="board"' in html
        assert "Select Algorithm" in html
        assert "Select Edge" in html
        assert 'id="speed-slider"' in html
        assert "Needs non-negative weights" in html

    def test_index_snapshot_contains_drawn_nodes(self, client) -> None:
        client.post("/api/pointer/down", json={"x": 100, "y": 100})
        html = client.get("/").get_data(as_text=True)
        assert 'class="node"' in html


# =============================================================================
# INTENTS
# =============================================================================


class TestIntents:
    def test_draw_node_then_graph_snapshot(self, client) -> None:
        res = client.post("/api/pointer/down", json={"x": 120, "y": 80})
        assert res.status_code == 200
        graph = client.get("/api/graph").get_json()
        assert len(graph["nodes"]) == 1
        assert graph["nodes"][0]["label"] == "1"

    def test_frame_ships_surface_commands_once(self, client) -> None:
        client.post("/api/pointer/down", json={"x": 120, "y": 80})
        first = client.get("/api/frame").get_json()
        assert [c["op"] for c in first["commands"]] == ["render_node"]
        assert client.get("/api/frame").get_json()["commands"] == []

    def test_tool_route_updates_flags(self, client) -> None:
        body = client.post("/api/tool", json={"tool": "move_node"}).get_json()
        assert body["flags"]["move_node"] is True
        assert sum(body["flags"].values()) == 1

    def test_algorithm_route_enters_anchor_mode(self, client) -> None:
        body = client.post("/api/algorithm", json={"algorithm": "bfs"}).get_json()
        assert body["flags"]["select_start_node"] is True
        body = client.post("/api/algorithm", json={"algorithm": None}).get_json()
        assert not any(body["flags"].values())

    def test_speed_route_snaps(self, client) -> None:
        assert client.post("/api/speed", json={"speed": 740}).get_json()["speed_ms"] == 700

    @pytest.mark.parametrize("url, payload", [
        ("/api/tool", {"tool": "lasso"}),
        ("/api/edge-kind", {"kind": "curved"}),
        ("/api/algorithm", {"algorithm": "astar"}),
        ("/api/algorithm", {"algorithm": [1]}),
        ("/api/edge-kind", {"kind": ["weighted"]}),
        ("/api/tool", {"tool": {"name": "move_node"}}),
        ("/api/speed", {"speed": "fast"}),
        ("/api/speed", {}),
        ("/api/pointer/down", {"x": 1}),
    ])
    def test_invalid_input_is_400(self, client, url: str, payload: dict) -> None:
        res = client.post(url, json=payload)
        assert res.status_code == 400
        assert "error" in res.get_json()


# =============================================================================
# PLAYBACK
# =============================================================================


class TestPlaybackRoutes:
    def test_run_locks_editing_until_finished(self, client, app_time: ManualTime) -> None:
        build_triangle(client)
        client.post("/api/speed", json={"speed": 100})
        client.post("/api/algorithm", json={"algorithm": "bfs"})
        body = client.post("/api/pointer/down", json={"x": 100, "y": 100}).get_json()
        assert body["running"] is True
        assert body["last_run"]["nodes_visited"] == 3

        assert client.post("/api/tool", json={"tool": "reset"}).status_code == 409
        assert client.post("/api/pointer/down", json={"x": 500, "y": 500}).status_code == 409

        client.get("/api/frame")
        app_time.now += 10.0
        frame = client.get("/api/frame").get_json()
        states = [c["state"] for c in frame["commands"] if c["op"] == "set_state"]
        assert states.count("visited") == 5
        assert frame["running"] is False
        assert len(client.get("/api/graph").get_json()["nodes"]) == 3

    def test_cancel_route(self, client) -> None:
        build_triangle(client)
        client.post("/api/algorithm", json={"algorithm": "dfs"})
        client.post("/api/pointer/down", json={"x": 100, "y": 100})
        body = client.post("/api/cancel").get_json()
        assert body["accepted"] is True and body["running"] is False
        assert client.post("/api/tool", json={"tool": "draw_node"}).status_code == 200

    def test_negative_weight_is_reported_not_played(self, client) -> None:
        build_triangle(client)
        client.post("/api/tool", json={"tool": "edit_edge"})
        client.post("/api/pointer/down", json={"x": 200, "y": 100, "weight": -3})
        client.post("/api/algorithm", json={"algorithm": "dijkstra"})
        client.post("/api/pointer/down", json={"x": 100, "y": 100})
        body = client.post("/api/pointer/down", json={"x": 200, "y": 300}).get_json()
        assert body["running"] is False
        assert "negative" in body["last_error"]
        frame = client.get("/api/frame").get_json()
        assert "negative" in frame["summary"]


# =============================================================================
# WORKSPACES
# =============================================================================


class TestWorkspaces:
    """Per-session workspaces are created on demand and dropped when stale."""

    def test_session_keeps_its_workspace(self, client) -> None:
        client.post("/api/pointer/down", json={"x": 100, "y": 100})
        client.get("/api/graph")
        assert len(main.WORKSPACES) == 1
        assert len(client.get("/api/graph").get_json()["nodes"]) == 1

    def test_idle_workspace_is_evicted(self, client, app_time: ManualTime) -> None:
        """A workspace untouched past the idle limit is dropped when another session arrives."""
        client.post("/api/pointer/down", json={"x": 100, "y": 100})
        first = set(main.WORKSPACES)

        app_time.now += 601.0
        with main.app.test_client() as other:
            other.get("/api/graph")
        assert len(main.WORKSPACES) == 1
        assert not first & set(main.WORKSPACES)

        # the original session starts over on an empty graph
        assert client.get("/api/graph").get_json()["nodes"] == []

    def test_recent_activity_keeps_a_workspace_alive(self, client, app_time: ManualTime) -> None:
        client.get("/api/graph")
        app_time.now += 400.0
        client.get("/api/frame")
        app_time.now += 400.0
        with main.app.test_client() as other:
            other.get("/api/graph")
        assert len(main.WORKSPACES) == 2

    def test_many_fresh_sessions_stay_under_the_cap(self, client, app_time: ManualTime) -> None:
        """Oldest-first eviction bounds the store no matter how many sessions arrive."""
        for _ in range(50):
            app_time.now += 1.0
            with main.app.test_client() as fresh:
                fresh.get("/api/graph")
        assert len(main.WORKSPACES) == main.app.config["MAX_WORKSPACES"]

        newest = max(main.WORKSPACES.values(), key=lambda ws: ws.last_seen)
        assert newest.last_seen == app_time.now
