"""Tests for the REST and WebSocket surface."""
import pytest
from fastapi.testclient import TestClient

from neuracar.api.websocket import broadcaster
from neuracar.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def _node(body, node_id):
    return next(n for n in body["nodes"] if n["id"] == node_id)


class TestNetworkRoutes:
    def test_get_default_network(self, client):
        body = client.get("/api/network").json()
        assert [n["id"] for n in body["nodes"]] == [
            "ForwardHit", "RightHit", "LeftHit", "Hidden1", "Hidden2", "Left", "Right",
        ]
        assert len(body["edges"]) == 10
        assert body["edges"][0]["id"] == "ForwardHit-Hidden1-0"
        assert body["states"]["Hidden1"]["output_value"] == pytest.approx(0.8706, abs=1e-4)

    def test_replace_network(self, client):
        resp = client.put("/api/network", json={"nodes": [
            {"id": "s", "role": "input", "connections": [
                {"source_id": "s", "target_id": "h", "weight": 2.0},
            ]},
            {"id": "h", "role": "hidden", "bias": 1.0, "activation": "identity"},
        ]})
        assert resp.status_code == 200
        assert resp.json()["states"]["h"] == {"input_value": 1.0, "output_value": 1.0}

    def test_replace_with_cycle_is_accepted(self, client):
        resp = client.put("/api/network", json={"nodes": [
            {"id": "a", "role": "hidden", "connections": [
                {"source_id": "a", "target_id": "b", "weight": 1.0}]},
            {"id": "b", "role": "hidden", "connections": [
                {"source_id": "b", "target_id": "a", "weight": 1.0}]},
        ]})
        assert resp.status_code == 200
        assert resp.json()["states"] == {}

    def test_reset(self, client):
        client.delete("/api/nodes/Hidden1")
        body = client.post("/api/network/reset").json()
        assert "Hidden1" in [n["id"] for n in body["nodes"]]

    def test_activations(self, client):
        names = client.get("/api/activations").json()["activations"]
        assert {"sigmoid", "step", "identity", "softmax"} <= set(names)


class TestNodeRoutes:
    def test_create_allocates_id(self, client):
        body = client.post("/api/nodes", json={}).json()
        node = _node(body, "Hidden7")
        assert node["role"] == "hidden"
        assert node["activation"] == "sigmoid"
        assert body["states"]["Hidden7"]["output_value"] == 0.5

    def test_deleted_id_not_reused(self, client):
        client.post("/api/nodes", json={})
        client.delete("/api/nodes/Hidden7")
        body = client.post("/api/nodes", json={}).json()
        ids = [n["id"] for n in body["nodes"]]
        assert "Hidden7" not in ids
        assert "Hidden8" in ids

    def test_create_duplicate_id_conflict(self, client):
        assert client.post("/api/nodes", json={"id": "Hidden1"}).status_code == 409

    def test_delete_protected(self, client):
        assert client.delete("/api/nodes/Left").status_code == 409
        assert client.delete("/api/nodes/ForwardHit").status_code == 409

    def test_delete_missing(self, client):
        assert client.delete("/api/nodes/Nope").status_code == 404

    def test_delete_cascades(self, client):
        body = client.delete("/api/nodes/Hidden2").json()
        assert not any("Hidden2" in e["id"] for e in body["edges"])
        assert "Hidden2" not in body["states"]

    def test_bias_delta(self, client):
        body = client.patch("/api/nodes/Right", json={"bias_delta": 10.0}).json()
        assert _node(body, "Right")["bias"] == pytest.approx(10.268, abs=1e-3)
        assert body["states"]["Right"]["output_value"] == 1.0

    def test_bias_steps(self, client):
        body = client.patch("/api/nodes/Left", json={"bias_steps": 2}).json()
        assert _node(body, "Left")["bias"] == pytest.approx(0.26100065231323242)

    def test_move_node(self, client):
        body = client.patch("/api/nodes/Hidden1", json={"x": 5.0}).json()
        node = _node(body, "Hidden1")
        assert (node["x"], node["y"]) == (5.0, 0.0)


class TestConnectionRoutes:
    def test_create_default_weight(self, client):
        body = client.post("/api/connections", json={
            "source_id": "ForwardHit", "target_id": "Left",
        }).json()
        assert body["edges"][2] == {
            "id": "ForwardHit-Left-2", "source_id": "ForwardHit",
            "target_id": "Left", "weight": 1.0,
        }

    def test_create_dangling(self, client):
        resp = client.post("/api/connections", json={
            "source_id": "Hidden1", "target_id": "Ghost", "weight": 0.5,
        })
        assert resp.status_code == 200
        assert "Ghost" not in resp.json()["states"]
        assert len(resp.json()["states"]) == 7

    def test_create_from_missing_source(self, client):
        resp = client.post("/api/connections", json={"source_id": "Ghost", "target_id": "Left"})
        assert resp.status_code == 404

    def test_update_weight_delta(self, client):
        body = client.patch(
            "/api/connections/Hidden1/Left", json={"delta": 0.01},
        ).json()
        edge = next(e for e in body["edges"] if e["id"] == "Hidden1-Left-0")
        assert edge["weight"] == pytest.approx(1.795682678222656)

    def test_update_requires_value(self, client):
        assert client.patch("/api/connections/Hidden1/Left", json={}).status_code == 400

    def test_update_weight_steps(self, client):
        body = client.patch(
            "/api/connections/Hidden2/Right", json={"steps": -3},
        ).json()
        edge = next(e for e in body["edges"] if e["id"] == "Hidden2-Right-1")
        assert edge["weight"] == pytest.approx(2.927220106124878 - 0.03)

    def test_delete_negative_index_rejected(self, client):
        resp = client.delete("/api/connections/Hidden1/Left", params={"index": -1})
        assert resp.status_code == 422
        assert len(client.get("/api/network").json()["edges"]) == 10

    def test_delete_by_index(self, client):
        body = client.delete("/api/connections/Hidden1/Left", params={"index": 0}).json()
        assert [e["id"] for e in body["edges"] if e["source_id"] == "Hidden1"] == ["Hidden1-Right-0"]

    def test_update_missing_connection(self, client):
        assert client.patch(
            "/api/connections/Hidden1/Hidden2", json={"weight": 1.0},
        ).status_code == 404

    def test_delete_connection(self, client):
        body = client.delete("/api/connections/Hidden1/Left").json()
        assert "Hidden1-Left-0" not in [e["id"] for e in body["edges"]]
        assert len(body["edges"]) == 9


class TestObservationRoutes:
    def test_tick_returns_actions(self, client):
        body = client.put("/api/observations", json={
            "observations": {"ForwardHit": 0.0, "RightHit": 1.0, "LeftHit": 0.0},
        }).json()
        assert body["actions"] == {
            "forward": True, "backward": False, "left": True, "right": False,
        }
        assert body["states"]["RightHit"]["output_value"] == 1.0

    def test_actions_and_states(self, client):
        client.put("/api/observations", json={"observations": {"LeftHit": 1.0}})
        assert client.get("/api/actions").json()["right"] is True
        states = client.get("/api/states").json()["states"]
        assert states["LeftHit"] == {"input_value": 1.0, "output_value": 1.0}


class TestDiagnostics:
    def test_clean(self, client):
        assert client.get("/api/diagnostics").json() == {"errors": []}

    def test_reports_cycle(self, client):
        client.post("/api/connections", json={
            "source_id": "Left", "target_id": "Hidden1", "weight": 1.0,
        })
        errors = client.get("/api/diagnostics").json()["errors"]
        assert any("cycle" in e for e in errors)


class TestWebSocket:
    def test_update_pushed_after_edit(self, client):
        with client.websocket_connect("/ws/network") as ws:
            client.patch("/api/nodes/Left", json={"bias": 5.0})
            message = ws.receive_json()
        assert message["type"] == "network_update"
        assert message["states"]["Left"]["output_value"] == 1.0

    def test_every_editor_receives_update(self, client):
        with client.websocket_connect("/ws/network") as first, \
                client.websocket_connect("/ws/network") as second:
            client.put("/api/observations", json={"observations": {"RightHit": 1.0}})
            assert first.receive_json()["revision"] == second.receive_json()["revision"] == 2

    def test_overflow_pushed_as_null(self, client):
        with client.websocket_connect("/ws/network") as ws:
            client.put("/api/network", json={"nodes": _overflowing_network()})
            message = ws.receive_json()
        assert message["states"]["o"] == {"input_value": None, "output_value": None}


def _overflowing_network():
    return [
        {"id": "h", "role": "hidden", "bias": 1e308, "activation": "identity",
         "connections": [{"source_id": "h", "target_id": "o", "weight": 10.0}]},
        {"id": "o", "role": "output", "activation": "identity"},
    ]


class TestNonFiniteValues:
    def test_rest_encodes_null(self, client):
        body = client.put("/api/network", json={"nodes": _overflowing_network()}).json()
        assert body["states"]["h"]["output_value"] == 1e308
        assert body["states"]["o"] == {"input_value": None, "output_value": None}

    def test_states_route_matches(self, client):
        client.put("/api/network", json={"nodes": _overflowing_network()})
        states = client.get("/api/states").json()["states"]
        assert states["o"] == {"input_value": None, "output_value": None}


class TestSingleCommitResponses:
    def test_observation_response_describes_its_own_commit(self, client, monkeypatch):
        store = client.app.state.store

        async def commit_during_push(data):
            store.set_observations({"LeftHit": 1.0})

        monkeypatch.setattr(broadcaster, "broadcast", commit_during_push)
        body = client.put("/api/observations", json={"observations": {"RightHit": 1.0}}).json()

        assert body["revision"] == 2
        assert body["actions"]["left"] is True
        assert body["actions"]["right"] is False
        assert body["states"]["Left"]["output_value"] == 1.0
        assert body["states"]["Right"]["output_value"] == 0.0
        assert body["states"]["RightHit"]["output_value"] == 1.0
        assert store.revision == 3

    def test_edit_response_describes_its_own_commit(self, client, monkeypatch):
        store = client.app.state.store

        async def commit_during_push(data):
            store.reset()

        monkeypatch.setattr(broadcaster, "broadcast", commit_during_push)
        body = client.delete("/api/nodes/Hidden2").json()

        assert body["revision"] == 2
        assert "Hidden2" not in body["states"]
        assert "Hidden2" not in [n["id"] for n in body["nodes"]]
