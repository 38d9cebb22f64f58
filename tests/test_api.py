"""
Tests for the session and TVM solve API endpoints.
"""

import pytest


def press(client, session_id, key_type, value=None):
    response = client.post(
        f"/api/sessions/{session_id}/keys",
        json={"type": key_type, "value": value},
    )
    assert response.status_code == 200, response.text
    return response.json()


def digits(number):
    return [{"type": "number", "value": ch} for ch in number]


@pytest.fixture
def session_id(client):
    response = client.post("/api/sessions/")
    assert response.status_code == 201
    return response.json()["session_id"]


class TestHealth:
    """Test the health endpoint."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSessionAPI:
    """Test session lifecycle and key presses."""

    def test_create_session(self, client, session_store):
        response = client.post("/api/sessions/")
        assert response.status_code == 201
        data = response.json()
        assert data["display"] == {"value": 0.0, "error": None, "text": "0"}
        assert data["registers"] == {"n": 0.0, "iy": 0.0, "pv": 0.0, "pmt": 0.0, "fv": 0.0}
        assert data["compute_pending"] is False
        assert len(session_store) == 1

    def test_get_session(self, client, session_id):
        response = client.get(f"/api/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["session_id"] == session_id

    def test_unknown_session(self, client):
        response = client.get("/api/sessions/does-not-exist")
        assert response.status_code == 404

    def test_press_digits(self, client, session_id):
        press(client, session_id, "number", "1")
        data = press(client, session_id, "number", ".")
        assert data["entry"] == "1."
        assert data["display"]["text"] == "1."

    def test_invalid_key(self, client, session_id):
        response = client.post(
            f"/api/sessions/{session_id}/keys",
            json={"type": "control", "value": "OFF"},
        )
        assert response.status_code == 400

    def test_division_by_zero(self, client, session_id):
        keys = (
            digits("5")
            + [{"type": "operator", "value": "/"}]
            + digits("0")
            + [{"type": "calculate", "value": "="}]
        )
        response = client.post(f"/api/sessions/{session_id}/keys/batch", json={"keys": keys})
        assert response.status_code == 200
        display = response.json()["display"]
        assert display["error"] == "division_by_zero"
        assert display["value"] is None
        assert display["text"] == "Error"

    def test_tvm_flow(self, client, session_id):
        keys = (
            digits("10") + [{"type": "tvm", "value": "N"}]
            + digits("5") + [{"type": "tvm", "value": "IY"}]
            + digits("1000") + [{"type": "func", "value": "CHS"}, {"type": "tvm", "value": "PV"}]
            + digits("0") + [{"type": "tvm", "value": "PMT"}]
            + [{"type": "control", "value": "CPT"}, {"type": "tvm", "value": "FV"}]
        )
        response = client.post(f"/api/sessions/{session_id}/keys/batch", json={"keys": keys})
        data = response.json()
        assert abs(data["display"]["value"] - 1628.894627) < 1e-6
        assert data["display"]["text"] == "1,628.89462678"
        assert data["registers"]["pv"] == -1000
        assert data["notice"] is None

    def test_compute_iy_notice(self, client, session_id):
        press(client, session_id, "control", "CPT")
        data = press(client, session_id, "tvm", "IY")
        assert data["display"]["error"] == "solve_unsupported"
        assert data["notice"] is not None

    def test_failed_register_is_null(self, client, session_id):
        keys = (
            digits("5") + [{"type": "tvm", "value": "IY"}]
            + digits("10") + [{"type": "tvm", "value": "PMT"}]
            + digits("1000") + [{"type": "tvm", "value": "FV"}]
            + [{"type": "control", "value": "CPT"}, {"type": "tvm", "value": "N"}]
        )
        response = client.post(f"/api/sessions/{session_id}/keys/batch", json={"keys": keys})
        assert response.status_code == 200
        data = response.json()
        assert data["display"]["error"] == "solve_no_real_solution"
        assert data["registers"]["n"] is None
        assert data["registers"]["fv"] == 1000

    def test_compute_pending_flag(self, client, session_id):
        data = press(client, session_id, "control", "CPT")
        assert data["compute_pending"] is True
        data = press(client, session_id, "control", "ON/C")
        assert data["compute_pending"] is False

    def test_batch_stops_at_invalid_key(self, client, session_id):
        keys = digits("7") + [{"type": "tvm", "value": "N"}, {"type": "bogus"}]
        response = client.post(f"/api/sessions/{session_id}/keys/batch", json={"keys": keys})
        assert response.status_code == 400
        data = client.get(f"/api/sessions/{session_id}").json()
        assert data["registers"]["n"] == 7

    def test_delete_session(self, client, session_id):
        response = client.delete(f"/api/sessions/{session_id}")
        assert response.status_code == 200
        assert client.get(f"/api/sessions/{session_id}").status_code == 404
        assert client.delete(f"/api/sessions/{session_id}").status_code == 404

    def test_oldest_session_evicted(self, client, session_store):
        first = client.post("/api/sessions/").json()["session_id"]
        for _ in range(session_store.max_sessions):
            client.post("/api/sessions/")
        assert len(session_store) == session_store.max_sessions
        assert client.get(f"/api/sessions/{first}").status_code == 404


class TestSolveAPI:
    """Test the stateless solve endpoint."""

    def test_solve_pmt(self, client):
        response = client.post(
            "/api/tvm/solve",
            json={"target": "PMT", "n": 360, "iy": 0.5, "pv": 200000, "fv": 0},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["target"] == "PMT"
        assert abs(data["value"] + 1199.10) < 0.01

    def test_solve_iy_unsupported(self, client):
        response = client.post("/api/tvm/solve", json={"target": "IY"})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "solve_unsupported"

    def test_solve_no_real_solution(self, client):
        response = client.post(
            "/api/tvm/solve",
            json={"target": "N", "iy": 5, "pv": 0, "pmt": 10, "fv": 1000},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "solve_no_real_solution"

    def test_invalid_target(self, client):
        response = client.post("/api/tvm/solve", json={"target": "NPV"})
        assert response.status_code == 422
