"""Tests for the FastAPI backend."""

import json

import pytest
from fastapi.testclient import TestClient

from stepsched.web.app import app, create_records


@pytest.fixture
def client():
    return TestClient(app)


SRTF_PROCESSES = [
    {"pid": 1, "arrival_time": 0, "priority": 0, "execution_time": 3},
    {"pid": 2, "arrival_time": 1, "priority": 0, "execution_time": 1},
]


class TestRestApi:

    def test_algorithms_lists_seven_methods(self, client):
        response = client.get("/algorithms")
        assert response.status_code == 200
        algorithms = response.json()["algorithms"]
        assert [a["id"] for a in algorithms] == list(range(7))
        assert algorithms[1] == {"id": 1, "name": "SJF", "preemptive": False}

    def test_simulate_returns_tick_lines(self, client):
        response = client.post("/simulate", json={"processes": SRTF_PROCESSES, "methods": [2]})
        assert response.status_code == 200
        result = response.json()["results"][0]
        assert result["lines"] == ["0 1", "1 2", "2 1", "3 1", "4 -1"]
        assert result["ticks"][1] == {"time": 1, "units": [2]}
        assert result["statistics"]["preemptions"] == 1

    def test_simulate_on_two_units(self, client):
        processes = [{"pid": 1, "arrival_time": 0, "priority": 2, "execution_time": 5}]
        response = client.post("/simulate", json={"processes": processes, "methods": [0],
                                                  "unit_count": 2})
        lines = response.json()["results"][0]["lines"]
        assert lines[0] == "0 1 -1"
        assert lines[-1] == "5 -1 -1"

    def test_unknown_method_is_bad_request(self, client):
        response = client.post("/simulate", json={"processes": SRTF_PROCESSES, "methods": [9]})
        assert response.status_code == 400

    def test_zero_units_is_bad_request(self, client):
        response = client.post("/simulate", json={"processes": SRTF_PROCESSES, "unit_count": 0})
        assert response.status_code == 400

    def test_invalid_process_is_rejected(self, client):
        processes = [{"pid": 1, "arrival_time": 0, "priority": 0, "execution_time": 0}]
        response = client.post("/simulate", json={"processes": processes})
        assert response.status_code == 422

    def test_compare_collects_statistics(self, client):
        response = client.post("/simulate/compare",
                               json={"processes": SRTF_PROCESSES, "methods": [0, 1, 2]})
        comparison = response.json()["comparison"]
        assert comparison["methods"] == [0, 1, 2]
        assert comparison["algorithms"] == ["FCFS", "SJF", "SRTF"]
        assert comparison["preemptions"] == [0, 0, 1]

    def test_sample_processes_run(self, client):
        samples = client.get("/sample-processes").json()["samples"]
        for sample in samples:
            response = client.post("/simulate", json={
                "processes": sample["processes"], "methods": list(range(7)),
                "unit_count": sample["unit_count"]})
            assert response.status_code == 200

    def test_create_records_groups_by_arrival(self):
        from stepsched.web.app import ProcessInput
        processes = [ProcessInput(pid=2, arrival_time=3, priority=0, execution_time=1),
                     ProcessInput(pid=1, arrival_time=0, priority=0, execution_time=1),
                     ProcessInput(pid=3, arrival_time=3, priority=1, execution_time=2)]
        records = create_records(processes)
        assert [r.time for r in records] == [0, 3]
        assert records[1].processes == [(2, 0, 1), (3, 1, 2)]


class TestRealtime:

    def test_step_through_simulation(self, client):
        with client.websocket_connect("/ws/realtime") as ws:
            ws.send_text(json.dumps({"action": "init", "processes": SRTF_PROCESSES,
                                     "method": 2}))
            assert ws.receive_json()["type"] == "initialized"

            lines = []
            while True:
                ws.send_text(json.dumps({"action": "step"}))
                message = ws.receive_json()
                assert message["type"] == "step_result"
                lines.append(message["line"])
                if message["complete"]:
                    break

        assert lines == ["0 1", "1 2", "2 1", "3 1", "4 -1"]
        assert "final" in message["stats"]

    def test_invalid_init_reports_error(self, client):
        with client.websocket_connect("/ws/realtime") as ws:
            ws.send_text(json.dumps({"action": "init", "processes": SRTF_PROCESSES,
                                     "method": 12}))
            message = ws.receive_json()
            assert message["type"] == "error"

    @pytest.mark.parametrize("speed", [0, -2, "fast"])
    def test_run_rejects_non_positive_speed(self, client, speed):
        with client.websocket_connect("/ws/realtime") as ws:
            ws.send_text(json.dumps({"action": "init", "processes": SRTF_PROCESSES,
                                     "method": 2}))
            ws.receive_json()

            ws.send_text(json.dumps({"action": "run", "speed": speed}))
            assert ws.receive_json()["type"] == "error"

            # the socket stays usable after the error
            ws.send_text(json.dumps({"action": "step"}))
            message = ws.receive_json()
            assert message["type"] == "step_result"
            assert message["line"] == "0 1"
