"""Tests for the programmatic solve() facade."""

import json
from datetime import datetime, timezone

import pytest

from quicksilver.api import load_request, solve
from quicksilver.config import AlgorithmParams, ProblemParams, QuicksilverParams
from quicksilver.core_types import DispatchRequest, InvalidRequestError

ANCHOR = "2025-01-01T09:00:00Z"


def _request_dict(planning_start=ANCHOR):
    data = {
        "couriers": [
            {
                "guid": "c1",
                "start_point": {"lat": 55.75, "lon": 37.62},
                "capacity": {"volume": 10, "weight": 10},
                "pickup_duration": 120,
                "drop_duration": 60,
            }
        ],
        "tasks": [
            {
                "guid": "t1",
                "sender_point": {"lat": 55.75, "lon": 37.63},
                "recipient_point": {"lat": 55.76, "lon": 37.64},
                "capacity": {"volume": 2, "weight": 3},
                "assembly": {"from": "2025-01-01T09:00:00Z", "to": "2025-01-01T11:00:00Z"},
                "slot": {"from": "2025-01-01T09:30:00Z", "to": "2025-01-01T12:00:00Z"},
            },
            {
                "guid": "t2",
                "sender_point": {"lat": 55.75, "lon": 37.63},
                "recipient_point": {"lat": 55.76, "lon": 37.64},
                "capacity": {"volume": 50, "weight": 50},
            },
        ],
    }
    if planning_start is not None:
        data["planning_start"] = planning_start
    return data


def _write_request(tmp_path, data):
    path = tmp_path / "request.json"
    path.write_text(json.dumps(data))
    return path


class TestSolve:
    def test_from_dict(self):
        solution = solve(_request_dict())
        assert solution.to_dict() == {
            "routes": [{"courier_guid": "c1", "route": ["t1"]}],
            "unassigned": ["t2"],
        }

    def test_from_file(self, tmp_path):
        solution = solve(_write_request(tmp_path, _request_dict()))
        assert solution.unassigned == ["t2"]

    def test_from_request_object(self):
        solution = solve(DispatchRequest.from_dict(_request_dict()))
        assert solution.route_for("c1").route == ["t1"]

    def test_records_run_metadata(self):
        solution = solve(_request_dict())
        assert solution.solver_name == "greedy"
        assert solution.planning_start == datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
        assert [m.span_name for m in solution.time_measurements] == ["solve"]
        assert solution.solver_runtime_sec >= 0

    def test_explicit_planning_start_wins(self):
        # Two hours later the assembly window (closing 11:00) is already missed
        late = datetime(2025, 1, 1, 11, 0, 0)
        solution = solve(_request_dict(), planning_start=late)
        assert solution.planning_start == late.replace(tzinfo=timezone.utc)
        assert solution.unassigned == ["t1", "t2"]

    def test_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        solution = solve(_request_dict(planning_start=None))
        assert solution.planning_start >= before

    def test_config_object(self):
        params = QuicksilverParams(
            problem=ProblemParams(avg_speed_mps=0.01),
            algorithm=AlgorithmParams(),
        )
        solution = solve(_request_dict(), config=params)
        # At 1 cm/s the sender is more than two hours away
        assert solution.unassigned == ["t1", "t2"]

    def test_config_file(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("dispatch:\n  duration_fallback: courier\n")
        solution = solve(_request_dict(), config=config)
        assert solution.unassigned == ["t2"]

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            solve(_request_dict(), config=tmp_path / "missing.yaml")

    def test_unknown_dispatcher(self):
        params = QuicksilverParams(algorithm=AlgorithmParams(dispatcher="optimal"))
        with pytest.raises(ValueError, match="Unknown dispatcher"):
            solve(_request_dict(), config=params)

    @pytest.mark.parametrize("fmt", ["json", "csv"])
    def test_saves_results(self, tmp_path, fmt):
        solve(_request_dict(), output_dir=tmp_path / "out", format=fmt)
        written = list((tmp_path / "out").glob(f"*.{fmt}"))
        assert len(written) == 1

    def test_saved_json_matches_contract(self, tmp_path):
        solution = solve(_request_dict(), output_dir=tmp_path)
        (written,) = tmp_path.glob("*.json")
        assert json.loads(written.read_text()) == solution.to_dict()


class TestLoadRequest:
    def test_reads_file(self, tmp_path):
        request = load_request(_write_request(tmp_path, _request_dict()))
        assert [t.guid for t in request.tasks] == ["t1", "t2"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Request file not found"):
            load_request(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(InvalidRequestError, match="not valid JSON"):
            load_request(path)

    def test_incomplete_request(self, tmp_path):
        data = _request_dict()
        del data["tasks"][0]["recipient_point"]
        with pytest.raises(InvalidRequestError, match="recipient_point"):
            load_request(_write_request(tmp_path, data))
