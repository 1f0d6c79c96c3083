"""Test the Typer command-line interface."""

import json

import pandas as pd
from typer.testing import CliRunner

from quicksilver import __version__
from quicksilver.app import app

runner = CliRunner()


def _request_dict():
    return {
        "planning_start": "2025-01-01T09:00:00Z",
        "couriers": [
            {
                "guid": "c1",
                "start_point": {"lat": 55.75, "lon": 37.62},
                "capacity": {"volume": 10, "weight": 10},
            }
        ],
        "tasks": [
            {
                "guid": "t1",
                "sender_point": {"lat": 55.75, "lon": 37.63},
                "recipient_point": {"lat": 55.76, "lon": 37.64},
                "capacity": {"volume": 2, "weight": 3},
            },
            {
                "guid": "t2",
                "sender_point": {"lat": 55.75, "lon": 37.63},
                "recipient_point": {"lat": 55.76, "lon": 37.64},
                "capacity": {"volume": 20, "weight": 3},
            },
        ],
    }


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


def _debug(result):
    if result.exit_code != 0:
        print(f"STDOUT: {result.stdout}")
        print(f"Exception: {result.exception}")


def test_solve_prints_summary(tmp_path):
    request = _write(tmp_path, "request.json", _request_dict())

    result = runner.invoke(app, ["solve", str(request)])
    _debug(result)

    assert result.exit_code == 0
    assert "Dispatch Results: request" in result.stdout
    assert "Unassigned" in result.stdout
    assert "t2" in result.stdout


def test_solve_saves_json(tmp_path):
    request = _write(tmp_path, "request.json", _request_dict())
    out = tmp_path / "out"

    result = runner.invoke(app, ["solve", str(request), "-o", str(out), "-q"])
    _debug(result)

    assert result.exit_code == 0
    saved = json.loads((out / "request_result.json").read_text())
    assert saved == {
        "routes": [{"courier_guid": "c1", "route": ["t1"]}],
        "unassigned": ["t2"],
    }


def test_solve_several_files_as_csv(tmp_path):
    first = _write(tmp_path, "morning.json", _request_dict())
    second = _write(tmp_path, "evening.json", _request_dict())
    out = tmp_path / "out"

    result = runner.invoke(
        app, ["solve", str(first), str(second), "--output", str(out), "--format", "csv"]
    )
    _debug(result)

    assert result.exit_code == 0
    for stem in ("morning", "evening"):
        df = pd.read_csv(out / f"{stem}_result.csv")
        assert df["Task_GUID"].tolist() == ["t1", "t2"]


def test_planning_start_option(tmp_path):
    data = _request_dict()
    data["tasks"][0]["assembly"] = {
        "from": "2025-01-01T09:00:00Z",
        "to": "2025-01-01T10:00:00Z",
    }
    request = _write(tmp_path, "request.json", data)
    out = tmp_path / "out"

    result = runner.invoke(
        app,
        ["solve", str(request), "-o", str(out), "-q", "--planning-start", "2025-01-01T12:00:00Z"],
    )
    _debug(result)

    assert result.exit_code == 0
    saved = json.loads((out / "request_result.json").read_text())
    assert saved["unassigned"] == ["t1", "t2"]


def test_solve_missing_request_file(tmp_path):
    result = runner.invoke(app, ["solve", str(tmp_path / "missing.json")])
    assert result.exit_code == 1


def test_solve_invalid_format(tmp_path):
    request = _write(tmp_path, "request.json", _request_dict())
    result = runner.invoke(app, ["solve", str(request), "--format", "xlsx"])
    assert result.exit_code == 1


def test_solve_missing_config(tmp_path):
    request = _write(tmp_path, "request.json", _request_dict())
    result = runner.invoke(
        app, ["solve", str(request), "--config", str(tmp_path / "missing.yaml")]
    )
    assert result.exit_code == 1


def test_solve_incomplete_request(tmp_path):
    data = _request_dict()
    del data["tasks"][1]["sender_point"]
    request = _write(tmp_path, "request.json", data)

    result = runner.invoke(app, ["solve", str(request)])
    assert result.exit_code == 1


def test_solve_bad_planning_start(tmp_path):
    request = _write(tmp_path, "request.json", _request_dict())
    result = runner.invoke(app, ["solve", str(request), "--planning-start", "noon"])
    assert result.exit_code == 1


def test_solve_uses_configured_format(tmp_path):
    request = _write(tmp_path, "request.json", _request_dict())
    config = tmp_path / "config.yaml"
    config.write_text("format: csv\n")
    out = tmp_path / "out"

    result = runner.invoke(
        app, ["solve", str(request), "-c", str(config), "-o", str(out), "-q"]
    )
    _debug(result)

    assert result.exit_code == 0
    assert (out / "request_result.csv").exists()
    assert not (out / "request_result.json").exists()


def test_format_option_overrides_config(tmp_path):
    request = _write(tmp_path, "request.json", _request_dict())
    config = tmp_path / "config.yaml"
    config.write_text("format: csv\n")
    out = tmp_path / "out"

    result = runner.invoke(
        app, ["solve", str(request), "-c", str(config), "-o", str(out), "-f", "json", "-q"]
    )
    _debug(result)

    assert result.exit_code == 0
    assert (out / "request_result.json").exists()


def test_failed_batch_is_not_reported_as_success(tmp_path):
    good = _write(tmp_path, "good.json", _request_dict())
    data = _request_dict()
    del data["tasks"][0]["recipient_point"]
    bad = _write(tmp_path, "bad.json", data)

    result = runner.invoke(app, ["solve", str(good), str(bad)])

    assert result.exit_code == 1
    assert "completed successfully" not in result.output
    assert "Dispatch stopped after 1/2 requests" in result.output


def test_serve_applies_overrides(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr("quicksilver.app.run_server", lambda params: captured.update(params=params))

    result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "8080"])
    _debug(result)

    assert result.exit_code == 0
    server = captured["params"].server
    assert (server.host, server.port) == ("127.0.0.1", 8080)
    assert "/vpr/greedy" in result.stdout


def test_serve_uses_config_defaults(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr("quicksilver.app.run_server", lambda params: captured.update(params=params))
    config = tmp_path / "config.yaml"
    config.write_text("server:\n  port: 9000\n")

    result = runner.invoke(app, ["serve", "-c", str(config)])
    _debug(result)

    assert result.exit_code == 0
    assert captured["params"].server.port == 9000
    assert captured["params"].server.host == "0.0.0.0"


def test_serve_invalid_port(monkeypatch):
    monkeypatch.setattr("quicksilver.app.run_server", lambda params: None)
    result = runner.invoke(app, ["serve", "--port", "0"])
    assert result.exit_code == 1


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"Quicksilver version {__version__}" in result.stdout
