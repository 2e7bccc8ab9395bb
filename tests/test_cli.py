from __future__ import annotations

import json
from pathlib import Path

import pytest

from nodescript import __version__
from nodescript.__main__ import main


def _script(name, nodes, connections, owner_type="Room", owner_id="hall"):
    return {"Name": name, "OwnerType": owner_type, "OwnerId": owner_id, "Nodes": nodes, "Connections": connections}


GREETING = _script(
    "greeting",
    [
        {"Id": "start", "NodeType": "Event_OnEnter"},
        {"Id": "msg", "NodeType": "Action_ShowMessage", "Properties": {"Message": "Welcome to the hall"}},
        {"Id": "snd", "NodeType": "Action_PlaySound", "Properties": {"SoundId": "bell"}},
    ],
    [{"FromNodeId": "start", "ToNodeId": "msg"}, {"FromNodeId": "msg", "ToNodeId": "snd"}],
)

BROKEN = _script(
    "broken",
    [{"Id": "msg", "NodeType": "Action_ShowMessage"}],
    [],
)


@pytest.fixture
def scripts(tmp_path: Path) -> Path:
    path = tmp_path / "scripts.json"
    path.write_text(json.dumps({"Scripts": [GREETING, BROKEN]}), encoding="utf-8")
    return path


def test_validate_reports_each_script(scripts, capsys):
    code = main(["validate", str(scripts)])
    out = capsys.readouterr().out
    assert code == 1
    assert "OK    greeting (Room/hall)" in out
    assert "FAIL  broken (Room/hall)" in out
    assert "      - The script has no event node, so it will never run." in out
    assert "Node Action_ShowMessage (msg) is missing: Message" in out
    assert out.strip().endswith("2 script(s) checked, 1 with errors")


def test_validate_clean_file(tmp_path: Path, capsys):
    path = tmp_path / "ok.json"
    path.write_text(json.dumps([GREETING]), encoding="utf-8")
    assert main(["validate", str(path)]) == 0
    assert "1 script(s) checked, 0 with errors" in capsys.readouterr().out


def test_run_prints_messages_and_host_calls(scripts, tmp_path: Path, capsys):
    world = tmp_path / "world.json"
    world.write_text(json.dumps({"CurrentRoomId": "hall", "Rooms": [{"Id": "hall"}]}), encoding="utf-8")
    code = main(
        ["run", str(scripts), "--owner-type", "Room", "--owner-id", "hall", "--event", "Event_OnEnter", "--world", str(world)]
    )
    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out == [
        "Welcome to the hall",
        "<play_sound> {'sound_id': 'bell'}",
        "1 walk(s) run for Room/hall/Event_OnEnter",
    ]


def test_run_with_debug_config(scripts, tmp_path: Path, capsys):
    config = tmp_path / "engine.yaml"
    config.write_text("debug_messages: true\n", encoding="utf-8")
    main(["run", str(scripts), "--owner-type", "Room", "--owner-id", "hall", "--event", "Event_OnEnter", "--config", str(config)])
    out = capsys.readouterr().out
    assert "[Debug] Looking for scripts: Room/hall/Event_OnEnter" in out


def test_load_errors_exit_with_status_two(tmp_path: Path, capsys):
    assert main(["validate", str(tmp_path / "missing.json")]) == 2
    assert "error: Script file not found" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as ei:
        main(["--version"])
    assert ei.value.code == 0
    assert __version__ in capsys.readouterr().out
