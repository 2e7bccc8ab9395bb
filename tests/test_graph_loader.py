import json
import logging
from pathlib import Path

import pytest

from nodescript.exceptions import GraphFileNotFoundError, GraphParseError, GraphSchemaError
from nodescript.graph.loader import graphs_from_data, load_graph_directory, load_graphs, load_many


def script(name, owner_id="hall"):
    return {
        "Id": f"g-{name}",
        "Name": name,
        "OwnerType": "Room",
        "OwnerId": owner_id,
        "Nodes": [
            {"Id": "n1", "NodeType": "Event_OnEnter", "Category": "Event", "X": 10, "Y": 20},
            {"Id": "n2", "NodeType": "Action_ShowMessage", "Properties": {"Message": "Hola"}},
        ],
        "Connections": [{"Id": "c1", "FromNodeId": "n1", "ToNodeId": "n2"}],
    }


def write_json(path: Path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


def test_load_list_file_keeps_order_and_defaults_ports(tmp_path: Path, caplog):
    file_path = tmp_path / "hall.json"
    write_json(file_path, [script("first"), script("second")])

    caplog.set_level(logging.INFO, logger="nodescript")
    graphs = load_graphs(file_path)

    assert [g.name for g in graphs] == ["first", "second"]
    conn = graphs[0].connections[0]
    assert (conn.from_port, conn.to_port) == ("Exec", "Exec")
    assert graphs[0].node("n2").text("Message") == "Hola"
    assert any("Loaded 2 script graph(s)" in rec.message for rec in caplog.records)


def test_load_editor_file_with_scripts_key(tmp_path: Path):
    file_path = tmp_path / "world_scripts.json"
    write_json(file_path, {"Scripts": [script("only")], "Version": 3})
    (graph,) = load_graphs(file_path)
    assert graph.owner() == ("Room", "hall")


def test_missing_owner_type_is_a_schema_error(tmp_path: Path):
    bad = script("bad")
    del bad["OwnerType"]
    file_path = tmp_path / "bad.json"
    write_json(file_path, [bad])

    with pytest.raises(GraphSchemaError) as ei:
        load_graphs(file_path)

    assert ei.value.messages == ["At 0: 'OwnerType' is a required property"]
    assert "does not match the graph schema" in str(ei.value)


def test_wrong_root_type_is_a_schema_error():
    with pytest.raises(GraphSchemaError) as ei:
        graphs_from_data("nope")
    assert "Root must be" in ei.value.messages[0]


def test_property_values_must_be_scalars():
    data = [script("nested")]
    data[0]["Nodes"][1]["Properties"] = {"Message": {"nested": True}}
    with pytest.raises(GraphSchemaError) as ei:
        graphs_from_data(data)
    assert ei.value.messages[0].startswith("At 0.Nodes.1.Properties.Message:")


def test_invalid_json_raises_parse_error(tmp_path: Path):
    bad = tmp_path / "broken.json"
    bad.write_text('[{"OwnerType": "Room",, }]', encoding="utf-8")

    with pytest.raises(GraphParseError) as ei:
        load_graphs(bad)

    assert ei.value.lineno == 1
    assert "Failed to parse script file" in str(ei.value)


def test_file_not_found(tmp_path: Path):
    with pytest.raises(GraphFileNotFoundError):
        load_graphs(tmp_path / "missing.json")
    with pytest.raises(GraphFileNotFoundError):
        load_graph_directory(tmp_path / "nowhere")


def test_directory_and_mixed_loading(tmp_path: Path):
    scripts = tmp_path / "scripts"
    scripts.mkdir()
    write_json(scripts / "b.json", [script("b")])
    write_json(scripts / "a.json", [script("a")])
    (scripts / "notes.txt").write_text("ignored", encoding="utf-8")
    extra = tmp_path / "extra.json"
    write_json(extra, [script("extra")])

    assert [g.name for g in load_graph_directory(scripts)] == ["a", "b"]
    assert [g.name for g in load_many([extra, scripts])] == ["extra", "a", "b"]
