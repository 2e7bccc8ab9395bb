"""JSON Schema for authored script files.

A script file holds either a list of graphs or an object with a ``Scripts``
list (the shape the world editor saves); each shape has its own schema so
errors point at the offending graph. Only the keys the engine reads are
constrained; editor-only keys such as node positions pass through.
"""

from __future__ import annotations

from typing import Any, Dict

NODE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["NodeType"],
    "properties": {
        "Id": {"type": "string", "minLength": 1},
        "NodeType": {"type": "string", "minLength": 1},
        "Category": {"type": ["string", "integer", "null"]},
        "Properties": {
            "type": ["object", "null"],
            "additionalProperties": {"type": ["string", "number", "boolean", "null"]},
        },
        "Comment": {"type": ["string", "null"]},
    },
}

CONNECTION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["FromNodeId", "ToNodeId"],
    "properties": {
        "Id": {"type": "string"},
        "FromNodeId": {"type": "string", "minLength": 1},
        "FromPortName": {"type": "string", "default": "Exec"},
        "ToNodeId": {"type": "string", "minLength": 1},
        "ToPortName": {"type": "string", "default": "Exec"},
    },
}

GRAPH_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["OwnerType", "Nodes"],
    "properties": {
        "Id": {"type": "string"},
        "Name": {"type": "string", "default": ""},
        "OwnerType": {"type": "string"},
        "OwnerId": {"type": "string", "default": ""},
        "Nodes": {"type": "array", "items": NODE_SCHEMA},
        "Connections": {"type": "array", "items": CONNECTION_SCHEMA, "default": []},
    },
}

SCRIPT_LIST_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    "items": GRAPH_SCHEMA,
}

SCRIPT_FILE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["Scripts"],
    "properties": {"Scripts": {"type": "array", "items": GRAPH_SCHEMA}},
}
