from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence, Union

from jsonschema import Draft202012Validator
from jsonschema import exceptions as js_exceptions
from pydantic import ValidationError

from ..exceptions import GraphFileNotFoundError, GraphParseError, GraphSchemaError
from .model import ScriptGraph
from .schema import SCRIPT_FILE_SCHEMA, SCRIPT_LIST_SCHEMA

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise GraphFileNotFoundError(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise GraphParseError(path, e.msg, e.lineno, e.colno) from e


def _format_error(err: js_exceptions.ValidationError) -> str:
    where = ".".join(str(p) for p in err.absolute_path) or "root"
    return f"At {where}: {err.message}"


def _validate(path: Path, data: Any) -> List[Any]:
    """Check ``data`` against the script file schema and return its graph entries."""
    if isinstance(data, list):
        schema = SCRIPT_LIST_SCHEMA
    elif isinstance(data, dict):
        schema = SCRIPT_FILE_SCHEMA
    else:
        raise GraphSchemaError(path, ["Root must be a list of scripts or an object with a Scripts list"])
    errors = sorted(Draft202012Validator(schema).iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        raise GraphSchemaError(path, [_format_error(e) for e in errors])
    return data if isinstance(data, list) else data["Scripts"]


def graphs_from_data(data: Any, source: PathLike = "<memory>") -> List[ScriptGraph]:
    """Build graphs from already parsed JSON (a list or ``{"Scripts": [...]}``)."""
    path = Path(source)
    entries = _validate(path, data)
    graphs: List[ScriptGraph] = []
    for index, entry in enumerate(entries):
        try:
            graphs.append(ScriptGraph.model_validate(entry))
        except ValidationError as exc:
            messages = [f"At {index}.{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
            raise GraphSchemaError(path, messages) from exc
    return graphs


def load_graphs(path: PathLike) -> List[ScriptGraph]:
    """Load every script graph stored in one JSON file.

    Raises:
        GraphFileNotFoundError: the file does not exist.
        GraphParseError: the file is not valid JSON.
        GraphSchemaError: the JSON does not describe script graphs.
    """
    p = Path(path)
    graphs = graphs_from_data(_read_json(p), p)
    logger.info("Loaded %d script graph(s) from %s", len(graphs), p)
    return graphs


def load_graph_directory(dir_path: PathLike, pattern: str = "*.json") -> List[ScriptGraph]:
    """Load the graphs of every matching file in a directory, in file name order."""
    d = Path(dir_path)
    if not d.exists() or not d.is_dir():
        raise GraphFileNotFoundError(d)
    graphs: List[ScriptGraph] = []
    for fp in sorted(d.glob(pattern)):
        graphs.extend(load_graphs(fp))
    return graphs


def load_many(paths: Sequence[PathLike]) -> List[ScriptGraph]:
    """Load files and directories alike, keeping the order given."""
    graphs: List[ScriptGraph] = []
    for entry in paths:
        p = Path(entry)
        graphs.extend(load_graph_directory(p) if p.is_dir() else load_graphs(p))
    return graphs


__all__ = ["graphs_from_data", "load_graph_directory", "load_graphs", "load_many"]
