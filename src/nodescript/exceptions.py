class NodeScriptError(Exception):
    """Base exception for the nodescript package."""


class ConfigError(NodeScriptError):
    """Raised when engine settings cannot be loaded or are invalid."""


class GraphLoadError(NodeScriptError):
    """Base error for authored graph files that cannot be loaded."""


class GraphFileNotFoundError(GraphLoadError):
    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"Script file not found: {path}")


class GraphParseError(GraphLoadError):
    def __init__(self, path, message: str, lineno=None, colno=None) -> None:
        self.path = path
        self.message = message
        self.lineno = lineno
        self.colno = colno
        location = f" (line {lineno}, column {colno})" if lineno is not None and colno is not None else ""
        super().__init__(f"Failed to parse script file {path}{location}: {message}")


class GraphSchemaError(GraphLoadError):
    def __init__(self, path, messages) -> None:
        self.path = path
        self.messages = list(messages)
        lines = [f"Script file {path} does not match the graph schema:"]
        lines.extend(f" - {m}" for m in self.messages)
        super().__init__("\n".join(lines))


class WalkAborted(NodeScriptError):
    """Raised inside a walk when the step or depth guard trips (e.g. an authored cycle)."""

    def __init__(self, reason: str, node_id: str = "") -> None:
        self.reason = reason
        self.node_id = node_id
        suffix = f" at node '{node_id}'" if node_id else ""
        super().__init__(f"Walk aborted{suffix}: {reason}")


class EngineClosedError(NodeScriptError):
    """Raised when a trigger is submitted to an engine that was closed."""
