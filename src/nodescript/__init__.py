"""Graph-based script execution engine for interactive-fiction worlds."""

__version__ = "0.1.0"

from .config import EngineSettings, load_settings  # noqa: E402
from .events import EventBus, HostEvent  # noqa: E402
from .graph.model import Connection, Node, NodeCategory, ScriptGraph  # noqa: E402
from .runtime.engine import ScriptEngine, WalkReport  # noqa: E402
from .world.state import World  # noqa: E402

__all__ = [
    "Connection",
    "EngineSettings",
    "EventBus",
    "HostEvent",
    "Node",
    "NodeCategory",
    "ScriptEngine",
    "ScriptGraph",
    "WalkReport",
    "World",
    "__version__",
    "load_settings",
]
