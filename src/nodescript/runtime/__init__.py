from .context import ExecutionContext, NodeResult
from .engine import ScriptEngine, WalkReport
from .registry import DEFAULT_REGISTRY, HandlerRegistry, HandlerSpec, default_registry, handler

__all__ = [
    "DEFAULT_REGISTRY",
    "ExecutionContext",
    "HandlerRegistry",
    "HandlerSpec",
    "NodeResult",
    "ScriptEngine",
    "WalkReport",
    "default_registry",
    "handler",
]
