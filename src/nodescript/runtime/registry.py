from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..graph.model import Node, NodeCategory

logger = logging.getLogger(__name__)

HandlerReturn = Union[Any, Awaitable[Any]]
Handler = Callable[[Node, Any], HandlerReturn]


@dataclass(frozen=True)
class HandlerSpec:
    tag: str
    category: NodeCategory
    func: Handler
    required: Tuple[str, ...] = ()
    pure: bool = False

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.func)


class HandlerRegistry:
    """Dispatch table mapping node type tags to handlers.

    Tags are matched case-insensitively. The default registry is filled once
    when ``nodescript.handlers`` is imported.
    """

    def __init__(self) -> None:
        self._specs: Dict[str, HandlerSpec] = {}

    def add(
        self,
        tag: str,
        category: NodeCategory,
        func: Handler,
        required: Iterable[str] = (),
        pure: bool = False,
    ) -> HandlerSpec:
        key = tag.casefold()
        if key in self._specs:
            raise ValueError(f"Handler already registered for node type {tag}")
        spec = HandlerSpec(tag=tag, category=category, func=func, required=tuple(required), pure=pure)
        self._specs[key] = spec
        return spec

    def register(
        self,
        tag: str,
        category: NodeCategory,
        required: Iterable[str] = (),
        pure: bool = False,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`add`; returns the function unchanged."""

        def decorator(func: Handler) -> Handler:
            self.add(tag, category, func, required=required, pure=pure)
            return func

        return decorator

    def get(self, tag: Optional[str]) -> Optional[HandlerSpec]:
        if not tag:
            return None
        return self._specs.get(tag.casefold())

    def category_of(self, tag: str) -> Optional[NodeCategory]:
        spec = self.get(tag)
        return spec.category if spec else None

    def tags(self, category: Optional[NodeCategory] = None) -> List[str]:
        return sorted(s.tag for s in self._specs.values() if category is None or s.category is category)

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and tag.casefold() in self._specs

    def __len__(self) -> int:
        return len(self._specs)


# Filled by the handler modules at import time
DEFAULT_REGISTRY = HandlerRegistry()


def handler(tag: str, category: NodeCategory, required: Iterable[str] = (), pure: bool = False):
    """Register a function in the default registry."""
    return DEFAULT_REGISTRY.register(tag, category, required=required, pure=pure)


def default_registry() -> HandlerRegistry:
    """Return the default registry with every built-in node family loaded."""
    from .. import handlers  # noqa: F401  (import registers the handlers)

    logger.debug("Default handler registry has %d node types", len(DEFAULT_REGISTRY))
    return DEFAULT_REGISTRY
