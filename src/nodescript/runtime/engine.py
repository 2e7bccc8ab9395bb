from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from ..config.settings import EngineSettings
from ..events.bus import EventBus, HostEvent
from ..exceptions import EngineClosedError, WalkAborted
from ..graph.model import DEFAULT_PORT, Node, ScriptGraph
from ..world.state import World
from .context import ExecutionContext
from .registry import HandlerRegistry, default_registry
from .router import EventRouter
from .walker import Walker

logger = logging.getLogger(__name__)


@dataclass
class WalkReport:
    """Outcome of one top-level trigger, delivered through its future."""

    label: str
    success: bool = True
    walks: int = 0
    error: Optional[str] = None
    aborted: bool = False


@dataclass
class _Job:
    label: str
    run: Callable[[], Awaitable[int]]
    future: "asyncio.Future[WalkReport]"


class ScriptEngine:
    """Script session: owns the graphs, the handler table and the trigger queue.

    Every top-level trigger is queued and executed by a single worker task,
    one job at a time and to completion (including any Flow_Delay), so walks
    never interleave their world mutations. Triggers raised by handlers while
    a walk runs execute inline inside that job.

    Note: the trigger methods must be called from a running event loop. The
    returned future may be awaited or ignored.
    """

    def __init__(
        self,
        world: World,
        graphs: Iterable[ScriptGraph] = (),
        *,
        bus: Optional[EventBus] = None,
        settings: Optional[EngineSettings] = None,
        registry: Optional[HandlerRegistry] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.world = world
        self.graphs: List[ScriptGraph] = list(graphs)
        self.bus = bus or EventBus()
        self.settings = settings or EngineSettings()
        self.registry = registry or default_registry()
        self.rng = rng or random.Random(self.settings.random_seed)
        self.walker = Walker(self.registry)
        self.router = EventRouter(self)
        self._queue: Optional["asyncio.Queue[_Job]"] = None
        self._worker: Optional["asyncio.Task[None]"] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._current: Optional[_Job] = None
        self._closed = False
        logger.info("ScriptEngine created with %d graph(s), %d node types", len(self.graphs), len(self.registry))

    # --- public API -----------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def add_graph(self, graph: ScriptGraph) -> None:
        self.graphs.append(graph)

    def trigger_by_name(self, owner_type: str, owner_id: str, event_tag: str) -> "asyncio.Future[WalkReport]":
        """Queue every graph of ``(owner_type, owner_id)`` with an entry node ``event_tag``."""
        label = f"{owner_type}/{owner_id}/{event_tag}"
        return self._submit(label, lambda: self.router.trigger_by_name(owner_type, owner_id, event_tag))

    def execute_single_node(self, node: Node) -> "asyncio.Future[WalkReport]":
        """Queue one node for execution in a throwaway single-node graph."""

        async def run() -> int:
            if node.type_tag not in self.registry:
                logger.debug("execute_single_node: no handler for %s", node.type_tag)
                return 0
            ctx = self.new_context(ScriptGraph.for_single_node(node))
            await self.walker.run_from(node, DEFAULT_PORT, ctx)
            return 1

        return self._submit(f"node/{node.type_tag}", run)

    def notify_property_changed(
        self, entity_type: str, entity_id: str, prop: str, old: Any, new: Any
    ) -> "asyncio.Future[WalkReport]":
        """Queue a property-changed fan-out for a change the host made itself."""
        label = f"property/{entity_type}/{entity_id}/{prop}"
        return self._submit(label, lambda: self.router.property_changed(entity_type, entity_id, prop, old, new))

    async def drain(self) -> None:
        """Wait until every queued trigger has finished."""
        if self._queue is not None and self._worker is not None and not self._worker.done():
            await self._queue.join()

    async def close(self) -> None:
        """End the session: cancel the running walk, pending delays and queued triggers."""
        if self._closed:
            return
        self._closed = True
        worker, self._worker = self._worker, None
        if worker is not None and not worker.done():
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass
        self._cancel_pending()
        logger.info("ScriptEngine closed")

    async def __aenter__(self) -> "ScriptEngine":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # --- helpers used by contexts and the router ------------------------

    def new_context(self, graph: ScriptGraph) -> ExecutionContext:
        return ExecutionContext(graph, self)

    def debug(self, message: str) -> None:
        if self.settings.debug_messages:
            self.bus.emit(HostEvent.MESSAGE, text=message)

    # --- queue ------------------------------------------------------------

    def _submit(self, label: str, run: Callable[[], Awaitable[int]]) -> "asyncio.Future[WalkReport]":
        if self._closed:
            raise EngineClosedError(f"Cannot run {label}: script engine is closed")
        loop = asyncio.get_running_loop()
        self._ensure_worker(loop)
        future: "asyncio.Future[WalkReport]" = loop.create_future()
        assert self._queue is not None
        self._queue.put_nowait(_Job(label, run, future))
        logger.debug("Queued %s (%d pending)", label, self._queue.qsize())
        return future

    def _ensure_worker(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._loop is not loop or self._queue is None:
            # a new event loop (e.g. a second asyncio.run) needs its own queue
            self._cancel_pending()
            self._loop = loop
            self._queue = asyncio.Queue()
            self._worker = None
        if self._worker is None or self._worker.done():
            self._worker = loop.create_task(self._work(), name="nodescript-walks")

    def _cancel_pending(self) -> None:
        if self._current is not None:
            self._current.future.cancel()
            self._current = None
        if self._queue is None:
            return
        while not self._queue.empty():
            job = self._queue.get_nowait()
            job.future.cancel()
            self._queue.task_done()

    async def _work(self) -> None:
        assert self._queue is not None
        queue = self._queue
        while True:
            job = await queue.get()
            self._current = job
            try:
                if job.future.cancelled():
                    continue
                report = await self._run_job(job)
                if not job.future.done():
                    job.future.set_result(report)
            except asyncio.CancelledError:
                job.future.cancel()
                raise
            finally:
                self._current = None
                queue.task_done()

    async def _run_job(self, job: _Job) -> WalkReport:
        try:
            walks = await job.run()
        except WalkAborted as exc:
            logger.warning("Trigger %s aborted: %s", job.label, exc)
            self._diagnostic(f"[Script aborted] {job.label}: {exc}")
            return WalkReport(job.label, success=False, error=str(exc), aborted=True)
        except Exception as exc:
            logger.exception("Script error while running %s", job.label)
            self._diagnostic(f"[Script error] {job.label}: {exc}")
            return WalkReport(job.label, success=False, error=f"{type(exc).__name__}: {exc}")
        return WalkReport(job.label, success=True, walks=walks)

    def _diagnostic(self, text: str) -> None:
        self.bus.emit(HostEvent.DIAGNOSTIC, text=text)
        if self.settings.debug_messages:
            self.bus.emit(HostEvent.MESSAGE, text=text)
