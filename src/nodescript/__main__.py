from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import load_settings
from .events import EventBus, HostEvent
from .exceptions import NodeScriptError
from .graph.loader import load_many
from .graph.validator import validate_graph
from .logging_config import configure_logging
from .runtime.engine import ScriptEngine
from .world.loader import load_world
from .world.state import World

logger = logging.getLogger(__name__)


def _level(verbosity: int) -> int:
    if verbosity == 1:
        return logging.INFO
    if verbosity >= 2:
        return logging.DEBUG
    return logging.WARNING


def _cmd_validate(args: argparse.Namespace) -> int:
    graphs = load_many(args.paths)
    problems = 0
    for graph in graphs:
        report = validate_graph(graph)
        label = graph.name or graph.id
        if report.is_valid:
            print(f"OK    {label} ({graph.owner_type}/{graph.owner_id})")
            continue
        problems += 1
        print(f"FAIL  {label} ({graph.owner_type}/{graph.owner_id})")
        for error in report.errors:
            print(f"      - {error}")
    print(f"{len(graphs)} script(s) checked, {problems} with errors")
    return 1 if problems else 0


async def _run_trigger(engine: ScriptEngine, args: argparse.Namespace):
    async with engine:
        future = engine.trigger_by_name(args.owner_type, args.owner_id, args.event)
        return await future


def _cmd_run(args: argparse.Namespace) -> int:
    graphs = load_many(args.paths)
    world = load_world(args.world) if args.world else World()
    settings = load_settings(args.config)

    bus = EventBus()
    bus.subscribe(HostEvent.MESSAGE, lambda text: print(text))
    for event in HostEvent.ALL:
        if event in (HostEvent.MESSAGE, HostEvent.DIAGNOSTIC):
            continue
        bus.subscribe(event, lambda _event=event, **payload: print(f"<{_event}> {payload}"))
    bus.subscribe(HostEvent.DIAGNOSTIC, lambda text: logger.warning("%s", text))

    engine = ScriptEngine(world, graphs, bus=bus, settings=settings)
    report = asyncio.run(_run_trigger(engine, args))
    print(f"{report.walks} walk(s) run for {args.owner_type}/{args.owner_id}/{args.event}")
    return 0 if report.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nodescript",
        description="Validate and run interactive-fiction script graphs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Check script files for authoring errors")
    validate.add_argument("paths", nargs="+", help="Script JSON files or directories")
    validate.set_defaults(func=_cmd_validate)

    run = sub.add_parser("run", help="Fire one event and print what the scripts do")
    run.add_argument("paths", nargs="+", help="Script JSON files or directories")
    run.add_argument("--owner-type", required=True, help="Owner type, e.g. Room or Npc")
    run.add_argument("--owner-id", required=True, help="Owner id, e.g. the room id")
    run.add_argument("--event", required=True, help="Event node type, e.g. Event_OnEnter")
    run.add_argument("--world", default=None, help="World snapshot JSON (default: empty world)")
    run.add_argument("--config", default=None, help="Engine settings YAML (default: built-in)")
    run.set_defaults(func=_cmd_run)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(_level(args.verbose))
    try:
        return args.func(args)
    except NodeScriptError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
