# src/taskdeps/cli/main.py

"""
CLI entrypoint for inspecting and maintaining a task dependency store.

Usage:
    taskdeps graph OWNER [--layout]
    taskdeps ready OWNER
    taskdeps can-start TASK
    taskdeps path FROM TO
    taskdeps add TASK DEPENDS_ON [--owner OWNER]
    taskdeps remove TASK DEPENDS_ON

Exit codes: 0 success, 1 the engine rejected the request, 2 usage error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from ..config import get_settings
from ..core.errors import DependencyError
from ..graph.engine import DependencyEngine
from ..logging_setup import setup_logging
from ..tasks.task_models import Task
from .bootstrap import create_engine

logger = logging.getLogger(__name__)


def _fmt_task(task: Task) -> str:
    return f"{task.id}  [{task.status.value}/{task.priority.value}]  {task.title}"


def _fail(error: DependencyError) -> int:
    print(f"error ({error.kind.value}): {error.message}", file=sys.stderr)
    return 1


def _cmd_graph(engine: DependencyEngine, args: argparse.Namespace) -> int:
    graph = engine.get_dependency_graph(args.owner)
    if not graph.nodes:
        print("No tasks.")
        return 0

    for index, level in enumerate(graph.levels):
        print(f"Level {index}:")
        for node in level:
            print(f"  {node.id}  [{node.status.value}]  {node.title}")
    if graph.cyclic:
        placed = {n.id for level in graph.levels for n in level}
        stuck = [n.id for n in graph.nodes if n.id not in placed]
        print(f"WARNING: cyclic dependencies, not layered: {', '.join(stuck)}")

    print(f"{len(graph.nodes)} task(s), {len(graph.edges)} dependency edge(s)")

    if args.layout:
        layout = engine.get_graph_layout(args.owner)
        print(f"Layout {layout.width:g}x{layout.height:g}")
        for p in layout.nodes:
            print(f"  {p.node.id} @ ({p.x:g}, {p.y:g})")
    return 0


def _cmd_ready(engine: DependencyEngine, args: argparse.Namespace) -> int:
    tasks = engine.get_ready_tasks(args.owner)
    if not tasks:
        print("No ready tasks.")
    for task in tasks:
        print(_fmt_task(task))
    return 0


def _cmd_can_start(engine: DependencyEngine, args: argparse.Namespace) -> int:
    res = engine.can_start(args.task)
    if res.error is not None:
        return _fail(res.error)
    check = res.unwrap()
    print(check.message)
    for task in check.blocked_by:
        print(f"  blocked by {_fmt_task(task)}")
    return 0


def _cmd_path(engine: DependencyEngine, args: argparse.Namespace) -> int:
    res = engine.find_dependency_path(args.source, args.target)
    if res.error is not None:
        return _fail(res.error)
    found = res.unwrap()
    if not found.has_path:
        print("No dependency path.")
        return 0
    print(f"Path length {found.length}:")
    for task in found.path:
        print(f"  {_fmt_task(task)}")
    return 0


def _cmd_add(engine: DependencyEngine, args: argparse.Namespace) -> int:
    res = engine.try_add_dependency(args.task, args.depends_on, owner_id=args.owner)
    if res.error is not None:
        return _fail(res.error)
    print(f"Added: {args.task} depends on {args.depends_on}")
    return 0


def _cmd_remove(engine: DependencyEngine, args: argparse.Namespace) -> int:
    res = engine.remove_dependency(args.task, args.depends_on)
    if res.error is not None:
        return _fail(res.error)
    print(f"Removed: {args.task} no longer depends on {args.depends_on}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskdeps", description="Task dependency graph tools.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("graph", help="Show the layered dependency graph of an owner.")
    p.add_argument("owner")
    p.add_argument("--layout", action="store_true", help="Also print node positions.")
    p.set_defaults(handler=_cmd_graph)

    p = sub.add_parser("ready", help="List pending tasks whose prerequisites are all completed.")
    p.add_argument("owner")
    p.set_defaults(handler=_cmd_ready)

    p = sub.add_parser("can-start", help="Check whether a task can be started.")
    p.add_argument("task")
    p.set_defaults(handler=_cmd_can_start)

    p = sub.add_parser("path", help="Shortest chain of dependents from one task to another.")
    p.add_argument("source")
    p.add_argument("target")
    p.set_defaults(handler=_cmd_path)

    p = sub.add_parser("add", help="Make TASK depend on DEPENDS_ON.")
    p.add_argument("task")
    p.add_argument("depends_on")
    p.add_argument("--owner", default=None, help="Require both tasks to belong to this owner.")
    p.set_defaults(handler=_cmd_add)

    p = sub.add_parser("remove", help="Remove the dependency of TASK on DEPENDS_ON.")
    p.add_argument("task")
    p.add_argument("depends_on")
    p.set_defaults(handler=_cmd_remove)

    return parser


def main(argv: Sequence[str] | None = None, *, settings=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if settings is None:
        settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=getattr(settings, "log_dir", ".local/taskdeps"), console_level=console_level)

    engine = create_engine(settings=settings)
    logger.debug("Running command %s", args.command)
    return int(args.handler(engine, args))


if __name__ == "__main__":
    sys.exit(main())
