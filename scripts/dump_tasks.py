#!/usr/bin/env python3
"""Dump the task list the tasksync store sees.

This script fetches every task from the configured backend and prints the
parsed fields **and** the raw API JSON, plus the derived counts, so you can
check id normalization and spot fields that aren't parsed yet.

Usage
-----
Set environment variables and run::

    export TASKSYNC_BASE_URL="http://localhost:3000/api"
    export TASKSYNC_TOKEN="..."          # optional
    python scripts/dump_tasks.py

Options::

    --filter VALUE       Only print tasks visible under all/active/completed
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --debug              Enable DEBUG logging (with redacted request traces)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from tasksync import Task, TaskFilter, TaskSyncClient, TaskSyncConfig  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _task_dict(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="json", exclude={"raw"})


def _print_task(task: Task, out: list[str]) -> None:
    out.append(_section(f"TASK  id={task.id}"))
    for key, value in _task_dict(task).items():
        out.append(f"  {key}: {value}")
    out.append("\n  ── raw JSON ──")
    out.append(json.dumps(task.raw, indent=2, default=str, ensure_ascii=False))


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dump the tasks tasksync can fetch for debugging / development.",
    )
    parser.add_argument(
        "--filter",
        default=TaskFilter.ALL.value,
        choices=[item.value for item in TaskFilter],
        help="Only print tasks visible under this filter",
    )
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = TaskSyncConfig.from_env(**({"api_trace_enabled": True} if args.debug else {}))

    async with TaskSyncClient(config) as client:
        store = client.store
        await store.fetch_tasks()
        if store.error is not None:
            print(f"!! {store.error}", file=sys.stderr)
            return 1
        store.set_filter(args.filter)
        visible = store.filtered_tasks
        summary = {
            "base_url": config.base_url,
            "filter": store.filter,
            "total": len(store.tasks),
            "active": store.active_tasks_count,
            "completed": store.completed_tasks_count,
        }

    if args.json_mode:
        text = json.dumps(
            {"summary": summary, "tasks": [{"parsed": _task_dict(t), "raw": t.raw} for t in visible]},
            indent=2,
            default=str,
            ensure_ascii=False,
        )
    else:
        out: list[str] = [_section("SUMMARY")]
        out.extend(f"  {key}: {value}" for key, value in summary.items())
        for task in visible:
            _print_task(task, out)
        text = "\n".join(out)

    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Written to {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
