"""
Task Registry
-------------

Tracks the asyncio tasks the driver spawns (the playback loop, mainly) so
failures are logged instead of lost, and so shutdown can find what is still
running. A task is forgotten as soon as it finishes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, List
from datetime import datetime, timezone

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class TaskCategory(Enum):
    """Logical grouping of asynchronous tasks."""
    PLAYBACK = auto()
    SYSTEM = auto()


@dataclass(frozen=True)
class TaskInfo:
    """Immutable metadata captured at task creation time."""
    id: int
    category: TaskCategory
    description: str
    created_at: str  # ISO UTC string


class TaskRegistry:
    """
    Global registry of running tasks.
    """

    _instance: Optional["TaskRegistry"] = None

    def __init__(self) -> None:
        self._tasks: Dict[asyncio.Task, TaskInfo] = {}
        self._next_id: int = 1

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def register(self, task: asyncio.Task, category: TaskCategory, description: str) -> int:
        task_id = self._next_id
        self._next_id += 1

        self._tasks[task] = TaskInfo(
            id=task_id,
            category=category,
            description=description,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        log.debug(f"[Task {task_id}] Registered ({category.name}) - {description}")

        task.add_done_callback(self._on_task_done)
        return task_id

    def _on_task_done(self, task: asyncio.Task) -> None:
        info = self._tasks.pop(task, None)
        if info is None:
            return

        if task.cancelled():
            log.debug(f"[Task {info.id}] Cancelled")
            return

        exc = task.exception()
        if exc:
            log.error(
                f"[Task {info.id}] FAILED: {exc}",
                description=info.description,
                error_type=type(exc).__name__,
            )
        else:
            log.debug(f"[Task {info.id}] Completed successfully")

    def active(self) -> List[TaskInfo]:
        """Metadata of tasks that have not finished yet."""
        return list(self._tasks.values())


def create_tracked_task(
    coro,
    *,
    category: TaskCategory,
    description: str,
) -> asyncio.Task:
    """
    Create and register a task in a single call.
    """
    task = asyncio.get_running_loop().create_task(coro)
    TaskRegistry.instance().register(task=task, category=category, description=description)
    return task
