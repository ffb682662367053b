"""
Lifecycle subsystem
-------------------

Background task tracking:
    from lifecycle import TaskRegistry, create_tracked_task
"""

from .task_registry import TaskRegistry, TaskCategory, TaskInfo, create_tracked_task

__all__ = [
    "TaskRegistry",
    "TaskCategory",
    "TaskInfo",
    "create_tracked_task",
]
