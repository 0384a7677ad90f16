"""
Client side of the task tracker: an HTTP transport (`TaskApi`) and the
optimistic-update task list (`TaskBoard`) driven by the console front end.
"""

from .board import TaskBoard
from .transport import TaskApi

__all__ = ["TaskApi", "TaskBoard"]
