from __future__ import annotations

import logging
from typing import Callable, List, Optional

import httpx

from ..schemas import TaskOut
from .transport import TaskApi

logger = logging.getLogger(__name__)

Listener = Callable[[List[TaskOut]], None]


# PUBLIC_INTERFACE
class TaskBoard:
    """
    Client-side task list mirroring the server.

    State:
    - tasks: last known list of tasks (TaskOut, immutable)
    - draft_text: current input buffer

    Toggle and remove mutate `tasks` before the server answers and restore the
    pre-action snapshot when the request fails. Failures are logged and
    reported through the boolean return value; they are never raised.
    Undecodable response bodies (JSON or schema errors, both ValueError)
    count as failures too.
    `on_change` is called after every change to `tasks` so a front end can
    re-render.
    """

    def __init__(self, api: TaskApi, on_change: Optional[Listener] = None) -> None:
        self.api = api
        self.tasks: List[TaskOut] = []
        self.draft_text = ""
        self._on_change = on_change

    def _set_tasks(self, tasks: List[TaskOut]) -> None:
        self.tasks = tasks
        if self._on_change is not None:
            self._on_change(list(self.tasks))

    def find(self, task_id: str) -> Optional[TaskOut]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def load(self) -> bool:
        """Replace `tasks` with the server list."""
        try:
            data = self.api.get_tasks()
            tasks = [TaskOut.model_validate(item) for item in data]
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to load tasks: %s", e)
            return False
        self._set_tasks(tasks)
        return True

    def set_draft(self, text: str) -> None:
        self.draft_text = text

    def submit(self) -> bool:
        """
        Create a task from the draft. A blank draft issues no request.
        """
        if not self.draft_text.strip():
            return False
        try:
            data = self.api.add_task({"text": self.draft_text})
            created = TaskOut.model_validate(data)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to add task: %s", e)
            return False
        self.draft_text = ""
        self._set_tasks([*self.tasks, created])
        return True

    def toggle(self, task_id: str) -> bool:
        """
        Flip `completed` locally, then persist it; revert on failure.
        """
        current = self.find(task_id)
        if current is None:
            logger.warning("Toggle ignored, no local task with id %s", task_id)
            return False

        original = list(self.tasks)
        completed = not current.completed
        self._set_tasks(
            [t.model_copy(update={"completed": completed}) if t.id == task_id else t for t in original]
        )
        try:
            self.api.update_task(task_id, {"completed": completed})
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to update task %s, reverting: %s", task_id, e)
            self._set_tasks(original)
            return False
        return True

    def remove(self, task_id: str) -> bool:
        """
        Drop the task locally, then delete it on the server; revert on failure.
        """
        original = list(self.tasks)
        self._set_tasks([t for t in original if t.id != task_id])
        try:
            self.api.delete_task(task_id)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to delete task %s, reverting: %s", task_id, e)
            self._set_tasks(original)
            return False
        return True
