from __future__ import annotations

import itertools
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, List, Optional

from .errors import StoreError
from .models import TaskEntity
from .schemas import TaskCreate, TaskUpdate
from .settings import Settings

logger = logging.getLogger(__name__)

MEMORY_SCHEME = "memory://"


def new_task_id() -> str:
    """Return a fresh opaque task identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class TaskStore(ABC):
    """
    Abstract contract for task storage backends.

    A store is a process-scoped resource: `connect` is called once at
    application startup and `close` at shutdown. Backend failures are raised
    as StoreError; missing records are reported through return values.
    """

    @abstractmethod
    def connect(self) -> None:
        """Acquire the backend connection. Raise StoreError on failure."""

    @abstractmethod
    def close(self) -> None:
        """Release the backend connection."""

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the backend is currently reachable."""

    @abstractmethod
    def create(self, data: TaskCreate) -> TaskEntity:
        """Insert and return a new TaskEntity."""

    @abstractmethod
    def list(self) -> List[TaskEntity]:
        """Return all tasks, newest first (ties broken by insertion order)."""

    @abstractmethod
    def update(self, task_id: str, data: TaskUpdate) -> Optional[TaskEntity]:
        """Apply the provided fields. Return the updated entity or None if not found."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""


class InMemoryTaskStore(TaskStore):
    """
    Thread-safe in-memory store, used for tests and `memory://` deployments.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, TaskEntity] = {}
        self._order: Dict[str, int] = {}
        self._seq = itertools.count()
        self._connected = False

    def connect(self) -> None:
        self._connected = True
        logger.info("In-memory task store ready")

    def close(self) -> None:
        self._connected = False

    def ping(self) -> bool:
        return self._connected

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise StoreError("Task store is not connected")

    def create(self, data: TaskCreate) -> TaskEntity:
        self._ensure_connected()
        now = utcnow()
        entity: TaskEntity = {
            "id": new_task_id(),
            "text": data.text,
            "completed": data.completed,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
            self._order[entity["id"]] = next(self._seq)
        return entity.copy()  # type: ignore[return-value]

    def list(self) -> List[TaskEntity]:
        self._ensure_connected()
        with self._lock:
            items = sorted(
                self._items.values(),
                key=lambda t: (t["created_at"], self._order[t["id"]]),
                reverse=True,
            )
            # Return copies to avoid external mutation
            return [t.copy() for t in items]  # type: ignore[misc]

    def update(self, task_id: str, data: TaskUpdate) -> Optional[TaskEntity]:
        self._ensure_connected()
        changes = data.changes()
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                return None
            if not changes:
                return existing.copy()  # type: ignore[return-value]

            updated = existing.copy()
            updated.update(changes)  # type: ignore[typeddict-item]
            updated["updated_at"] = utcnow()
            self._items[task_id] = updated  # type: ignore[assignment]
            return updated.copy()  # type: ignore[return-value]

    def delete(self, task_id: str) -> bool:
        self._ensure_connected()
        with self._lock:
            self._order.pop(task_id, None)
            return self._items.pop(task_id, None) is not None


# PUBLIC_INTERFACE
def create_store(settings: Settings) -> TaskStore:
    """
    Build the task store selected by the connection string.
    - memory://: InMemoryTaskStore
    - anything else: SqlTaskStore over SQLAlchemy (sqlite, postgresql, ...)

    The store is returned unconnected; callers own its lifecycle.
    """
    if settings.store_conn_str.startswith(MEMORY_SCHEME):
        return InMemoryTaskStore()

    from .db import SqlTaskStore

    return SqlTaskStore(
        settings.store_conn_str,
        username=settings.db_username if settings.use_db_auth else None,
        password=settings.db_password if settings.use_db_auth else None,
    )
