from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    Storage-side representation of a task, shared by all store backends.

    Fields:
    - id: Opaque unique identifier (uuid4 hex), assigned on insert
    - text: Trimmed task text (1..500 chars, enforced by the schemas)
    - completed: Boolean completion flag
    - created_at: UTC creation timestamp
    - updated_at: UTC last update timestamp
    """

    id: str
    text: str
    completed: bool
    created_at: datetime
    updated_at: datetime
