from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..errors import StoreError
from ..repositories import TaskStore
from ..schemas import DeleteResult, TaskCreate, TaskOut, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)

TASK_NOT_FOUND = "Task not found"


# PUBLIC_INTERFACE
def get_store(request: Request) -> TaskStore:
    """
    Dependency returning the process-scoped store attached to the app at startup.
    """
    return request.app.state.store


# PUBLIC_INTERFACE
@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post(
    "/",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task with completed=false unless stated otherwise.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Validation or store error"},
    },
)
def create_task(payload: TaskCreate, store: TaskStore = Depends(get_store)) -> TaskOut:
    """
    Create a new task. Store failures are reported as 400 with the store's message.
    """
    try:
        created = store.create(payload)
    except StoreError as e:
        logger.error("Create task error: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return TaskOut(**created)


# PUBLIC_INTERFACE
@router.get("", response_model=List[TaskOut], include_in_schema=False)
@router.get(
    "/",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="List all tasks, newest first.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"description": "Store failure"},
    },
)
def list_tasks(store: TaskStore = Depends(get_store)) -> List[TaskOut]:
    try:
        items = store.list()
    except StoreError as e:
        logger.error("Get tasks error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch tasks"
        ) from e
    return [TaskOut(**it) for it in items]


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Apply the provided fields (text and/or completed) to an existing task.",
    responses={
        200: {"description": "Task updated"},
        400: {"description": "Validation or store error"},
        404: {"description": "Task not found"},
    },
)
def update_task(task_id: str, payload: TaskUpdate, store: TaskStore = Depends(get_store)) -> TaskOut:
    """
    Partial update; fields absent from the body keep their stored values.
    """
    try:
        updated = store.update(task_id, payload)
    except StoreError as e:
        logger.error("Update task error: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return TaskOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    response_model=DeleteResult,
    summary="Delete Task",
    description="Delete a task by ID.",
    responses={
        200: {"description": "Task deleted"},
        404: {"description": "Task not found"},
        500: {"description": "Store failure"},
    },
)
def delete_task(task_id: str, store: TaskStore = Depends(get_store)) -> DeleteResult:
    try:
        deleted = store.delete(task_id)
    except StoreError as e:
        logger.error("Delete task error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete task"
        ) from e
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return DeleteResult(message="Task deleted successfully")
