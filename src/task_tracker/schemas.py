from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TEXT_MAX_LENGTH = 500


def _clean_text(value: str) -> str:
    """
    Strip surrounding whitespace and enforce 1..TEXT_MAX_LENGTH characters.
    """
    s = value.strip()
    if not s:
        raise ValueError("Task text is required")
    if len(s) > TEXT_MAX_LENGTH:
        raise ValueError(f"Task text must be at most {TEXT_MAX_LENGTH} characters")
    return s


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "Buy groceries",
            }
        }
    )

    text: str = Field(..., description="Task text, trimmed, 1..500 characters")
    completed: bool = Field(default=False, description="Completion status flag")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _clean_text(v)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for a partial task update.

    Only fields present in the request body are applied; unknown fields
    (including id and timestamps) are ignored. Explicit nulls are rejected.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "completed": True,
            }
        }
    )

    text: Optional[str] = Field(default=None, description="New task text, trimmed, 1..500 characters")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("text cannot be null")
        return _clean_text(v)

    @field_validator("completed")
    @classmethod
    def validate_completed(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError("completed cannot be null")
        return v

    # PUBLIC_INTERFACE
    def changes(self) -> dict:
        """Return only the fields explicitly provided by the caller."""
        return self.model_dump(exclude_unset=True)


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Task as returned by the API. Serialized with camelCase keys
    (createdAt, updatedAt); accepts either spelling on input so the client
    can parse responses back into this model.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "3f2b9c1e8a7d4e6f9b0c1d2e3f4a5b6c",
                "text": "Buy groceries",
                "completed": False,
                "createdAt": "2025-01-25T10:15:30.123456Z",
                "updatedAt": "2025-01-26T09:00:00.000001Z",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the task")
    text: str = Field(..., description="Task text")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class DeleteResult(BaseModel):
    message: str = Field(..., description="Confirmation message")


class HealthStatus(BaseModel):
    status: str = Field(..., description="Service status, always 'ok' when reachable")
    database: str = Field(..., description="'connected' or 'disconnected'")
