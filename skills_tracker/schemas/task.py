"""Pydantic schemas for task contracts."""

from pydantic import BaseModel, field_serializer
from typing import Optional, List
from datetime import datetime, timezone


class TaskCreate(BaseModel):
    project_id: int
    title: str
    description: str = ""
    deadline: str
    hours: int = 0
    priority: str = ""
    type: str = ""
    parent_task_id: Optional[int] = None
    skill_ids: List[int] = []
    assignee_ids: List[int] = []


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[int] = None
    hours: Optional[int] = None
    priority: Optional[str] = None
    type: Optional[str] = None
    parent_task_id: Optional[int] = None
    skill_ids: Optional[List[int]] = None
    assignee_ids: Optional[List[int]] = None


class TaskOut(BaseModel):
    id: int
    project_id: int
    title: str
    description: Optional[str] = ""
    deadline: Optional[datetime] = None
    status: str
    progress: int
    hours: int
    priority: str
    type: str
    parent_task_id: Optional[int] = None
    skill_ids: List[int] = []
    assignee_ids: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_serializer("deadline")
    def serialize_deadline(self, value: Optional[datetime]) -> Optional[str]:
        # Stored as naive UTC; emit RFC3339 so the value can be sent back as-is.
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
