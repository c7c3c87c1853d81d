"""Pydantic schemas for task comments."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class CommentCreate(BaseModel):
    task_id: int
    text: str


class CommentUpdate(BaseModel):
    text: str


class CommentOut(BaseModel):
    id: int
    task_id: int
    user_id: int
    text: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
