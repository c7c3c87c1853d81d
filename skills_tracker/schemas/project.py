"""Pydantic schemas for project and membership contracts."""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class ProjectCreate(BaseModel):
    name: str
    description: str = ""
    status: str = ""
    member_ids: List[int] = []


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    member_ids: Optional[List[int]] = None


class ProjectOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = ""
    manager_id: int
    status: str
    member_ids: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProjectMemberCreate(BaseModel):
    user_id: int
    role: str = ""


class ProjectMemberOut(BaseModel):
    id: int
    project_id: int
    user_id: int
    username: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
