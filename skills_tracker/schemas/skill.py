"""Pydantic schemas for skills and user skill levels."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SkillCreate(BaseModel):
    name: str
    description: str = ""
    category: str = ""


class SkillUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None


class SkillOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = ""
    category: Optional[str] = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserSkillCreate(BaseModel):
    skill_id: int
    level: int


class UserSkillLevelUpdate(BaseModel):
    level: int


class UserSkillOut(BaseModel):
    id: int
    user_id: int
    skill_id: int
    skill_name: str = ""
    level: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
