"""Skills API router. Any authenticated user may manage the skill catalogue."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from skills_tracker.middleware.auth_middleware import get_current_principal
from skills_tracker.routers.users import get_skill_service
from skills_tracker.schemas.skill import SkillCreate, SkillOut, SkillUpdate
from skills_tracker.services.skill_service import SkillService
from skills_tracker.utils.permissions import Principal

router = APIRouter(prefix="/api/v1/skills", tags=["skills"])


@router.post("", response_model=SkillOut, status_code=status.HTTP_201_CREATED)
def create_skill(
    data: SkillCreate,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    return svc.create_skill(data)


@router.get("", response_model=List[SkillOut])
def list_skills(
    category: Optional[str] = None,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    if category:
        return svc.get_skills_by_category(category)
    return svc.get_all_skills()


@router.get("/{skill_id}", response_model=SkillOut)
def get_skill(
    skill_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    return svc.get_skill(skill_id)


@router.put("/{skill_id}", response_model=SkillOut)
def update_skill(
    skill_id: int,
    data: SkillUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    return svc.update_skill(skill_id, data)


@router.delete("/{skill_id}")
def delete_skill(
    skill_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    svc.delete_skill(skill_id)
    return {"message": "skill deleted"}
