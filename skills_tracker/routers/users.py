"""Users API router: self-service profile, user management and user skill levels."""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skills_tracker.database import get_db
from skills_tracker.middleware.auth_middleware import get_current_principal, require_roles
from skills_tracker.routers.auth import get_user_service
from skills_tracker.schemas.skill import UserSkillCreate, UserSkillLevelUpdate, UserSkillOut
from skills_tracker.schemas.user import UserOut, UserSelfUpdate, UserUpdate
from skills_tracker.services.skill_service import SkillService
from skills_tracker.services.user_service import UserService
from skills_tracker.utils.permissions import MANAGER, Principal

router = APIRouter(prefix="/api/v1/users", tags=["users"])


def get_skill_service(db: Session = Depends(get_db)) -> SkillService:
    return SkillService(db, logging.getLogger("skills_tracker.skills"))


@router.get("/me", response_model=UserOut)
def me(principal: Principal = Depends(get_current_principal), svc: UserService = Depends(get_user_service)):
    return svc.get_user(principal.user_id)


@router.put("/me", response_model=UserOut)
def update_me(
    data: UserSelfUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: UserService = Depends(get_user_service),
):
    return svc.update_self(principal.user_id, data)


@router.get("", response_model=List[UserOut])
def list_users(
    principal: Principal = Depends(require_roles(MANAGER)),
    svc: UserService = Depends(get_user_service),
):
    return svc.get_users()


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    principal: Principal = Depends(require_roles(MANAGER)),
    svc: UserService = Depends(get_user_service),
):
    return svc.get_user(user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    data: UserUpdate,
    principal: Principal = Depends(require_roles(MANAGER)),
    svc: UserService = Depends(get_user_service),
):
    return svc.update_user(user_id, data)


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    principal: Principal = Depends(require_roles(MANAGER)),
    svc: UserService = Depends(get_user_service),
):
    svc.delete_user(user_id)
    return {"message": "user deleted"}


@router.post("/{user_id}/skills", response_model=UserSkillOut)
def add_user_skill(
    user_id: int,
    data: UserSkillCreate,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    return svc.add_user_skill(user_id, data.skill_id, data.level)


@router.get("/{user_id}/skills", response_model=List[UserSkillOut])
def list_user_skills(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    return svc.get_user_skills(user_id)


@router.put("/{user_id}/skills/{skill_id}", response_model=UserSkillOut)
def update_user_skill(
    user_id: int,
    skill_id: int,
    data: UserSkillLevelUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    return svc.update_user_skill(user_id, skill_id, data.level)


@router.delete("/{user_id}/skills/{skill_id}")
def remove_user_skill(
    user_id: int,
    skill_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: SkillService = Depends(get_skill_service),
):
    svc.remove_user_skill(user_id, skill_id)
    return {"message": "user skill removed"}
