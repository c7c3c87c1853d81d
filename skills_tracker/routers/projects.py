"""Projects API router. Validates requests and delegates to ProjectService."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skills_tracker.database import get_db
from skills_tracker.middleware.auth_middleware import get_current_principal
from skills_tracker.schemas.project import (
    ProjectCreate,
    ProjectMemberCreate,
    ProjectMemberOut,
    ProjectOut,
    ProjectUpdate,
)
from skills_tracker.services.project_service import ProjectService
from skills_tracker.utils.permissions import Principal

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    return ProjectService(db, logging.getLogger("skills_tracker.projects"))


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectCreate,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(get_project_service),
):
    return svc.create_project(principal, data)


@router.get("", response_model=List[ProjectOut])
def list_projects(
    manager_id: Optional[int] = None,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(get_project_service),
):
    if manager_id is not None:
        return svc.get_projects_by_manager(manager_id)
    return svc.get_all_projects()


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(get_project_service),
):
    return svc.get_project(project_id)


@router.put("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: int,
    data: ProjectUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(get_project_service),
):
    return svc.update_project(project_id, principal, data)


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(get_project_service),
):
    svc.delete_project(project_id, principal)
    return {"message": "project deleted"}


@router.get("/{project_id}/members", response_model=List[ProjectMemberOut])
def get_members(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(get_project_service),
):
    return svc.get_members(project_id)


@router.post("/{project_id}/members", response_model=ProjectMemberOut)
def add_member(
    project_id: int,
    data: ProjectMemberCreate,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(get_project_service),
):
    return svc.add_member(project_id, data.user_id, data.role, principal)


@router.delete("/{project_id}/members/{user_id}")
def remove_member(
    project_id: int,
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(get_project_service),
):
    svc.remove_member(project_id, user_id)
    return {"message": "member removed"}
