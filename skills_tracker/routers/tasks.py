import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from skills_tracker.database import get_db
from skills_tracker.middleware.auth_middleware import get_current_principal
from skills_tracker.schemas.task import TaskCreate, TaskOut, TaskUpdate
from skills_tracker.services.task_service import TaskService
from skills_tracker.utils.permissions import Principal

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db, logging.getLogger("skills_tracker.tasks"))


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreate,
    principal: Principal = Depends(get_current_principal),
    svc: TaskService = Depends(get_task_service),
):
    return svc.create_task(principal, data)


@router.get("", response_model=List[TaskOut])
def list_tasks(
    project_id: Optional[int] = None,
    user_id: Optional[int] = None,
    principal: Principal = Depends(get_current_principal),
    svc: TaskService = Depends(get_task_service),
):
    if project_id is not None:
        return svc.get_tasks_by_project(project_id)
    if user_id is not None:
        return svc.get_tasks_by_user(user_id)
    raise HTTPException(status_code=400, detail="project_id or user_id required")


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: TaskService = Depends(get_task_service),
):
    return svc.get_task(task_id)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    data: TaskUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: TaskService = Depends(get_task_service),
):
    return svc.update_task(task_id, principal, data)


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: TaskService = Depends(get_task_service),
):
    svc.delete_task(task_id, principal)
    return {"message": "task deleted"}
