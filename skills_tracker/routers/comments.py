import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skills_tracker.database import get_db
from skills_tracker.middleware.auth_middleware import get_current_principal
from skills_tracker.schemas.comment import CommentCreate, CommentOut, CommentUpdate
from skills_tracker.services.comment_service import CommentService
from skills_tracker.utils.permissions import Principal

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    return CommentService(db, logging.getLogger("skills_tracker.comments"))


@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    data: CommentCreate,
    principal: Principal = Depends(get_current_principal),
    svc: CommentService = Depends(get_comment_service),
):
    return svc.create_comment(principal, data.task_id, data.text)


@router.get("", response_model=List[CommentOut])
def list_comments(
    task_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: CommentService = Depends(get_comment_service),
):
    return svc.get_comments_by_task(task_id)


@router.get("/{comment_id}", response_model=CommentOut)
def get_comment(
    comment_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: CommentService = Depends(get_comment_service),
):
    return svc.get_comment(comment_id)


@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
    comment_id: int,
    data: CommentUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: CommentService = Depends(get_comment_service),
):
    return svc.update_comment(comment_id, principal, data.text)


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: int,
    principal: Principal = Depends(get_current_principal),
    svc: CommentService = Depends(get_comment_service),
):
    svc.delete_comment(comment_id, principal)
    return {"message": "comment deleted"}
