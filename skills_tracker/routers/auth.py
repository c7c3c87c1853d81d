"""Auth API router: registration and login."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skills_tracker.database import get_db
from skills_tracker.schemas.user import LoginRequest, LoginResponse, UserCreate, UserOut
from skills_tracker.services.user_service import UserService

router = APIRouter(prefix="/api/v1", tags=["auth"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db, logging.getLogger("skills_tracker.users"))


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, svc: UserService = Depends(get_user_service)):
    return svc.login(request.username, request.password)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(data: UserCreate, svc: UserService = Depends(get_user_service)):
    return svc.register(data)
