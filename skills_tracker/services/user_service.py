"""User service layer: registration, login and user management."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skills_tracker.errors import ConflictError, InvalidInputError, NotFoundError
from skills_tracker.models.project import Project
from skills_tracker.models.user import User
from skills_tracker.schemas.user import UserCreate, UserUpdate, UserSelfUpdate, LoginResponse
from skills_tracker.services.auth_service import authenticate, create_access_token, hash_password
from skills_tracker.utils.permissions import ALL_ROLES, EMPLOYEE


def _normalize_role(value: Optional[str]) -> str:
    role = (value or EMPLOYEE).strip().lower()
    if role not in ALL_ROLES:
        raise InvalidInputError(f"role must be one of: {', '.join(ALL_ROLES)}")
    return role


class UserService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def _get(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("user not found")
        return user

    def _ensure_username_free(self, username: str, exclude_id: Optional[int] = None):
        query = self.db.query(User).filter(User.username == username)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first() is not None:
            self.logger.warning("[user] username already exists: %s", username)
            raise ConflictError("user already exists")

    def _commit_unique(self, username: str):
        # A concurrent insert or rename can still hit the unique index.
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            self.logger.warning("[user] username already exists: %s", username)
            raise ConflictError("user already exists")

    def register(self, data: UserCreate) -> User:
        username = data.username.strip()
        if not username or not data.password:
            raise InvalidInputError("username and password are required")
        self._ensure_username_free(username)
        user = User(
            username=username,
            password_hash=hash_password(data.password),
            role=_normalize_role(data.role),
            name=data.name,
            email=data.email,
        )
        self.db.add(user)
        self._commit_unique(username)
        self.db.refresh(user)
        self.logger.info("[user] created id=%s username=%s", user.id, user.username)
        return user

    def login(self, username: str, password: str) -> LoginResponse:
        user = authenticate(self.db, username, password)
        token = create_access_token(user.id, user.username, user.role)
        self.logger.info("[user] login id=%s", user.id)
        return LoginResponse(token=token, role=user.role)

    def get_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def get_user(self, user_id: int) -> User:
        return self._get(user_id)

    def _apply_common(self, user: User, data):
        # Empty strings leave the stored value unchanged.
        if data.username:
            username = data.username.strip()
            if username and username != user.username:
                self._ensure_username_free(username, exclude_id=user.id)
                user.username = username
        if data.name:
            user.name = data.name
        if data.email:
            user.email = data.email
        if data.password:
            user.password_hash = hash_password(data.password)

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = self._get(user_id)
        self._apply_common(user, data)
        if data.role:
            user.role = _normalize_role(data.role)
        self._commit_unique(user.username)
        self.db.refresh(user)
        self.logger.info("[user] updated id=%s", user.id)
        return user

    def update_self(self, user_id: int, data: UserSelfUpdate) -> User:
        user = self._get(user_id)
        self._apply_common(user, data)
        self._commit_unique(user.username)
        self.db.refresh(user)
        self.logger.info("[user] self-updated id=%s", user.id)
        return user

    def delete_user(self, user_id: int):
        user = self._get(user_id)
        managed = self.db.query(Project).filter(Project.manager_id == user_id).count()
        if managed:
            raise ConflictError("user still manages projects")
        self.db.delete(user)
        self.db.commit()
        self.logger.info("[user] deleted id=%s", user_id)
