"""Project service layer: ownership rules and membership management.

Membership attachment during create/update is best-effort: an id that does not
resolve to a user, or whose insert fails, is skipped and logged, and the
caller still receives the project with the members that were attached.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from skills_tracker.errors import ConflictError, ForbiddenError, NotFoundError
from skills_tracker.models.project import Project, ProjectMember
from skills_tracker.models.user import User
from skills_tracker.schemas.project import ProjectCreate, ProjectUpdate
from skills_tracker.utils.permissions import (
    DEVELOPER_ROLE,
    PROJECT_MANAGER_ROLE,
    Principal,
    can_manage_project,
)

DEFAULT_PROJECT_STATUS = "active"


def unique_ids(ids: Optional[Iterable[int]]) -> List[int]:
    seen = set()
    result = []
    for value in ids or []:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


class ProjectService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def _get(self, project_id: int) -> Project:
        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise NotFoundError("project not found")
        return project

    def _ensure_can_manage(self, project: Project, requester: Principal, action: str):
        if not can_manage_project(project, requester):
            self.logger.warning(
                "[project] %s denied project_id=%s user_id=%s", action, project.id, requester.user_id
            )
            raise ForbiddenError(f"only project manager can {action} project")

    def _user_exists(self, user_id: int) -> bool:
        return self.db.query(User.id).filter(User.id == user_id).first() is not None

    def _member_ids(self, project_id: int) -> List[int]:
        try:
            rows = (
                self.db.query(ProjectMember.user_id)
                .filter(ProjectMember.project_id == project_id)
                .order_by(ProjectMember.id)
                .all()
            )
        except SQLAlchemyError as exc:
            self.logger.warning("[project] member lookup failed project_id=%s: %s", project_id, exc)
            self.db.rollback()
            return []
        return [row[0] for row in rows]

    def _with_members(self, project: Project) -> Project:
        project._member_ids = self._member_ids(project.id)
        return project

    def _attach_member(self, project_id: int, user_id: int, role: str) -> bool:
        try:
            self.db.add(ProjectMember(project_id=project_id, user_id=user_id, role=role))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.warning(
                "[project] failed to add member project_id=%s user_id=%s: %s", project_id, user_id, exc
            )
            return False
        return True

    def _attach_developers(self, project: Project, member_ids: Iterable[int]) -> List[int]:
        attached = []
        for member_id in unique_ids(member_ids):
            if member_id == project.manager_id:
                continue
            if not self._user_exists(member_id):
                self.logger.warning("[project] user not found, skipping user_id=%s", member_id)
                continue
            if self._attach_member(project.id, member_id, DEVELOPER_ROLE):
                attached.append(member_id)
        return attached

    def create_project(self, requester: Principal, data: ProjectCreate) -> Project:
        if not requester.is_manager:
            raise ForbiddenError("only managers can create projects")
        if not self._user_exists(requester.user_id):
            raise NotFoundError("user not found")

        project = Project(
            name=data.name,
            description=data.description,
            manager_id=requester.user_id,
            status=data.status or DEFAULT_PROJECT_STATUS,
        )
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)

        developers = self._attach_developers(project, data.member_ids)
        # The requester never goes through the developer loop, so this is
        # the only membership row written for the manager.
        self._attach_member(project.id, requester.user_id, PROJECT_MANAGER_ROLE)

        project._member_ids = [requester.user_id] + developers
        self.logger.info("[project] created id=%s manager_id=%s", project.id, project.manager_id)
        return project

    def get_project(self, project_id: int) -> Project:
        return self._with_members(self._get(project_id))

    def get_projects_by_manager(self, manager_id: int) -> List[Project]:
        projects = (
            self.db.query(Project)
            .filter(Project.manager_id == manager_id)
            .order_by(Project.id)
            .all()
        )
        return [self._with_members(p) for p in projects]

    def get_all_projects(self) -> List[Project]:
        projects = self.db.query(Project).order_by(Project.id).all()
        return [self._with_members(p) for p in projects]

    def update_project(self, project_id: int, requester: Principal, data: ProjectUpdate) -> Project:
        project = self._get(project_id)
        self._ensure_can_manage(project, requester, "update")

        if data.name:
            project.name = data.name
        if data.description:
            project.description = data.description
        if data.status:
            project.status = data.status
        self.db.commit()
        self.db.refresh(project)

        if data.member_ids is not None:
            self._replace_members(project, data.member_ids)

        self.logger.info("[project] updated id=%s", project.id)
        return self._with_members(project)

    def _replace_members(self, project: Project, member_ids: List[int]):
        existing = self.db.query(ProjectMember).filter(ProjectMember.project_id == project.id).all()
        manager_present = False
        for member in existing:
            if member.user_id == project.manager_id:
                manager_present = True
                continue
            self.db.delete(member)
        self.db.commit()
        if not manager_present:
            self._attach_member(project.id, project.manager_id, PROJECT_MANAGER_ROLE)
        self._attach_developers(project, member_ids)

    def delete_project(self, project_id: int, requester: Principal):
        project = self._get(project_id)
        self._ensure_can_manage(project, requester, "delete")
        self.db.delete(project)
        self.db.commit()
        self.logger.info("[project] deleted id=%s", project_id)

    def get_members(self, project_id: int) -> List[ProjectMember]:
        self._get(project_id)
        return (
            self.db.query(ProjectMember)
            .filter(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.id)
            .all()
        )

    def _find_member(self, project_id: int, user_id: int) -> Optional[ProjectMember]:
        return self.db.query(ProjectMember).filter(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        ).first()

    def add_member(self, project_id: int, user_id: int, role: Optional[str], requester: Principal) -> ProjectMember:
        project = self._get(project_id)
        if not can_manage_project(project, requester):
            raise ForbiddenError("only project manager can add members")

        if self._find_member(project_id, user_id) is not None:
            raise ConflictError("user is already a project member")
        if not self._user_exists(user_id):
            raise NotFoundError("user not found")

        member = ProjectMember(project_id=project_id, user_id=user_id, role=role or DEVELOPER_ROLE)
        self.db.add(member)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("user is already a project member")
        self.db.refresh(member)
        self.logger.info("[project] member added project_id=%s user_id=%s role=%s", project_id, user_id, member.role)
        return member

    def remove_member(self, project_id: int, user_id: int):
        project = self._get(project_id)
        if project.manager_id == user_id:
            raise ForbiddenError("cannot remove project manager")
        self.db.query(ProjectMember).filter(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        ).delete(synchronize_session=False)
        self.db.commit()
        self.logger.info("[project] member removed project_id=%s user_id=%s", project_id, user_id)
