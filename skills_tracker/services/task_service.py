"""Task service layer: authorization, parent-task gating and skill-based assignment.

Creating or updating a task is a sequence of independent store writes, not a
single transaction. The task row is committed first, then each required skill
and each assignee is attached on its own. Ids that do not resolve, assignees
that do not cover every required skill, and attach writes that fail are
skipped with a warning; the returned task lists only what was attached.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skills_tracker.errors import ForbiddenError, InvalidInputError, NotFoundError, PreconditionFailedError
from skills_tracker.models.project import Project
from skills_tracker.models.skill import Skill, UserSkill
from skills_tracker.models.task import Task, TaskAssignee, TaskSkill
from skills_tracker.models.user import User
from skills_tracker.schemas.task import TaskCreate, TaskUpdate
from skills_tracker.services.project_service import unique_ids
from skills_tracker.utils.permissions import Principal, can_manage_project

STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

ALLOWED_TASK_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_CANCELLED)
ALLOWED_TASK_PRIORITIES = ("low", "medium", "high", "urgent")
ALLOWED_TASK_TYPES = ("feature", "bug", "task", "epic")

DEFAULT_PRIORITY = "medium"
DEFAULT_TYPE = "task"


RFC3339_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))$"
)


def parse_deadline(value: Optional[str]) -> datetime:
    """Parse an RFC3339 timestamp and return it as naive UTC.

    Seconds and an explicit offset are mandatory. Fractional seconds beyond
    microseconds are truncated.
    """
    match = RFC3339_PATTERN.match((value or "").strip())
    if not match:
        raise InvalidInputError("invalid deadline format")
    year, month, day, hour, minute, second, fraction, zulu, sign, off_h, off_m = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    try:
        if zulu:
            tz = timezone.utc
        else:
            offset = timedelta(hours=int(off_h), minutes=int(off_m))
            tz = timezone(-offset if sign == "-" else offset)
        parsed = datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond, tzinfo=tz
        )
    except ValueError:
        raise InvalidInputError("invalid deadline format")
    return parsed.astimezone(timezone.utc).replace(tzinfo=None)


def _choice(value: Optional[str], allowed, default: str, field: str) -> str:
    if not value:
        return default
    if value not in allowed:
        raise InvalidInputError(f"invalid {field}: must be one of {', '.join(allowed)}")
    return value


def covers_required_skills(user_skill_ids: Set[int], required_skill_ids: Set[int]) -> bool:
    # Vacuously true when the task requires nothing.
    return required_skill_ids.issubset(user_skill_ids)


class TaskService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    # lookups

    def _get(self, task_id: int) -> Task:
        task = self.db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise NotFoundError("task not found")
        return task

    def _get_project(self, project_id: int) -> Project:
        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise NotFoundError("project not found")
        return project

    def _ensure_can_manage(self, project: Project, requester: Principal):
        if not can_manage_project(project, requester):
            self.logger.warning(
                "[task] denied project_id=%s user_id=%s role=%s",
                project.id, requester.user_id, requester.role,
            )
            raise ForbiddenError("only managers or the project manager can modify tasks")

    def _ensure_parent_completed(self, parent_task_id: int):
        parent = self.db.query(Task).filter(Task.id == parent_task_id).first()
        if not parent:
            raise NotFoundError("parent task not found")
        if parent.status != STATUS_COMPLETED:
            raise PreconditionFailedError("parent task must be completed")

    def _skill_ids(self, task_id: int) -> List[int]:
        try:
            rows = (
                self.db.query(TaskSkill.skill_id)
                .filter(TaskSkill.task_id == task_id)
                .order_by(TaskSkill.id)
                .all()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.warning("[task] skill lookup failed task_id=%s: %s", task_id, exc)
            return []
        return [row[0] for row in rows]

    def _assignee_ids(self, task_id: int) -> List[int]:
        try:
            rows = (
                self.db.query(TaskAssignee.user_id)
                .filter(TaskAssignee.task_id == task_id)
                .order_by(TaskAssignee.id)
                .all()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.warning("[task] assignee lookup failed task_id=%s: %s", task_id, exc)
            return []
        return [row[0] for row in rows]

    def _user_skill_ids(self, user_id: int) -> Set[int]:
        rows = self.db.query(UserSkill.skill_id).filter(UserSkill.user_id == user_id).all()
        return {row[0] for row in rows}

    def _enrich(self, task: Task) -> Task:
        task._skill_ids = self._skill_ids(task.id)
        task._assignee_ids = self._assignee_ids(task.id)
        return task

    # best-effort attachment

    def _commit_link(self, link, what: str) -> bool:
        try:
            self.db.add(link)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.warning("[task] failed to attach %s: %s", what, exc)
            return False
        return True

    def _attach_skills(self, task_id: int, skill_ids) -> List[int]:
        attached = []
        for skill_id in unique_ids(skill_ids):
            if self.db.query(Skill.id).filter(Skill.id == skill_id).first() is None:
                self.logger.warning("[task] skill not found, skipping task_id=%s skill_id=%s", task_id, skill_id)
                continue
            if self._commit_link(TaskSkill(task_id=task_id, skill_id=skill_id), f"skill {skill_id}"):
                attached.append(skill_id)
        return attached

    def _attach_assignees(self, task_id: int, assignee_ids, required_skill_ids: Set[int]) -> List[int]:
        attached = []
        for user_id in unique_ids(assignee_ids):
            if self.db.query(User.id).filter(User.id == user_id).first() is None:
                self.logger.warning("[task] user not found, skipping task_id=%s user_id=%s", task_id, user_id)
                continue
            if required_skill_ids and not covers_required_skills(self._user_skill_ids(user_id), required_skill_ids):
                self.logger.warning(
                    "[task] user lacks required skills, skipping task_id=%s user_id=%s", task_id, user_id
                )
                continue
            if self._commit_link(TaskAssignee(task_id=task_id, user_id=user_id), f"assignee {user_id}"):
                attached.append(user_id)
        return attached

    # workflow

    def create_task(self, requester: Principal, data: TaskCreate) -> Task:
        project = self._get_project(data.project_id)
        self._ensure_can_manage(project, requester)

        if data.parent_task_id:
            self._ensure_parent_completed(data.parent_task_id)

        deadline = parse_deadline(data.deadline)
        priority = _choice(data.priority, ALLOWED_TASK_PRIORITIES, DEFAULT_PRIORITY, "priority")
        task_type = _choice(data.type, ALLOWED_TASK_TYPES, DEFAULT_TYPE, "type")
        if data.hours < 0:
            raise InvalidInputError("hours must not be negative")

        task = Task(
            project_id=project.id,
            title=data.title,
            description=data.description,
            deadline=deadline,
            status=STATUS_PENDING,
            progress=0,
            hours=data.hours,
            priority=priority,
            type=task_type,
            parent_task_id=data.parent_task_id or None,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)

        skill_ids = self._attach_skills(task.id, data.skill_ids)
        assignee_ids = self._attach_assignees(task.id, data.assignee_ids, set(skill_ids))

        task._skill_ids = skill_ids
        task._assignee_ids = assignee_ids
        self.logger.info(
            "[task] created id=%s project_id=%s skills=%s assignees=%s",
            task.id, task.project_id, skill_ids, assignee_ids,
        )
        return task

    def get_task(self, task_id: int) -> Task:
        return self._enrich(self._get(task_id))

    def get_tasks_by_project(self, project_id: int) -> List[Task]:
        tasks = self.db.query(Task).filter(Task.project_id == project_id).order_by(Task.id).all()
        return [self._enrich(t) for t in tasks]

    def get_tasks_by_user(self, user_id: int) -> List[Task]:
        tasks = (
            self.db.query(Task)
            .join(TaskAssignee, TaskAssignee.task_id == Task.id)
            .filter(TaskAssignee.user_id == user_id)
            .order_by(Task.id)
            .all()
        )
        return [self._enrich(t) for t in tasks]

    def update_task(self, task_id: int, requester: Principal, data: TaskUpdate) -> Task:
        task = self._get(task_id)
        self._ensure_can_manage(self._get_project(task.project_id), requester)

        # Validate every provided field before touching the row.
        updates = {}
        if data.title:
            updates["title"] = data.title
        if data.description:
            updates["description"] = data.description
        if data.deadline:
            updates["deadline"] = parse_deadline(data.deadline)
        if data.status:
            updates["status"] = _choice(data.status, ALLOWED_TASK_STATUSES, task.status, "status")
        if data.progress is not None:
            if data.progress < 0 or data.progress > 100:
                raise InvalidInputError("progress must be between 0 and 100")
            updates["progress"] = data.progress
        if data.hours is not None and data.hours > 0:
            updates["hours"] = data.hours
        if data.priority:
            updates["priority"] = _choice(data.priority, ALLOWED_TASK_PRIORITIES, task.priority, "priority")
        if data.type:
            updates["type"] = _choice(data.type, ALLOWED_TASK_TYPES, task.type, "type")
        if "parent_task_id" in data.model_fields_set:
            if data.parent_task_id == task.id:
                raise InvalidInputError("task cannot be its own parent")
            if data.parent_task_id:
                self._ensure_parent_completed(data.parent_task_id)
            updates["parent_task_id"] = data.parent_task_id or None

        for k, v in updates.items():
            setattr(task, k, v)
        self.db.commit()
        self.db.refresh(task)

        if data.skill_ids is not None:
            self.db.query(TaskSkill).filter(TaskSkill.task_id == task.id).delete(synchronize_session=False)
            self.db.commit()
            self._attach_skills(task.id, data.skill_ids)

        if data.assignee_ids is not None:
            required = set(self._skill_ids(task.id))
            self.db.query(TaskAssignee).filter(TaskAssignee.task_id == task.id).delete(synchronize_session=False)
            self.db.commit()
            self._attach_assignees(task.id, data.assignee_ids, required)

        self.logger.info("[task] updated id=%s", task.id)
        return self._enrich(task)

    def delete_task(self, task_id: int, requester: Principal):
        task = self._get(task_id)
        self._ensure_can_manage(self._get_project(task.project_id), requester)

        dependents = self.db.query(Task.id).filter(Task.parent_task_id == task_id).count()
        if dependents:
            raise PreconditionFailedError("cannot delete task with dependent tasks")

        self.db.delete(task)
        self.db.commit()
        self.logger.info("[task] deleted id=%s", task_id)
