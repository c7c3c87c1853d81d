"""SQLAlchemy model package."""

from skills_tracker.models.user import User
from skills_tracker.models.project import Project, ProjectMember
from skills_tracker.models.task import Task, TaskSkill, TaskAssignee
from skills_tracker.models.skill import Skill, UserSkill
from skills_tracker.models.comment import Comment

__all__ = [
    "User",
    "Project", "ProjectMember",
    "Task", "TaskSkill", "TaskAssignee",
    "Skill", "UserSkill",
    "Comment",
]
