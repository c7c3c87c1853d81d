"""Task domain SQLAlchemy models, including required skills and assignees."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from skills_tracker.database import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, default="")
    deadline = Column(DateTime)
    status = Column(String(20), default="pending")      # pending/in_progress/completed/cancelled
    progress = Column(Integer, default=0)
    hours = Column(Integer, default=0)
    priority = Column(String(10), default="medium")     # low/medium/high/urgent
    type = Column(String(10), default="task")           # feature/bug/task/epic
    parent_task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="tasks")
    skills = relationship("TaskSkill", back_populates="task", cascade="all, delete-orphan")
    assignees = relationship("TaskAssignee", back_populates="task", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="task", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_task_project", "project_id"),
        Index("idx_task_parent", "parent_task_id"),
    )

    @property
    def skill_ids(self):
        return list(getattr(self, "_skill_ids", []))

    @property
    def assignee_ids(self):
        return list(getattr(self, "_assignee_ids", []))


class TaskSkill(Base):
    __tablename__ = "task_skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    task = relationship("Task", back_populates="skills")
    skill = relationship("Skill", back_populates="task_links")

    __table_args__ = (
        UniqueConstraint("task_id", "skill_id", name="uq_task_skill"),
    )


class TaskAssignee(Base):
    __tablename__ = "task_assignees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    task = relationship("Task", back_populates="assignees")
    user = relationship("User", back_populates="task_assignments")

    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="uq_task_assignee"),
        Index("idx_task_assignee_user", "user_id"),
    )
