"""Seed the database with demo users, skills and a project."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timedelta
from skills_tracker.database import SessionLocal, engine, Base
import skills_tracker.models  # noqa: F401

from skills_tracker.models.user import User
from skills_tracker.models.project import Project, ProjectMember
from skills_tracker.models.skill import Skill, UserSkill
from skills_tracker.models.task import Task, TaskSkill, TaskAssignee
from skills_tracker.services.auth_service import hash_password

DEMO_PASSWORD = "password123"


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        password_hash = hash_password(DEMO_PASSWORD)
        users = [
            User(username="manager", password_hash=password_hash, role="manager", name="Maria Manager", email="manager@example.com"),
            User(username="alice", password_hash=password_hash, role="employee", name="Alice Backend", email="alice@example.com"),
            User(username="bob", password_hash=password_hash, role="employee", name="Bob Frontend", email="bob@example.com"),
        ]
        db.add_all(users)
        db.flush()

        skills = [
            Skill(name="Python", description="Backend services", category="technical"),
            Skill(name="SQL", description="Relational modelling", category="technical"),
            Skill(name="TypeScript", description="Web frontends", category="technical"),
            Skill(name="Communication", description="Stakeholder updates", category="soft"),
        ]
        db.add_all(skills)
        db.flush()

        db.add_all([
            UserSkill(user_id=users[1].id, skill_id=skills[0].id, level=4),
            UserSkill(user_id=users[1].id, skill_id=skills[1].id, level=3),
            UserSkill(user_id=users[2].id, skill_id=skills[2].id, level=5),
            UserSkill(user_id=users[2].id, skill_id=skills[3].id, level=2),
        ])

        project = Project(name="Skills Portal", description="Internal skills directory", manager_id=users[0].id, status="active")
        db.add(project)
        db.flush()
        db.add_all([
            ProjectMember(project_id=project.id, user_id=users[0].id, role="project_manager"),
            ProjectMember(project_id=project.id, user_id=users[1].id, role="developer"),
            ProjectMember(project_id=project.id, user_id=users[2].id, role="developer"),
        ])

        api_task = Task(
            project_id=project.id,
            title="Design REST API",
            description="Endpoints for skills and assignments",
            deadline=datetime.utcnow() + timedelta(days=14),
            hours=16,
            priority="high",
            type="feature",
        )
        db.add(api_task)
        db.flush()
        db.add_all([
            TaskSkill(task_id=api_task.id, skill_id=skills[0].id),
            TaskSkill(task_id=api_task.id, skill_id=skills[1].id),
            TaskAssignee(task_id=api_task.id, user_id=users[1].id),
        ])

        db.commit()
        print(f"Seed complete. Log in as 'manager', 'alice' or 'bob' with password '{DEMO_PASSWORD}'.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
