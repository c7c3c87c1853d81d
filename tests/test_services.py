"""Service-level tests for best-effort attachment and logged skips."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from tests.conftest import principal_for
from skills_tracker.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from skills_tracker.models.project import ProjectMember
from skills_tracker.models.skill import UserSkill
from skills_tracker.models.task import Task, TaskAssignee
from skills_tracker.models.user import User
from skills_tracker.schemas.project import ProjectCreate
from skills_tracker.schemas.user import UserCreate
from skills_tracker.schemas.task import TaskCreate, TaskUpdate
from skills_tracker.services.project_service import ProjectService, unique_ids
from skills_tracker.services.skill_service import SkillService
from skills_tracker.services.task_service import TaskService, covers_required_skills, parse_deadline
from skills_tracker.services.user_service import UserService
from skills_tracker.utils.permissions import Principal


def _fail_on(db, monkeypatch, model):
    real_add = db.add

    def add(instance, *args, **kwargs):
        if isinstance(instance, model):
            raise OperationalError("INSERT", {}, Exception("boom"))
        return real_add(instance, *args, **kwargs)

    monkeypatch.setattr(db, "add", add)


@pytest.fixture
def project(db, seed_users, logger):
    svc = ProjectService(db, logger)
    return svc.create_project(principal_for(seed_users["manager"]), ProjectCreate(name="Core"))


def test_unique_ids_keeps_first_occurrence():
    assert unique_ids([3, 1, 3, 2, 1]) == [3, 1, 2]
    assert unique_ids(None) == []


def test_covers_required_skills():
    assert covers_required_skills({1, 2, 3}, {1, 2})
    assert not covers_required_skills({1}, {1, 2})
    assert covers_required_skills(set(), set())


def test_parse_deadline_normalizes_to_utc():
    assert parse_deadline("2030-01-01T05:00:00+05:00").isoformat() == "2030-01-01T00:00:00"
    assert parse_deadline("2030-01-01T00:00:00Z").tzinfo is None


def test_parse_deadline_fractional_seconds():
    assert parse_deadline("2030-06-01T12:30:00.5Z").microsecond == 500000
    assert parse_deadline("2030-06-01T12:30:00.123456789-01:00").isoformat() == "2030-06-01T13:30:00.123456"


@pytest.mark.parametrize(
    "value",
    ["2030-06-01T14Z", "2030-06-01T14:30Z", "2030-06-01 14:30:00Z", "2030-13-01T00:00:00Z", "2030-06-01T00:00:00+25:00", None],
)
def test_parse_deadline_rejects_non_rfc3339(value):
    with pytest.raises(InvalidInputError):
        parse_deadline(value)


def test_create_project_requires_manager(db, seed_users, logger):
    svc = ProjectService(db, logger)
    with pytest.raises(ForbiddenError):
        svc.create_project(principal_for(seed_users["alice"]), ProjectCreate(name="Nope"))


def test_create_project_requires_existing_requester(db, seed_users, logger):
    ghost = Principal(user_id=9999, username="ghost", role="manager")
    with pytest.raises(NotFoundError):
        ProjectService(db, logger).create_project(ghost, ProjectCreate(name="Ghost"))


def test_member_skip_is_logged(db, seed_users, logger, caplog):
    svc = ProjectService(db, logger)
    with caplog.at_level(logging.WARNING, logger=logger.name):
        project = svc.create_project(
            principal_for(seed_users["manager"]),
            ProjectCreate(name="Core", member_ids=[seed_users["alice"].id, 4242]),
        )
    assert project.member_ids == [seed_users["manager"].id, seed_users["alice"].id]
    assert "4242" in caplog.text


def test_failed_member_insert_does_not_abort_project(db, seed_users, logger, monkeypatch):
    _fail_on(db, monkeypatch, ProjectMember)
    svc = ProjectService(db, logger)
    project = svc.create_project(
        principal_for(seed_users["manager"]),
        ProjectCreate(name="Core", member_ids=[seed_users["alice"].id]),
    )
    assert project.id is not None
    assert project.member_ids == [seed_users["manager"].id]


def test_failed_assignee_insert_keeps_task_and_skills(
    db, seed_users, seed_skills, alice_knows_python_and_sql, project, logger, monkeypatch, caplog
):
    # bob covers the python requirement, so only the injected write failure drops him.
    _fail_on(db, monkeypatch, TaskAssignee)
    svc = TaskService(db, logger)
    with caplog.at_level(logging.WARNING, logger=logger.name):
        task = svc.create_task(
            principal_for(seed_users["manager"]),
            TaskCreate(
                project_id=project.id,
                title="Partial",
                deadline="2030-01-01T00:00:00Z",
                skill_ids=[seed_skills["python"].id],
                assignee_ids=[seed_users["bob"].id],
            ),
        )
    assert task.skill_ids == [seed_skills["python"].id]
    assert task.assignee_ids == []
    assert db.query(Task).filter(Task.id == task.id).count() == 1
    assert "failed to attach assignee" in caplog.text
    assert "lacks required skills" not in caplog.text


def test_ineligible_assignee_is_logged(db, seed_users, seed_skills, project, logger, caplog):
    svc = TaskService(db, logger)
    with caplog.at_level(logging.WARNING, logger=logger.name):
        task = svc.create_task(
            principal_for(seed_users["manager"]),
            TaskCreate(
                project_id=project.id,
                title="Gated",
                deadline="2030-01-01T00:00:00Z",
                skill_ids=[seed_skills["sql"].id],
                assignee_ids=[seed_users["bob"].id],
            ),
        )
    assert task.assignee_ids == []
    assert "lacks required skills" in caplog.text


def test_two_task_parent_cycle_is_not_detected(db, seed_users, project, logger):
    # Only the immediate parent is checked, so a mutual pairing can be built.
    manager = principal_for(seed_users["manager"])
    svc = TaskService(db, logger)
    a = svc.create_task(manager, TaskCreate(project_id=project.id, title="A", deadline="2030-01-01T00:00:00Z"))
    b = svc.create_task(manager, TaskCreate(project_id=project.id, title="B", deadline="2030-01-01T00:00:00Z"))
    svc.update_task(a.id, manager, TaskUpdate(status="completed"))
    svc.update_task(b.id, manager, TaskUpdate(status="completed", parent_task_id=a.id))
    updated = svc.update_task(a.id, manager, TaskUpdate(parent_task_id=b.id))
    assert updated.parent_task_id == b.id
    assert svc.get_task(b.id).parent_task_id == a.id


def test_username_race_is_a_conflict(db, seed_users, logger, monkeypatch):
    svc = UserService(db, logger)
    # Simulate a concurrent registration that slipped past the lookup.
    monkeypatch.setattr(svc, "_ensure_username_free", lambda *args, **kwargs: None)
    with pytest.raises(ConflictError):
        svc.register(UserCreate(username="alice", password="pw"))
    assert db.query(User).filter(User.username == "alice").count() == 1


def test_member_insert_race_is_a_conflict(db, seed_users, project, logger, monkeypatch):
    svc = ProjectService(db, logger)
    manager = principal_for(seed_users["manager"])
    svc.add_member(project.id, seed_users["bob"].id, None, manager)
    monkeypatch.setattr(svc, "_find_member", lambda *args: None)
    with pytest.raises(ConflictError):
        svc.add_member(project.id, seed_users["bob"].id, None, manager)
    assert db.query(ProjectMember).filter(ProjectMember.user_id == seed_users["bob"].id).count() == 1


def test_user_skill_insert_race_falls_back_to_update(db, seed_users, seed_skills, logger, monkeypatch):
    svc = SkillService(db, logger)
    alice_id = seed_users["alice"].id
    python_id = seed_skills["python"].id
    svc.add_user_skill(alice_id, python_id, 2)

    real_lookup = svc._get_user_skill
    calls = []

    def stale_first_lookup(user_id, skill_id):
        calls.append((user_id, skill_id))
        if len(calls) == 1:
            return None
        return real_lookup(user_id, skill_id)

    monkeypatch.setattr(svc, "_get_user_skill", stale_first_lookup)
    user_skill = svc.add_user_skill(alice_id, python_id, 4)

    assert user_skill.level == 4
    assert user_skill.skill_name == "Python"
    rows = db.query(UserSkill).filter(UserSkill.user_id == alice_id).all()
    assert len(rows) == 1
    assert rows[0].level == 4
