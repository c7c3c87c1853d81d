import pytest

from tests.conftest import auth_headers
from skills_tracker.models.skill import UserSkill
from skills_tracker.models.task import TaskSkill


def test_skill_crud(client, seed_users):
    headers = auth_headers(client, "alice")
    created = client.post(
        "/api/v1/skills",
        json={"name": "Go", "description": "Systems", "category": "technical"},
        headers=headers,
    )
    assert created.status_code == 201
    skill_id = created.json()["id"]

    fetched = client.get(f"/api/v1/skills/{skill_id}", headers=headers).json()
    assert fetched["name"] == "Go"
    assert fetched["category"] == "technical"

    updated = client.put(f"/api/v1/skills/{skill_id}", json={"name": "Golang", "description": ""}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["name"] == "Golang"
    assert updated.json()["description"] == "Systems"

    assert client.delete(f"/api/v1/skills/{skill_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/skills/{skill_id}", headers=headers).status_code == 404
    assert client.put(f"/api/v1/skills/{skill_id}", json={"name": "x"}, headers=headers).status_code == 404
    assert client.delete(f"/api/v1/skills/{skill_id}", headers=headers).status_code == 404


def test_skills_require_authentication(client):
    assert client.get("/api/v1/skills").status_code == 401


def test_list_skills_by_category(client, seed_users, seed_skills):
    headers = auth_headers(client, "bob")
    all_names = [s["name"] for s in client.get("/api/v1/skills", headers=headers).json()]
    assert all_names == ["Python", "SQL", "Communication"]

    technical = client.get("/api/v1/skills?category=technical", headers=headers).json()
    assert [s["name"] for s in technical] == ["Python", "SQL"]
    assert client.get("/api/v1/skills?category=none", headers=headers).json() == []


def test_add_user_skill_upserts(client, db, seed_users, seed_skills):
    headers = auth_headers(client, "alice")
    alice_id = seed_users["alice"].id
    skill_id = seed_skills["python"].id

    first = client.post(f"/api/v1/users/{alice_id}/skills", json={"skill_id": skill_id, "level": 4}, headers=headers)
    assert first.status_code == 200
    assert first.json()["skill_name"] == "Python"
    assert first.json()["level"] == 4

    again = client.post(f"/api/v1/users/{alice_id}/skills", json={"skill_id": skill_id, "level": 2}, headers=headers)
    assert again.json()["id"] == first.json()["id"]
    assert again.json()["level"] == 2

    rows = db.query(UserSkill).filter(UserSkill.user_id == alice_id).all()
    assert len(rows) == 1
    assert rows[0].level == 2


@pytest.mark.parametrize("level,expected", [(0, 400), (1, 200), (5, 200), (6, 400)])
def test_user_skill_level_bounds(client, seed_users, seed_skills, level, expected):
    resp = client.post(
        f"/api/v1/users/{seed_users['bob'].id}/skills",
        json={"skill_id": seed_skills["sql"].id, "level": level},
        headers=auth_headers(client, "bob"),
    )
    assert resp.status_code == expected


def test_add_user_skill_unknown_user_or_skill(client, seed_users, seed_skills):
    headers = auth_headers(client, "manager")
    assert client.post(
        "/api/v1/users/9999/skills", json={"skill_id": seed_skills["sql"].id, "level": 3}, headers=headers
    ).status_code == 404
    assert client.post(
        f"/api/v1/users/{seed_users['bob'].id}/skills", json={"skill_id": 9999, "level": 3}, headers=headers
    ).status_code == 404


def test_update_and_remove_user_skill(client, seed_users, seed_skills, alice_knows_python_and_sql):
    headers = auth_headers(client, "alice")
    alice_id = seed_users["alice"].id
    sql_id = seed_skills["sql"].id

    listed = client.get(f"/api/v1/users/{alice_id}/skills", headers=headers).json()
    assert [s["skill_name"] for s in listed] == ["Python", "SQL"]

    updated = client.put(f"/api/v1/users/{alice_id}/skills/{sql_id}", json={"level": 5}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["level"] == 5
    assert updated.json()["skill_name"] == "SQL"

    assert client.put(f"/api/v1/users/{alice_id}/skills/{sql_id}", json={"level": 9}, headers=headers).status_code == 400
    missing = client.put(
        f"/api/v1/users/{alice_id}/skills/{seed_skills['talk'].id}", json={"level": 2}, headers=headers
    )
    assert missing.status_code == 404
    assert missing.json()["detail"] == "user skill not found"

    assert client.delete(f"/api/v1/users/{alice_id}/skills/{sql_id}", headers=headers).status_code == 200
    # Removing an absent pairing is not an error.
    assert client.delete(f"/api/v1/users/{alice_id}/skills/{sql_id}", headers=headers).status_code == 200
    remaining = client.get(f"/api/v1/users/{alice_id}/skills", headers=headers).json()
    assert [s["skill_name"] for s in remaining] == ["Python"]


def test_delete_skill_detaches_users_and_tasks(client, db, seed_users, seed_skills, alice_knows_python_and_sql):
    headers = auth_headers(client, "manager")
    project = client.post("/api/v1/projects", json={"name": "P"}, headers=headers).json()
    client.post(
        "/api/v1/tasks",
        json={
            "project_id": project["id"],
            "title": "T",
            "deadline": "2030-01-01T00:00:00Z",
            "skill_ids": [seed_skills["python"].id],
        },
        headers=headers,
    )

    assert client.delete(f"/api/v1/skills/{seed_skills['python'].id}", headers=headers).status_code == 200
    assert db.query(UserSkill).filter(UserSkill.skill_id == seed_skills["python"].id).count() == 0
    assert db.query(TaskSkill).filter(TaskSkill.skill_id == seed_skills["python"].id).count() == 0
