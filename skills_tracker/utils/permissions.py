"""Role constants, the authenticated principal and shared permission predicates."""

from dataclasses import dataclass

from skills_tracker.models.project import Project


MANAGER = "manager"
EMPLOYEE = "employee"

ALL_ROLES = (MANAGER, EMPLOYEE)

PROJECT_MANAGER_ROLE = "project_manager"
DEVELOPER_ROLE = "developer"


@dataclass(frozen=True)
class Principal:
    """The acting user, derived once per request from the bearer token."""

    user_id: int
    username: str
    role: str

    @property
    def is_manager(self) -> bool:
        return self.role == MANAGER


def is_project_manager(project: Project, principal: Principal) -> bool:
    return project.manager_id == principal.user_id


def can_manage_project(project: Project, principal: Principal) -> bool:
    # Project owner or any platform manager.
    return is_project_manager(project, principal) or principal.is_manager


def is_author(author_id: int, principal: Principal) -> bool:
    return author_id == principal.user_id
