"""Service layer package."""

from skills_tracker.services import (
    auth_service,
    user_service,
    project_service,
    task_service,
    skill_service,
    comment_service,
)
