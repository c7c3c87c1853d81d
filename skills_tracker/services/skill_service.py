"""Skill service layer: skill catalogue CRUD and per-user skill levels."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from skills_tracker.errors import ConflictError, InvalidInputError, NotFoundError
from skills_tracker.models.skill import Skill, UserSkill
from skills_tracker.models.user import User
from skills_tracker.schemas.skill import SkillCreate, SkillUpdate

MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 5


def _validate_level(level: int):
    if level < MIN_SKILL_LEVEL or level > MAX_SKILL_LEVEL:
        raise InvalidInputError(f"skill level must be between {MIN_SKILL_LEVEL} and {MAX_SKILL_LEVEL}")


class SkillService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def _get(self, skill_id: int) -> Skill:
        skill = self.db.query(Skill).filter(Skill.id == skill_id).first()
        if not skill:
            raise NotFoundError("skill not found")
        return skill

    def _get_user_skill(self, user_id: int, skill_id: int) -> Optional[UserSkill]:
        return self.db.query(UserSkill).filter(
            UserSkill.user_id == user_id,
            UserSkill.skill_id == skill_id,
        ).first()

    def _skill_name(self, skill_id: int) -> str:
        try:
            skill = self.db.query(Skill).filter(Skill.id == skill_id).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.warning("[skill] name lookup failed skill_id=%s: %s", skill_id, exc)
            return ""
        return skill.name if skill else ""

    # catalogue

    def create_skill(self, data: SkillCreate) -> Skill:
        skill = Skill(name=data.name, description=data.description, category=data.category)
        self.db.add(skill)
        self.db.commit()
        self.db.refresh(skill)
        self.logger.info("[skill] created id=%s name=%s", skill.id, skill.name)
        return skill

    def get_skill(self, skill_id: int) -> Skill:
        return self._get(skill_id)

    def get_all_skills(self) -> List[Skill]:
        return self.db.query(Skill).order_by(Skill.id).all()

    def get_skills_by_category(self, category: str) -> List[Skill]:
        return self.db.query(Skill).filter(Skill.category == category).order_by(Skill.id).all()

    def update_skill(self, skill_id: int, data: SkillUpdate) -> Skill:
        skill = self._get(skill_id)
        if data.name:
            skill.name = data.name
        if data.description:
            skill.description = data.description
        if data.category:
            skill.category = data.category
        self.db.commit()
        self.db.refresh(skill)
        self.logger.info("[skill] updated id=%s", skill.id)
        return skill

    def delete_skill(self, skill_id: int):
        skill = self._get(skill_id)
        self.db.delete(skill)
        self.db.commit()
        self.logger.info("[skill] deleted id=%s", skill_id)

    # user skills

    def add_user_skill(self, user_id: int, skill_id: int, level: int) -> UserSkill:
        if self.db.query(User.id).filter(User.id == user_id).first() is None:
            raise NotFoundError("user not found")
        skill = self._get(skill_id)
        _validate_level(level)

        user_skill = self._get_user_skill(user_id, skill_id)
        if user_skill:
            user_skill.level = level
            action = "updated"
            self.db.commit()
        else:
            user_skill = UserSkill(user_id=user_id, skill_id=skill_id, level=level)
            self.db.add(user_skill)
            action = "added"
            try:
                self.db.commit()
            except IntegrityError:
                # Lost an insert race for the same pair; update the winner's row.
                self.db.rollback()
                user_skill = self._get_user_skill(user_id, skill_id)
                if user_skill is None:
                    raise ConflictError("user skill could not be saved")
                user_skill.level = level
                action = "updated"
                self.db.commit()
        self.db.refresh(user_skill)
        user_skill._skill_name = skill.name
        self.logger.info("[skill] user skill %s user_id=%s skill_id=%s level=%s", action, user_id, skill_id, level)
        return user_skill

    def get_user_skills(self, user_id: int) -> List[UserSkill]:
        user_skills = (
            self.db.query(UserSkill)
            .filter(UserSkill.user_id == user_id)
            .order_by(UserSkill.id)
            .all()
        )
        for us in user_skills:
            us._skill_name = self._skill_name(us.skill_id)
        return user_skills

    def update_user_skill(self, user_id: int, skill_id: int, level: int) -> UserSkill:
        _validate_level(level)
        user_skill = self._get_user_skill(user_id, skill_id)
        if not user_skill:
            raise NotFoundError("user skill not found")
        user_skill.level = level
        self.db.commit()
        self.db.refresh(user_skill)
        user_skill._skill_name = self._skill_name(skill_id)
        self.logger.info("[skill] user skill updated user_id=%s skill_id=%s level=%s", user_id, skill_id, level)
        return user_skill

    def remove_user_skill(self, user_id: int, skill_id: int):
        self.db.query(UserSkill).filter(
            UserSkill.user_id == user_id,
            UserSkill.skill_id == skill_id,
        ).delete(synchronize_session=False)
        self.db.commit()
        self.logger.info("[skill] user skill removed user_id=%s skill_id=%s", user_id, skill_id)
