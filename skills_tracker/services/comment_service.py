"""Comment service layer. Only the author may edit or delete a comment."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from skills_tracker.errors import ForbiddenError, NotFoundError
from skills_tracker.models.comment import Comment
from skills_tracker.models.task import Task
from skills_tracker.utils.permissions import Principal, is_author


class CommentService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def _get(self, comment_id: int) -> Comment:
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise NotFoundError("comment not found")
        return comment

    def _get_owned(self, comment_id: int, requester: Principal) -> Comment:
        comment = self._get(comment_id)
        if not is_author(comment.user_id, requester):
            self.logger.warning("[comment] denied id=%s user_id=%s", comment_id, requester.user_id)
            raise ForbiddenError("only the author can modify this comment")
        return comment

    def create_comment(self, requester: Principal, task_id: int, text: str) -> Comment:
        if self.db.query(Task.id).filter(Task.id == task_id).first() is None:
            raise NotFoundError("task not found")
        comment = Comment(task_id=task_id, user_id=requester.user_id, text=text)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        self.logger.info("[comment] created id=%s task_id=%s", comment.id, task_id)
        return comment

    def get_comment(self, comment_id: int) -> Comment:
        return self._get(comment_id)

    def get_comments_by_task(self, task_id: int) -> List[Comment]:
        return (
            self.db.query(Comment)
            .filter(Comment.task_id == task_id)
            .order_by(Comment.created_at, Comment.id)
            .all()
        )

    def update_comment(self, comment_id: int, requester: Principal, text: str) -> Comment:
        comment = self._get_owned(comment_id, requester)
        comment.text = text
        self.db.commit()
        self.db.refresh(comment)
        self.logger.info("[comment] updated id=%s", comment_id)
        return comment

    def delete_comment(self, comment_id: int, requester: Principal):
        comment = self._get_owned(comment_id, requester)
        self.db.delete(comment)
        self.db.commit()
        self.logger.info("[comment] deleted id=%s", comment_id)
