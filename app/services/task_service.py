"""
Task service (tenant-scoped). A task given to several assignees is stored as
one row per assignee so each can track their own progress.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ForbiddenError, TaskNotFound, UserNotFound, ValidationFailed
from app.models.task import Task, TaskStatus
from app.models.user import User

logger = logging.getLogger(__name__)


def _with_people(query):
    return query.options(joinedload(Task.assignee), joinedload(Task.creator))


def create_tasks(
    db: Session,
    creator: User,
    *,
    title: str,
    description: str,
    assignee_ids: Sequence[int],
    due_date: Optional[datetime] = None,
    status: Optional[TaskStatus] = None,
) -> List[Task]:
    """
    Create one task per assignee in a single transaction.

    Raises:
        ValidationFailed: no assignees given
        UserNotFound: an assignee does not exist in this tenant
    """
    assignee_ids = list(dict.fromkeys(assignee_ids))
    if not assignee_ids:
        raise ValidationFailed("At least one assignee is required")

    found = {uid for (uid,) in db.query(User.id).filter(User.id.in_(assignee_ids)).all()}
    missing = [uid for uid in assignee_ids if uid not in found]
    if missing:
        raise UserNotFound(f"Assignee not found: {missing[0]}")

    tasks = [
        Task(
            title=title,
            description=description,
            assignee_id=uid,
            creator_id=creator.id,
            due_date=due_date,
            status=status or TaskStatus.PENDING,
        )
        for uid in assignee_ids
    ]
    db.add_all(tasks)
    db.commit()
    for task in tasks:
        db.refresh(task)

    logger.info("Tasks created: count=%s creator_id=%s", len(tasks), creator.id)
    return tasks


def list_tasks(
    db: Session,
    status: Optional[TaskStatus] = None,
    assignee_id: Optional[int] = None,
    creator_id: Optional[int] = None,
) -> List[Task]:
    query = _with_people(db.query(Task))
    if status is not None:
        query = query.filter(Task.status == status)
    if assignee_id is not None:
        query = query.filter(Task.assignee_id == assignee_id)
    if creator_id is not None:
        query = query.filter(Task.creator_id == creator_id)
    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def list_my_tasks(db: Session, user_id: int, status: Optional[TaskStatus] = None) -> List[Task]:
    return list_tasks(db, status=status, assignee_id=user_id)


def get_task(db: Session, task_id: int) -> Task:
    task = _with_people(db.query(Task)).filter(Task.id == task_id).first()
    if task is None:
        raise TaskNotFound()
    return task


def update_task(db: Session, task_id: int, **changes) -> Task:
    """Partial update; None values are left unchanged."""
    task = get_task(db, task_id)

    assignee_id = changes.get("assignee_id")
    if assignee_id is not None and db.get(User, assignee_id) is None:
        raise UserNotFound(f"Assignee not found: {assignee_id}")

    for field in ("title", "description", "assignee_id", "due_date", "status"):
        value = changes.get(field)
        if value is not None:
            setattr(task, field, value)
    db.commit()
    db.refresh(task)
    return task


def update_task_status(db: Session, task_id: int, user: User, status: TaskStatus) -> Task:
    """Only the assignee or the creator may move a task along."""
    task = get_task(db, task_id)
    if user.id not in (task.assignee_id, task.creator_id):
        raise ForbiddenError("You can only update your own tasks")
    task.status = status
    db.commit()
    db.refresh(task)
    logger.info("Task status updated: id=%s status=%s by=%s", task.id, status.value, user.id)
    return task


def delete_task(db: Session, task_id: int) -> None:
    task = get_task(db, task_id)
    db.delete(task)
    db.commit()
    logger.info("Task deleted: id=%s", task_id)
