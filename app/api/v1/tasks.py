"""
Task endpoints. Creating, listing, editing and deleting need LEADER or ADMIN;
assignees update status through PATCH /{id}/status.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_tenant_db, require_roles
from app.models.task import TaskStatus
from app.models.user import Role, User
from app.schemas.common import MessageResponse
from app.schemas.task import TaskCreate, TaskOut, TaskStatusUpdate, TaskUpdate
from app.services import task_service

router = APIRouter()

leader_or_admin = require_roles(Role.ADMIN, Role.LEADER)


@router.get("/my", response_model=List[TaskOut])
def my_tasks(
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    return task_service.list_my_tasks(db, current_user.id, task_status)


@router.patch("/{task_id}/status", response_model=TaskOut)
def update_status(
    task_id: int,
    payload: TaskStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    return task_service.update_task_status(db, task_id, current_user, payload.status)


@router.post("", response_model=List[TaskOut], status_code=status.HTTP_201_CREATED)
def create_tasks(
    payload: TaskCreate,
    db: Session = Depends(get_tenant_db),
    creator: User = Depends(leader_or_admin),
):
    """Create the task once per assignee."""
    return task_service.create_tasks(
        db,
        creator,
        title=payload.title,
        description=payload.description,
        assignee_ids=payload.resolved_assignees(),
        due_date=payload.due_date,
        status=payload.status,
    )


@router.get("", response_model=List[TaskOut])
def list_tasks(
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    assignee_id: Optional[int] = Query(None),
    creator_id: Optional[int] = Query(None),
    db: Session = Depends(get_tenant_db),
    _: User = Depends(leader_or_admin),
):
    return task_service.list_tasks(db, task_status, assignee_id, creator_id)


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(get_current_user),
):
    return task_service.get_task(db, task_id)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(leader_or_admin),
):
    return task_service.update_task(db, task_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(leader_or_admin),
):
    task_service.delete_task(db, task_id)
    return MessageResponse(message="Task deleted successfully")
