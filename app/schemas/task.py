"""
Task schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from app.models.task import TaskStatus
from app.schemas.common import serialize_dt
from app.schemas.user import UserSummary


class TaskCreate(BaseModel):
    """Either assignee_id or assignee_ids must be given"""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    assignee_id: Optional[int] = None
    assignee_ids: Optional[List[int]] = None
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None

    @model_validator(mode="after")
    def _require_assignee(self):
        if not self.assignee_ids and self.assignee_id is None:
            raise ValueError("At least one assignee is required")
        return self

    def resolved_assignees(self) -> List[int]:
        if self.assignee_ids:
            return self.assignee_ids
        return [self.assignee_id]


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    assignee_id: Optional[int] = None
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskOut(BaseModel):
    id: int
    title: str
    description: str
    assignee_id: int
    creator_id: int
    status: TaskStatus
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    assignee: Optional[UserSummary] = None
    creator: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("due_date", "created_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return serialize_dt(dt)
