"""
User schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.models.user import Role, SalaryType
from app.schemas.common import HHMM_PATTERN, serialize_dt


class UserCreate(BaseModel):
    """Schema for creating a user (ADMIN)"""
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=72)
    name: str = Field(..., min_length=1, max_length=255)
    role: Role = Role.USER
    salary_type: SalaryType = SalaryType.MONTHLY
    salary: float = Field(default=0, ge=0)
    start_work_time: str = Field(default="09:00", pattern=HHMM_PATTERN)
    late_penalty: float = Field(default=0, ge=0)


class UserUpdate(BaseModel):
    """Schema for updating a user (ADMIN); omitted fields are unchanged"""
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[Role] = None
    salary_type: Optional[SalaryType] = None
    salary: Optional[float] = Field(None, ge=0)
    start_work_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    late_penalty: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    photo: Optional[str] = None
    start_work_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=72)


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserOut(BaseModel):
    """Schema for user output (never includes the password hash or face descriptor)"""
    id: int
    email: str
    name: str
    role: Role
    photo: Optional[str] = None
    face_registered: bool
    is_active: bool
    salary_type: SalaryType
    salary: float
    start_work_time: str
    late_penalty: float
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return serialize_dt(dt)
