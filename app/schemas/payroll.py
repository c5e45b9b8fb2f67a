"""
Payroll schemas
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.schemas.common import serialize_dt
from app.schemas.user import UserSummary


class PayrollGenerateRequest(BaseModel):
    user_id: int = Field(..., description="User to pay")
    period_start: date
    period_end: date


class PayrollOut(BaseModel):
    id: int
    user_id: int
    period_start: date
    period_end: date
    base_salary: float
    working_days: int
    working_hours: float
    overtime_hours: float
    late_count: int
    total_break_minutes: int
    late_deductions: float
    break_deductions: float
    overtime_bonus: float
    deductions: float
    net_salary: float
    created_at: Optional[datetime] = None
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return serialize_dt(dt)
