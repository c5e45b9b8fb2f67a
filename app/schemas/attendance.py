"""
Attendance and break schemas. All datetimes are serialized in UTC (Z).
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.models.attendance import AttendanceStatus
from app.schemas.common import serialize_dt
from app.schemas.user import UserSummary


class ClockInRequest(BaseModel):
    """Schema for clock-in request"""
    status: Optional[AttendanceStatus] = Field(None, description="Override status; PRESENT is subject to the late check")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="GPS latitude")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="GPS longitude")
    face_verified: bool = False
    photo: Optional[str] = Field(None, description="Stored photo reference")


class PunchRequest(BaseModel):
    """Clock-out and break start/end"""
    face_verified: bool = False
    photo: Optional[str] = None


class BreakOut(BaseModel):
    id: int
    user_id: int
    attendance_id: Optional[int] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    start_photo: Optional[str] = None
    end_photo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("start_time", "end_time")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return serialize_dt(dt)


class AttendanceOut(BaseModel):
    id: int
    user_id: int
    work_date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    clock_in_photo: Optional[str] = None
    clock_out_photo: Optional[str] = None
    status: AttendanceStatus
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    total_break_minutes: int = 0
    breaks: List[BreakOut] = []

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("clock_in", "clock_out")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return serialize_dt(dt)


class AttendanceWithUserOut(AttendanceOut):
    user: Optional[UserSummary] = None


class ClockInResponse(BaseModel):
    attendance: AttendanceOut
    is_late: bool


class AttendanceHistoryResponse(BaseModel):
    items: List[AttendanceOut]
    total: int
    page: int
    limit: int


class AttendanceStatistics(BaseModel):
    month: int
    year: int
    total_days: int
    present: int
    late: int
    absent: int
    sick: int
    leave: int
    alpha: int
    total_break_minutes: int


class TodayBreaksResponse(BaseModel):
    breaks: List[BreakOut]
    total_minutes: int
    active_break: Optional[BreakOut] = None


class BreakHistoryResponse(BaseModel):
    items: List[BreakOut]
    total: int
    page: int
    limit: int
