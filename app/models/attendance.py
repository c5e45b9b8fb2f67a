"""
Attendance and break models (per tenant)
"""
from sqlalchemy import (
    Column, Integer, Date, DateTime, Float, ForeignKey, Index, Text, UniqueConstraint, Enum as SQLEnum, text
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from app.db.base import TenantBase


class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    SICK = "SICK"
    LEAVE = "LEAVE"
    ALPHA = "ALPHA"


class Attendance(TenantBase):
    __tablename__ = "attendances"
    __table_args__ = (
        UniqueConstraint("user_id", "work_date", name="uq_attendance_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    work_date = Column(Date, nullable=False, index=True)  # company wall-clock date
    clock_in = Column(DateTime(timezone=True), nullable=True)
    clock_out = Column(DateTime(timezone=True), nullable=True)
    clock_in_photo = Column(Text, nullable=True)
    clock_out_photo = Column(Text, nullable=True)
    status = Column(SQLEnum(AttendanceStatus, native_enum=False, length=20), nullable=False, default=AttendanceStatus.PRESENT)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    total_break_minutes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    user = relationship("User", back_populates="attendances")
    breaks = relationship("Break", back_populates="attendance", order_by="Break.start_time")


class Break(TenantBase):
    __tablename__ = "breaks"
    __table_args__ = (
        # At most one open break per user
        Index(
            "uq_break_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("end_time IS NULL"),
            sqlite_where=text("end_time IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    attendance_id = Column(Integer, ForeignKey("attendances.id", ondelete="SET NULL"), nullable=True, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    duration = Column(Integer, nullable=True)  # minutes, set when the break ends
    start_photo = Column(Text, nullable=True)
    end_photo = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    user = relationship("User", back_populates="breaks")
    attendance = relationship("Attendance", back_populates="breaks")
