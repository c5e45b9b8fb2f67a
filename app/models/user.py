"""
User model (per tenant)
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from app.db.base import TenantBase


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    LEADER = "LEADER"
    USER = "USER"


class SalaryType(str, enum.Enum):
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class User(TenantBase):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Unique within the tenant only; the same email may exist in other tenants
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(SQLEnum(Role, native_enum=False, length=20), nullable=False, default=Role.USER)
    photo = Column(Text, nullable=True)
    face_descriptor = Column(Text, nullable=True)  # JSON-encoded list of floats
    face_registered = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    salary_type = Column(SQLEnum(SalaryType, native_enum=False, length=20), nullable=False, default=SalaryType.MONTHLY)
    salary = Column(Float, nullable=False, default=0)
    start_work_time = Column(String(10), nullable=False, default="09:00")
    late_penalty = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    attendances = relationship("Attendance", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    breaks = relationship("Break", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    payrolls = relationship("Payroll", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
