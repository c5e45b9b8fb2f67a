"""
Company configuration (per tenant, at most one row)
"""
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func
from app.db.base import TenantBase

DEFAULT_COMPANY_NAME = "My Company"
DEFAULT_MAX_BREAK_MINUTES = 60
DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_OVERTIME_RATE = 1.5
DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "17:00"


class CompanyConfig(TenantBase):
    __tablename__ = "company_configs"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String(255), nullable=False, default=DEFAULT_COMPANY_NAME)
    max_break_minutes_per_day = Column(Integer, nullable=False, default=DEFAULT_MAX_BREAK_MINUTES)
    late_threshold_minutes = Column(Integer, nullable=False, default=DEFAULT_LATE_THRESHOLD_MINUTES)
    overtime_rate_multiplier = Column(Float, nullable=False, default=DEFAULT_OVERTIME_RATE)
    work_start_time = Column(String(10), nullable=False, default=DEFAULT_WORK_START)
    work_end_time = Column(String(10), nullable=False, default=DEFAULT_WORK_END)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)
