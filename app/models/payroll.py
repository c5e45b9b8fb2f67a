"""
Payroll model (per tenant). Write-once: rows are created by the payroll
calculator and only ever deleted afterwards.
"""
from sqlalchemy import Column, Integer, Date, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import TenantBase


class Payroll(TenantBase):
    __tablename__ = "payrolls"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    base_salary = Column(Float, nullable=False)
    working_days = Column(Integer, nullable=False, default=0)
    working_hours = Column(Float, nullable=False, default=0)
    overtime_hours = Column(Float, nullable=False, default=0)
    late_count = Column(Integer, nullable=False, default=0)
    total_break_minutes = Column(Integer, nullable=False, default=0)
    late_deductions = Column(Float, nullable=False, default=0)
    break_deductions = Column(Float, nullable=False, default=0)
    overtime_bonus = Column(Float, nullable=False, default=0)
    deductions = Column(Float, nullable=False)
    net_salary = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    user = relationship("User", back_populates="payrolls")
