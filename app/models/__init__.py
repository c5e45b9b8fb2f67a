"""
Database models
"""
from app.models.tenant import Tenant, SuperAdmin
from app.models.user import User, Role, SalaryType
from app.models.attendance import Attendance, AttendanceStatus, Break
from app.models.task import Task, TaskStatus
from app.models.payroll import Payroll
from app.models.company_config import CompanyConfig

__all__ = [
    "Tenant",
    "SuperAdmin",
    "User",
    "Role",
    "SalaryType",
    "Attendance",
    "AttendanceStatus",
    "Break",
    "Task",
    "TaskStatus",
    "Payroll",
    "CompanyConfig",
]
