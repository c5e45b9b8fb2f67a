"""
Payroll calculator.

Only attendances with both clock-in and clock-out count toward a period;
everything else is ignored. Each generated Payroll keeps every intermediate
figure alongside the net salary.
"""
import logging
import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import PayrollNotFound, UserNotFound, ValidationFailed
from app.models.attendance import Attendance, AttendanceStatus
from app.models.company_config import DEFAULT_OVERTIME_RATE
from app.models.payroll import Payroll
from app.models.user import SalaryType, User
from app.services.company_config_service import find_config
from app.utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 8

# Divisor turning a salary rate into an hourly rate for overtime
_HOURLY_DIVISORS = {
    SalaryType.HOURLY: 1,
    SalaryType.DAILY: 8,
    SalaryType.WEEKLY: 40,
    SalaryType.MONTHLY: 160,
}


@dataclass
class PayrollFigures:
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


def _salary_type(value) -> SalaryType:
    try:
        return SalaryType(value)
    except ValueError:
        return SalaryType.MONTHLY


def calculate_payroll(
    salary_type,
    rate: float,
    late_penalty: float,
    attendances: Iterable[Attendance],
    overtime_multiplier: float = DEFAULT_OVERTIME_RATE,
) -> PayrollFigures:
    """
    Compute payroll figures from a user's salary settings and attendances.

    Unrecognized salary types are paid as MONTHLY.
    """
    salary_type = _salary_type(salary_type)
    rate = rate or 0
    late_penalty = late_penalty or 0

    working_days = 0
    working_hours = 0.0
    late_count = 0
    total_break_minutes = 0
    for attendance in attendances:
        if attendance.clock_in is None or attendance.clock_out is None:
            continue
        working_days += 1
        elapsed = ensure_utc(attendance.clock_out) - ensure_utc(attendance.clock_in)
        working_hours += elapsed.total_seconds() / 3600
        if attendance.status == AttendanceStatus.LATE:
            late_count += 1
        total_break_minutes += attendance.total_break_minutes or 0

    if salary_type == SalaryType.HOURLY:
        base_salary = rate * working_hours
    elif salary_type == SalaryType.DAILY:
        base_salary = rate * working_days
    elif salary_type == SalaryType.WEEKLY:
        base_salary = rate * math.ceil(working_days / 7)
    else:
        base_salary = rate

    late_deductions = late_count * late_penalty
    break_deductions = 0.0

    expected_hours = working_days * HOURS_PER_DAY
    overtime_hours = max(0.0, working_hours - expected_hours)
    hourly_rate = rate / _HOURLY_DIVISORS[salary_type]
    overtime_bonus = overtime_hours * hourly_rate * overtime_multiplier

    deductions = late_deductions + break_deductions
    net_salary = base_salary + overtime_bonus - deductions

    return PayrollFigures(
        base_salary=base_salary,
        working_days=working_days,
        working_hours=working_hours,
        overtime_hours=overtime_hours,
        late_count=late_count,
        total_break_minutes=total_break_minutes,
        late_deductions=late_deductions,
        break_deductions=break_deductions,
        overtime_bonus=overtime_bonus,
        deductions=deductions,
        net_salary=net_salary,
    )


def generate_payroll(db: Session, user_id: int, period_start: date, period_end: date) -> Payroll:
    """
    Generate and persist a payroll for one user over [period_start, period_end].

    Raises:
        ValidationFailed: period_start is after period_end
        UserNotFound: no such user in this tenant
    """
    if period_start > period_end:
        raise ValidationFailed("period_start must be less than or equal to period_end")

    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound()

    config = find_config(db)
    multiplier = config.overtime_rate_multiplier if config else DEFAULT_OVERTIME_RATE

    attendances = (
        db.query(Attendance)
        .filter(
            Attendance.user_id == user_id,
            Attendance.work_date >= period_start,
            Attendance.work_date <= period_end,
        )
        .all()
    )
    figures = calculate_payroll(user.salary_type, user.salary, user.late_penalty, attendances, multiplier)

    payroll = Payroll(
        user_id=user_id,
        period_start=period_start,
        period_end=period_end,
        **asdict(figures),
    )
    db.add(payroll)
    db.commit()
    db.refresh(payroll)

    logger.info(
        "Payroll generated: id=%s user_id=%s period=%s..%s net=%.2f",
        payroll.id, user_id, period_start, period_end, figures.net_salary,
    )
    return payroll


def list_payrolls(
    db: Session,
    user_id: Optional[int] = None,
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
) -> List[Payroll]:
    """Payrolls, newest first; the period filter keeps rows inside the range."""
    query = db.query(Payroll).options(joinedload(Payroll.user))
    if user_id is not None:
        query = query.filter(Payroll.user_id == user_id)
    if period_start is not None:
        query = query.filter(Payroll.period_start >= period_start)
    if period_end is not None:
        query = query.filter(Payroll.period_end <= period_end)
    return query.order_by(Payroll.created_at.desc(), Payroll.id.desc()).all()


def get_payroll(db: Session, payroll_id: int) -> Payroll:
    payroll = db.query(Payroll).options(joinedload(Payroll.user)).filter(Payroll.id == payroll_id).first()
    if payroll is None:
        raise PayrollNotFound()
    return payroll


def delete_payroll(db: Session, payroll_id: int) -> None:
    payroll = get_payroll(db, payroll_id)
    db.delete(payroll)
    db.commit()
    logger.info("Payroll deleted: id=%s", payroll_id)
