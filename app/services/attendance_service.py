"""
Attendance state engine: clock in/out per (user, work date) plus read-only
reporting.

Per user and work date: NO_RECORD -> CLOCKED_IN -> CLOCKED_OUT (terminal).
Timestamps are stored in UTC; the work date and lateness are evaluated on the
company wall clock (settings.TZ).
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.exceptions import (
    ActiveBreakMustEndFirst,
    AlreadyClockedIn,
    FaceVerificationRequired,
    NoActiveSession,
    UserNotFound,
    ValidationFailed,
)
from app.models.attendance import Attendance, AttendanceStatus, Break
from app.models.company_config import (
    CompanyConfig,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_WORK_START,
)
from app.models.user import User
from app.services.company_config_service import find_config
from app.utils.datetime_utils import (
    ensure_utc,
    late_deadline,
    month_bounds,
    now_utc,
    to_local,
    work_date,
)

_log = logging.getLogger(__name__)


def load_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user


def require_face_verification(user: User, face_verified: bool, action: str) -> None:
    """Users with a registered face must present a verified face for every punch."""
    if user.face_registered and not face_verified:
        raise FaceVerificationRequired(f"Face verification required for {action}")


def determine_status(
    now: datetime,
    config: Optional[CompanyConfig],
    user: User,
    requested: Optional[AttendanceStatus] = None,
) -> AttendanceStatus:
    """
    Status for a clock-in at ``now``.

    Work start comes from the company config, then the user's own start time,
    then 09:00; the grace period from the config, else 15 minutes. A PRESENT
    (or absent) request becomes LATE when the wall-clock time is strictly
    after work start + grace. Any other requested status is kept as is.
    """
    status = requested or AttendanceStatus.PRESENT
    if status != AttendanceStatus.PRESENT:
        return status

    work_start = (config.work_start_time if config else None) or user.start_work_time or DEFAULT_WORK_START
    threshold = DEFAULT_LATE_THRESHOLD_MINUTES
    if config is not None and config.late_threshold_minutes is not None:
        threshold = config.late_threshold_minutes

    local_now = to_local(now).replace(tzinfo=None)
    deadline = late_deadline(local_now.date(), work_start, threshold)
    if local_now > deadline:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


def find_active_attendance(db: Session, user_id: int, day: date) -> Optional[Attendance]:
    """Today's attendance that is clocked in but not yet clocked out."""
    return (
        db.query(Attendance)
        .filter(
            Attendance.user_id == user_id,
            Attendance.work_date == day,
            Attendance.clock_out.is_(None),
        )
        .first()
    )


def clock_in(
    db: Session,
    user_id: int,
    now: Optional[datetime] = None,
    *,
    status: Optional[AttendanceStatus] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    face_verified: bool = False,
    photo: Optional[str] = None,
) -> Tuple[Attendance, bool]:
    """
    Clock in for the current work date.

    Returns:
        (attendance, is_late)

    Raises:
        FaceVerificationRequired, AlreadyClockedIn
    """
    now = ensure_utc(now) or now_utc()
    user = load_user(db, user_id)
    require_face_verification(user, face_verified, "clock in")

    today = work_date(now)
    existing = (
        db.query(Attendance)
        .filter(Attendance.user_id == user_id, Attendance.work_date == today)
        .first()
    )
    if existing:
        raise AlreadyClockedIn()

    attendance_status = determine_status(now, find_config(db), user, status)
    attendance = Attendance(
        user_id=user_id,
        work_date=today,
        clock_in=now,
        clock_in_photo=photo,
        status=attendance_status,
        latitude=latitude,
        longitude=longitude,
        total_break_minutes=0,
    )
    db.add(attendance)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent clock-in for the same day
        db.rollback()
        raise AlreadyClockedIn()
    db.refresh(attendance)

    is_late = attendance_status == AttendanceStatus.LATE
    _log.info(
        "clock_in: user_id=%s work_date=%s status=%s",
        user_id, today, attendance_status.value,
    )
    return attendance, is_late


def clock_out(
    db: Session,
    user_id: int,
    now: Optional[datetime] = None,
    *,
    face_verified: bool = False,
    photo: Optional[str] = None,
) -> Attendance:
    """
    Clock out of today's active attendance.

    Raises:
        FaceVerificationRequired, NoActiveSession, ActiveBreakMustEndFirst
    """
    now = ensure_utc(now) or now_utc()
    user = load_user(db, user_id)
    require_face_verification(user, face_verified, "clock out")

    attendance = find_active_attendance(db, user_id, work_date(now))
    if attendance is None:
        raise NoActiveSession()

    active_break = (
        db.query(Break)
        .filter(
            Break.user_id == user_id,
            Break.attendance_id == attendance.id,
            Break.end_time.is_(None),
        )
        .first()
    )
    if active_break:
        raise ActiveBreakMustEndFirst()

    attendance.clock_out = now
    attendance.clock_out_photo = photo
    db.commit()
    db.refresh(attendance)

    _log.info("clock_out: user_id=%s attendance_id=%s", user_id, attendance.id)
    return attendance


def get_today_attendance(db: Session, user_id: int, now: Optional[datetime] = None) -> Optional[Attendance]:
    return (
        db.query(Attendance)
        .options(selectinload(Attendance.breaks))
        .filter(Attendance.user_id == user_id, Attendance.work_date == work_date(now))
        .first()
    )


def get_history(db: Session, user_id: int, page: int = 1, limit: int = 20) -> Tuple[List[Attendance], int]:
    """Paginated attendance history (newest first) with breaks."""
    query = db.query(Attendance).filter(Attendance.user_id == user_id)
    total = query.count()
    items = (
        query.options(selectinload(Attendance.breaks))
        .order_by(Attendance.work_date.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def summarize(attendances: List[Attendance]) -> Dict[str, int]:
    """Bucket attendances by status and sum their break minutes."""
    stats = {"total_days": len(attendances)}
    for status in AttendanceStatus:
        stats[status.value.lower()] = sum(1 for a in attendances if a.status == status)
    stats["total_break_minutes"] = sum(a.total_break_minutes or 0 for a in attendances)
    return stats


def get_statistics(db: Session, user_id: int, month: int, year: int) -> Dict[str, int]:
    """Monthly statistics for one user."""
    try:
        start, end = month_bounds(year, month)
    except ValueError as e:
        raise ValidationFailed(str(e))
    attendances = (
        db.query(Attendance)
        .filter(
            Attendance.user_id == user_id,
            Attendance.work_date >= start,
            Attendance.work_date <= end,
        )
        .all()
    )
    return summarize(attendances)


def admin_list_today(db: Session, now: Optional[datetime] = None) -> List[Attendance]:
    """All attendances of the current work date, earliest clock-in first."""
    return (
        db.query(Attendance)
        .options(joinedload(Attendance.user), selectinload(Attendance.breaks))
        .filter(Attendance.work_date == work_date(now))
        .order_by(Attendance.clock_in.asc())
        .all()
    )


def admin_report(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    user_id: Optional[int] = None,
) -> List[Attendance]:
    """
    Attendance report. The date filter applies only when both bounds are given.
    """
    query = db.query(Attendance).options(joinedload(Attendance.user), selectinload(Attendance.breaks))
    if start_date is not None and end_date is not None:
        if start_date > end_date:
            raise ValidationFailed("start_date must be less than or equal to end_date")
        query = query.filter(Attendance.work_date >= start_date, Attendance.work_date <= end_date)
    if user_id is not None:
        query = query.filter(Attendance.user_id == user_id)
    return query.order_by(Attendance.work_date.desc(), Attendance.clock_in.asc()).all()
