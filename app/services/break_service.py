"""
Breaks nested inside a clocked-in attendance: NOT_ON_BREAK <-> ON_BREAK.
"""
import logging
import math
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    BreakAlreadyActive,
    BreakLimitReached,
    InternalError,
    MustClockInFirst,
    NoActiveBreak,
)
from app.models.attendance import Attendance, Break
from app.models.company_config import DEFAULT_MAX_BREAK_MINUTES
from app.services.attendance_service import find_active_attendance, load_user, require_face_verification
from app.services.company_config_service import find_config
from app.utils.datetime_utils import ensure_utc, now_utc, work_date

logger = logging.getLogger(__name__)


def break_minutes(start: datetime, end: datetime) -> int:
    """Elapsed minutes rounded to the nearest minute, halves rounding up; never negative."""
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return max(0, int(math.floor(seconds / 60 + 0.5)))


def find_active_break(db: Session, user_id: int) -> Optional[Break]:
    return (
        db.query(Break)
        .filter(Break.user_id == user_id, Break.end_time.is_(None))
        .first()
    )


def start_break(
    db: Session,
    user_id: int,
    now: Optional[datetime] = None,
    *,
    face_verified: bool = False,
    photo: Optional[str] = None,
) -> Break:
    """
    Start a break on today's active attendance.

    Raises:
        FaceVerificationRequired, MustClockInFirst, BreakAlreadyActive,
        BreakLimitReached
    """
    now = ensure_utc(now) or now_utc()
    user = load_user(db, user_id)
    require_face_verification(user, face_verified, "break")

    attendance = find_active_attendance(db, user_id, work_date(now))
    if attendance is None:
        raise MustClockInFirst()

    if find_active_break(db, user_id):
        raise BreakAlreadyActive()

    config = find_config(db)
    max_minutes = config.max_break_minutes_per_day if config else DEFAULT_MAX_BREAK_MINUTES
    if (attendance.total_break_minutes or 0) >= max_minutes:
        raise BreakLimitReached(f"Maximum break time ({max_minutes} minutes) for today reached")

    brk = Break(
        user_id=user_id,
        attendance_id=attendance.id,
        start_time=now,
        start_photo=photo,
    )
    db.add(brk)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BreakAlreadyActive()
    db.refresh(brk)

    logger.info("Break started: user_id=%s attendance_id=%s break_id=%s", user_id, attendance.id, brk.id)
    return brk


def end_break(
    db: Session,
    user_id: int,
    now: Optional[datetime] = None,
    *,
    face_verified: bool = False,
    photo: Optional[str] = None,
) -> Break:
    """
    End the user's active break.

    Closing the break and adding its duration to the attendance counter are
    committed together; on failure neither is applied.

    Raises:
        FaceVerificationRequired, NoActiveBreak
    """
    now = ensure_utc(now) or now_utc()
    user = load_user(db, user_id)
    require_face_verification(user, face_verified, "break")

    brk = find_active_break(db, user_id)
    if brk is None:
        raise NoActiveBreak()

    duration = break_minutes(brk.start_time, now)
    brk.end_time = now
    brk.duration = duration
    brk.end_photo = photo
    try:
        if brk.attendance_id is not None:
            db.execute(
                update(Attendance)
                .where(Attendance.id == brk.attendance_id)
                .values(total_break_minutes=Attendance.total_break_minutes + duration)
            )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to end break id=%s", brk.id)
        raise InternalError("Failed to end break")
    db.refresh(brk)

    logger.info("Break ended: user_id=%s break_id=%s duration=%s", user_id, brk.id, duration)
    return brk


def get_today_breaks(db: Session, user_id: int, now: Optional[datetime] = None) -> dict:
    """Breaks of today's attendance with their total and the open one, if any."""
    attendance = (
        db.query(Attendance)
        .filter(Attendance.user_id == user_id, Attendance.work_date == work_date(now))
        .first()
    )
    breaks: List[Break] = []
    if attendance is not None:
        breaks = (
            db.query(Break)
            .filter(Break.attendance_id == attendance.id)
            .order_by(Break.start_time.asc())
            .all()
        )
    return {
        "breaks": breaks,
        "total_minutes": attendance.total_break_minutes if attendance else 0,
        "active_break": next((b for b in breaks if b.end_time is None), None),
    }


def get_break_history(db: Session, user_id: int, page: int = 1, limit: int = 20) -> Tuple[List[Break], int]:
    query = db.query(Break).filter(Break.user_id == user_id)
    total = query.count()
    items = (
        query.order_by(Break.start_time.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total
