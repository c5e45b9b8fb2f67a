"""
Attendance endpoints: clock in/out for the current user plus reporting.
/admin/* endpoints are ADMIN only.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_tenant_db, require_roles
from app.models.user import Role, User
from app.schemas.attendance import (
    AttendanceHistoryResponse,
    AttendanceOut,
    AttendanceStatistics,
    AttendanceWithUserOut,
    ClockInRequest,
    ClockInResponse,
    PunchRequest,
)
from app.services import attendance_service
from app.utils.datetime_utils import now_utc, to_local

router = APIRouter()


@router.post("/clock-in", response_model=ClockInResponse, status_code=status.HTTP_201_CREATED)
def clock_in(
    payload: ClockInRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    """
    Clock in for today.

    A PRESENT clock-in after work start + late threshold is recorded as LATE;
    ``is_late`` mirrors the stored status.
    """
    attendance, is_late = attendance_service.clock_in(
        db,
        current_user.id,
        status=payload.status,
        latitude=payload.latitude,
        longitude=payload.longitude,
        face_verified=payload.face_verified,
        photo=payload.photo,
    )
    return ClockInResponse(attendance=AttendanceOut.model_validate(attendance), is_late=is_late)


@router.post("/clock-out", response_model=AttendanceOut)
def clock_out(
    payload: PunchRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    return attendance_service.clock_out(
        db,
        current_user.id,
        face_verified=payload.face_verified,
        photo=payload.photo,
    )


@router.get("/today", response_model=Optional[AttendanceOut])
def get_today(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    """Today's attendance, or null if not clocked in yet."""
    return attendance_service.get_today_attendance(db, current_user.id)


@router.get("/history", response_model=AttendanceHistoryResponse)
def get_history(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    items, total = attendance_service.get_history(db, current_user.id, page, limit)
    return AttendanceHistoryResponse(
        items=[AttendanceOut.model_validate(a) for a in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/statistics", response_model=AttendanceStatistics)
def get_statistics(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1970),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    """Monthly statistics; defaults to the current month on the company clock."""
    today = to_local(now_utc()).date()
    month = month or today.month
    year = year or today.year
    stats = attendance_service.get_statistics(db, current_user.id, month, year)
    return AttendanceStatistics(month=month, year=year, **stats)


@router.get("/admin/today", response_model=List[AttendanceWithUserOut])
def admin_today(
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return attendance_service.admin_list_today(db)


@router.get("/admin/report", response_model=List[AttendanceWithUserOut])
def admin_report(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    """Attendances filtered by date range (both bounds required) and user."""
    return attendance_service.admin_report(db, start_date, end_date, user_id)
