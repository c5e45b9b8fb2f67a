"""
Break endpoints for the current user
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_tenant_db
from app.models.user import User
from app.schemas.attendance import BreakHistoryResponse, BreakOut, PunchRequest, TodayBreaksResponse
from app.services import break_service

router = APIRouter()


@router.post("/start", response_model=BreakOut, status_code=status.HTTP_201_CREATED)
def start_break(
    payload: PunchRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    return break_service.start_break(
        db, current_user.id, face_verified=payload.face_verified, photo=payload.photo
    )


@router.post("/end", response_model=BreakOut)
def end_break(
    payload: PunchRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    """End the active break; its duration is added to today's attendance."""
    return break_service.end_break(
        db, current_user.id, face_verified=payload.face_verified, photo=payload.photo
    )


@router.get("/today", response_model=TodayBreaksResponse)
def today_breaks(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    return break_service.get_today_breaks(db, current_user.id)


@router.get("/history", response_model=BreakHistoryResponse)
def break_history(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    items, total = break_service.get_break_history(db, current_user.id, page, limit)
    return BreakHistoryResponse(
        items=[BreakOut.model_validate(b) for b in items],
        total=total,
        page=page,
        limit=limit,
    )
