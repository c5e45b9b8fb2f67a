"""
Payroll endpoints. Generation and management are ADMIN only; /my is for everyone.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_tenant_db, require_roles
from app.models.user import Role, User
from app.schemas.common import MessageResponse
from app.schemas.payroll import PayrollGenerateRequest, PayrollOut
from app.services import payroll_service

router = APIRouter()


@router.get("/my", response_model=List[PayrollOut])
def my_payrolls(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    return payroll_service.list_payrolls(db, user_id=current_user.id)


@router.post("/generate", response_model=PayrollOut, status_code=status.HTTP_201_CREATED)
def generate_payroll(
    payload: PayrollGenerateRequest,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    """
    Generate a payroll for one user over an inclusive date range.

    Only attendances with both clock-in and clock-out are counted. Generating
    again for the same period writes another payroll.
    """
    return payroll_service.generate_payroll(db, payload.user_id, payload.period_start, payload.period_end)


@router.get("", response_model=List[PayrollOut])
def list_payrolls(
    period_start: Optional[date] = Query(None),
    period_end: Optional[date] = Query(None),
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return payroll_service.list_payrolls(db, period_start=period_start, period_end=period_end)


@router.get("/user/{user_id}", response_model=List[PayrollOut])
def user_payrolls(
    user_id: int,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return payroll_service.list_payrolls(db, user_id=user_id)


@router.get("/{payroll_id}", response_model=PayrollOut)
def get_payroll(
    payroll_id: int,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    return payroll_service.get_payroll(db, payroll_id)


@router.delete("/{payroll_id}", response_model=MessageResponse)
def delete_payroll(
    payroll_id: int,
    db: Session = Depends(get_tenant_db),
    _: User = Depends(require_roles(Role.ADMIN)),
):
    payroll_service.delete_payroll(db, payroll_id)
    return MessageResponse(message="Payroll deleted successfully")
