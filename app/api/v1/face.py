"""
Face registration endpoints for the current user
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_tenant_db
from app.models.user import User
from app.schemas.face import FaceRegisterRequest, FaceStatusResponse, FaceVerifyRequest, FaceVerifyResponse
from app.services import face_service

router = APIRouter()


@router.post("/register", response_model=FaceStatusResponse)
def register_face(
    payload: FaceRegisterRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    user = face_service.register_face(db, current_user, payload.face_descriptor, payload.photo)
    return FaceStatusResponse(face_registered=user.face_registered, photo=user.photo)


@router.post("/verify", response_model=FaceVerifyResponse)
def verify_face(
    payload: FaceVerifyRequest,
    current_user: User = Depends(get_current_user),
):
    return face_service.verify_face(current_user, payload.face_descriptor)


@router.get("/status", response_model=FaceStatusResponse)
async def face_status(current_user: User = Depends(get_current_user)):
    return FaceStatusResponse(face_registered=current_user.face_registered, photo=current_user.photo)


@router.delete("", response_model=FaceStatusResponse)
def delete_face(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_tenant_db),
):
    user = face_service.delete_face(db, current_user)
    return FaceStatusResponse(face_registered=user.face_registered, photo=user.photo)
