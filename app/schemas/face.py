"""
Face registration schemas
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class FaceRegisterRequest(BaseModel):
    face_descriptor: List[float] = Field(..., min_length=1)
    photo: Optional[str] = None


class FaceVerifyRequest(BaseModel):
    face_descriptor: List[float] = Field(..., min_length=1)


class FaceVerifyResponse(BaseModel):
    verified: bool
    # None when the descriptors cannot be compared
    distance: Optional[float] = None
    threshold: float


class FaceStatusResponse(BaseModel):
    face_registered: bool
    photo: Optional[str] = None
