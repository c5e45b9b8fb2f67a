"""
Face registration and verification.

Descriptors are plain float vectors supplied by the client; two descriptors
match when their Euclidean distance is below settings.FACE_MATCH_THRESHOLD.
"""
import json
import logging
import math
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import FaceNotRegistered, ValidationFailed
from app.models.user import User

logger = logging.getLogger(__name__)


def euclidean_distance(a, b) -> float:
    """Distance between two descriptors; incomparable descriptors are infinitely far apart."""
    if not isinstance(a, (list, tuple)) or not isinstance(b, (list, tuple)):
        return math.inf
    if len(a) != len(b):
        return math.inf
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def register_face(db: Session, user: User, descriptor: Sequence[float], photo: Optional[str] = None) -> User:
    if not descriptor:
        raise ValidationFailed("Face descriptor is required")
    user.face_descriptor = json.dumps(list(descriptor))
    user.face_registered = True
    if photo:
        user.photo = photo
    db.commit()
    db.refresh(user)
    logger.info("Face registered: user_id=%s", user.id)
    return user


def verify_face(user: User, descriptor: Sequence[float]) -> dict:
    """
    Compare a descriptor against the user's registered one.

    Raises:
        FaceNotRegistered: the user has no registered descriptor
    """
    if not descriptor:
        raise ValidationFailed("Face descriptor is required")
    if not user.face_registered or not user.face_descriptor:
        raise FaceNotRegistered()

    stored = json.loads(user.face_descriptor)
    distance = euclidean_distance(stored, list(descriptor))
    threshold = settings.FACE_MATCH_THRESHOLD
    return {
        "verified": distance < threshold,
        "distance": None if math.isinf(distance) else distance,
        "threshold": threshold,
    }


def delete_face(db: Session, user: User) -> User:
    user.face_descriptor = None
    user.face_registered = False
    db.commit()
    db.refresh(user)
    logger.info("Face registration deleted: user_id=%s", user.id)
    return user
