"""
User service (tenant-scoped): profiles and admin user management
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateEmail, InvalidCredentials, UserNotFound, ValidationFailed
from app.core.security import hash_password, verify_password
from app.models.user import Role, SalaryType, User
from app.utils.datetime_utils import parse_hhmm

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def _validate_start_time(value: Optional[str]) -> None:
    if value is not None:
        try:
            parse_hhmm(value)
        except ValueError as e:
            raise ValidationFailed(str(e))


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    name: str,
    role: Role = Role.USER,
    salary_type: SalaryType = SalaryType.MONTHLY,
    salary: float = 0,
    start_work_time: str = "09:00",
    late_penalty: float = 0,
) -> User:
    """
    Create a user inside the tenant partition.

    Raises:
        DuplicateEmail: email already registered in this tenant
    """
    if find_user_by_email(db, email):
        raise DuplicateEmail()
    _validate_start_time(start_work_time)

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name,
        role=role,
        salary_type=salary_type,
        salary=salary,
        start_work_time=start_work_time,
        late_penalty=late_penalty,
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail()
    db.refresh(user)
    logger.info("User created: id=%s role=%s", user.id, user.role.value)
    return user


def update_user(db: Session, user_id: int, **changes) -> User:
    """Admin update; None values are left unchanged."""
    user = get_user(db, user_id)

    email = changes.get("email")
    if email and email != user.email:
        if find_user_by_email(db, email):
            raise DuplicateEmail()
    _validate_start_time(changes.get("start_work_time"))

    for field in ("name", "email", "role", "salary_type", "salary", "start_work_time", "late_penalty", "is_active"):
        value = changes.get(field)
        if value is not None:
            setattr(user, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail()
    db.refresh(user)
    return user


def update_profile(db: Session, user: User, *, name=None, photo=None, start_work_time=None) -> User:
    _validate_start_time(start_work_time)
    if name:
        user.name = name
    if photo:
        user.photo = photo
    if start_work_time:
        user.start_work_time = start_work_time
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int, acting_user_id: int) -> None:
    if user_id == acting_user_id:
        raise ValidationFailed("Cannot delete your own account")
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted: id=%s by=%s", user_id, acting_user_id)


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise InvalidCredentials("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    db.commit()
