"""
Authentication across tenants.

User identity is unique per tenant only. ``auto_login`` therefore searches
every active tenant for the email and, when more than one tenant knows it,
stops without checking any password and asks the caller to pick a tenant
(``login_with_tenant``).
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    AccountInactive,
    DuplicateEmail,
    EmailNotFound,
    InvalidCredentials,
    InvalidSetupKey,
    TenantNotFound,
    AppError,
)
from app.core.security import (
    hash_password,
    issue_super_admin_token,
    issue_user_token,
    verify_password,
)
from app.db.partitions import PartitionRegistry
from app.models.tenant import SuperAdmin, Tenant
from app.models.user import User
from app.services.tenant_service import list_active_tenants, resolve_tenant

logger = logging.getLogger(__name__)


@dataclass
class TenantCandidate:
    tenant_id: int
    tenant_name: str


@dataclass
class Authenticated:
    token: str
    is_super_admin: bool = False
    user: Optional[User] = None
    super_admin: Optional[SuperAdmin] = None
    tenant: Optional[TenantCandidate] = None


@dataclass
class AmbiguousTenant:
    candidates: List[TenantCandidate] = field(default_factory=list)


@dataclass
class LoginFailed:
    error: AppError


LoginResult = Union[Authenticated, AmbiguousTenant, LoginFailed]


@dataclass
class _Match:
    tenant: Tenant
    user: User


def super_admin_login(db: Session, email: str, password: str) -> LoginResult:
    super_admin = db.query(SuperAdmin).filter(SuperAdmin.email == email).first()
    if super_admin is None:
        return LoginFailed(InvalidCredentials("Invalid email or password"))
    return _authenticate_super_admin(super_admin, password)


def _authenticate_super_admin(super_admin: SuperAdmin, password: str) -> LoginResult:
    if not verify_password(password, super_admin.password_hash):
        logger.info("Super admin login failed: id=%s", super_admin.id)
        return LoginFailed(InvalidCredentials("Invalid password (super admin)"))
    logger.info("Super admin logged in: id=%s", super_admin.id)
    return Authenticated(
        token=issue_super_admin_token(super_admin.id, super_admin.email),
        is_super_admin=True,
        super_admin=super_admin,
    )


def _authenticate_user(tenant: Tenant, user: User, password: str) -> LoginResult:
    if not user.is_active:
        return LoginFailed(AccountInactive())
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: tenant_id=%s user_id=%s", tenant.id, user.id)
        return LoginFailed(InvalidCredentials("Invalid password"))
    logger.info("User logged in: tenant_id=%s user_id=%s", tenant.id, user.id)
    return Authenticated(
        token=issue_user_token(user.id, user.email, user.role.value, tenant.id),
        user=user,
        tenant=TenantCandidate(tenant_id=tenant.id, tenant_name=tenant.name),
    )


def _find_in_tenants(db: Session, registry: PartitionRegistry, email: str) -> List[_Match]:
    matches = []
    for tenant in list_active_tenants(db):
        try:
            tenant_db = registry.get(tenant.partition_name).session()
            try:
                user = tenant_db.query(User).filter(User.email == email).first()
                if user is not None:
                    tenant_db.expunge(user)
            finally:
                tenant_db.close()
        except SQLAlchemyError as e:
            logger.warning("Skipping partition %s during login lookup: %s", tenant.partition_name, e)
            continue
        if user is not None:
            matches.append(_Match(tenant=tenant, user=user))
    return matches


def auto_login(db: Session, registry: PartitionRegistry, email: str, password: str) -> LoginResult:
    """
    Log in by email alone.

    A super admin email ends the search whether or not the password is right.
    Exactly one tenant match is authenticated; several matches yield
    AmbiguousTenant without any password check.
    """
    super_admin = db.query(SuperAdmin).filter(SuperAdmin.email == email).first()
    if super_admin is not None:
        return _authenticate_super_admin(super_admin, password)

    matches = _find_in_tenants(db, registry, email)
    if not matches:
        return LoginFailed(EmailNotFound())
    if len(matches) > 1:
        logger.info("Login requires tenant selection: %s candidates", len(matches))
        return AmbiguousTenant(candidates=[
            TenantCandidate(tenant_id=m.tenant.id, tenant_name=m.tenant.name) for m in matches
        ])
    match = matches[0]
    return _authenticate_user(match.tenant, match.user, password)


def login_with_tenant(
    db: Session,
    registry: PartitionRegistry,
    tenant_id: int,
    email: str,
    password: str,
) -> LoginResult:
    """Log in against one explicitly chosen tenant."""
    try:
        tenant = resolve_tenant(db, tenant_id)
    except AppError:
        return LoginFailed(TenantNotFound("Tenant not found or inactive"))
    tenant_db = registry.get(tenant.partition_name).session()
    try:
        return tenant_login(tenant_db, tenant, email, password)
    finally:
        tenant_db.close()


def tenant_login(tenant_db: Session, tenant: Tenant, email: str, password: str) -> LoginResult:
    """Log in with a session already bound to the tenant's partition."""
    user = tenant_db.query(User).filter(User.email == email).first()
    if user is None:
        return LoginFailed(EmailNotFound("Email not found in this tenant"))
    return _authenticate_user(tenant, user, password)


def create_super_admin(db: Session, setup_key: str, email: str, password: str, name: str) -> SuperAdmin:
    """
    Raises:
        InvalidSetupKey: setup key does not match settings.SUPER_ADMIN_SETUP_KEY
        DuplicateEmail: a super admin with this email exists
    """
    if setup_key != settings.SUPER_ADMIN_SETUP_KEY:
        raise InvalidSetupKey()
    if db.query(SuperAdmin).filter(SuperAdmin.email == email).first():
        raise DuplicateEmail("Super admin email already exists")

    super_admin = SuperAdmin(email=email, password_hash=hash_password(password), name=name)
    db.add(super_admin)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail("Super admin email already exists")
    db.refresh(super_admin)
    logger.info("Super admin created: id=%s", super_admin.id)
    return super_admin
