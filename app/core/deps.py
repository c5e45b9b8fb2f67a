"""
Dependencies and guards for FastAPI endpoints.

Tenant binding: every tenant-scoped endpoint depends (directly or through
get_current_user) on get_tenant_context, which resolves the tenant from the
X-Tenant-ID header, or from the tenant claim of the bearer token when the
header is absent, and binds that tenant's partition handle to the request.
"""
import logging
from dataclasses import dataclass
from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    AppError,
    ForbiddenError,
    InsufficientRole,
    InvalidTenant,
    MissingTenant,
    TenantMismatch,
    UnauthorizedError,
    AccountInactive,
)
from app.core.security import decode_token
from app.db.partitions import Partition, PartitionRegistry
from app.db.session import SessionLocal
from app.models.tenant import SuperAdmin
from app.models.user import Role, User
from app.services.tenant_service import resolve_tenant

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

# Largest id a BIGINT (and an SQLite INTEGER) can hold
MAX_TENANT_ID = 2 ** 63 - 1


@dataclass(frozen=True)
class TenantContext:
    """Tenant bound to the current request."""
    tenant_id: int
    tenant_name: str
    partition_name: str
    partition: Partition


def get_db() -> Generator:
    """Dependency for getting a directory database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_partition_registry(request: Request) -> PartitionRegistry:
    """The application's partition registry (set up in app.main)."""
    return request.app.state.partitions


def _token_claims(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[dict]:
    if credentials is None:
        return None
    try:
        return decode_token(credentials.credentials)
    except ValueError:
        return None


def _requested_tenant_id(request: Request, claims: Optional[dict]) -> int:
    raw = request.headers.get(settings.TENANT_HEADER)
    if raw is None or not raw.strip():
        tenant_id = (claims or {}).get("tenant_id")
        if tenant_id is None:
            raise MissingTenant(f"{settings.TENANT_HEADER} header is required")
        raw = str(tenant_id)
    try:
        tenant_id = int(raw.strip())
    except ValueError:
        raise InvalidTenant(f"Invalid {settings.TENANT_HEADER} header")
    if not 1 <= tenant_id <= MAX_TENANT_ID:
        raise InvalidTenant(f"Invalid {settings.TENANT_HEADER} header")
    return tenant_id


def get_tenant_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db),
    registry: PartitionRegistry = Depends(get_partition_registry),
) -> TenantContext:
    """
    Strict tenant binder: fails with MISSING_TENANT / INVALID_TENANT /
    TENANT_NOT_FOUND / TENANT_INACTIVE before any handler logic runs.
    """
    tenant_id = _requested_tenant_id(request, _token_claims(credentials))
    tenant = resolve_tenant(db, tenant_id)
    return TenantContext(
        tenant_id=tenant.id,
        tenant_name=tenant.name,
        partition_name=tenant.partition_name,
        partition=registry.get(tenant.partition_name),
    )


def get_optional_tenant_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db),
    registry: PartitionRegistry = Depends(get_partition_registry),
) -> Optional[TenantContext]:
    """Optional tenant binder: any resolution failure yields None."""
    try:
        return get_tenant_context(request, credentials, db, registry)
    except AppError as e:
        logger.debug("Optional tenant binding skipped: %s", e.kind)
        return None
    except (SQLAlchemyError, OverflowError) as e:
        logger.warning("Optional tenant binding skipped: %s", e)
        return None


def get_tenant_db(ctx: TenantContext = Depends(get_tenant_context)) -> Generator:
    """Dependency for getting a session on the bound tenant's partition"""
    db = ctx.partition.session()
    try:
        yield db
    finally:
        db.close()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_tenant_db),
) -> User:
    """
    Get current authenticated tenant user from JWT token
    """
    try:
        payload = decode_token(credentials.credentials)
        user_id = int(payload["sub"])
    except (ValueError, TypeError, KeyError):
        raise UnauthorizedError("Invalid token")

    if payload.get("is_super_admin"):
        raise ForbiddenError("Super admin tokens cannot access tenant data")

    token_tenant = payload.get("tenant_id")
    if token_tenant is None or int(token_tenant) != ctx.tenant_id:
        raise TenantMismatch()

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("User not found or inactive")
    if not user.is_active:
        raise AccountInactive()

    return user


def require_roles(*allowed_roles: Role):
    """
    Dependency factory for role-based access control

    Usage:
        @router.get("/admin-only")
        async def admin_endpoint(user: User = Depends(require_roles(Role.ADMIN))):
            ...
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise InsufficientRole(
                f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker


def get_current_super_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> SuperAdmin:
    """Authenticate a super admin; never binds a tenant."""
    try:
        payload = decode_token(credentials.credentials)
        super_admin_id = int(payload["sub"])
    except (ValueError, TypeError, KeyError):
        raise UnauthorizedError("Invalid token")

    if not payload.get("is_super_admin"):
        raise ForbiddenError("Super admin access required")

    super_admin = db.get(SuperAdmin, super_admin_id)
    if super_admin is None:
        raise UnauthorizedError("Super admin not found")
    return super_admin
