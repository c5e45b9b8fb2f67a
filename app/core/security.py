"""
Security utilities for authentication and authorization
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.core.config import settings

# Configure logger
logger = logging.getLogger(__name__)

# Track available backends
argon2_available = False
bcrypt_available = False

# Test backends at startup
try:
    import argon2
    hasher = argon2.PasswordHasher()
    if hasher.verify(hasher.hash("test"), "test"):
        argon2_available = True
        logger.info("Argon2 backend is available")
except Exception as e:
    logger.warning(f"Argon2 backend not available: {e}")

try:
    import bcrypt
    if bcrypt.checkpw(b"test", bcrypt.hashpw(b"test", bcrypt.gensalt())):
        bcrypt_available = True
        logger.info("Bcrypt backend is available")
except Exception as e:
    logger.warning(f"Bcrypt backend not available: {e}")

# Ensure at least one backend is available
if not argon2_available and not bcrypt_available:
    error_msg = "No password hashing backends available. Please install argon2-cffi or bcrypt."
    logger.critical(error_msg)
    raise RuntimeError(error_msg)

# Only used to verify hashes created by older deployments
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password using available backend (argon2 preferred, bcrypt fallback)"""
    if argon2_available:
        try:
            return argon2.PasswordHasher().hash(password)
        except argon2.exceptions.HashingError as e:
            logger.warning(f"Argon2 hashing failed, falling back to bcrypt: {e}")

    if bcrypt_available:
        # Bcrypt has a 72-byte limit
        password_bytes = password.encode('utf-8')[:72]
        return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode('utf-8')

    raise RuntimeError("No hashing backends available")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash"""
    if not hashed_password:
        return False

    if hashed_password.startswith('$argon2'):
        if not argon2_available:
            return False
        try:
            return argon2.PasswordHasher().verify(hashed_password, plain_password)
        except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
            return False

    if bcrypt_available:
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8')[:72],
                hashed_password.encode('utf-8')
            )
        except ValueError:
            pass

    # Fallback to passlib context (for existing hashes)
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(data: Dict, expires_minutes: Optional[int] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()

    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRE_MINUTES

    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> Dict:
    """Decode and verify a JWT token"""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise ValueError("Invalid token")


def issue_user_token(user_id: int, email: str, role: str, tenant_id: int) -> str:
    """Tenant-bound session token for a tenant user."""
    return create_access_token({
        "sub": str(user_id),
        "email": email,
        "role": role,
        "tenant_id": tenant_id,
        "is_super_admin": False,
    })


def issue_super_admin_token(super_admin_id: int, email: str) -> str:
    """Session token for a super admin; carries no tenant."""
    return create_access_token({
        "sub": str(super_admin_id),
        "email": email,
        "role": "SUPER_ADMIN",
        "tenant_id": None,
        "is_super_admin": True,
    })
