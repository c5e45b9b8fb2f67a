"""
Domain error taxonomy.

Services raise these; the handlers in app.core.errors turn them into the
JSON error envelope with a stable machine-readable ``kind``.
"""
from fastapi import status


class AppError(Exception):
    """Base class for business-rule failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_kind = "ERROR"
    default_message = "Request failed"

    def __init__(self, message=None, kind=None):
        self.kind = kind or self.default_kind
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self):
        return f"{type(self).__name__}(kind={self.kind!r}, message={self.message!r})"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_kind = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_kind = "CONFLICT"
    default_message = "Conflict with current state"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_kind = "UNAUTHORIZED"
    default_message = "Invalid authentication credentials"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_kind = "FORBIDDEN"
    default_message = "Access denied"


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_kind = "VALIDATION_ERROR"
    default_message = "Invalid request data"


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_kind = "INTERNAL_ERROR"
    default_message = "Internal server error"


# --- Tenancy ---

class MissingTenant(ValidationFailed):
    default_kind = "MISSING_TENANT"
    default_message = "X-Tenant-ID header is required"


class InvalidTenant(ValidationFailed):
    default_kind = "INVALID_TENANT"
    default_message = "Invalid X-Tenant-ID header"


class TenantNotFound(NotFoundError):
    default_kind = "TENANT_NOT_FOUND"
    default_message = "Tenant not found"


class TenantInactive(ForbiddenError):
    default_kind = "TENANT_INACTIVE"
    default_message = "Tenant is deactivated"


class TenantMismatch(ForbiddenError):
    default_kind = "TENANT_MISMATCH"
    default_message = "Token does not belong to this tenant"


class DuplicateTenantName(ConflictError):
    default_kind = "DUPLICATE_TENANT_NAME"
    default_message = "Tenant name already exists"


# --- Identity ---

class UserNotFound(NotFoundError):
    default_kind = "USER_NOT_FOUND"
    default_message = "User not found"


class DuplicateEmail(ConflictError):
    default_kind = "DUPLICATE_EMAIL"
    default_message = "Email already exists"


class EmailNotFound(UnauthorizedError):
    default_kind = "EMAIL_NOT_FOUND"
    default_message = "Email not found"


class InvalidCredentials(UnauthorizedError):
    default_kind = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class AccountInactive(ForbiddenError):
    default_kind = "ACCOUNT_INACTIVE"
    default_message = "Account is inactive"


class InsufficientRole(ForbiddenError):
    default_kind = "INSUFFICIENT_ROLE"
    default_message = "Insufficient permissions"


class InvalidSetupKey(ForbiddenError):
    default_kind = "INVALID_SETUP_KEY"
    default_message = "Invalid setup key"


# --- Attendance and breaks ---

class FaceVerificationRequired(ForbiddenError):
    default_kind = "FACE_VERIFICATION_REQUIRED"
    default_message = "Face verification required"


class FaceNotRegistered(ValidationFailed):
    default_kind = "FACE_NOT_REGISTERED"
    default_message = "Face not registered"


class AlreadyClockedIn(ConflictError):
    default_kind = "ALREADY_CLOCKED_IN"
    default_message = "Attendance already recorded for today"


class NoActiveSession(ConflictError):
    default_kind = "NO_ACTIVE_SESSION"
    default_message = "No active check-in found or already clocked out"


class ActiveBreakMustEndFirst(ConflictError):
    default_kind = "ACTIVE_BREAK_MUST_END_FIRST"
    default_message = "Please end your break before clocking out"


class MustClockInFirst(ConflictError):
    default_kind = "MUST_CLOCK_IN_FIRST"
    default_message = "You must clock in first before starting a break"


class BreakAlreadyActive(ConflictError):
    default_kind = "BREAK_ALREADY_ACTIVE"
    default_message = "You already have an active break"


class BreakLimitReached(ConflictError):
    default_kind = "BREAK_LIMIT_REACHED"
    default_message = "Maximum break time for today reached"


class NoActiveBreak(ConflictError):
    default_kind = "NO_ACTIVE_BREAK"
    default_message = "No active break found"


class AttendanceNotFound(NotFoundError):
    default_kind = "ATTENDANCE_NOT_FOUND"
    default_message = "Attendance not found"


# --- Payroll and tasks ---

class PayrollNotFound(NotFoundError):
    default_kind = "PAYROLL_NOT_FOUND"
    default_message = "Payroll not found"


class TaskNotFound(NotFoundError):
    default_kind = "TASK_NOT_FOUND"
    default_message = "Task not found"
