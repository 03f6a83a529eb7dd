"""Authentication and authorization."""
import logging
import secrets

from passlib.context import CryptContext
from passlib.hash import hex_sha256

from .config import settings
from .models import User

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)
logger = logging.getLogger(__name__)


def generate_session_token() -> str:
    """Opaque session token stored in the sessions table."""
    return secrets.token_urlsafe(32)


def validate_new_password(*, new_password: str | None, username: str | None = None) -> str | None:
    """Server-side password policy. Returns an error message or None."""
    if not new_password:
        return "Password is required"
    if len(new_password) < settings.PASSWORD_MIN_LENGTH:
        return f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
    if username and new_password.lower() == username.lower():
        return "Password must not match username"
    return None


def verify_password(plain_password: str, user: User) -> bool:
    """Verify password against the stored hash.

    Rows carrying a salt were hashed as hex sha256(salt + password).
    """
    if not plain_password or not user.password_hash:
        return False
    try:
        if user.password_salt:
            return hex_sha256.verify(user.password_salt + plain_password, user.password_hash)
        return pwd_context.verify(plain_password, user.password_hash)
    except (ValueError, TypeError):
        # Invalid/corrupted hash should not crash login flow.
        logger.exception("Password verification failed due to invalid hash format")
        return False


def get_password_hash(password: str) -> str:
    """Hash password."""
    return pwd_context.hash(password)


# Alias for convenience
hash_password = get_password_hash


# Role permissions matrix
ROLE_PERMISSIONS = {
    "admin": {
        "canViewAllProjects": True,
        "canReviewProjects": True,
        "canViewAllPrices": True,
        "canReviewInquiries": True,
        "canManageUsers": True,
        "canManageCatalog": True,
        "canManageSettings": True,
        "canViewAudit": True,
    },
    "sales_manager": {
        "canViewAllProjects": True,
        "canReviewProjects": True,
        "canViewAllPrices": True,
        "canReviewInquiries": True,
        "canManageUsers": True,
        "canManageCatalog": True,
        "canManageSettings": True,
        "canViewAudit": True,
    },
    "employee": {
        "canViewAllProjects": False,
        "canReviewProjects": False,
        "canViewAllPrices": False,
        "canReviewInquiries": False,
        "canManageUsers": False,
        "canManageCatalog": False,
        "canManageSettings": False,
        "canViewAudit": False,
    },
}

UI_PERMISSION_KEYS = tuple(ROLE_PERMISSIONS["admin"].keys())


def check_permission(user: User, permission: str) -> bool:
    """Check if user has specific permission."""
    permissions = ROLE_PERMISSIONS.get(user.role, {})
    return permissions.get(permission, False)


def get_role_ui_permissions(role: str) -> dict[str, bool]:
    """Full permission map for a role; unknown roles get everything denied."""
    permissions = ROLE_PERMISSIONS.get(role, {})
    return {key: bool(permissions.get(key, False)) for key in UI_PERMISSION_KEYS}
