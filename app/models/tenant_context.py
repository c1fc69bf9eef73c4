"""Tenant context for request authorization."""

from dataclasses import dataclass

from app.models.user import User
from app.models.role import UserRole


@dataclass
class TenantContext:
    """
    Resolved identity for one request.

    Built by the authorization dependencies from the session and the
    user's current database row, then passed explicitly into every
    service call so tenant scoping is part of each signature.

    Attributes:
        user: The authenticated User object
        tenant_id: The tenant all reads and writes are scoped to
        role: The user's role within this tenant
    """

    user: User
    tenant_id: str
    role: UserRole

    def is_admin(self) -> bool:
        """Check if user may manage tenant members."""
        match self.role:
            case UserRole.ADMIN:
                return True
            case UserRole.USER:
                return False

    def __repr__(self) -> str:
        return f"<TenantContext(user_id={self.user.id}, tenant_id={self.tenant_id}, role={self.role.value})>"
