import logging

from sqlalchemy.orm import Session

from app.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from app.core.security import hash_password
from app.models.role import UserRole
from app.models.tenant_context import TenantContext
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.admin_schemas import RoleUpdate, ResetPasswordRequest
from app.services.session_service import SessionService

logger = logging.getLogger(__name__)


class AdminService:
    """Service layer for tenant member management (ADMIN only)"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.session_service = SessionService(db)

    def _require_admin(self, context: TenantContext) -> None:
        if not context.is_admin():
            raise ForbiddenException("Admin access required")

    def _get_member(self, user_id: str, context: TenantContext) -> User:
        member = self.user_repo.get_by_id_and_tenant(user_id, context.tenant_id)
        if not member:
            raise NotFoundException("User not found")
        return member

    def list_members(self, context: TenantContext) -> list[User]:
        """
        Get all members of the caller's tenant.

        Args:
            context: Tenant context

        Returns:
            Users affiliated with the tenant
        """
        self._require_admin(context)
        return self.user_repo.get_by_tenant(context.tenant_id)

    def update_member_role(
        self, user_id: str, role_update: RoleUpdate, context: TenantContext
    ) -> User:
        """
        Change a member's role.

        Args:
            user_id: User ID to update
            role_update: New role
            context: Tenant context

        Returns:
            Updated user

        Raises:
            ForbiddenException: If caller is not ADMIN
            ValidationException: If an admin tries to demote themselves
            NotFoundException: If user is not in the caller's tenant
        """
        self._require_admin(context)

        # Cannot demote self (check first for better error message)
        if user_id == context.user.id and role_update.role == UserRole.USER:
            raise ValidationException(
                "Cannot demote yourself. Ask another admin to change your role."
            )

        member = self._get_member(user_id, context)
        member.role = role_update.role
        member = self.user_repo.update(member)
        logger.info(
            "Admin %s set role of %s to %s", context.user.id, member.id, member.role.value
        )
        return member

    def remove_member(self, user_id: str, context: TenantContext) -> None:
        """
        Detach a member from the tenant.

        The account is kept; its tenant affiliation is cleared, its role
        reset to USER and its sessions destroyed. No other member is
        promoted, even if the tenant is left without an admin.

        Raises:
            ForbiddenException: If caller is not ADMIN
            ValidationException: If an admin tries to remove themselves
            NotFoundException: If user is not in the caller's tenant
        """
        self._require_admin(context)

        if user_id == context.user.id:
            raise ValidationException("Cannot remove yourself")

        member = self._get_member(user_id, context)
        member.tenant_id = None
        member.role = UserRole.USER
        self.user_repo.update(member)
        self.session_service.destroy_for_user(member.id)
        logger.info("Admin %s removed %s from tenant %s", context.user.id, user_id, context.tenant_id)

    def reset_password(
        self, user_id: str, data: ResetPasswordRequest, context: TenantContext
    ) -> None:
        """
        Set a new password for a member of the caller's tenant.

        Raises:
            ForbiddenException: If caller is not ADMIN
            NotFoundException: If user is not in the caller's tenant
        """
        self._require_admin(context)

        member = self._get_member(user_id, context)
        member.password_hash = hash_password(data.new_password)
        self.user_repo.update(member)
        logger.info("Admin %s reset password of %s", context.user.id, member.id)
