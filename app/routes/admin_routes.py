from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.models.tenant_context import TenantContext
from app.services.admin_service import AdminService
from app.schemas.admin_schemas import RoleUpdate, ResetPasswordRequest
from app.schemas.auth_schemas import UserResponse, MessageResponse

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
def list_members(
    context: TenantContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    List all members of the current tenant.

    - **Requires ADMIN**
    """
    return AdminService(db).list_members(context)


@router.put("/users/{user_id}/role", response_model=UserResponse)
def update_member_role(
    user_id: str,
    role_update: RoleUpdate,
    context: TenantContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Change a member's role.

    - **Requires ADMIN**
    - Role must be `admin` or `user`
    - Admins cannot demote themselves
    """
    return AdminService(db).update_member_role(user_id, role_update, context)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    user_id: str,
    context: TenantContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Remove a member from the tenant.

    - **Requires ADMIN**
    - The account is kept but loses access to the tenant's data
    - Admins cannot remove themselves
    """
    AdminService(db).remove_member(user_id, context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/users/{user_id}/reset-password", response_model=MessageResponse)
def reset_member_password(
    user_id: str,
    data: ResetPasswordRequest,
    context: TenantContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Reset a member's password.

    - **Requires ADMIN**
    """
    AdminService(db).reset_password(user_id, data, context)
    return MessageResponse(message="Password reset successfully")
