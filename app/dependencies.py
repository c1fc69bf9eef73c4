import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import UnauthorizedException, ForbiddenException
from app.database import get_db
from app.models.role import UserRole
from app.models.session import UserSession
from app.models.tenant_context import TenantContext
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.session_service import SessionService

logger = logging.getLogger(__name__)


def get_session_token(request: Request) -> str | None:
    """Opaque session token from the HTTP-only cookie"""
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_current_session(
    request: Request, db: Session = Depends(get_db)
) -> UserSession:
    """
    FastAPI dependency resolving the live server-side session.

    Raises:
        UnauthorizedException: If the cookie is missing, unknown or expired
    """
    user_session = SessionService(db).resolve(get_session_token(request))
    if user_session is None:
        raise UnauthorizedException("Unauthorized")
    return user_session


def get_current_user(
    user_session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency returning the authenticated user.

    Flow:
    1. Resolve session from cookie (401 if missing or expired)
    2. Load the user named in the session payload
    3. Return User object for use in endpoints

    Raises:
        UnauthorizedException: If the session's user no longer exists
    """
    user = UserRepository(db).get_by_id(user_session.user_id)
    if user is None:
        raise UnauthorizedException("Unauthorized")
    return user


async def get_tenant_context(user: User = Depends(get_current_user)) -> TenantContext:
    """
    FastAPI dependency building the tenant context for data access.

    Tenant and role are read from the user's current row, so role changes
    and removals apply to the very next request.

    Raises:
        ForbiddenException: If the user is not affiliated with any tenant
    """
    if user.tenant_id is None:
        raise ForbiddenException("No tenant access")
    return TenantContext(user=user, tenant_id=user.tenant_id, role=user.role)


async def require_admin(context: TenantContext = Depends(get_tenant_context)) -> TenantContext:
    """
    FastAPI dependency allowing only tenant admins through.

    Raises:
        ForbiddenException: If the user's role is not ADMIN
    """
    match context.role:
        case UserRole.ADMIN:
            return context
        case UserRole.USER:
            logger.info("User %s denied admin access", context.user.id)
            raise ForbiddenException("Admin access required")
