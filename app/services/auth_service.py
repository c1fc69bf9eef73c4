import logging

from sqlalchemy.orm import Session

from app.core.exceptions import (
    ConflictException,
    UnauthorizedException,
    ValidationException,
)
from app.core.security import hash_password, verify_password
from app.models.role import UserRole
from app.models.tenant import Tenant
from app.models.user import User
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.auth_schemas import (
    RegisterRequest,
    LoginRequest,
    ChangePasswordRequest,
    CurrentUserResponse,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Service for registration, login and self-service credentials"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.tenant_repo = TenantRepository(db)

    def register(self, data: RegisterRequest) -> User:
        """
        Register a new account under a domain.

        Flow:
        1. Reject an email that is already registered
        2. Get the tenant for the domain, creating it on first use
        3. First account in the tenant becomes ADMIN, later ones USER
        4. Store the bcrypt hash, never the password

        Raises:
            ConflictException: If email (or a racing tenant domain) is taken
        """
        if self.user_repo.get_by_email(data.email):
            raise ConflictException("Email already registered")

        tenant = self._get_or_create_tenant(data.domain)

        # Decided once, at creation; never re-evaluated afterwards
        is_first_user = self.user_repo.count_by_tenant(tenant.id) == 0

        user = User(
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            tenant_id=tenant.id,
            role=UserRole.ADMIN if is_first_user else UserRole.USER,
        )
        user = self.user_repo.create(user)
        logger.info(
            "Registered user %s in tenant %s as %s", user.id, tenant.id, user.role.value
        )
        return user

    def _get_or_create_tenant(self, domain: str) -> Tenant:
        tenant = self.tenant_repo.get_by_domain(domain)
        if tenant:
            return tenant

        tenant = self.tenant_repo.create(Tenant(name=domain, domain=domain, subdomain=domain))
        logger.info("Created tenant %s for domain '%s'", tenant.id, domain)
        return tenant

    def authenticate(self, data: LoginRequest) -> User:
        """
        Verify email and password.

        Unknown email, missing hash and wrong password all produce the
        same error so callers cannot tell which factor failed.

        Raises:
            UnauthorizedException: On any credential mismatch
        """
        user = self.user_repo.get_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            logger.info("Failed login attempt")
            raise UnauthorizedException(INVALID_CREDENTIALS)

        logger.info("User %s logged in", user.id)
        return user

    def change_password(self, user: User, data: ChangePasswordRequest) -> None:
        """
        Change the caller's own password.

        Raises:
            ValidationException: If current password is wrong
        """
        if not verify_password(data.current_password, user.password_hash):
            raise ValidationException("Current password is incorrect")

        user.password_hash = hash_password(data.new_password)
        self.user_repo.update(user)
        logger.info("User %s changed their password", user.id)

    def get_profile(self, user: User) -> CurrentUserResponse:
        """Profile of the current user, with their tenant's domain"""
        domain = None
        if user.tenant_id:
            tenant = self.tenant_repo.get_by_id(user.tenant_id)
            domain = tenant.domain if tenant else None

        profile = CurrentUserResponse.model_validate(user)
        profile.domain = domain
        return profile
