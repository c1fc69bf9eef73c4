"""Repository for Tenant model operations."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException
from app.models.tenant import Tenant


class TenantRepository:
    """Repository for Tenant model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, tenant_id: str) -> Tenant | None:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant ID

        Returns:
            Tenant object or None if not found
        """
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_by_domain(self, domain: str) -> Tenant | None:
        """
        Get tenant by its (unique) domain.

        Args:
            domain: Domain string chosen at registration

        Returns:
            Tenant object or None if no tenant uses this domain
        """
        return self.db.query(Tenant).filter(Tenant.domain == domain).first()

    def create(self, tenant: Tenant) -> Tenant:
        """
        Create a new tenant.

        Args:
            tenant: Tenant object to create

        Returns:
            Created Tenant object with ID populated

        Raises:
            ConflictException: If domain or subdomain is already taken
        """
        self.db.add(tenant)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictException("Registration failed") from e
        self.db.refresh(tenant)
        return tenant
