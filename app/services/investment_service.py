import logging

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.base import utcnow
from app.models.investment import Investment
from app.models.tenant_context import TenantContext
from app.repositories.investment_repository import InvestmentRepository
from app.schemas.investment_schemas import InvestmentCreate, InvestmentUpdate

logger = logging.getLogger(__name__)


class InvestmentService:
    """Service layer for investment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InvestmentRepository(db)

    def list_investments(self, context: TenantContext) -> list[Investment]:
        """Get all investments for the tenant, newest first"""
        return self.repo.get_by_tenant(context.tenant_id)

    def get_investment(self, investment_id: int, context: TenantContext) -> Investment:
        """
        Get investment by ID within the caller's tenant.

        Raises:
            NotFoundException: If investment doesn't exist or belongs to another tenant
        """
        investment = self.repo.get_by_id_and_tenant(investment_id, context.tenant_id)
        if not investment:
            raise NotFoundException("Investment not found")
        return investment

    def create_investment(self, data: InvestmentCreate, context: TenantContext) -> Investment:
        """Create an investment owned by the caller's tenant"""
        investment = Investment(
            tenant_id=context.tenant_id,
            last_updated=utcnow(),
            **data.model_dump(),
        )
        investment = self.repo.create(investment)
        logger.info("Created investment %s in tenant %s", investment.id, context.tenant_id)
        return investment

    def update_investment(
        self, investment_id: int, data: InvestmentUpdate, context: TenantContext
    ) -> Investment:
        """
        Apply a partial update and stamp last_updated.

        last_updated moves to now on every update, even when no value
        changed (e.g. an empty body).

        Raises:
            NotFoundException: If investment doesn't exist or belongs to another tenant
        """
        investment = self.get_investment(investment_id, context)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(investment, field, value)

        now = utcnow()
        # last_updated never moves backwards
        investment.last_updated = max(now, investment.last_updated)
        return self.repo.update(investment)

    def delete_investment(self, investment_id: int, context: TenantContext) -> None:
        """
        Hard delete an investment.

        Raises:
            NotFoundException: If investment doesn't exist or belongs to another tenant
        """
        investment = self.get_investment(investment_id, context)
        self.repo.delete(investment)
        logger.info("Deleted investment %s in tenant %s", investment_id, context.tenant_id)
