from sqlalchemy.orm import Session

from app.models.investment import Investment


class InvestmentRepository:
    """Repository for Investment data access. Every query is tenant-scoped."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(self, tenant_id: str) -> list[Investment]:
        """Get all investments for a tenant, newest first"""
        return (
            self.db.query(Investment)
            .filter(Investment.tenant_id == tenant_id)
            .order_by(Investment.created_at.desc(), Investment.id.desc())
            .all()
        )

    def get_by_id_and_tenant(self, investment_id: int, tenant_id: str) -> Investment | None:
        """
        Get investment ensuring it belongs to the tenant (multi-tenant safety).

        Returns None if investment doesn't exist or belongs to another tenant.
        """
        return (
            self.db.query(Investment)
            .filter(Investment.id == investment_id, Investment.tenant_id == tenant_id)
            .first()
        )

    def create(self, investment: Investment) -> Investment:
        """Create new investment"""
        self.db.add(investment)
        self.db.commit()
        self.db.refresh(investment)
        return investment

    def update(self, investment: Investment) -> Investment:
        """Update existing investment"""
        self.db.commit()
        self.db.refresh(investment)
        return investment

    def delete(self, investment: Investment) -> None:
        """Hard delete an investment"""
        self.db.delete(investment)
        self.db.commit()
