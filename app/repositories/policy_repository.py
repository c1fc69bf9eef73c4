from sqlalchemy.orm import Session

from app.models.policy import Policy


class PolicyRepository:
    """Repository for Policy data access. Every query is tenant-scoped."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(self, tenant_id: str) -> list[Policy]:
        """Get all policies for a tenant, newest first"""
        return (
            self.db.query(Policy)
            .filter(Policy.tenant_id == tenant_id)
            .order_by(Policy.created_at.desc(), Policy.id.desc())
            .all()
        )

    def get_by_id_and_tenant(self, policy_id: int, tenant_id: str) -> Policy | None:
        """
        Get policy ensuring it belongs to the tenant (multi-tenant safety).

        Returns None if policy doesn't exist or belongs to another tenant.
        """
        return (
            self.db.query(Policy)
            .filter(Policy.id == policy_id, Policy.tenant_id == tenant_id)
            .first()
        )

    def create(self, policy: Policy) -> Policy:
        """Create new policy"""
        self.db.add(policy)
        self.db.commit()
        self.db.refresh(policy)
        return policy

    def update(self, policy: Policy) -> Policy:
        """Update existing policy"""
        self.db.commit()
        self.db.refresh(policy)
        return policy

    def delete(self, policy: Policy) -> None:
        """Hard delete a policy"""
        self.db.delete(policy)
        self.db.commit()
