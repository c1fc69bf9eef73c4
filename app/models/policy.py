from datetime import date
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import String, Integer, Date, Text, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, ExactDecimal


def _enum_column(enum_cls: type[PyEnum]) -> Enum:
    return Enum(enum_cls, native_enum=False, values_callable=lambda x: [e.value for e in x])


class PolicyType(str, PyEnum):
    """Insurance policy category"""

    HEALTH = "Health"
    LIFE = "Life"
    VEHICLE = "Vehicle"
    PROPERTY = "Property"
    TRAVEL = "Travel"


class PremiumFrequency(str, PyEnum):
    """How often the premium amount is paid"""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half-yearly"
    YEARLY = "yearly"


class BeneficiaryType(str, PyEnum):
    """Who the policy pays out to (shown as a badge)"""

    SINGLE = "SINGLE"
    FAMILY = "FAMILY"
    PARENTS = "PARENTS"
    SPOUSE = "SPOUSE"
    CHILDREN = "CHILDREN"
    OTHER = "OTHER"


class PolicyStatus(str, PyEnum):
    """Display status derived from the maturity date at read time"""

    ACTIVE = "active"
    MATURING_SOON = "maturing_soon"
    MATURED = "matured"


def derive_policy_status(maturity_date: date | None, today: date, window_days: int) -> PolicyStatus:
    """
    Status of a policy as of `today`.

    MATURED once the maturity date has passed, MATURING_SOON while it is
    within `window_days` (inclusive), ACTIVE otherwise or without a
    maturity date.
    """
    if maturity_date is None:
        return PolicyStatus.ACTIVE
    days_left = (maturity_date - today).days
    if days_left < 0:
        return PolicyStatus.MATURED
    if days_left <= window_days:
        return PolicyStatus.MATURING_SOON
    return PolicyStatus.ACTIVE


class Policy(Base, CreatedAtMixin):
    """
    Insurance policy owned by a tenant.

    renewal_status is stored for compatibility but never changed by
    business logic; the displayed status is derived from the dates at
    read time (see derive_policy_status).
    document_url is an opaque reference returned by the document storage.
    """

    __tablename__ = "policies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    provider: Mapped[str] = mapped_column(String(255), nullable=False)
    policy_name: Mapped[str] = mapped_column(String(255), nullable=False)
    policy_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    policy_type: Mapped[PolicyType] = mapped_column(_enum_column(PolicyType), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    maturity_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_renewal_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_premium_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    premium: Mapped[Decimal | None] = mapped_column(ExactDecimal, nullable=True)
    premium_currency: Mapped[str] = mapped_column(String(10), nullable=False, default="SEK")
    premium_frequency: Mapped[PremiumFrequency | None] = mapped_column(
        _enum_column(PremiumFrequency), nullable=True
    )
    nominee: Mapped[str | None] = mapped_column(String(255), nullable=True)
    beneficiary_type: Mapped[BeneficiaryType | None] = mapped_column(
        _enum_column(BeneficiaryType), nullable=True
    )
    paid_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    renewal_status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    document_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    __table_args__ = (Index("ix_policies_tenant_created", "tenant_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Policy(id={self.id}, tenant_id={self.tenant_id}, name='{self.policy_name}')>"
