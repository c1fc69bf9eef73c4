from datetime import date
from decimal import Decimal
from pydantic import BaseModel, Field


class CurrencyTotals(BaseModel):
    """Sum of current investment value per tracked currency"""

    SEK: Decimal = Decimal("0")
    INR: Decimal = Decimal("0")


class DashboardStats(BaseModel):
    """Summary counters for the dashboard"""

    total_policies: int
    expiring_soon: int = Field(..., description="Maturity date within the attention window")
    needs_renewal: int = Field(..., description="Next renewal date on or before window end")
    total_investments: int
    investments_by_currency: CurrencyTotals


class InvestmentTypeEntry(BaseModel):
    type: str
    value: Decimal
    count: int = 1


class InvestmentPlatformEntry(BaseModel):
    platform: str
    value: Decimal
    count: int = 1


class PremiumEntry(BaseModel):
    provider: str
    monthly_premium: Decimal
    yearly_premium: Decimal
    policy_count: int = 1
    currency: str


class RenewalEntry(BaseModel):
    date: date
    count: int
    total_premium: Decimal


class DashboardAnalytics(BaseModel):
    """
    Chart data for the dashboard.

    The per-type, per-platform and per-provider lists hold one entry per
    record; clients combine entries sharing a key themselves.
    """

    investments_by_type: list[InvestmentTypeEntry]
    investments_by_platform: list[InvestmentPlatformEntry]
    premiums_by_provider: list[PremiumEntry]
    upcoming_renewals: list[RenewalEntry]
