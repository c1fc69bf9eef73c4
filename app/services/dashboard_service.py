from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.config import settings
from app.models.policy import Policy, PremiumFrequency
from app.models.tenant_context import TenantContext
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.policy_repository import PolicyRepository
from app.schemas.dashboard_schemas import (
    CurrencyTotals,
    DashboardStats,
    DashboardAnalytics,
    InvestmentTypeEntry,
    InvestmentPlatformEntry,
    PremiumEntry,
    RenewalEntry,
)

TRACKED_CURRENCIES = ("SEK", "INR")
ZERO = Decimal("0")


def needs_renewal(policy: Policy, today: date, window_days: int) -> bool:
    """Next renewal on or before the window end (overdue renewals included)"""
    if policy.next_renewal_date is None:
        return False
    return policy.next_renewal_date <= today + timedelta(days=window_days)


def expiring_soon(policy: Policy, today: date, window_days: int) -> bool:
    """Maturity strictly after today and on or before the window end"""
    if policy.maturity_date is None:
        return False
    return today < policy.maturity_date <= today + timedelta(days=window_days)


def premium_breakdown(policy: Policy) -> tuple[Decimal, Decimal]:
    """
    (monthly, yearly) premium derived from the single premium field.

    A yearly premium is spread over 12 months; every other frequency is
    treated as a monthly amount.
    """
    premium = policy.premium if policy.premium is not None else ZERO
    if policy.premium_frequency == PremiumFrequency.YEARLY:
        return premium / 12, premium
    return premium, premium * 12


class DashboardService:
    """
    Derives dashboard numbers from the tenant's current records.

    Nothing is cached or stored; every call reads the policies and
    investments again.

    Note that needs_renewal and expiring_soon look at different date
    fields with different windows, so a policy can count towards both,
    either or neither.
    """

    def __init__(self, db: Session):
        self.db = db
        self.policy_repo = PolicyRepository(db)
        self.investment_repo = InvestmentRepository(db)

    def get_stats(self, context: TenantContext, today: date | None = None) -> DashboardStats:
        today = today or date.today()
        window = settings.ATTENTION_WINDOW_DAYS

        policies = self.policy_repo.get_by_tenant(context.tenant_id)
        investments = self.investment_repo.get_by_tenant(context.tenant_id)

        totals = {currency: ZERO for currency in TRACKED_CURRENCIES}
        for investment in investments:
            # Other currencies are left out of the totals
            if investment.currency in totals:
                totals[investment.currency] += investment.current_value

        return DashboardStats(
            total_policies=len(policies),
            needs_renewal=sum(1 for p in policies if needs_renewal(p, today, window)),
            expiring_soon=sum(1 for p in policies if expiring_soon(p, today, window)),
            total_investments=len(investments),
            investments_by_currency=CurrencyTotals(**totals),
        )

    def get_analytics(
        self, context: TenantContext, today: date | None = None
    ) -> DashboardAnalytics:
        today = today or date.today()
        window = settings.ATTENTION_WINDOW_DAYS

        policies = self.policy_repo.get_by_tenant(context.tenant_id)
        investments = self.investment_repo.get_by_tenant(context.tenant_id)

        investments_by_type = [
            InvestmentTypeEntry(type=inv.type.value, value=inv.current_value) for inv in investments
        ]
        investments_by_platform = [
            InvestmentPlatformEntry(platform=inv.platform, value=inv.current_value)
            for inv in investments
        ]

        premiums_by_provider = []
        for policy in policies:
            monthly, yearly = premium_breakdown(policy)
            premiums_by_provider.append(
                PremiumEntry(
                    provider=policy.provider,
                    monthly_premium=monthly,
                    yearly_premium=yearly,
                    currency=policy.premium_currency or "SEK",
                )
            )

        return DashboardAnalytics(
            investments_by_type=investments_by_type,
            investments_by_platform=investments_by_platform,
            premiums_by_provider=premiums_by_provider,
            upcoming_renewals=self._upcoming_renewals(policies, today, window),
        )

    def _upcoming_renewals(
        self, policies: list[Policy], today: date, window: int
    ) -> list[RenewalEntry]:
        """Policies counted by needs_renewal, grouped by renewal date"""
        by_date: dict[date, list[Policy]] = defaultdict(list)
        for policy in policies:
            if needs_renewal(policy, today, window):
                by_date[policy.next_renewal_date].append(policy)

        return [
            RenewalEntry(
                date=renewal_date,
                count=len(group),
                total_premium=sum(
                    (p.premium for p in group if p.premium is not None), ZERO
                ),
            )
            for renewal_date, group in sorted(by_date.items())
        ]
