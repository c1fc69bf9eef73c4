from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_tenant_context
from app.models.tenant_context import TenantContext
from app.services.dashboard_service import DashboardService
from app.schemas.dashboard_schemas import DashboardStats, DashboardAnalytics

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_stats(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Summary counters.

    - needs_renewal: next renewal date within the next 60 days (or overdue)
    - expiring_soon: maturity date after today and within the next 60 days
    - investments_by_currency: current value totals for SEK and INR only
    """
    return DashboardService(db).get_stats(context)


@router.get("/analytics", response_model=DashboardAnalytics)
def get_analytics(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Chart data: one entry per investment / policy, plus upcoming renewals"""
    return DashboardService(db).get_analytics(context)
