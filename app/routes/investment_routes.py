from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_tenant_context
from app.models.tenant_context import TenantContext
from app.services.investment_service import InvestmentService
from app.schemas.investment_schemas import (
    InvestmentCreate,
    InvestmentUpdate,
    InvestmentResponse,
)

router = APIRouter()


@router.get("", response_model=list[InvestmentResponse])
def list_investments(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """List the tenant's investments, newest first"""
    return InvestmentService(db).list_investments(context)


@router.get("/{investment_id}", response_model=InvestmentResponse)
def get_investment(
    investment_id: int,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Get a specific investment by ID.

    - Returns 404 if investment doesn't exist or doesn't belong to tenant
    """
    return InvestmentService(db).get_investment(investment_id, context)


@router.post("", response_model=InvestmentResponse, status_code=status.HTTP_201_CREATED)
def create_investment(
    data: InvestmentCreate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Create an investment.

    - Requires type, platform, country, currency, initial_amount and current_value
    - Amounts may be sent as decimal strings and are kept exact
    """
    return InvestmentService(db).create_investment(data, context)


@router.put("/{investment_id}", response_model=InvestmentResponse)
@router.patch("/{investment_id}", response_model=InvestmentResponse, include_in_schema=False)
def update_investment(
    investment_id: int,
    data: InvestmentUpdate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Update an investment.

    - Only provided fields are updated (partial update)
    - last_updated is set to now on every update
    - Returns 404 if investment doesn't exist or doesn't belong to tenant
    """
    return InvestmentService(db).update_investment(investment_id, data, context)


@router.delete("/{investment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_investment(
    investment_id: int,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Delete an investment.

    - Returns 404 if investment doesn't exist or doesn't belong to tenant
    """
    InvestmentService(db).delete_investment(investment_id, context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
