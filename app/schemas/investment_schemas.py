from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.investment import AssetType
from app.schemas.validators import blank_to_none, require_value

_REQUIRED_LABELS = {
    "type": "Investment type",
    "platform": "Platform",
    "country": "Country",
    "currency": "Currency",
    "initial_amount": "Initial amount",
    "current_value": "Current value",
}


class InvestmentCreate(BaseModel):
    """
    Schema for creating an investment.

    Amounts accept decimal strings ("1234.50") and are kept exact.
    tenant_id and last_updated are never taken from the client.
    """

    model_config = ConfigDict(extra="ignore")

    type: AssetType
    platform: str = Field(..., max_length=255)
    country: str = Field(..., max_length=100)
    currency: str = Field(..., max_length=10)
    initial_amount: Decimal = Field(..., ge=0)
    current_value: Decimal = Field(..., ge=0)
    shares: Decimal | None = Field(None, ge=0)
    purchase_date: date | None = None

    @field_validator(*_REQUIRED_LABELS, mode="before")
    @classmethod
    def required_values(cls, v, info):
        return require_value(v, _REQUIRED_LABELS[info.field_name])

    @field_validator("shares", "purchase_date", mode="before")
    @classmethod
    def optional_values(cls, v):
        return blank_to_none(v)

    @field_validator("currency", "country")
    @classmethod
    def upper_codes(cls, v: str) -> str:
        return v.upper()


class InvestmentUpdate(BaseModel):
    """Schema for a partial investment update"""

    model_config = ConfigDict(extra="ignore")

    type: AssetType | None = None
    platform: str | None = Field(None, max_length=255)
    country: str | None = Field(None, max_length=100)
    currency: str | None = Field(None, max_length=10)
    initial_amount: Decimal | None = Field(None, ge=0)
    current_value: Decimal | None = Field(None, ge=0)
    shares: Decimal | None = Field(None, ge=0)
    purchase_date: date | None = None

    @field_validator(*_REQUIRED_LABELS, mode="before")
    @classmethod
    def required_values(cls, v, info):
        return require_value(v, _REQUIRED_LABELS[info.field_name])

    @field_validator("shares", "purchase_date", mode="before")
    @classmethod
    def optional_values(cls, v):
        return blank_to_none(v)

    @field_validator("currency", "country")
    @classmethod
    def upper_codes(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class InvestmentResponse(BaseModel):
    """Schema for investment response"""

    model_config = {"from_attributes": True}

    id: int
    tenant_id: str
    type: AssetType
    platform: str
    country: str
    currency: str
    initial_amount: Decimal
    current_value: Decimal
    shares: Decimal | None
    purchase_date: date | None
    last_updated: datetime
    created_at: datetime
