from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from app.config import settings
from app.models.policy import (
    PolicyType,
    PremiumFrequency,
    BeneficiaryType,
    PolicyStatus,
    derive_policy_status,
)
from app.schemas.validators import blank_to_none, require_value, strip_text

_REQUIRED_LABELS = {
    "provider": "Provider",
    "policy_name": "Policy name",
    "policy_type": "Policy type",
    "country": "Country",
    "start_date": "Start date",
    "premium_currency": "Premium currency",
}

_OPTIONAL_FIELDS = (
    "policy_number",
    "maturity_date",
    "next_renewal_date",
    "last_premium_date",
    "premium",
    "premium_frequency",
    "nominee",
    "beneficiary_type",
    "paid_to",
    "notes",
)


class PolicyCreate(BaseModel):
    """
    Schema for creating a policy.

    Unknown fields (tenant_id, document_url, renewal_status, ...) are
    dropped: the owning tenant always comes from the session.
    """

    model_config = ConfigDict(extra="ignore")

    provider: str = Field(..., max_length=255)
    policy_name: str = Field(..., max_length=255)
    policy_number: str | None = Field(None, max_length=255)
    policy_type: PolicyType
    country: str = Field(..., max_length=100)
    start_date: date
    maturity_date: date | None = None
    next_renewal_date: date | None = None
    last_premium_date: date | None = None
    premium: Decimal | None = Field(None, ge=0)
    premium_currency: str = Field("SEK", max_length=10)
    premium_frequency: PremiumFrequency | None = None
    nominee: str | None = Field(None, max_length=255)
    beneficiary_type: BeneficiaryType | None = None
    paid_to: str | None = Field(None, max_length=255)
    notes: str | None = Field(None, max_length=5000)

    @field_validator(*_REQUIRED_LABELS, mode="before")
    @classmethod
    def required_values(cls, v, info):
        if info.field_name == "premium_currency" and blank_to_none(v) is None:
            return "SEK"
        return require_value(v, _REQUIRED_LABELS[info.field_name])

    @field_validator(*_OPTIONAL_FIELDS, mode="before")
    @classmethod
    def optional_values(cls, v):
        return strip_text(blank_to_none(v))

    @field_validator("premium_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class PolicyUpdate(BaseModel):
    """
    Schema for a partial policy update.

    Only fields present in the request are applied. Optional fields may
    be cleared with null or ""; required fields may not.
    """

    model_config = ConfigDict(extra="ignore")

    provider: str | None = Field(None, max_length=255)
    policy_name: str | None = Field(None, max_length=255)
    policy_number: str | None = Field(None, max_length=255)
    policy_type: PolicyType | None = None
    country: str | None = Field(None, max_length=100)
    start_date: date | None = None
    maturity_date: date | None = None
    next_renewal_date: date | None = None
    last_premium_date: date | None = None
    premium: Decimal | None = Field(None, ge=0)
    premium_currency: str | None = Field(None, max_length=10)
    premium_frequency: PremiumFrequency | None = None
    nominee: str | None = Field(None, max_length=255)
    beneficiary_type: BeneficiaryType | None = None
    paid_to: str | None = Field(None, max_length=255)
    notes: str | None = Field(None, max_length=5000)

    @field_validator(*_REQUIRED_LABELS, mode="before")
    @classmethod
    def required_values(cls, v, info):
        return require_value(v, _REQUIRED_LABELS[info.field_name])

    @field_validator(*_OPTIONAL_FIELDS, mode="before")
    @classmethod
    def optional_values(cls, v):
        return strip_text(blank_to_none(v))

    @field_validator("premium_currency")
    @classmethod
    def upper_currency(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class PolicyResponse(BaseModel):
    """Schema for policy response, including the date-derived status"""

    model_config = {"from_attributes": True}

    id: int
    tenant_id: str
    provider: str
    policy_name: str
    policy_number: str | None
    policy_type: PolicyType
    country: str
    start_date: date
    maturity_date: date | None
    next_renewal_date: date | None
    last_premium_date: date | None
    premium: Decimal | None
    premium_currency: str
    premium_frequency: PremiumFrequency | None
    nominee: str | None
    beneficiary_type: BeneficiaryType | None
    paid_to: str | None
    renewal_status: str
    notes: str | None
    document_url: str | None
    created_at: datetime

    @computed_field
    @property
    def status(self) -> PolicyStatus:
        return derive_policy_status(
            self.maturity_date, date.today(), settings.ATTENTION_WINDOW_DAYS
        )

    @computed_field
    @property
    def days_to_maturity(self) -> int | None:
        if self.maturity_date is None:
            return None
        return (self.maturity_date - date.today()).days
