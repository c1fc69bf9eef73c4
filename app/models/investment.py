from datetime import date, datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import String, Integer, Date, DateTime, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, ExactDecimal, utcnow


class AssetType(str, PyEnum):
    """Investment asset class"""

    STOCKS = "Stocks"
    MUTUAL_FUNDS = "Mutual Funds"
    ETFS = "ETFs"
    CRYPTO = "Crypto"
    REAL_ESTATE = "Real Estate"
    BONDS = "Bonds"
    COMMODITIES = "Commodities"


class Investment(Base, CreatedAtMixin):
    """
    Investment holding owned by a tenant.

    Amounts are stored as exact decimals. last_updated is stamped on
    every update, whichever fields changed.
    """

    __tablename__ = "investments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    type: Mapped[AssetType] = mapped_column(
        Enum(AssetType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    platform: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="SWEDEN")
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="SEK")
    initial_amount: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)
    current_value: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)
    shares: Mapped[Decimal | None] = mapped_column(ExactDecimal, nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_updated: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (Index("ix_investments_tenant_created", "tenant_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Investment(id={self.id}, tenant_id={self.tenant_id}, type={self.type.value})>"
