"""Tenant model for multi-tenant isolation."""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from app.models.user import User


class Tenant(Base, CreatedAtMixin):
    """
    Multi-tenant isolation boundary.

    A tenant is created lazily the first time someone registers under a
    new domain (e.g. "smithfamily"). Every later registration with the same
    domain joins that tenant. All policies and investments belong to a
    tenant, not to an individual user, so every member sees the same data.

    Tenants are never deleted in-band.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    domain: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    subdomain: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)

    # Relationships
    users: Mapped[list["User"]] = relationship("User", back_populates="tenant")

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, domain='{self.domain}')>"
