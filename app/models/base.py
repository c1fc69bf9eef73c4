from datetime import datetime, UTC
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (how timestamps are stored)"""
    return datetime.now(UTC).replace(tzinfo=None)


class ExactDecimal(TypeDecorator):
    """
    Decimal column that never rounds.

    PostgreSQL gets an unconstrained NUMERIC. SQLite has no decimal type
    and its driver goes through float, so there the value is stored as
    its decimal string.
    """

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(64))
        return dialect.type_descriptor(Numeric(asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return str(value) if dialect.name == "sqlite" else value

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, Decimal):
            return value
        return Decimal(value)


class Base(DeclarativeBase):
    pass


class CreatedAtMixin:
    """Adds an immutable creation timestamp"""

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class TimestampMixin(CreatedAtMixin):
    """Adds creation and last-modification timestamps"""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )
