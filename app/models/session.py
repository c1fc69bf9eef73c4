"""Server-side session storage."""

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class UserSession(Base):
    """
    Persisted login session.

    The cookie only carries sid; data holds at least user_id and
    tenant_id. user_id is also a column so a user's sessions can be
    found without scanning the table. Rows past expires_at are deleted
    lazily on lookup.
    """

    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    data: Mapped[dict] = mapped_column(JSON, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)

    @property
    def tenant_id(self) -> str | None:
        return self.data.get("tenant_id")

    def __repr__(self) -> str:
        return f"<UserSession(user_id={self.user_id}, expires_at={self.expires_at})>"
