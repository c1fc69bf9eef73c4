"""Server-side session management."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import generate_session_token
from app.models.base import utcnow
from app.models.session import UserSession
from app.models.user import User
from app.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """
    Issues, resolves and destroys login sessions.

    Lifecycle: Anonymous -> Authenticated (login/register) -> Expired or
    LoggedOut. Expiry is absolute (issued_at + SESSION_TTL_DAYS); activity
    does not extend it.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = SessionRepository(db)

    def create_session(self, user: User, now: datetime | None = None) -> UserSession:
        """
        Open a new session bound to the user and their tenant.

        Args:
            user: Authenticated user
            now: Issue time (defaults to current UTC time)

        Returns:
            Persisted session; its sid goes into the cookie
        """
        issued_at = now or utcnow()
        user_session = UserSession(
            sid=generate_session_token(),
            user_id=user.id,
            data={"user_id": user.id, "tenant_id": user.tenant_id},
            expires_at=issued_at + timedelta(days=settings.SESSION_TTL_DAYS),
        )
        return self.repo.create(user_session)

    def resolve(self, sid: str | None, now: datetime | None = None) -> UserSession | None:
        """
        Look up a live session.

        Expired sessions are deleted on the spot and treated as missing.
        """
        if not sid:
            return None

        user_session = self.repo.get(sid)
        if user_session is None:
            return None

        if user_session.expires_at <= (now or utcnow()):
            logger.debug("Session for user %s expired", user_session.user_id)
            self.repo.delete(user_session)
            return None

        return user_session

    def destroy(self, sid: str | None) -> None:
        """Delete a session if it exists (logout)"""
        if not sid:
            return
        user_session = self.repo.get(sid)
        if user_session is not None:
            logger.info("User %s logged out", user_session.user_id)
            self.repo.delete(user_session)

    def destroy_for_user(self, user_id: str) -> int:
        """Log a user out everywhere"""
        removed = self.repo.delete_for_user(user_id)
        if removed:
            logger.info("Destroyed %d session(s) for user %s", removed, user_id)
        return removed
