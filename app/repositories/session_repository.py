"""Repository for server-side sessions."""

from sqlalchemy.orm import Session

from app.models.session import UserSession


class SessionRepository:
    """Repository for UserSession rows"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, sid: str) -> UserSession | None:
        """Get a session by its token (expired rows included)"""
        return self.db.query(UserSession).filter(UserSession.sid == sid).first()

    def create(self, user_session: UserSession) -> UserSession:
        """Persist a new session"""
        self.db.add(user_session)
        self.db.commit()
        self.db.refresh(user_session)
        return user_session

    def delete(self, user_session: UserSession) -> None:
        """Delete a single session"""
        self.db.delete(user_session)
        self.db.commit()

    def delete_for_user(self, user_id: str) -> int:
        """
        Delete every session belonging to a user.

        Returns:
            Number of sessions removed
        """
        removed = (
            self.db.query(UserSession)
            .filter(UserSession.user_id == user_id)
            .delete(synchronize_session="fetch")
        )
        self.db.commit()
        return removed
