from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException
from app.models.user import User


class UserRepository:
    """Repository for User model operations (the credential store)"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        """Exact-match lookup used by login and duplicate-registration checks"""
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: str) -> User | None:
        """Get user by internal ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_id_and_tenant(self, user_id: str, tenant_id: str) -> User | None:
        """
        Get user ensuring they belong to the tenant (multi-tenant safety).

        Returns None if the user doesn't exist or belongs to another tenant.
        """
        return (
            self.db.query(User)
            .filter(User.id == user_id, User.tenant_id == tenant_id)
            .first()
        )

    def get_by_tenant(self, tenant_id: str) -> list[User]:
        """Get all members of a tenant, oldest first"""
        return (
            self.db.query(User)
            .filter(User.tenant_id == tenant_id)
            .order_by(User.created_at.asc())
            .all()
        )

    def count_by_tenant(self, tenant_id: str) -> int:
        """Number of accounts currently affiliated with a tenant"""
        return (
            self.db.query(func.count(User.id)).filter(User.tenant_id == tenant_id).scalar() or 0
        )

    def create(self, user: User) -> User:
        """
        Create new user.

        Raises:
            ConflictException: If the email is already registered
        """
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictException("Email already registered") from e
        self.db.refresh(user)
        return user

    def update(self, user: User) -> User:
        """Update existing user"""
        self.db.commit()
        self.db.refresh(user)
        return user
