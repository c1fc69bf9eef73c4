from pydantic import BaseModel, Field, field_validator

from app.config import settings
from app.models.role import UserRole
from app.schemas.validators import check_password_length


class RoleUpdate(BaseModel):
    """Change a member's role (ADMIN only)"""

    role: UserRole = Field(..., description="New role to assign")


class ResetPasswordRequest(BaseModel):
    """Admin-triggered password reset for a member"""

    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return check_password_length(v, settings.MIN_PASSWORD_LENGTH)
