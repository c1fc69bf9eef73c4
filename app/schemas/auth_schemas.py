from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.config import settings
from app.models.role import UserRole
from app.schemas.validators import blank_to_none, check_password_length


class RegisterRequest(BaseModel):
    """Schema for registering a new account under a domain"""

    email: EmailStr
    password: str
    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
    domain: str = Field(..., max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return check_password_length(v, settings.MIN_PASSWORD_LENGTH)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def optional_names(cls, v):
        return blank_to_none(v)

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        v = v.strip().lower()
        if len(v) < 2:
            raise ValueError("Domain must be at least 2 characters")
        return v


class LoginRequest(BaseModel):
    """Schema for logging in"""

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ChangePasswordRequest(BaseModel):
    """Schema for self-service password change"""

    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return check_password_length(v, settings.MIN_PASSWORD_LENGTH)


class UserResponse(BaseModel):
    """Public profile of an account (never includes password material)"""

    id: str
    email: str
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None = None
    role: UserRole
    tenant_id: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserResponse(UserResponse):
    """Profile of the logged-in user with their tenant's domain"""

    domain: str | None = None


class MessageResponse(BaseModel):
    message: str
