from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies import get_current_user, get_session_token
from app.models.user import User
from app.services.auth_service import AuthService
from app.services.session_service import SessionService
from app.schemas.auth_schemas import (
    RegisterRequest,
    LoginRequest,
    ChangePasswordRequest,
    UserResponse,
    CurrentUserResponse,
    MessageResponse,
)

router = APIRouter()


def _start_session(response: Response, user: User, db: Session) -> None:
    user_session = SessionService(db).create_session(user)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=user_session.sid,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    """
    Register a new account.

    - Creates the tenant for `domain` on first use, otherwise joins it
    - First account in a tenant becomes **admin**, later ones **user**
    - Opens a session (HTTP-only cookie)
    """
    user = AuthService(db).register(data)
    _start_session(response, user, db)
    return user


@router.post("/login", response_model=UserResponse)
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Verify credentials and open a session"""
    user = AuthService(db).authenticate(data)
    _start_session(response, user, db)
    return user


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    """Destroy the current session (if any) and clear the cookie"""
    SessionService(db).destroy(get_session_token(request))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    data: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the caller's password (current password required)"""
    AuthService(db).change_password(user, data)
    return MessageResponse(message="Password changed successfully")


@router.get("/user", response_model=CurrentUserResponse)
def get_me(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Profile of the logged-in user with their tenant's domain"""
    return AuthService(db).get_profile(user)
