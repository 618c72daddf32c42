"""
Auth endpoints: signup, login, logout, me.

Signup and login both open a server-side session and put its signed token in
an HttpOnly cookie; logout deletes the session row and clears the cookie.
"""
import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from mealtracker.core.config import settings
from mealtracker.core.errors import AuthenticationError, ValidationError
from mealtracker.deps import get_current_user, get_db, get_session_token
from mealtracker.models.user import User
from mealtracker.schemas.user import (
    LoginRequest,
    MessageResponse,
    SignupRequest,
    UserRead,
    UserResponse,
)
from mealtracker.services import credentials, sessions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def _start_session(db: Session, response: Response, user: User) -> None:
    session_id = sessions.create_session(db, user.id)
    _set_session_cookie(response, sessions.encode_token(session_id, user.id))


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, response: Response, db: Session = Depends(get_db)):
    """
    Create an account and log it in.
    400 on a short password, 409 if the email is taken.
    """
    if len(payload.password) < settings.password_min_length:
        raise ValidationError(
            f"Password must be at least {settings.password_min_length} characters long"
        )

    user = credentials.create_user(db, payload.email, payload.password, payload.name)
    _start_session(db, response, user)
    return UserResponse(message="User created successfully", user=UserRead.model_validate(user))


@router.post("/login", response_model=UserResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = credentials.verify_credentials(db, payload.email, payload.password)
    if user is None:
        raise AuthenticationError("Invalid email or password")

    _start_session(db, response, user)
    logger.info("[AUTH] User %s logged in", user.id)
    return UserResponse(message="Login successful", user=UserRead.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    """Always 200: an absent or invalid cookie just means there is nothing to revoke."""
    claims = sessions.decode_token(get_session_token(request))
    if claims is not None:
        sessions.delete_session(db, claims.session_id)
        logger.info("[AUTH] User %s logged out", claims.user_id)

    _clear_session_cookie(response)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse, response_model_exclude_none=True)
def me(user: User = Depends(get_current_user)):
    return UserResponse(user=UserRead.model_validate(user))
