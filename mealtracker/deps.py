from collections.abc import Generator
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from mealtracker.core.config import settings
from mealtracker.core.errors import AuthenticationError
from mealtracker.db.session import SessionLocal
from mealtracker.models.user import User
from mealtracker.services.authorizer import resolve_user


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name) or None


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[User]:
    return resolve_user(db, get_session_token(request))


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """
    Dependency for every protected route.
    Raises 401 before the route body (and the meal repository) runs.
    """
    if user is None:
        raise AuthenticationError()
    return user
