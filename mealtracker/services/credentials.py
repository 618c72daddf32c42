"""
Credential store: user records and password verification.

Passwords are hashed with bcrypt before they touch the database; nothing in
this module returns or logs a plaintext password.
"""
import logging
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from mealtracker.core.config import settings
from mealtracker.core.errors import DuplicateEmailError, StorageError, ValidationError
from mealtracker.models.user import User

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo123"
DEMO_NAME = "Demo User"

# bcrypt input limit; newer releases raise instead of truncating
BCRYPT_MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    if password_too_long(password):
        logger.info("Password longer than %d bytes, cannot match", BCRYPT_MAX_PASSWORD_BYTES)
        return False

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # stored hash is not a bcrypt hash
        logger.warning("Stored password hash could not be parsed")
        return False


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, email: str, password: str, name: str) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Raises DuplicateEmailError when the email is taken (checked up front and
    again by the unique index, for concurrent signups). ValidationError for a
    password bcrypt cannot hash.
    """
    if password_too_long(password):
        raise ValidationError(
            f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes long"
        )

    if get_user_by_email(db, email) is not None:
        raise DuplicateEmailError()

    user = User(email=email, password_hash=hash_password(password), name=name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmailError()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[AUTH] Failed to create user: {e}", exc_info=True)
        raise StorageError("Failed to create user")

    db.refresh(user)
    logger.info("[AUTH] Created user id=%s", user.id)
    return user


def verify_credentials(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user on a password match, None otherwise (unknown email and wrong password look the same)."""
    user = get_user_by_email(db, email)
    if user is None:
        logger.info("[AUTH] Login attempt for unknown email")
        return None

    if not check_password(password, user.password_hash):
        logger.info("[AUTH] Invalid password for user id=%s", user.id)
        return None

    return user


def ensure_demo_user(db: Session) -> User:
    existing = get_user_by_email(db, DEMO_EMAIL)
    if existing is not None:
        return existing
    return create_user(db, DEMO_EMAIL, DEMO_PASSWORD, DEMO_NAME)
