"""
Session manager: server-side session rows plus the signed token that points at them.

A login produces two things with aligned lifetimes:
- a `sessions` row (random id, owner, absolute expiry), and
- an HS256 JWT carrying the session id and user id, stored in the session cookie.

The token is checked before the database is touched; the row is what makes
logout and expiry authoritative. Expired rows are ignored on read and purged
by SessionSweeper.
"""
import asyncio
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mealtracker.core.config import settings
from mealtracker.core.errors import StorageError
from mealtracker.models.session import UserSession

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    session_id: str
    user_id: int


def utcnow() -> datetime:
    """Naive UTC, the form timestamps are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _session_ttl() -> timedelta:
    return timedelta(hours=settings.session_ttl_hours)


def generate_session_id() -> str:
    return secrets.token_urlsafe(32)


# ---------- token codec ----------


def encode_token(session_id: str, user_id: int, now: Optional[datetime] = None) -> str:
    issued_at = (now or utcnow()).replace(tzinfo=timezone.utc)
    payload = {
        "sessionId": session_id,
        "userId": user_id,
        "iat": issued_at,
        "exp": issued_at + _session_ttl(),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_token(token: Optional[str]) -> Optional[TokenClaims]:
    """
    Verify signature and expiry, return the embedded ids.
    Any failure returns None; this never touches the database.
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Session token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"Session token rejected: {e}")
        return None

    session_id = payload.get("sessionId")
    user_id = payload.get("userId")
    if not isinstance(session_id, str) or not session_id:
        return None
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None

    return TokenClaims(session_id=session_id, user_id=user_id)


# ---------- session rows ----------


def create_session(db: Session, user_id: int, now: Optional[datetime] = None) -> str:
    created = now or utcnow()
    user_session = UserSession(
        id=generate_session_id(),
        user_id=user_id,
        expires_at=created + _session_ttl(),
        created_at=created,
    )
    db.add(user_session)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[SESSION] Failed to create session for user {user_id}: {e}", exc_info=True)
        raise StorageError("Failed to create session")

    logger.info("[SESSION] Created session for user %s", user_id)
    return user_session.id


def get_valid_session(
    db: Session, session_id: str, now: Optional[datetime] = None
) -> Optional[UserSession]:
    """The session row if it exists and has not expired. Expired rows are left for the sweeper."""
    return (
        db.query(UserSession)
        .filter(
            UserSession.id == session_id,
            UserSession.expires_at > (now or utcnow()),
        )
        .first()
    )


def delete_session(db: Session, session_id: str) -> None:
    try:
        db.query(UserSession).filter(UserSession.id == session_id).delete(
            synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[SESSION] Failed to delete session: {e}", exc_info=True)
        raise StorageError("Failed to delete session")


def sweep_expired(db: Session, now: Optional[datetime] = None) -> int:
    """Delete every session with expires_at <= now. Returns the number of rows removed."""
    try:
        removed = (
            db.query(UserSession)
            .filter(UserSession.expires_at <= (now or utcnow()))
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return removed


class SessionSweeper:
    """
    Hourly purge of expired sessions, tied to the application lifespan.

    start() schedules the loop on the running event loop, stop() cancels it and
    waits for it to finish. Each run uses its own database session in a worker
    thread so a slow sweep never blocks request handling.
    """

    def __init__(self, session_factory: Callable[[], Session], interval_seconds: float):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> int:
        with self.session_factory() as db:
            return sweep_expired(db)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                removed = await to_thread.run_sync(self.run_once)
            except Exception as e:
                logger.error(f"[SESSION] Sweep failed: {e}", exc_info=True)
                continue
            if removed:
                logger.info("[SESSION] Swept %d expired sessions", removed)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="session-sweeper")
        logger.info("[SESSION] Sweeper started (every %ss)", self.interval_seconds)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("[SESSION] Sweeper stopped")
