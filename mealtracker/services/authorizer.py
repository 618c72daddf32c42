"""
Request authorizer: who is making this request?

resolve_user walks cookie token -> signed claims -> live session -> user and
returns None at the first step that fails. Callers get no hint of which
step it was.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from mealtracker.models.user import User
from mealtracker.services import sessions
from mealtracker.services.credentials import get_user_by_id

logger = logging.getLogger(__name__)


def resolve_user(db: Session, token: Optional[str]) -> Optional[User]:
    if not token:
        return None

    claims = sessions.decode_token(token)
    if claims is None:
        return None

    user_session = sessions.get_valid_session(db, claims.session_id)
    if user_session is None:
        logger.debug("No live session for token of user %s", claims.user_id)
        return None

    if user_session.user_id != claims.user_id:
        logger.warning(
            "Session %s... belongs to user %s but token names user %s",
            claims.session_id[:6],
            user_session.user_id,
            claims.user_id,
        )
        return None

    return get_user_by_id(db, user_session.user_id)
