"""
Per-request identity.

The signed-in user is resolved once per request (see ``middleware``) into a
``SessionContext`` that views hand to the services explicitly. Supabase tokens
are kept in the Django session under ``AUTH_SESSION_KEY``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from recipes.exceptions import RemoteCallError, Unauthenticated

logger = logging.getLogger(__name__)

AUTH_SESSION_KEY = "supabase_auth"


@dataclass(frozen=True)
class SessionContext:
    user_id: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def require_user(self, message: str | None = None) -> str:
        """Return the user id, or raise Unauthenticated with ``message``."""
        if not self.user_id:
            raise Unauthenticated(message)
        return self.user_id


ANONYMOUS = SessionContext()


def store_auth(session, payload: dict) -> None:
    """Keep the tokens/user returned by ``SupabaseDataClient.sign_in``."""
    session[AUTH_SESSION_KEY] = {
        "access_token": payload["access_token"],
        "refresh_token": payload.get("refresh_token"),
        "user": payload.get("user") or {},
    }


def clear_auth(session) -> None:
    session.pop(AUTH_SESSION_KEY, None)


def stored_tokens(session) -> tuple[Optional[str], Optional[str]]:
    auth = session.get(AUTH_SESSION_KEY) or {}
    return auth.get("access_token"), auth.get("refresh_token")


def stored_email(session) -> Optional[str]:
    """Email saved at sign-in; cheap, unverified, fine for the navbar."""
    auth = session.get(AUTH_SESSION_KEY) or {}
    return (auth.get("user") or {}).get("email")


def resolve_session_context(session, client) -> SessionContext:
    """
    Ask Supabase who the stored token belongs to.
    A failed lookup makes this request anonymous. A token Supabase no longer
    recognises is dropped from the session.
    """
    access_token, _ = stored_tokens(session)
    if not access_token:
        return ANONYMOUS
    try:
        user = client.current_user()
    except RemoteCallError:
        logger.warning("Stored Supabase session could not be verified; continuing as anonymous.")
        return ANONYMOUS
    if not user:
        clear_auth(session)
        return ANONYMOUS
    return SessionContext(user_id=str(user["id"]), email=user.get("email"))
