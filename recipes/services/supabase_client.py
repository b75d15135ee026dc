"""
Thin wrapper around the Supabase client.

This is the only module that talks to Supabase. Everything else gets plain
dicts back (one per row) or a ``RemoteCallError``.

    client = SupabaseDataClient.from_settings(access_token=...)
    client.select("recipes", "*, user:users(email)", order_by="created_at")
    client.count("likes", eq={"recipe_id": rid})
    client.insert("comments", {"recipe_id": rid, "user_id": uid, "content": "Yum"})
    client.delete("likes", eq={"recipe_id": rid, "user_id": uid})
"""

import logging
import threading
from typing import Any, Optional

from django.conf import settings
from supabase import Client, create_client

from recipes.exceptions import RemoteCallError

logger = logging.getLogger(__name__)


class SupabaseDataClient:
    """
    Row queries, inserts, deletes and auth calls against one Supabase project.

    The underlying ``supabase.Client`` is created on first use, so building a
    SupabaseDataClient per request is cheap and a missing configuration only
    surfaces (as RemoteCallError) when a page actually queries something.
    """

    def __init__(
        self,
        url: str | None,
        key: str | None,
        access_token: str | None = None,
        refresh_token: str | None = None,
        client: Client | None = None,
    ):
        self.url = url
        self.key = key
        self.access_token = access_token
        self.refresh_token = refresh_token
        self._client = client
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, access_token: str | None = None, refresh_token: str | None = None) -> "SupabaseDataClient":
        return cls(
            getattr(settings, "SUPABASE_URL", None),
            getattr(settings, "SUPABASE_ANON_KEY", None),
            access_token=access_token,
            refresh_token=refresh_token,
        )

    @property
    def supabase(self) -> Client:
        with self._lock:
            if self._client is None:
                if not self.url or not self.key:
                    logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set; remote calls are disabled.")
                    raise RemoteCallError("Supabase is not configured.")
                try:
                    self._client = create_client(self.url, self.key)
                except Exception as e:
                    logger.error("Could not create Supabase client: %s", e, exc_info=True)
                    raise RemoteCallError("Supabase is not configured.") from e
                if self.access_token:
                    # Row-level security only sees the user when PostgREST carries their JWT.
                    self._client.postgrest.auth(self.access_token)
            return self._client

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def _execute(self, table: str, operation: str, query):
        try:
            return query.execute()
        except Exception as e:
            logger.error("Supabase %s on '%s' failed: %s", operation, table, e, exc_info=True)
            raise RemoteCallError(f"Could not {operation} {table}.", table=table, operation=operation) from e

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[dict[str, Any]] = None,
        ilike: Optional[dict[str, str]] = None,
        order_by: str | None = None,
        descending: bool = True,
        single: bool = False,
        limit: int | None = None,
    ):
        """
        Run a filtered select.
        :param eq: column -> value equality filters (ANDed)
        :param ilike: column -> pattern case-insensitive filters (ANDed)
        :param order_by: column to sort on; ``descending`` picks the direction
        :param single: return the first row or None instead of a list
        :param limit: cap on the number of rows (ignored in single mode)
        """
        query = self.supabase.table(table).select(columns)
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        for column, pattern in (ilike or {}).items():
            query = query.ilike(column, pattern)
        if order_by:
            query = query.order(order_by, desc=descending)
        if single:
            query = query.limit(1)
        elif limit:
            query = query.limit(limit)

        rows = self._execute(table, "select", query).data or []
        if single:
            return rows[0] if rows else None
        return rows

    def count(self, table: str, *, eq: Optional[dict[str, Any]] = None) -> int:
        query = self.supabase.table(table).select("id", count="exact")
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        return self._execute(table, "count", query).count or 0

    def exists(self, table: str, *, eq: dict[str, Any]) -> bool:
        return self.select(table, "id", eq=eq, single=True) is not None

    def insert(self, table: str, values: dict[str, Any]) -> list[dict]:
        return self._execute(table, "insert into", self.supabase.table(table).insert(values)).data or []

    def delete(self, table: str, *, eq: dict[str, Any]) -> list[dict]:
        if not eq:
            # PostgREST refuses unfiltered deletes; fail before the round trip.
            raise RemoteCallError(f"Refusing to delete from {table} without filters.", table=table, operation="delete")
        query = self.supabase.table(table).delete()
        for column, value in eq.items():
            query = query.eq(column, value)
        return self._execute(table, "delete from", query).data or []

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def current_user(self) -> Optional[dict]:
        """Return ``{"id", "email"}`` for the stored access token, or None."""
        if not self.access_token:
            return None
        try:
            response = self.supabase.auth.get_user(self.access_token)
        except Exception as e:
            logger.error("Supabase user lookup failed: %s", e, exc_info=True)
            raise RemoteCallError("Could not verify your session.", operation="get_user") from e
        user = getattr(response, "user", None)
        if user is None:
            return None
        return {"id": str(user.id), "email": user.email}

    def sign_in(self, email: str, password: str) -> dict:
        auth = self.supabase.auth
        try:
            response = auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.info("Sign-in rejected for %s: %s", email, e)
            raise RemoteCallError("Invalid email or password", operation="sign_in") from e

        session, user = response.session, response.user
        if session is None or user is None:
            raise RemoteCallError("Invalid email or password", operation="sign_in")
        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "user": {"id": str(user.id), "email": user.email},
        }

    def sign_out(self) -> None:
        if not (self.access_token and self.refresh_token):
            return
        try:
            self.supabase.auth.set_session(self.access_token, self.refresh_token)
            self.supabase.auth.sign_out()
        except Exception as e:
            logger.error("Supabase sign-out failed: %s", e, exc_info=True)
            raise RemoteCallError("Could not sign out.", operation="sign_out") from e
