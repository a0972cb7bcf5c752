# strivio/supabase_store.py
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client
from supabase_auth.errors import AuthError

from strivio.config import Settings
from strivio.db import Rows, SessionListener
from strivio.errors import StoreError
from strivio.models.user import Identity

logger = logging.getLogger(__name__)


def _identity(user) -> Optional[Identity]:
    if user is None:
        return None
    return Identity(id=str(user.id), email=user.email or "")


class SupabaseStore:
    """RemoteStore over a supabase-py client. One client per browser tab,
    since the client carries the signed-in session."""

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseStore":
        return cls(create_client(settings.supabase_url, settings.supabase_key))

    def _execute(self, query, action: str) -> Rows:
        try:
            response = query.execute()
        except APIError as exc:
            logger.warning("%s failed: %s", action, exc.message)
            raise StoreError(exc.message or str(exc), {"action": action, "code": exc.code}) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s failed: %s", action, exc)
            raise StoreError(str(exc), {"action": action}) from exc
        return list(response.data or [])

    def _auth(self, action: str, call: Callable[[], Any]) -> Any:
        try:
            return call()
        except AuthError as exc:
            logger.warning("%s failed: %s", action, exc.message)
            raise StoreError(exc.message, {"action": action}) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s failed: %s", action, exc)
            raise StoreError(str(exc), {"action": action}) from exc

    # ---- tables ----
    def select(self, table: str, columns: str = "*", eq: Optional[Mapping[str, Any]] = None) -> Rows:
        query = self._client.table(table).select(columns)
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        return self._execute(query, f"select {table}")

    def insert(self, table: str, rows) -> Rows:
        payload = dict(rows) if isinstance(rows, Mapping) else [dict(r) for r in rows]
        return self._execute(self._client.table(table).insert(payload), f"insert {table}")

    def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Rows:
        data = self._execute(self._client.table(table).update(dict(values)).eq("id", row_id),
                             f"update {table}")
        if not data:
            raise StoreError(f"No {table} row with id {row_id}", {"table": table, "id": row_id})
        return data

    def delete(self, table: str, row_id: str) -> None:
        self._execute(self._client.table(table).delete().eq("id", row_id), f"delete {table}")

    # ---- auth ----
    def sign_in(self, email: str, password: str) -> Identity:
        response = self._auth("sign-in", lambda: self._client.auth.sign_in_with_password(
            {"email": email, "password": password}))
        return _identity(response.user)

    def sign_up(self, email: str, password: str) -> Identity:
        response = self._auth("sign-up", lambda: self._client.auth.sign_up(
            {"email": email, "password": password}))
        if response.user is None:
            raise StoreError("Sign-up returned no user")
        return _identity(response.user)

    def sign_out(self) -> None:
        self._auth("sign-out", self._client.auth.sign_out)

    def get_session(self) -> Optional[Identity]:
        session = self._auth("get-session", self._client.auth.get_session)
        return _identity(session.user) if session else None

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        def _listener(event, session) -> None:
            callback(str(event), _identity(session.user) if session else None)

        subscription = self._client.auth.on_auth_state_change(_listener)
        return subscription.unsubscribe
