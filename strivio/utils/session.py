# strivio/utils/session.py
"""Signed-in identity for one browser tab, and the redirect rule built on it.

The context is created once per tab and handed to pages explicitly; nothing
else writes the identity. ``mount`` asks the store for a persisted session
and subscribes to session changes; ``guard`` is re-evaluated on every
navigation without going back to the store.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from strivio.db import RemoteStore
from strivio.errors import StoreError
from strivio.models.user import Identity
from strivio.utils import routes

logger = logging.getLogger(__name__)

AUTHENTICATED = "authenticated"
UNAUTHENTICATED = "unauthenticated"


class SessionContext:
    def __init__(self, store: RemoteStore,
                 public_routes: Iterable[str] = routes.PUBLIC_ROUTES,
                 login_route: str = routes.LOGIN):
        self._store = store
        self.public_routes = frozenset(public_routes)
        self.login_route = login_route
        self.identity: Optional[Identity] = None
        # set when the session could not be fetched (as opposed to "no session")
        self.last_error: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    @property
    def state(self) -> str:
        return AUTHENTICATED if self.identity is not None else UNAUTHENTICATED

    def set_identity(self, identity: Optional[Identity]) -> None:
        self.identity = identity

    def mount(self, route: str) -> Optional[str]:
        """Restore the session and start listening. Returns a redirect target or None."""
        if self.mounted:
            return self.guard(route)
        try:
            identity = self._store.get_session()
            self.last_error = None
        except StoreError as exc:
            # treated like "no session" below, but kept apart for the sign-in page
            logger.warning("Session fetch failed: %s", exc.message)
            identity = None
            self.last_error = exc.message
        if identity is not None:
            self.set_identity(identity)
        self._unsubscribe = self._store.on_session_change(self._on_change)
        return self.guard(route)

    def guard(self, route: str) -> Optional[str]:
        if self.identity is None and route not in self.public_routes:
            return self.login_route
        return None

    def _on_change(self, event_name: str, identity: Optional[Identity]) -> None:
        logger.info("Session %s (%s)", event_name, identity.email if identity else "signed out")
        self.set_identity(identity)

    def teardown(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.identity = None
