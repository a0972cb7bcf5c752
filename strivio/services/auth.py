# strivio/services/auth.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from strivio.db import RemoteStore
from strivio.errors import StoreError
from strivio.models import CredentialsForm, Identity, validate_form
from strivio.services import users
from strivio.utils import routes

logger = logging.getLogger(__name__)

SIGNUP_SUCCESS = "Signup successful! Check your email for confirmation."


@dataclass
class AuthOutcome:
    ok: bool
    errors: Dict[str, str] = field(default_factory=dict)
    message: str = ""
    identity: Optional[Identity] = None
    redirect: Optional[str] = None
    redirect_after: float = 0.0


def sign_in(store: RemoteStore, data: Mapping[str, Any]) -> AuthOutcome:
    form, errors = validate_form(CredentialsForm, data)
    if errors:
        return AuthOutcome(ok=False, errors=errors)
    try:
        identity = store.sign_in(form.email, form.password)
    except StoreError as exc:
        return AuthOutcome(ok=False, message=exc.message)
    return AuthOutcome(ok=True, identity=identity, redirect=routes.DASHBOARD)


def sign_up(store: RemoteStore, data: Mapping[str, Any], redirect_seconds: float = 2.0) -> AuthOutcome:
    """Create the account, then the profile row that projects are owned by.

    The row is keyed by the email the store reports back, which is what the
    session carries later; stores may normalise case.
    """
    form, errors = validate_form(CredentialsForm, data)
    if errors:
        return AuthOutcome(ok=False, errors=errors)
    try:
        identity = store.sign_up(form.email, form.password)
    except StoreError as exc:
        return AuthOutcome(ok=False, message=exc.message)

    try:
        users.insert_users(store, [{"email": identity.email}])
    except StoreError as exc:
        # account exists at this point; the page still reports success
        logger.warning("Could not create user record for %s: %s", identity.email, exc.message)

    return AuthOutcome(ok=True, message=SIGNUP_SUCCESS, identity=identity,
                       redirect=routes.LOGIN, redirect_after=redirect_seconds)
