# strivio/services/users.py
from typing import Any, Dict, List, Mapping, Sequence

from strivio.db import RemoteStore
from strivio.errors import StoreError

TABLE = "users"


def fetch_user(store: RemoteStore, email: str) -> Dict[str, Any]:
    """The profile row for ``email``; exactly one must exist."""
    rows = store.select(TABLE, "*", eq={"email": email})
    if len(rows) != 1:
        raise StoreError(f"Expected one user record for {email}, found {len(rows)}")
    return rows[0]


def insert_users(store: RemoteStore, users: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return store.insert(TABLE, list(users))


def update_user(store: RemoteStore, user_id: str, changes: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.update(TABLE, user_id, changes)


def delete_user(store: RemoteStore, user_id: str) -> None:
    store.delete(TABLE, user_id)
