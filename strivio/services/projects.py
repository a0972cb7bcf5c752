# strivio/services/projects.py
from typing import Any, Dict, List, Mapping

from strivio.db import RemoteStore

TABLE = "projects"


def fetch_projects(store: RemoteStore) -> List[Dict[str, Any]]:
    return store.select(TABLE, "*")


def insert_project(store: RemoteStore, project: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """``project`` carries user_id, name and description."""
    return store.insert(TABLE, project)


def update_project(store: RemoteStore, project_id: str, changes: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.update(TABLE, project_id, changes)


def delete_project(store: RemoteStore, project_id: str) -> None:
    store.delete(TABLE, project_id)
