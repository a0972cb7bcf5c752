# strivio/services/tasks.py
from typing import Any, Dict, List, Mapping, Optional

from strivio.db import RemoteStore

TABLE = "tasks"
WITH_PROJECT_NAME = "*, projects(name)"


def fetch_tasks(store: RemoteStore, project_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """All tasks, or those of one project, each with ``row["projects"]["name"]``."""
    eq = {"project_id": project_id} if project_id else None
    return store.select(TABLE, WITH_PROJECT_NAME, eq=eq)


def insert_task(store: RemoteStore, task: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.insert(TABLE, task)


def update_task(store: RemoteStore, task_id: str, changes: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.update(TABLE, task_id, changes)


def delete_task(store: RemoteStore, task_id: str) -> None:
    store.delete(TABLE, task_id)
