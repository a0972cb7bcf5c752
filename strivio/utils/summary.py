# strivio/utils/summary.py
from typing import Any, Dict, Iterable

import pandas as pd

from strivio.models.task import STATUS_LABELS, TASK_STATUSES


def status_counts(tasks: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """One row per status (in workflow order, zeros included)."""
    df = pd.DataFrame(list(tasks), columns=["id", "status"])
    counts = df["status"].value_counts().reindex(list(TASK_STATUSES), fill_value=0)
    return pd.DataFrame({
        "Status": [STATUS_LABELS[s] for s in TASK_STATUSES],
        "Tasks": [int(counts[s]) for s in TASK_STATUSES],
    })
