# strivio/models/task.py
from typing import ClassVar, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

TASK_STATUSES = ("pending", "in_progress", "completed")

STATUS_LABELS = {
    "pending": "Pending",
    "in_progress": "In Progress",
    "completed": "Completed",
}

# Jira-like palette
STATUS_COLORS = {
    "Pending": "#9CA3AF",      # gray-400
    "In Progress": "#2563EB",  # blue-600
    "Completed": "#16A34A",    # green-600
}


class TaskForm(BaseModel):
    """Task editor input. ``project`` holds the selected project id."""

    model_config = ConfigDict(str_strip_whitespace=True)

    required_messages: ClassVar[Dict[str, str]] = {
        "title": "Task title is required",
        "status": "Task Status is required",
        "project": "Task Project is required",
    }
    invalid_messages: ClassVar[Dict[str, str]] = {
        "status": "Unknown task status",
    }

    title: str = Field(min_length=1)
    status: str = Field(min_length=1)
    project: str = Field(min_length=1)

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        if value not in TASK_STATUSES:
            raise ValueError(f"status must be one of {', '.join(TASK_STATUSES)}")
        return value
