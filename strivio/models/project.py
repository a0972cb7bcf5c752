# strivio/models/project.py
from typing import ClassVar, Dict

from pydantic import BaseModel, ConfigDict, Field


class ProjectForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    required_messages: ClassVar[Dict[str, str]] = {
        "name": "Project name is required",
        "description": "Description is required",
    }

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
