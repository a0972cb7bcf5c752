# strivio/models/user.py
from dataclasses import dataclass
from typing import ClassVar, Dict

from pydantic import BaseModel, ConfigDict, EmailStr, Field


@dataclass(frozen=True)
class Identity:
    """The signed-in caller as reported by the remote store."""
    id: str
    email: str


class CredentialsForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    required_messages: ClassVar[Dict[str, str]] = {
        "password": "Password must be at least 6 characters",
    }
    invalid_messages: ClassVar[Dict[str, str]] = {
        "email": "Invalid email address",
    }

    email: EmailStr
    password: str = Field(min_length=6)
