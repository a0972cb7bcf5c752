# strivio/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class StoreError(Exception):
    """Any failure reported by the remote store: auth, constraint or network."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details: Dict[str, Any] = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"
