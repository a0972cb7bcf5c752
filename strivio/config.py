# strivio/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException

DEFAULT_DATABASE_URL = "sqlite:///strivio.db"


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    database_url: str = DEFAULT_DATABASE_URL
    signup_redirect_seconds: float = 2.0
    log_level: str = "INFO"

    @property
    def backend(self) -> str:
        return "supabase" if self.supabase_url and self.supabase_key else "local"


def _secret(name: str) -> Optional[str]:
    # no secrets.toml is the normal case outside Streamlit Cloud
    try:
        return st.secrets.get(name)
    except (FileNotFoundError, StreamlitAPIException):
        return None


def _lookup(name: str) -> Optional[str]:
    return _secret(name) or os.getenv(name)


def load_settings() -> Settings:
    """Secrets first, then environment, then defaults."""
    delay = _lookup("STRIVIO_SIGNUP_REDIRECT_SECONDS")
    return Settings(
        supabase_url=_lookup("SUPABASE_URL"),
        supabase_key=_lookup("SUPABASE_KEY"),
        database_url=_lookup("DATABASE_URL") or DEFAULT_DATABASE_URL,
        signup_redirect_seconds=float(delay) if delay else 2.0,
        log_level=(_lookup("STRIVIO_LOG_LEVEL") or "INFO").upper(),
    )
