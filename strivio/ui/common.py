# strivio/ui/common.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import streamlit as st

from strivio import db
from strivio.config import Settings, load_settings
from strivio.errors import StoreError
from strivio.ui.editor import EditorState, EntityEditor
from strivio.utils import routes
from strivio.utils.query_cache import QueryCache
from strivio.utils.session import SessionContext

logger = logging.getLogger(__name__)

_TAB_KEY = "strivio_tab"
_PAGES: Dict[str, "st.Page"] = {}


@dataclass
class TabState:
    """Everything one browser tab owns: its store client, session and cache."""
    settings: Settings
    store: db.RemoteStore
    session: SessionContext
    cache: QueryCache

    def close(self) -> None:
        self.session.teardown()
        self.cache.clear()


@st.cache_resource
def _shared_engine(url: str):
    engine = db.make_engine(url)
    db.init_db(engine)
    return engine


def tab_state(settings: Optional[Settings] = None) -> TabState:
    state = st.session_state.get(_TAB_KEY)
    if state is None:
        settings = settings or load_settings()
        engine = None if settings.backend == "supabase" else _shared_engine(settings.database_url)
        store = db.create_store(settings, engine)
        state = TabState(settings=settings, store=store, session=SessionContext(store), cache=QueryCache())
        st.session_state[_TAB_KEY] = state
    return state


def editor_state(key: str) -> EditorState:
    if key not in st.session_state:
        st.session_state[key] = EditorState()
    return st.session_state[key]


# ---- navigation ----
def register_pages(pages: Mapping[str, "st.Page"]) -> None:
    _PAGES.clear()
    _PAGES.update(pages)


def route_of(page) -> str:
    return page.url_path or routes.DASHBOARD


def go(route: str) -> None:
    st.switch_page(_PAGES[route])


def page_link(route: str, label: str) -> None:
    st.page_link(_PAGES[route], label=label)


def sign_out() -> None:
    state = tab_state()
    try:
        state.store.sign_out()
    except StoreError as exc:
        st.error(exc.message)
        return
    state.close()
    st.session_state.clear()
    go(routes.LOGIN)


# ---- widgets ----
def render_header(title: str) -> None:
    identity = tab_state().session.identity
    left, right = st.columns([5, 1])
    with left:
        st.title(title)
        if identity is not None:
            st.caption(f"Signed in as **{identity.email}**")
    with right:
        if st.button("Sign out", key=f"sign_out_{title}", use_container_width=True):
            sign_out()


def field_error(errors: Mapping[str, str], name: str) -> None:
    if name in errors:
        st.caption(f":red[{errors[name]}]")


def render_messages(editor: EntityEditor) -> None:
    if editor.state.error_message:
        st.error(editor.state.error_message)
    if editor.state.success_message:
        st.success(editor.state.success_message)


def render_delete_confirmation(editor: EntityEditor, noun: str) -> None:
    row_id = editor.state.pending_delete
    st.warning(f"Are you sure you want to delete this {noun}?")
    yes, no = st.columns(2)
    if yes.button("Yes, delete", key=f"confirm_delete_{row_id}", type="primary", use_container_width=True):
        with st.spinner("Deleting..."):
            editor.confirm_delete()
        st.rerun()
    if no.button("Cancel", key=f"cancel_delete_{row_id}", use_container_width=True):
        editor.cancel_delete()
        st.rerun()
