# strivio/ui/auth_pages.py
import time

import streamlit as st

from strivio.services import auth
from strivio.ui.common import field_error, go, page_link, tab_state
from strivio.utils import routes


def _credentials_form(form_key: str, button: str):
    with st.form(form_key, clear_on_submit=False):
        email = st.text_input("Email", placeholder="you@example.com")
        errors = st.session_state.get(f"{form_key}_errors", {})
        field_error(errors, "email")
        password = st.text_input("Password", type="password", placeholder="Password")
        field_error(errors, "password")
        submitted = st.form_submit_button(button, use_container_width=True)
    return submitted, {"email": email, "password": password}


def render_login():
    state = tab_state()
    _, col, _ = st.columns([1, 2.2, 1])
    with col:
        st.title("Sign in")
        if state.session.last_error:
            st.warning(f"Could not restore your session: {state.session.last_error}")
        submitted, data = _credentials_form("login_form", "Sign in")
        if submitted:
            with st.spinner("Signing in..."):
                outcome = auth.sign_in(state.store, data)
            st.session_state["login_form_errors"] = outcome.errors
            if outcome.ok:
                state.session.set_identity(outcome.identity)
                go(outcome.redirect)
            elif outcome.errors:
                st.rerun()
            else:
                st.error(outcome.message)
        page_link(routes.SIGNUP, "Don't have an account? Sign up")


def render_signup():
    state = tab_state()
    _, col, _ = st.columns([1, 2.2, 1])
    with col:
        st.title("Sign up")
        submitted, data = _credentials_form("signup_form", "Sign up")
        if submitted:
            with st.spinner("Creating account..."):
                outcome = auth.sign_up(state.store, data, state.settings.signup_redirect_seconds)
            st.session_state["signup_form_errors"] = outcome.errors
            if outcome.ok:
                st.success(outcome.message)
                time.sleep(outcome.redirect_after)
                go(outcome.redirect)
            elif outcome.errors:
                st.rerun()
            else:
                st.error(outcome.message)
        page_link(routes.LOGIN, "Already have an account? Sign in")
