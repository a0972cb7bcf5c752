# strivio/ui/dashboard.py
import plotly.express as px
import streamlit as st

from strivio.errors import StoreError
from strivio.models.task import STATUS_COLORS
from strivio.services import tasks
from strivio.ui.common import page_link, render_header, tab_state
from strivio.utils import routes
from strivio.utils.summary import status_counts


def render_dashboard():
    state = tab_state()
    render_header("Dashboard")
    identity = state.session.identity
    if identity is None:
        return

    st.subheader("Your account")
    st.write(f"**Email:** {identity.email}")
    st.caption(f"User ID: {identity.id}")

    c1, c2 = st.columns(2)
    with c1:
        page_link(routes.PROJECTS, "Manage projects")
    with c2:
        page_link(routes.TASKS, "Manage tasks")

    st.markdown("---")
    st.subheader("Task status overview")
    try:
        rows = state.cache.fetch(("tasks",), lambda: tasks.fetch_tasks(state.store))
    except StoreError as exc:
        st.error(exc.message)
        return

    df = status_counts(rows)
    if df["Tasks"].sum() == 0:
        st.info("No tasks yet. Create a project, then add tasks to it.")
        return

    left, right = st.columns([1, 2])
    with left:
        st.dataframe(df, hide_index=True, use_container_width=True)
    with right:
        fig = px.bar(df, x="Status", y="Tasks", color="Status", color_discrete_map=STATUS_COLORS)
        fig.update_layout(showlegend=False, height=300, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
