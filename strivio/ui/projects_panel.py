# strivio/ui/projects_panel.py
import streamlit as st

from strivio.errors import StoreError
from strivio.models import ProjectForm
from strivio.services import projects, users
from strivio.ui.common import (
    editor_state, field_error, go, render_delete_confirmation, render_header, render_messages, tab_state,
)
from strivio.ui.editor import EntityEditor, EntityOps
from strivio.ui.tasks_panel import TASK_FILTER_KEY
from strivio.utils import routes

EDITOR_KEY = "project_editor"


def owner_id(state) -> str:
    """Profile row id of the signed-in user; projects are owned by it."""
    identity = state.session.identity
    if identity is None:
        raise StoreError("You must be signed in to create a project")
    user = state.cache.fetch(("users", identity.email), lambda: users.fetch_user(state.store, identity.email))
    return user["id"]


def project_editor(state) -> EntityEditor:
    store = state.store
    ops = EntityOps(
        insert=lambda record: projects.insert_project(store, {"user_id": owner_id(state), **record}),
        update=lambda project_id, record: projects.update_project(store, project_id, record),
        delete=lambda project_id: projects.delete_project(store, project_id),
        # task rows embed the project name and go with a deleted project
        cache_keys=(("projects",), ("tasks",)),
    )
    return EntityEditor("Project", ProjectForm, ops, state.cache, editor_state(EDITOR_KEY))


def _render_form(editor: EntityEditor):
    s = editor.state
    st.subheader("Edit Project" if editor.editing else "New Project")
    with st.form("project_form"):
        name = st.text_input("Project name", value=s.values.get("name", ""),
                             placeholder="Project Name", key=f"p_name_{s.form_version}")
        field_error(s.errors, "name")
        description = st.text_area("Description", value=s.values.get("description", ""),
                                   placeholder="Enter Description", key=f"p_desc_{s.form_version}")
        field_error(s.errors, "description")
        submitted = st.form_submit_button("Update project" if editor.editing else "Create project",
                                          disabled=s.submitting, use_container_width=True)
    if submitted and editor.begin_submit({"name": name, "description": description}):
        st.rerun()
    if s.submitting:
        with st.spinner("Saving..."):
            editor.finish_submit()
        st.rerun()
    render_messages(editor)


def _render_list(state, editor: EntityEditor):
    st.subheader("Projects")
    try:
        rows = state.cache.fetch(("projects",), lambda: projects.fetch_projects(state.store))
    except StoreError as exc:
        st.error(exc.message)
        return
    if not rows:
        st.info("No projects yet.")
        return

    for row in rows:
        c1, c2, c3, c4, c5 = st.columns([2, 3, 1, 1, 1])
        c1.markdown(f"**{row['name']}**")
        c2.write(row["description"])
        if c3.button("Edit", key=f"p_edit_{row['id']}"):
            editor.start_edit(row["id"], {"name": row["name"], "description": row["description"]})
            st.rerun()
        if c4.button("Delete", key=f"p_delete_{row['id']}"):
            editor.request_delete(row["id"])
            st.rerun()
        if c5.button("Tasks", key=f"p_tasks_{row['id']}"):
            st.session_state[TASK_FILTER_KEY] = row["id"]
            go(routes.TASKS)
        if editor.state.pending_delete == row["id"]:
            render_delete_confirmation(editor, "project")


def render_projects_page():
    state = tab_state()
    editor = project_editor(state)
    render_header("Projects")
    form_col, list_col = st.columns([1, 2])
    with form_col:
        _render_form(editor)
    with list_col:
        _render_list(state, editor)
