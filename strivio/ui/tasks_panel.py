# strivio/ui/tasks_panel.py
from typing import Optional

import streamlit as st

from strivio.errors import StoreError
from strivio.models import TaskForm, TASK_STATUSES, STATUS_LABELS
from strivio.services import projects, tasks
from strivio.ui.common import (
    editor_state, field_error, render_delete_confirmation, render_header, render_messages, tab_state,
)
from strivio.ui.editor import EntityEditor, EntityOps
from strivio.utils import routes

EDITOR_KEY = "task_editor"
# set by the projects page before switching here
TASK_FILTER_KEY = "task_filter"


def task_record(form: TaskForm) -> dict:
    return {"title": form.title, "status": form.status, "project_id": form.project}


def task_editor(state) -> EntityEditor:
    store = state.store
    ops = EntityOps(
        insert=lambda record: tasks.insert_task(store, record),
        update=lambda task_id, record: tasks.update_task(store, task_id, record),
        delete=lambda task_id: tasks.delete_task(store, task_id),
        cache_keys=(("tasks",),),
    )
    return EntityEditor("Task", TaskForm, ops, state.cache, editor_state(EDITOR_KEY), to_record=task_record)


def _project_filter() -> Optional[str]:
    pending = st.session_state.pop(TASK_FILTER_KEY, None)
    if pending:
        st.query_params[routes.TASK_FILTER_PARAM] = pending
    return st.query_params.get(routes.TASK_FILTER_PARAM)


def _index_of(options, value):
    return options.index(value) if value in options else None


def _render_form(editor: EntityEditor, project_rows):
    s = editor.state
    st.subheader("Edit Task" if editor.editing else "New Task")
    names = {p["id"]: p["name"] for p in project_rows}
    project_ids = list(names)
    statuses = list(TASK_STATUSES)
    with st.form("task_form"):
        title = st.text_input("Task title", value=s.values.get("title", ""),
                              placeholder="Task Title", key=f"t_title_{s.form_version}")
        field_error(s.errors, "title")
        status = st.selectbox("Status", statuses, index=_index_of(statuses, s.values.get("status")),
                              format_func=STATUS_LABELS.get, placeholder="Select status",
                              key=f"t_status_{s.form_version}")
        field_error(s.errors, "status")
        project = st.selectbox("Project", project_ids, index=_index_of(project_ids, s.values.get("project")),
                               format_func=names.get, placeholder="Select project",
                               key=f"t_project_{s.form_version}")
        field_error(s.errors, "project")
        if not project_ids:
            st.caption("No projects available. Create one first.")
        submitted = st.form_submit_button("Update task" if editor.editing else "Create task",
                                          disabled=s.submitting, use_container_width=True)
    if submitted and editor.begin_submit({"title": title, "status": status, "project": project}):
        st.rerun()
    if s.submitting:
        with st.spinner("Saving..."):
            editor.finish_submit()
        st.rerun()
    render_messages(editor)


def _render_list(state, editor: EntityEditor, project_filter: Optional[str], project_rows):
    st.subheader("Tasks")
    if project_filter:
        name = next((p["name"] for p in project_rows if p["id"] == project_filter), project_filter)
        c1, c2 = st.columns([3, 1])
        c1.info(f"Showing tasks for project **{name}**")
        if c2.button("Show all tasks", key="t_clear_filter"):
            del st.query_params[routes.TASK_FILTER_PARAM]
            st.rerun()

    key = ("tasks", project_filter) if project_filter else ("tasks",)
    try:
        rows = state.cache.fetch(key, lambda: tasks.fetch_tasks(state.store, project_filter))
    except StoreError as exc:
        st.error(exc.message)
        return
    if not rows:
        st.info("No tasks yet.")
        return

    for row in rows:
        project_name = (row.get("projects") or {}).get("name", "—")
        c1, c2, c3, c4, c5 = st.columns([3, 1.5, 2, 1, 1])
        c1.markdown(f"**{row['title']}**")
        c2.write(STATUS_LABELS.get(row["status"], row["status"]))
        c3.write(project_name)
        if c4.button("Edit", key=f"t_edit_{row['id']}"):
            editor.start_edit(row["id"], {"title": row["title"], "status": row["status"],
                                          "project": row["project_id"]})
            st.rerun()
        if c5.button("Delete", key=f"t_delete_{row['id']}"):
            editor.request_delete(row["id"])
            st.rerun()
        if editor.state.pending_delete == row["id"]:
            render_delete_confirmation(editor, "task")


def render_tasks_page():
    state = tab_state()
    editor = task_editor(state)
    project_filter = _project_filter()
    render_header("Tasks")

    try:
        project_rows = state.cache.fetch(("projects",), lambda: projects.fetch_projects(state.store))
    except StoreError as exc:
        st.error(f"Could not load projects: {exc.message}")
        project_rows = []

    form_col, list_col = st.columns([1, 2])
    with form_col:
        _render_form(editor, project_rows)
    with list_col:
        _render_list(state, editor, project_filter, project_rows)
