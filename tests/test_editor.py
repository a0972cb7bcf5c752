# tests/test_editor.py
from types import SimpleNamespace

import pytest

from strivio.errors import StoreError
from strivio.models import Identity, ProjectForm, TaskForm
from strivio.services import projects, tasks
from strivio.ui.editor import CREATE, EDIT, EntityEditor, EntityOps
from strivio.ui.projects_panel import owner_id
from strivio.ui.tasks_panel import task_record


def project_editor(store, cache):
    ops = EntityOps(
        insert=lambda record: projects.insert_project(store, {"user_id": "U1", **record}),
        update=lambda pid, record: projects.update_project(store, pid, record),
        delete=lambda pid: projects.delete_project(store, pid),
        cache_keys=(("projects",), ("tasks",)),
    )
    return EntityEditor("Project", ProjectForm, ops, cache)


def task_editor(store, cache):
    ops = EntityOps(
        insert=lambda record: tasks.insert_task(store, record),
        update=lambda tid, record: tasks.update_task(store, tid, record),
        delete=lambda tid: tasks.delete_task(store, tid),
        cache_keys=(("tasks",),),
    )
    return EntityEditor("Task", TaskForm, ops, cache, to_record=task_record)


def _list(store, cache):
    return cache.fetch(("projects",), lambda: projects.fetch_projects(store))


def test_create_inserts_once_and_refreshes_list(fake_store, cache):
    editor = project_editor(fake_store, cache)
    assert _list(fake_store, cache) == []

    assert editor.submit({"name": "Apollo", "description": "Moon"})

    assert fake_store.mutations() == [
        ("insert", "projects", [{"user_id": "U1", "name": "Apollo", "description": "Moon"}]),
    ]
    assert cache.invalidations == 1
    assert [(r["name"], r["description"]) for r in _list(fake_store, cache)] == [("Apollo", "Moon")]
    assert editor.state.mode == CREATE
    assert editor.state.values == {}
    assert editor.state.success_message == "Project created successfully!"


def test_invalid_task_makes_no_calls(fake_store, cache):
    editor = task_editor(fake_store, cache)
    assert not editor.submit({"title": "", "status": None, "project": ""})

    assert fake_store.calls == []
    assert cache.invalidations == 0
    assert len(editor.state.errors) == 3
    assert editor.state.success_message == ""


def test_edit_submit_updates_by_id(fake_store, cache):
    fake_store.tables["tasks"] = [{"id": "T1", "title": "Build", "status": "pending", "project_id": "P1"}]
    editor = task_editor(fake_store, cache)

    editor.start_edit("T1", {"title": "Build", "status": "pending", "project": "P1"})
    assert editor.state.mode == EDIT
    assert editor.submit({"title": "Build rocket", "status": "in_progress", "project": "P1"})

    assert fake_store.mutations() == [
        ("update", "tasks", "T1", {"title": "Build rocket", "status": "in_progress", "project_id": "P1"}),
    ]
    assert editor.state.mode == CREATE
    assert editor.state.edit_id is None
    assert editor.state.success_message == "Task updated successfully!"
    assert cache.invalidations == 1


def test_delete_requires_confirmation(fake_store, cache):
    fake_store.tables["projects"] = [{"id": "P1", "user_id": "U1", "name": "Apollo", "description": "Moon"}]
    editor = project_editor(fake_store, cache)

    editor.request_delete("P1")
    editor.cancel_delete()
    assert fake_store.mutations() == []
    assert not editor.confirm_delete()

    editor.request_delete("P1")
    assert editor.confirm_delete()
    assert fake_store.mutations() == [("delete", "projects", "P1")]
    assert cache.invalidations == 1


def test_store_error_keeps_form(fake_store, cache):
    fake_store.fail["insert"] = "duplicate key value"
    editor = project_editor(fake_store, cache)

    assert not editor.submit({"name": "Apollo", "description": "Moon"})
    assert editor.state.error_message == "duplicate key value"
    assert editor.state.values == {"name": "Apollo", "description": "Moon"}
    assert not editor.state.submitting
    assert cache.invalidations == 0


def test_deleting_the_row_being_edited_leaves_edit_mode_alone(fake_store, cache):
    fake_store.tables["projects"] = [{"id": "P1", "user_id": "U1", "name": "Apollo", "description": "Moon"}]
    editor = project_editor(fake_store, cache)
    editor.start_edit("P1", {"name": "Apollo", "description": "Moon"})

    editor.request_delete("P1")
    editor.confirm_delete()

    assert editor.state.mode == EDIT
    assert editor.state.edit_id == "P1"
    assert not editor.submit({"name": "Apollo", "description": "Moon"})
    assert "No projects row" in editor.state.error_message


def test_owner_id_resolves_user_record_once(fake_store, cache):
    fake_store.tables["users"] = [{"id": "U7", "email": "a@b.com"}]
    state = SimpleNamespace(store=fake_store, cache=cache,
                            session=SimpleNamespace(identity=Identity(id="auth-1", email="a@b.com")))
    assert owner_id(state) == "U7"
    assert owner_id(state) == "U7"
    assert len([c for c in fake_store.calls if c[1] == "users"]) == 1


def test_owner_id_requires_session(fake_store, cache):
    state = SimpleNamespace(store=fake_store, cache=cache, session=SimpleNamespace(identity=None))
    with pytest.raises(StoreError):
        owner_id(state)


def test_project_changes_refresh_cached_tasks(fake_store, cache):
    fake_store.tables["projects"] = [{"id": "P1", "user_id": "U1", "name": "Apollo", "description": "Moon"}]
    fake_store.tables["tasks"] = [{"id": "T1", "title": "Build", "status": "pending", "project_id": "P1"}]
    editor = project_editor(fake_store, cache)

    def cached_tasks():
        return cache.fetch(("tasks",), lambda: tasks.fetch_tasks(fake_store))

    assert cached_tasks()[0]["projects"]["name"] == "Apollo"

    editor.start_edit("P1", {"name": "Apollo", "description": "Moon"})
    assert editor.submit({"name": "Artemis", "description": "Moon"})
    assert cached_tasks()[0]["projects"]["name"] == "Artemis"

    # the store drops a deleted project's tasks along with it
    fake_store.tables["tasks"] = []
    editor.request_delete("P1")
    assert editor.confirm_delete()
    assert cached_tasks() == []
    assert cache.invalidations == 2


def test_submit_button_stays_disabled_until_the_next_run(fake_store, cache):
    editor = project_editor(fake_store, cache)

    assert editor.begin_submit({"name": "Apollo", "description": "Moon"})
    assert editor.state.submitting
    assert fake_store.calls == []
    assert not editor.begin_submit({"name": "Apollo", "description": "Moon"})

    assert editor.finish_submit()
    assert not editor.state.submitting
    assert editor.state.pending_submit is None
    assert len(fake_store.mutations()) == 1
    assert not editor.finish_submit()
    assert len(fake_store.mutations()) == 1


def test_failed_submit_clears_the_in_flight_flag(fake_store, cache):
    fake_store.fail["insert"] = "duplicate key value"
    editor = project_editor(fake_store, cache)
    editor.begin_submit({"name": "Apollo", "description": "Moon"})
    assert not editor.finish_submit()
    assert not editor.state.submitting
    assert editor.state.error_message == "duplicate key value"


def test_delete_clears_earlier_messages(fake_store, cache):
    fake_store.tables["projects"] = [{"id": "P1", "user_id": "U1", "name": "Apollo", "description": "Moon"}]
    editor = project_editor(fake_store, cache)
    assert editor.submit({"name": "Gemini", "description": "Orbit"})
    assert editor.state.success_message

    fake_store.fail["delete"] = "permission denied"
    editor.request_delete("P1")
    assert not editor.confirm_delete()
    assert editor.state.success_message == ""
    assert editor.state.error_message == "permission denied"
