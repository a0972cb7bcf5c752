# strivio/ui/editor.py
"""Create/edit form state shared by the project and task pages.

The editor starts in create mode. ``start_edit`` loads a row into the form;
a successful submit (insert or update) invalidates every cached query that
can hold the entity, once, and drops back to an empty create form. Pages
submit in two runs: ``begin_submit`` on the click, ``finish_submit`` on the
rerun that draws the submit button disabled. Deleting asks for confirmation
first: ``request_delete`` then ``confirm_delete`` or ``cancel_delete``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Mapping, Optional, Tuple, Type

from pydantic import BaseModel

from strivio.errors import StoreError
from strivio.models.validation import validate_form
from strivio.utils.query_cache import QueryCache

logger = logging.getLogger(__name__)

CREATE = "create"
EDIT = "edit"


@dataclass
class EditorState:
    mode: str = CREATE
    edit_id: Optional[str] = None
    values: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    success_message: str = ""
    error_message: str = ""
    submitting: bool = False
    # form data waiting for the next run, while the submit button is drawn disabled
    pending_submit: Optional[Dict[str, Any]] = None
    pending_delete: Optional[str] = None
    # bumped whenever the form is reloaded so widgets pick up new defaults
    form_version: int = 0


@dataclass
class EntityOps:
    insert: Callable[[Dict[str, Any]], Any]
    update: Callable[[str, Dict[str, Any]], Any]
    delete: Callable[[str], Any]
    # every cached query that can hold rows of this entity
    cache_keys: Tuple[Tuple[Hashable, ...], ...]


class EntityEditor:
    def __init__(self, label: str, schema: Type[BaseModel], ops: EntityOps, cache: QueryCache,
                 state: Optional[EditorState] = None,
                 to_record: Optional[Callable[[BaseModel], Dict[str, Any]]] = None):
        self.label = label
        self.schema = schema
        self.ops = ops
        self.cache = cache
        self.state = state if state is not None else EditorState()
        self.to_record = to_record or (lambda form: form.model_dump())

    @property
    def editing(self) -> bool:
        return self.state.mode == EDIT and self.state.edit_id is not None

    def start_edit(self, row_id: str, values: Mapping[str, Any]) -> None:
        s = self.state
        s.mode, s.edit_id = EDIT, row_id
        s.values, s.errors = dict(values), {}
        s.form_version += 1

    def reset(self) -> None:
        s = self.state
        s.mode, s.edit_id = CREATE, None
        s.values, s.errors = {}, {}
        s.form_version += 1

    def submit(self, data: Mapping[str, Any]) -> bool:
        s = self.state
        s.success_message = ""
        s.error_message = ""
        form, errors = validate_form(self.schema, data)
        if errors:
            s.errors, s.values = errors, dict(data)
            return False
        s.errors = {}

        record = self.to_record(form)
        try:
            if self.editing:
                self.ops.update(s.edit_id, record)
                message = f"{self.label} updated successfully!"
            else:
                self.ops.insert(record)
                message = f"{self.label} created successfully!"
        except StoreError as exc:
            logger.warning("%s %s rejected: %s", self.label, s.mode, exc.message)
            s.error_message, s.values = exc.message, dict(data)
            return False

        self.cache.invalidate(*self.ops.cache_keys)
        self.reset()
        s.success_message = message
        return True

    def begin_submit(self, data: Mapping[str, Any]) -> bool:
        """Queue ``data`` for ``finish_submit`` on the next run. Ignored while one is in flight."""
        s = self.state
        if s.submitting:
            return False
        s.submitting, s.pending_submit = True, dict(data)
        return True

    def finish_submit(self) -> bool:
        s = self.state
        data, s.pending_submit = s.pending_submit, None
        try:
            return data is not None and self.submit(data)
        finally:
            s.submitting = False

    def request_delete(self, row_id: str) -> None:
        self.state.pending_delete = row_id

    def cancel_delete(self) -> None:
        self.state.pending_delete = None

    def confirm_delete(self) -> bool:
        s = self.state
        s.success_message = ""
        s.error_message = ""
        row_id, s.pending_delete = s.pending_delete, None
        if row_id is None:
            return False
        try:
            self.ops.delete(row_id)
        except StoreError as exc:
            logger.warning("%s delete rejected: %s", self.label, exc.message)
            s.error_message = exc.message
            return False
        self.cache.invalidate(*self.ops.cache_keys)
        if self.editing and s.edit_id == row_id:
            # form stays in edit mode on the deleted row
            logger.info("%s %s deleted while open in the editor", self.label, row_id)
        return True
