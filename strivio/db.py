# strivio/db.py

#============================================================#
#                       Strivio-Tasks                        #
#============================================================#
# Author      : Aktham Almomani                              #
# Created     : 2025-10-15                                   #
# Version     : V1.0.0                                       #
#------------------------------------------------------------#
# Purpose     : Remote store layer for Strivio-Tasks. Table  #
#               CRUD + auth over Supabase, or over a local   #
#               SQLAlchemy database (SQLite by default)      #
#                                                            #
# Change Log  :                                              #
#  - V1.0.0 (2025-10-15): Initial release.                   #
#============================================================#


from __future__ import annotations

import hashlib
import hmac
import logging
import os
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

from sqlalchemy import (
    create_engine, event, Column, String, DateTime, ForeignKey, Enum
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from strivio.config import Settings
from strivio.errors import StoreError
from strivio.models.task import TASK_STATUSES
from strivio.models.user import Identity

logger = logging.getLogger(__name__)

Rows = List[Dict[str, Any]]
SessionListener = Callable[[str, Optional[Identity]], None]


class RemoteStore(Protocol):
    """Table-scoped CRUD plus session operations of the hosted backend."""

    def select(self, table: str, columns: str = "*",
               eq: Optional[Mapping[str, Any]] = None) -> Rows: ...

    def insert(self, table: str,
               rows: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> Rows: ...

    def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Rows: ...

    def delete(self, table: str, row_id: str) -> None: ...

    def sign_in(self, email: str, password: str) -> Identity: ...

    def sign_up(self, email: str, password: str) -> Identity: ...

    def sign_out(self) -> None: ...

    def get_session(self) -> Optional[Identity]: ...

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]: ...


# ---- Local schema ----
Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=_now)


class Project(Base):
    __tablename__ = "projects"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now)


class Task(Base):
    __tablename__ = "tasks"
    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    status = Column(Enum(*TASK_STATUSES, name="task_status", create_constraint=True),
                    default="pending", nullable=False)
    created_at = Column(DateTime, default=_now)


class Account(Base):
    __tablename__ = "auth_accounts"
    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    salt = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now)


TABLES = {"users": User, "projects": Project, "tasks": Task}


def make_engine(url: str) -> Engine:
    if url in ("sqlite://", "sqlite:///:memory:"):
        engine = create_engine(url, future=True, poolclass=StaticPool,
                               connect_args={"check_same_thread": False})
    else:
        engine = create_engine(url, pool_pre_ping=True, future=True)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)


# ---- helpers ----
_EMBED = re.compile(r"^(\w+)\(([\w\s,]*)\)$")


def _parse_columns(columns: str) -> Tuple[List[str], List[Tuple[str, List[str]]]]:
    """Split a projection like ``"*, projects(name)"`` into plain and embedded parts."""
    plain, embeds = [], []
    # commas also separate the embedded column list, so split on top-level commas only
    depth, token, parts = 0, "", []
    for ch in columns:
        if ch == "," and depth == 0:
            parts.append(token.strip())
            token = ""
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        token += ch
    parts.append(token.strip())

    for part in filter(None, parts):
        m = _EMBED.match(part)
        if m:
            cols = [c.strip() for c in m.group(2).split(",") if c.strip()]
            embeds.append((m.group(1), cols or ["*"]))
        else:
            plain.append(part)
    return plain or ["*"], embeds


def _as_dict(obj, columns: Sequence[str] = ("*",)) -> Dict[str, Any]:
    names = [c.name for c in obj.__table__.columns]
    if "*" not in columns:
        names = [n for n in names if n in columns]
    out = {}
    for name in names:
        value = getattr(obj, name)
        out[name] = value.isoformat() if isinstance(value, datetime) else value
    return out


def _hash_password(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), 100_000).hex()


class LocalStore:
    """SQLAlchemy-backed stand-in for the hosted backend.

    The engine is shared; the signed-in identity and the session listeners
    belong to the instance, so each browser tab gets its own LocalStore.
    """

    def __init__(self, engine: Engine):
        self._engine = engine
        self._sessionmaker = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
        self._identity: Optional[Identity] = None
        self._listeners: List[SessionListener] = []

    def _model(self, table: str):
        model = TABLES.get(table)
        if model is None:
            raise StoreError(f"Unknown table: {table}")
        return model

    def _column(self, model, name: str):
        if name not in model.__table__.columns:
            raise StoreError(f"Column {model.__tablename__}.{name} does not exist")
        return getattr(model, name)

    # ---- tables ----
    def select(self, table: str, columns: str = "*", eq: Optional[Mapping[str, Any]] = None) -> Rows:
        model = self._model(table)
        plain, embeds = _parse_columns(columns)
        try:
            with self._sessionmaker() as s:
                q = s.query(model)
                for name, value in (eq or {}).items():
                    q = q.filter(self._column(model, name) == value)
                rows = []
                for obj in q.order_by(model.created_at).all():
                    row = _as_dict(obj, plain)
                    for target, cols in embeds:
                        row[target] = self._embed(s, model, obj, target, cols)
                    rows.append(row)
                return rows
        except SQLAlchemyError as exc:
            logger.warning("select %s failed: %s", table, exc)
            raise StoreError(str(exc)) from exc

    def _embed(self, s, model, obj, target: str, cols: Sequence[str]) -> Optional[Dict[str, Any]]:
        target_model = self._model(target)
        for fk in model.__table__.foreign_keys:
            if fk.column.table.name == target:
                parent = s.get(target_model, getattr(obj, fk.parent.name))
                return _as_dict(parent, cols) if parent is not None else None
        raise StoreError(f"Could not find a relationship between '{model.__tablename__}' and '{target}'")

    def insert(self, table: str, rows) -> Rows:
        model = self._model(table)
        payload = [rows] if isinstance(rows, Mapping) else list(rows)
        try:
            with self._sessionmaker() as s:
                objs = []
                for values in payload:
                    for name in values:
                        self._column(model, name)
                    objs.append(model(**values))
                s.add_all(objs)
                s.commit()
                return [_as_dict(o) for o in objs]
        except IntegrityError as exc:
            logger.warning("insert into %s rejected: %s", table, exc.orig)
            raise StoreError(str(exc.orig), {"table": table}) from exc
        except SQLAlchemyError as exc:
            logger.warning("insert into %s failed: %s", table, exc)
            raise StoreError(str(exc), {"table": table}) from exc

    def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Rows:
        model = self._model(table)
        try:
            with self._sessionmaker() as s:
                obj = s.get(model, row_id)
                if obj is None:
                    raise StoreError(f"No {table} row with id {row_id}", {"table": table, "id": row_id})
                for name, value in values.items():
                    self._column(model, name)
                    setattr(obj, name, value)
                s.commit()
                return [_as_dict(obj)]
        except IntegrityError as exc:
            logger.warning("update of %s %s rejected: %s", table, row_id, exc.orig)
            raise StoreError(str(exc.orig), {"table": table, "id": row_id}) from exc
        except SQLAlchemyError as exc:
            logger.warning("update of %s %s failed: %s", table, row_id, exc)
            raise StoreError(str(exc), {"table": table, "id": row_id}) from exc

    def delete(self, table: str, row_id: str) -> None:
        model = self._model(table)
        try:
            with self._sessionmaker() as s:
                s.query(model).filter(model.id == row_id).delete(synchronize_session=False)
                s.commit()
        except IntegrityError as exc:
            logger.warning("delete of %s %s rejected: %s", table, row_id, exc.orig)
            raise StoreError(str(exc.orig), {"table": table, "id": row_id}) from exc
        except SQLAlchemyError as exc:
            logger.warning("delete of %s %s failed: %s", table, row_id, exc)
            raise StoreError(str(exc), {"table": table, "id": row_id}) from exc

    # ---- auth ----
    def sign_up(self, email: str, password: str) -> Identity:
        email = email.strip().lower()
        salt = os.urandom(16).hex()
        try:
            with self._sessionmaker() as s:
                if s.query(Account).filter(Account.email == email).one_or_none():
                    raise StoreError("User already registered")
                account = Account(email=email, salt=salt, password_hash=_hash_password(password, salt))
                s.add(account)
                s.commit()
                return Identity(id=account.id, email=account.email)
        except SQLAlchemyError as exc:
            logger.warning("sign-up failed: %s", exc)
            raise StoreError(str(exc)) from exc

    def sign_in(self, email: str, password: str) -> Identity:
        email = email.strip().lower()
        try:
            with self._sessionmaker() as s:
                account = s.query(Account).filter(Account.email == email).one_or_none()
        except SQLAlchemyError as exc:
            logger.warning("sign-in failed: %s", exc)
            raise StoreError(str(exc)) from exc
        if account is None or not hmac.compare_digest(
                account.password_hash, _hash_password(password, account.salt)):
            raise StoreError("Invalid login credentials")
        self._identity = Identity(id=account.id, email=account.email)
        self._notify("SIGNED_IN")
        return self._identity

    def sign_out(self) -> None:
        self._identity = None
        self._notify("SIGNED_OUT")

    def get_session(self) -> Optional[Identity]:
        return self._identity

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, event_name: str) -> None:
        for listener in list(self._listeners):
            listener(event_name, self._identity)


def create_store(settings: Settings, engine: Optional[Engine] = None) -> RemoteStore:
    """Supabase when credentials are configured, otherwise the local database."""
    if settings.backend == "supabase":
        from strivio.supabase_store import SupabaseStore
        logger.info("Using Supabase backend at %s", settings.supabase_url)
        return SupabaseStore.from_settings(settings)
    if engine is None:
        engine = make_engine(settings.database_url)
        init_db(engine)
    logger.info("Using local backend at %s", engine.url.render_as_string(hide_password=True))
    return LocalStore(engine)
