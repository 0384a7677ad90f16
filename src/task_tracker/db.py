from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.engine import URL, Engine, RowMapping, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .errors import StoreError
from .models import TaskEntity
from .repositories import TaskStore, new_task_id, utcnow
from .schemas import TEXT_MAX_LENGTH, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

metadata = MetaData()

tasks_table = Table(
    "tasks",
    metadata,
    # Insertion sequence, used to order tasks created within the same timestamp tick
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(32), nullable=False, unique=True, index=True),
    Column("text", String(TEXT_MAX_LENGTH), nullable=False),
    Column("completed", Boolean, nullable=False, default=False),
    Column("created_at", DateTime(timezone=True), nullable=False, index=True),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_to_entity(row: RowMapping) -> TaskEntity:
    return {
        "id": str(row["id"]),
        "text": str(row["text"]),
        "completed": bool(row["completed"]),
        "created_at": _as_utc(row["created_at"]),
        "updated_at": _as_utc(row["updated_at"]),
    }


class SqlTaskStore(TaskStore):
    """
    Task store backed by any database SQLAlchemy can reach.

    The engine is created in `connect` and disposed in `close`; each
    operation runs in its own transaction (`engine.begin()`).
    """

    def __init__(
        self,
        conn_str: str,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        try:
            url = make_url(conn_str)
        except ArgumentError as e:
            raise StoreError(f"Invalid store connection string: {conn_str!r}", cause=e) from e
        if username is not None:
            url = url.set(username=username, password=password)
        self._url = url
        self._engine: Optional[Engine] = None

    @property
    def engine_url(self) -> URL:
        return self._url

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise StoreError("Task store is not connected")
        return self._engine

    def connect(self) -> None:
        options: dict = {"pool_pre_ping": True}
        if self._url.get_backend_name() == "sqlite":
            options["connect_args"] = {"check_same_thread": False}
            if self._url.database and self._url.database != ":memory:":
                os.makedirs(os.path.dirname(self._url.database) or ".", exist_ok=True)
            else:
                # One shared connection, otherwise every thread sees its own empty database
                options["poolclass"] = StaticPool
        try:
            engine = create_engine(self._url, **options)
            with engine.begin() as conn:
                conn.execute(text("SELECT 1"))
            metadata.create_all(engine)
        except (SQLAlchemyError, ImportError) as e:
            raise StoreError(f"Could not connect to database: {e}", cause=e) from e
        self._engine = engine
        logger.info(
            "Connected to database successfully (%s)",
            self._url.render_as_string(hide_password=True),
        )

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database connection closed")

    def ping(self) -> bool:
        if self._engine is None:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("Database ping failed: %s", e)
            return False
        return True

    def _fetch(self, conn, task_id: str) -> Optional[TaskEntity]:
        row = conn.execute(
            select(tasks_table).where(tasks_table.c.id == task_id)
        ).mappings().first()
        return _row_to_entity(row) if row else None

    def create(self, data: TaskCreate) -> TaskEntity:
        now = utcnow()
        task_id = new_task_id()
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    insert(tasks_table).values(
                        id=task_id,
                        text=data.text,
                        completed=data.completed,
                        created_at=now,
                        updated_at=now,
                    )
                )
                created = self._fetch(conn, task_id)
        except SQLAlchemyError as e:
            raise StoreError(str(e), cause=e) from e
        assert created is not None
        return created

    def list(self) -> List[TaskEntity]:
        query = select(tasks_table).order_by(
            tasks_table.c.created_at.desc(), tasks_table.c.seq.desc()
        )
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(query).mappings().all()
        except SQLAlchemyError as e:
            raise StoreError(str(e), cause=e) from e
        return [_row_to_entity(r) for r in rows]

    def update(self, task_id: str, data: TaskUpdate) -> Optional[TaskEntity]:
        changes = data.changes()
        try:
            with self.engine.begin() as conn:
                if not changes:
                    return self._fetch(conn, task_id)
                result = conn.execute(
                    update(tasks_table)
                    .where(tasks_table.c.id == task_id)
                    .values(**changes, updated_at=utcnow())
                )
                if result.rowcount == 0:
                    return None
                return self._fetch(conn, task_id)
        except SQLAlchemyError as e:
            raise StoreError(str(e), cause=e) from e

    def delete(self, task_id: str) -> bool:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(delete(tasks_table).where(tasks_table.c.id == task_id))
        except SQLAlchemyError as e:
            raise StoreError(str(e), cause=e) from e
        return result.rowcount > 0
