"""SQLite persistence for todos.

``TodoStorage`` owns the single process-wide engine. It is created once at
startup, attached to the application and handed to the route handlers
through a FastAPI dependency.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from sqlalchemy import delete, inspect, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import Update

from todo_backend import models
from todo_backend.database import make_engine, make_session_factory
from todo_backend.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

todos_table = models.Todo.__table__


def _driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def build_update(todo_id: int, values: Dict[str, Any]) -> Update:
    """Build ``UPDATE todos SET ... WHERE id = ?`` from supplied values.

    Columns come from the fixed ``UPDATABLE_FIELDS`` enumeration and are
    rendered in table order (title, completed, priority); the id binds last.
    """
    assignments = {
        todos_table.c[name]: values[name]
        for name in models.UPDATABLE_FIELDS
        if name in values
    }
    if not assignments:
        raise ValidationError("No fields to update provided.")
    return update(todos_table).where(todos_table.c.id == todo_id).values(assignments)


class TodoStorage:
    def __init__(self, database_url: str = None, engine: Engine = None):
        if engine is None:
            engine = make_engine(database_url)
        self.engine = engine
        self._session_factory = make_session_factory(engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Storage operation failed: %s", _driver_message(exc))
            raise StorageError(_driver_message(exc)) from exc
        except OverflowError as exc:
            # sqlite3 raises this while binding, outside SQLAlchemy's wrapping
            db.rollback()
            logger.error("Storage operation failed: %s", exc)
            raise StorageError(str(exc)) from exc
        finally:
            db.close()

    # -- schema -----------------------------------------------------------

    def init_schema(self) -> bool:
        """Create the todos table and add the ``priority`` column if missing.

        Never raises. Returns False when the store could not be opened or
        the schema could not be brought up to date; the process keeps
        serving and data operations report ``StorageError``.
        """
        try:
            conn = self.engine.connect()
        except SQLAlchemyError as exc:
            logger.error("Error connecting to database: %s", _driver_message(exc))
            return False

        with conn:
            logger.info("Connected to the SQLite database.")
            try:
                models.Base.metadata.create_all(bind=conn)
                conn.commit()
            except SQLAlchemyError as exc:
                logger.error("Error creating todos table: %s", _driver_message(exc))
                return False
            logger.info("Todos table created or already exists.")
            return self._ensure_priority_column(conn)

    def _ensure_priority_column(self, conn) -> bool:
        try:
            columns = {col["name"] for col in inspect(conn).get_columns("todos")}
            if "priority" in columns:
                logger.debug("priority column already present")
                return True
            conn.execute(text("ALTER TABLE todos ADD COLUMN priority INTEGER DEFAULT 0"))
            conn.commit()
        except SQLAlchemyError:
            logger.exception("Error adding priority column; continuing without it")
            return False
        logger.info("Added priority column to todos table.")
        return True

    # -- operations -------------------------------------------------------

    def list_all(self) -> List[models.Todo]:
        with self._session() as db:
            return db.query(models.Todo).order_by(models.Todo.id).all()

    def insert(self, title: str, priority: int = 0) -> int:
        with self._session() as db:
            obj = models.Todo(title=title, completed=False, priority=priority)
            db.add(obj)
            db.flush()
            todo_id = obj.id
            db.commit()
        logger.debug("inserted todo %s", todo_id)
        return todo_id

    def update(self, todo_id: int, values: Dict[str, Any]) -> int:
        stmt = build_update(todo_id, values)
        with self._session() as db:
            result = db.execute(stmt)
            db.commit()
            return result.rowcount

    def delete(self, todo_id: int) -> int:
        with self._session() as db:
            result = db.execute(delete(todos_table).where(todos_table.c.id == todo_id))
            db.commit()
            return result.rowcount

    def close(self) -> None:
        self.engine.dispose()
