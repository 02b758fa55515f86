"""
SQL Gateway for the Signage CMS.

Executes parameterized SQL against the Flask-SQLAlchemy session on behalf of
the entities and factories:
- select: rows as dictionaries
- insert: generated primary key
- update: affected row count (also used for DELETE statements)
- transaction: unit of work that commits once at the outermost level and
  rolls back every statement of the unit when any of them fails
- on_rollback: callbacks that undo in-memory state when the unit rolls back

Usage:
    gateway = SqlGateway(db.session)
    with gateway.transaction():
        layout_id = gateway.insert('INSERT INTO layout (...) VALUES (...)', {...})
        gateway.update('UPDATE display SET ...', {...})
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy import text


logger = logging.getLogger(__name__)


class SqlGateway:
    """
    Thin wrapper around a SQLAlchemy session for textual, parameterized SQL.

    Statements run inside the session's current transaction. Outside of
    ``transaction()`` every write is committed immediately.
    """

    def __init__(self, session):
        self.session = session
        self._depth = 0
        self._rollback_hooks = {}

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def select(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Run a SELECT statement.

        Args:
            sql: SQL with named ``:param`` placeholders
            params: Parameter values

        Returns:
            List of rows as dictionaries keyed by column name
        """
        result = self.session.execute(text(sql), params or {})
        return [dict(row) for row in result.mappings().all()]

    def insert(self, sql: str, params: Optional[Dict[str, Any]] = None) -> int:
        """
        Run an INSERT statement.

        Returns:
            The generated primary key of the new row
        """
        result = self.session.execute(text(sql), params or {})
        self._autocommit()
        return result.lastrowid

    def update(self, sql: str, params: Optional[Dict[str, Any]] = None) -> int:
        """
        Run an UPDATE or DELETE statement.

        Returns:
            Number of affected rows
        """
        result = self.session.execute(text(sql), params or {})
        self._autocommit()
        return result.rowcount

    def on_rollback(self, key, callback):
        """
        Register a callback to run if the current unit of work rolls back.

        Only the first callback registered under ``key`` in a unit is kept, so
        it sees the state from before the unit started. Outside of
        ``transaction()`` this does nothing.

        Args:
            key: Identifies the owner of the callback within the unit
            callback: Called without arguments after the rollback
        """
        if self.in_transaction and key not in self._rollback_hooks:
            self._rollback_hooks[key] = callback

    @contextmanager
    def transaction(self):
        """
        Group several statements into one unit of work.

        Nested calls join the outermost unit. The outermost unit commits on
        success and rolls back on any exception, which is re-raised. Rollback
        callbacks run newest first after the session rollback.
        """
        self._depth += 1
        try:
            yield self
            if self._depth == 1:
                self.session.commit()
        except Exception:
            self._depth -= 1
            if self._depth == 0:
                logger.warning('Rolling back unit of work')
                self.session.rollback()
                self._run_rollback_hooks()
            raise
        else:
            self._depth -= 1
            if self._depth == 0:
                self._rollback_hooks = {}

    def _run_rollback_hooks(self):
        hooks, self._rollback_hooks = self._rollback_hooks, {}
        for callback in reversed(list(hooks.values())):
            callback()

    def _autocommit(self):
        if not self.in_transaction:
            self.session.commit()
