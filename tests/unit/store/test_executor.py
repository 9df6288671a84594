"""Tests for SQLAlchemyStatementExecutor."""

import pytest
from sqlalchemy import text

from qedb.app.protocols import StatementExecutorProtocol, TransactionalExecutorProtocol
from qedb.core.exceptions import DatabaseError, ExecutionError
from qedb.store.database import Database
from qedb.store.executor import SQLAlchemyStatementExecutor


def _scalar(db: Database, sql: str):
    with db.engine.connect() as conn:
        return conn.execute(text(sql)).scalar()


@pytest.fixture
def table(executor: SQLAlchemyStatementExecutor) -> str:
    executor.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT)")
    return "items"


class TestExecute:
    """Tests for single-statement execution."""

    def test_implements_protocols(self, executor: SQLAlchemyStatementExecutor):
        assert isinstance(executor, StatementExecutorProtocol)
        assert isinstance(executor, TransactionalExecutorProtocol)

    def test_statement_is_committed(self, db: Database, executor, table):
        """Each statement commits on its own."""
        executor.execute("INSERT INTO items (name) VALUES ('pizza')")

        other = Database(db.url)
        other.connect()
        assert _scalar(other, "SELECT COUNT(*) FROM items") == 1
        other.close()

    def test_statement_sent_verbatim(self, db: Database, executor, table):
        """Percent signs and colon-prefixed words are not treated as binds."""
        executor.execute("INSERT INTO items (name) VALUES ('100% :fresh')")

        assert _scalar(db, "SELECT name FROM items") == "100% :fresh"

    def test_error_carries_engine_diagnostic(self, executor):
        """ExecutionError's message is the driver's message, unchanged."""
        with pytest.raises(ExecutionError) as exc_info:
            executor.execute("SELECT * FROM no_such_table")

        error = exc_info.value
        assert "no such table: no_such_table" in str(error)
        assert str(error) == str(error.__cause__.orig)

    def test_syntax_error(self, executor):
        with pytest.raises(ExecutionError, match="syntax error"):
            executor.execute("CREATE TABLE (")

    def test_not_connected_raises(self, db_url: str):
        db = Database(db_url)

        with pytest.raises(DatabaseError, match="not connected"):
            SQLAlchemyStatementExecutor(db).execute("SELECT 1")


class TestAtomic:
    """Tests for grouping statements in one transaction."""

    def test_commits_on_success(self, db: Database, executor, table):
        with executor.atomic() as unit:
            unit.execute("INSERT INTO items (name) VALUES ('a')")
            unit.execute("INSERT INTO items (name) VALUES ('b')")

        assert _scalar(db, "SELECT COUNT(*) FROM items") == 2

    def test_rolls_back_on_failure(self, db: Database, executor, table):
        """Statements before the failing one are undone."""
        with pytest.raises(ExecutionError):
            with executor.atomic() as unit:
                unit.execute("INSERT INTO items (id, name) VALUES (1, 'a')")
                unit.execute("INSERT INTO items (id, name) VALUES (1, 'dup')")

        assert _scalar(db, "SELECT COUNT(*) FROM items") == 0

    def test_rolls_back_on_caller_error(self, db: Database, executor, table):
        """Any exception leaving the block rolls back."""
        with pytest.raises(RuntimeError):
            with executor.atomic() as unit:
                unit.execute("INSERT INTO items (name) VALUES ('a')")
                raise RuntimeError("abort")

        assert _scalar(db, "SELECT COUNT(*) FROM items") == 0
