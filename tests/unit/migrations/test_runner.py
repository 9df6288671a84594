"""Tests for MigrationRunner using in-memory fakes."""

import pytest

from qedb.core.exceptions import (
    DatabaseError,
    ExecutionError,
    MigrationDefinitionError,
    StatementFailedError,
    StoreUnavailableError,
)
from qedb.core.types import MigrationDefinition
from qedb.migrations.runner import MigrationRunner
from tests.fakes import (
    InMemoryMigrationStore,
    RecordingExecutor,
    TransactionalRecordingExecutor,
)


def _definition(identifier: str, *statements: str) -> MigrationDefinition:
    return MigrationDefinition(identifier=identifier, statements=statements)


class TestRunAppliesMigrations:
    """Tests for applying migrations to an empty store."""

    def test_empty_store_applies_all_in_order(
        self, fake_store, fake_executor, init_and_seed
    ):
        """Both migrations should be applied and recorded in order."""
        runner = MigrationRunner(fake_store, fake_executor)

        result = runner.run(init_and_seed)

        assert result.applied == ["init", "seed"]
        assert result.skipped == []
        assert result.changed
        assert [r.identifier for r in fake_store.list_applied()] == ["init", "seed"]
        assert fake_executor.executed == [
            init_and_seed[0].statements[0],
            init_and_seed[1].statements[0],
        ]

    def test_run_initializes_store_first(self, fake_store, fake_executor):
        """run() should initialize the store even with nothing to apply."""
        runner = MigrationRunner(fake_store, fake_executor)

        result = runner.run([])

        assert fake_store.initialized
        assert result.applied == []
        assert not result.changed

    def test_statements_execute_in_order(self, fake_store, fake_executor):
        """Statements within a migration run in their listed order."""
        runner = MigrationRunner(fake_store, fake_executor)

        runner.run([_definition("m1", "s1", "s2", "s3")])

        assert fake_executor.executed == ["s1", "s2", "s3"]

    def test_accepts_generator(self, fake_store, fake_executor, init_and_seed):
        """Definitions may be any iterable."""
        runner = MigrationRunner(fake_store, fake_executor)

        result = runner.run(d for d in init_and_seed)

        assert result.applied == ["init", "seed"]


class TestIdempotence:
    """Tests for re-running the same migrations."""

    def test_second_run_executes_nothing(self, fake_store, fake_executor, init_and_seed):
        """Running twice should be a no-op the second time."""
        runner = MigrationRunner(fake_store, fake_executor)

        runner.run(init_and_seed)
        executed_after_first = list(fake_executor.executed)
        records_after_first = fake_store.list_applied()

        result = runner.run(init_and_seed)

        assert result.applied == []
        assert result.skipped == ["init", "seed"]
        assert fake_executor.executed == executed_after_first
        assert fake_store.list_applied() == records_after_first

    def test_skip_on_applied(self, fake_executor):
        """An identifier already in the store causes zero executor calls."""
        store = InMemoryMigrationStore().preload("X")
        runner = MigrationRunner(store, fake_executor)

        result = runner.run([_definition("X", "CREATE TABLE a (id INT)")])

        assert fake_executor.executed == []
        assert result.skipped == ["X"]

    def test_only_unapplied_migration_runs(self, fake_executor, init_and_seed):
        """With 'init' already applied, only 'seed' executes."""
        store = InMemoryMigrationStore().preload("init")
        runner = MigrationRunner(store, fake_executor)

        result = runner.run(init_and_seed)

        assert result.applied == ["seed"]
        assert result.skipped == ["init"]
        assert fake_executor.executed == [init_and_seed[1].statements[0]]


class TestFailure:
    """Tests for fail-fast behavior."""

    def test_failing_statement_stops_migration(self, fake_store):
        """If s2 fails, s1 ran, s3 never runs and nothing is recorded."""
        executor = RecordingExecutor(failing={"s2"})
        runner = MigrationRunner(fake_store, executor)

        with pytest.raises(StatementFailedError) as exc_info:
            runner.run([_definition("m1", "s1", "s2", "s3")])

        assert executor.executed == ["s1"]
        assert not fake_store.has_applied("m1")
        assert exc_info.value.identifier == "m1"
        assert exc_info.value.index == 1
        assert exc_info.value.statement == "s2"

    def test_failure_aborts_later_migrations(self, fake_store):
        """Migrations after a failed one are not attempted."""
        executor = RecordingExecutor(failing={"bad"})
        runner = MigrationRunner(fake_store, executor)

        with pytest.raises(StatementFailedError):
            runner.run(
                [
                    _definition("a", "ok-a"),
                    _definition("b", "bad"),
                    _definition("c", "ok-c"),
                ]
            )

        assert executor.executed == ["ok-a"]
        assert [r.identifier for r in fake_store.list_applied()] == ["a"]

    def test_engine_diagnostic_is_preserved(self, fake_store):
        """The executor's message reaches the caller unchanged."""
        executor = RecordingExecutor(
            failing={"s1"}, error='ERROR:  relation "users" does not exist'
        )
        runner = MigrationRunner(fake_store, executor)

        with pytest.raises(StatementFailedError) as exc_info:
            runner.run([_definition("seed", "s1")])

        error = exc_info.value
        assert isinstance(error.cause, ExecutionError)
        assert error.__cause__ is error.cause
        assert str(error.cause) == 'ERROR:  relation "users" does not exist'
        assert "seed" in str(error)
        assert "statement 0" in str(error)

    def test_failed_migration_is_retried(self, fake_store, init_and_seed):
        """Failure is not remembered: a later run applies the fixed migration."""
        seed_statement = init_and_seed[1].statements[0]
        executor = RecordingExecutor(failing={seed_statement})
        runner = MigrationRunner(fake_store, executor)

        with pytest.raises(StatementFailedError) as exc_info:
            runner.run(init_and_seed)
        assert exc_info.value.identifier == "seed"
        assert [r.identifier for r in fake_store.list_applied()] == ["init"]

        executor.failing.clear()
        result = runner.run(init_and_seed)

        assert result.applied == ["seed"]
        assert result.skipped == ["init"]
        assert [r.identifier for r in fake_store.list_applied()] == ["init", "seed"]

    def test_store_unavailable_aborts_before_execution(self, fake_executor, init_and_seed):
        """No statement runs when the store cannot be initialized."""
        store = InMemoryMigrationStore(unavailable=True)
        runner = MigrationRunner(store, fake_executor)

        with pytest.raises(StoreUnavailableError):
            runner.run(init_and_seed)

        assert fake_executor.executed == []

    def test_duplicate_identifiers_rejected(self, fake_store, fake_executor):
        """Duplicate identifiers fail before the store is touched."""
        runner = MigrationRunner(fake_store, fake_executor)

        with pytest.raises(MigrationDefinitionError, match="Duplicate"):
            runner.run([_definition("a", "s1"), _definition("a", "s2")])

        assert fake_store.init_calls == 0
        assert fake_executor.executed == []


class TestAtomicMode:
    """Tests for running each migration in one transaction."""

    def test_requires_transactional_executor(self, fake_store, fake_executor):
        """atomic=True with a plain executor is a usage error."""
        with pytest.raises(TypeError, match="atomic"):
            MigrationRunner(fake_store, fake_executor, atomic=True)

    def test_commits_whole_migration(self, fake_store):
        """All statements commit together on success."""
        executor = TransactionalRecordingExecutor()
        runner = MigrationRunner(fake_store, executor, atomic=True)

        runner.run([_definition("m1", "s1", "s2"), _definition("m2", "s3")])

        assert executor.committed == ["s1", "s2", "s3"]
        assert executor.transactions == 2

    def test_failure_discards_earlier_statements(self, fake_store):
        """A failure rolls back statements already run in the migration."""
        executor = TransactionalRecordingExecutor(failing={"s2"})
        runner = MigrationRunner(fake_store, executor, atomic=True)

        with pytest.raises(StatementFailedError) as exc_info:
            runner.run([_definition("m1", "s1", "s2", "s3")])

        assert exc_info.value.index == 1
        assert executor.committed == []
        assert not fake_store.has_applied("m1")

    def test_commit_failure_names_migration(self, fake_store):
        """A failed commit is reported against the migration's last statement."""
        executor = TransactionalRecordingExecutor(commit_fails=True)
        runner = MigrationRunner(fake_store, executor, atomic=True)

        with pytest.raises(StatementFailedError) as exc_info:
            runner.run([_definition("m1", "s1", "s2", "s3"), _definition("m2", "s4")])

        assert exc_info.value.identifier == "m1"
        assert exc_info.value.index == 2
        assert exc_info.value.statement == "s3"
        assert isinstance(exc_info.value.cause, DatabaseError)
        assert executor.committed == []
        assert fake_store.records == {}


class TestPendingAndStatus:
    """Tests for read-only inspection."""

    def test_pending_lists_unapplied_in_order(self, fake_executor, init_and_seed):
        """pending() returns only what a run would apply."""
        store = InMemoryMigrationStore().preload("init")
        runner = MigrationRunner(store, fake_executor)

        pending = runner.pending(init_and_seed)

        assert [d.identifier for d in pending] == ["seed"]
        assert fake_executor.executed == []

    def test_pending_does_not_initialize_store(self, fake_store, fake_executor, init_and_seed):
        """Inspecting pending migrations does not create the marker table."""
        runner = MigrationRunner(fake_store, fake_executor)

        runner.pending(init_and_seed)

        assert fake_store.init_calls == 0

    def test_status_reports_applied_at(self, fake_executor, init_and_seed):
        """status() includes timestamps for applied migrations only."""
        store = InMemoryMigrationStore().preload("init")
        runner = MigrationRunner(store, fake_executor)

        statuses = runner.status(init_and_seed)

        assert [s.identifier for s in statuses] == ["init", "seed"]
        assert statuses[0].is_applied
        assert statuses[0].applied_at == store.records["init"].applied_at
        assert not statuses[1].is_applied
        assert statuses[1].applied_at is None
