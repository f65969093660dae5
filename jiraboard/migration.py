"""Plain-SQL schema migrations kept as ``<id>_<name>.up.sql`` / ``.down.sql`` files."""

from __future__ import annotations

import logging
import os
import re
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterator, TextIO

from jiraboard.utils.timestamp import now

_LOGGER = logging.getLogger(__name__)

_ID_FORMAT = "%Y%m%d%H%M%S"
_ID_PATTERN = re.compile(r"[0-9]{14}")
_UP_SUFFIX = ".up.sql"
_DOWN_SUFFIX = ".down.sql"

_CREATE_TABLE = """
	CREATE TABLE IF NOT EXISTS migrations (
		id VARCHAR(255) PRIMARY KEY,
		name VARCHAR(255) NOT NULL,
		executed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
	)"""


class MigrationError(Exception):
    """Raised when migrations cannot be loaded, applied or rolled back."""


@dataclass
class Migration:
    """One migration: its id, name and the SQL to apply and revert it."""

    id: str
    name: str
    up_sql: str = ""
    down_sql: str = ""
    timestamp: datetime | None = None


def _parse_timestamp(migration_id: str) -> datetime | None:
    if not _ID_PATTERN.fullmatch(migration_id):
        return None
    try:
        return datetime.strptime(migration_id, _ID_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


class Migrator:
    """Applies and reverts migrations over a DB-API connection.

    ``placeholder`` is the parameter marker of the driver's paramstyle.
    """

    def __init__(self, db: Any, placeholder: str = "?", out: TextIO | None = None) -> None:
        self.db = db
        self.placeholder = placeholder
        self.out = out

    @contextmanager
    def _transaction(self) -> Iterator[Any]:
        cursor = self.db.cursor()
        try:
            yield cursor
        except BaseException:
            self.db.rollback()
            raise
        else:
            self.db.commit()
        finally:
            cursor.close()

    def create_migrations_table(self) -> None:
        """Create the table that records applied migrations."""
        with self._transaction() as cursor:
            cursor.execute(_CREATE_TABLE)

    def get_executed_migrations(self) -> list[str]:
        """Return the ids of applied migrations in ascending order."""
        cursor = self.db.cursor()
        try:
            cursor.execute("SELECT id FROM migrations ORDER BY id")
            return [str(row[0]) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def load_migrations(self, migration_dir: str) -> list[Migration]:
        """Read every migration file under ``migration_dir``, sorted by id."""
        migrations: dict[tuple[str, str], Migration] = {}
        walk_errors: list[OSError] = []
        for root, dirs, files in os.walk(migration_dir, onerror=walk_errors.append):
            if walk_errors:
                break
            dirs.sort()
            for filename in sorted(files):
                if not filename.endswith(".sql"):
                    continue
                parts = filename.split("_")
                if len(parts) < 2:
                    continue
                migration_id = parts[0]
                name_part = "_".join(parts[1:])
                if name_part.endswith(_UP_SUFFIX):
                    is_up, name = True, name_part[: -len(_UP_SUFFIX)]
                elif name_part.endswith(_DOWN_SUFFIX):
                    is_up, name = False, name_part[: -len(_DOWN_SUFFIX)]
                else:
                    continue

                with open(os.path.join(root, filename), encoding="utf-8") as handle:
                    content = handle.read()

                migration = migrations.get((migration_id, name))
                if migration is None:
                    migration = Migration(
                        id=migration_id, name=name, timestamp=_parse_timestamp(migration_id)
                    )
                    migrations[(migration_id, name)] = migration
                if is_up:
                    migration.up_sql = content
                else:
                    migration.down_sql = content

        if walk_errors:
            raise walk_errors[0]
        return sorted(migrations.values(), key=lambda migration: migration.id)

    def split_sql_statements(self, sql: str) -> list[str]:
        """Split SQL into statements, dropping ``--`` and ``/* */`` comment lines."""
        statements: list[str] = []
        current: list[str] = []
        in_block_comment = False

        for line in sql.split("\n"):
            trimmed = line.strip()
            if not trimmed or trimmed.startswith("--"):
                continue
            if "/*" in trimmed:
                in_block_comment = True
            if "*/" in trimmed:
                in_block_comment = False
                continue
            if in_block_comment:
                continue

            current.append(line + " ")
            if trimmed.endswith(";"):
                statement = "".join(current).strip().removesuffix(";").strip()
                if statement:
                    statements.append(statement)
                current = []

        if current:
            statement = "".join(current).strip()
            if statement:
                statements.append(statement)
        return statements

    def _execute_sql(self, cursor: Any, sql: str) -> None:
        for statement in self.split_sql_statements(sql):
            try:
                cursor.execute(statement)
            except Exception as exc:
                raise MigrationError(
                    f"failed to execute statement: {statement}\nError: {exc}"
                ) from exc

    def _executed(self) -> list[str]:
        try:
            return self.get_executed_migrations()
        except Exception as exc:
            raise MigrationError(f"failed to get executed migrations: {exc}") from exc

    def _load(self, migration_dir: str) -> list[Migration]:
        try:
            return self.load_migrations(migration_dir)
        except OSError as exc:
            raise MigrationError(f"failed to load migrations: {exc}") from exc

    def up(self, migration_dir: str) -> None:
        """Apply every pending migration, each in its own transaction."""
        try:
            self.create_migrations_table()
        except Exception as exc:
            raise MigrationError(f"failed to create migrations table: {exc}") from exc

        executed = set(self._executed())
        insert = (
            "INSERT INTO migrations (id, name) VALUES "
            f"({self.placeholder}, {self.placeholder})"
        )

        for migration in self._load(migration_dir):
            if migration.id in executed:
                _LOGGER.info("Migration %s already executed, skipping", migration.id)
                continue
            if not migration.up_sql:
                _LOGGER.info("No up migration found for %s, skipping", migration.id)
                continue

            _LOGGER.info("Running migration %s: %s", migration.id, migration.name)
            with self._transaction() as cursor:
                try:
                    self._execute_sql(cursor, migration.up_sql)
                except MigrationError as exc:
                    raise MigrationError(
                        f"failed to execute migration {migration.id}: {exc}"
                    ) from exc
                try:
                    cursor.execute(insert, (migration.id, migration.name))
                except Exception as exc:
                    raise MigrationError(
                        f"failed to record migration {migration.id}: {exc}"
                    ) from exc
            _LOGGER.info("Migration %s completed successfully", migration.id)

    def down(self, migration_dir: str) -> None:
        """Revert the most recently applied migration."""
        executed = self._executed()
        if not executed:
            _LOGGER.info("No migrations to rollback")
            return

        last_id = executed[-1]
        target = next(
            (migration for migration in self._load(migration_dir) if migration.id == last_id),
            None,
        )
        if target is None:
            raise MigrationError(f"migration file for {last_id} not found")
        if not target.down_sql:
            raise MigrationError(f"no down migration found for {last_id}")

        _LOGGER.info("Rolling back migration %s: %s", target.id, target.name)
        with self._transaction() as cursor:
            try:
                self._execute_sql(cursor, target.down_sql)
            except MigrationError as exc:
                raise MigrationError(f"failed to execute rollback {target.id}: {exc}") from exc
            try:
                cursor.execute(f"DELETE FROM migrations WHERE id = {self.placeholder}", (target.id,))
            except Exception as exc:
                raise MigrationError(
                    f"failed to remove migration record {target.id}: {exc}"
                ) from exc
        _LOGGER.info("Migration %s rolled back successfully", target.id)

    def status(self, migration_dir: str) -> None:
        """Print every known migration and whether it has been applied."""
        executed = set(self._executed())
        migrations = self._load(migration_dir)
        out = self.out or sys.stdout

        print("Migration Status:", file=out)
        print("ID\t\tName\t\t\t\tStatus", file=out)
        print("--\t\t----\t\t\t\t------", file=out)
        for migration in migrations:
            state = "Applied" if migration.id in executed else "Pending"
            print(f"{migration.id}\t\t{migration.name}\t\t\t{state}", file=out)


def generate_migration_id() -> str:
    """Return a new migration id from the current UTC time."""
    return now().strftime(_ID_FORMAT)


def create_migration_files(migration_dir: str, name: str) -> tuple[str, str]:
    """Write empty up and down files for a new migration; return their paths."""
    migration_id = generate_migration_id()
    try:
        os.makedirs(migration_dir, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise MigrationError(f"failed to create migration directory: {exc}") from exc

    up_file = os.path.join(migration_dir, f"{migration_id}_{name}{_UP_SUFFIX}")
    down_file = os.path.join(migration_dir, f"{migration_id}_{name}{_DOWN_SUFFIX}")
    created_at = now().strftime("%Y-%m-%dT%H:%M:%SZ")

    up_content = f"-- Migration: {name}\n-- Created at: {created_at}\n\n-- Add your up migration here\n"
    down_content = f"-- Rollback: {name}\n-- Created at: {created_at}\n\n-- Add your down migration here\n"

    for path, content, kind in ((up_file, up_content, "up"), (down_file, down_content, "down")):
        try:
            with open(path, "w", encoding="utf-8") as handle:
                handle.write(content)
        except OSError as exc:
            raise MigrationError(f"failed to create {kind} migration file: {exc}") from exc

    _LOGGER.info("Created migration files:")
    _LOGGER.info("  %s", up_file)
    _LOGGER.info("  %s", down_file)
    return up_file, down_file