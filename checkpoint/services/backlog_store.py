"""
Backlog store: the single source of truth for game records.

Owns the backing SQLite table and an in-memory snapshot of it, and keeps
the two consistent across every mutation.

INVARIANTS:
- The backing store is written FIRST; the snapshot changes only after
  the write has committed. A failed write leaves the snapshot untouched.
- Every operation uses its own short-lived connection and transaction.
- Mutations on one store are serialized by a per-store lock.
- Callers only ever hold copies of stored games.
- Failures are returned as StoreResult, never raised to the caller.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from threading import RLock
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from checkpoint.analysis.ranker import score_for
from checkpoint.analysis.report import BacklogReport, build_backlog_report
from checkpoint.config import IMPORT_ENCODING, settings
from checkpoint.db import operations
from checkpoint.db.database import create_session_factory, create_store_engine, init_db
from checkpoint.models.db import GameDB
from checkpoint.models.failure import (
    DuplicateIdError,
    FailureKind,
    ImportSourceError,
    KnownError,
    NotFoundError,
    StorageError,
    StoreResult,
    UnknownFieldError,
    ValidationError,
)
from checkpoint.models.game import Game, validate_field
from checkpoint.parsers.backlog_import import ImportSummary, parse_import_text
from checkpoint.parsers.game_fields import (
    normalize_stored_ownership,
    normalize_stored_status,
    parse_int_field,
    parse_ownership,
    parse_status,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Text-to-value parsing applied before validation, per updatable field
_FIELD_PARSERS: dict[str, Callable[[Any], Any]] = {
    "name": lambda value: value,
    "platform": lambda value: value,
    "status": parse_status,
    "priority": lambda value: parse_int_field("priority", value),
    "ownership": parse_ownership,
}


def game_from_row(row: GameDB) -> Game:
    """
    Convert a database row to a domain game.

    Status and ownership go through load-time normalization, so a row
    written by some other tool with an unknown label still loads.

    Raises:
        ValidationError: If the row cannot form a valid game even after
            normalization (blank name, priority out of range, ...).
    """
    return Game(
        id=row.id,
        name=row.name,
        platform=row.platform,
        status=normalize_stored_status(row.status),
        priority=row.priority,
        ownership=normalize_stored_ownership(row.ownership),
    )


def parse_field_value(field: str, value: Any) -> Any:
    """Parse and validate a new value for an updatable field."""
    return validate_field(field, _FIELD_PARSERS[field](value))


def parse_new_id(value: Any) -> int:
    """Parse and validate a replacement id."""
    return validate_field("id", parse_int_field("id", value))


class BacklogStore:
    """
    SQLite-backed game backlog with a write-through snapshot.

    Usage:
        store = BacklogStore("checkpoint.db")
        result = store.add(Game(1, "Hades II", "PC", Status.UNPLAYED, 5, Ownership.DIGITAL))
        print(result)
    """

    def __init__(self, database_path: str | Path, echo: bool | None = None):
        self.database_path = database_path
        self._engine = create_store_engine(database_path, echo=echo)
        self._session_factory = create_session_factory(self._engine)
        self._games: dict[int, Game] = {}
        self._lock = RLock()
        self.load_skipped = 0

        self._ensure_table()
        self.reload()

    @classmethod
    def open(cls, database_path: str | Path | None = None) -> StoreResult:
        """
        Open a store, reporting failure as a result instead of raising.

        Returns:
            StoreResult whose data is the BacklogStore on success
        """
        path = database_path if database_path is not None else settings.database_path
        try:
            store = cls(path)
        except KnownError as e:
            return e.to_result()
        return StoreResult.success(f"Connected to database: {path}", data=store)

    def close(self) -> None:
        """Release the engine. The snapshot stays readable."""
        self._engine.dispose()

    # --- Reads ---

    def list_all(self) -> tuple[Game, ...]:
        """
        Read-only view of the snapshot, in snapshot order.

        The games are copies; changes go through update_field.
        """
        with self._lock:
            return tuple(replace(game) for game in self._games.values())

    def find_by_id(self, game_id: int) -> Game | None:
        """Copy of the stored game, or None."""
        with self._lock:
            game = self._games.get(game_id)
            return replace(game) if game is not None else None

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._games

    # --- Mutations ---

    def add(self, game: Game) -> StoreResult:
        """Insert a game; the snapshot gains it only after the row is written."""
        with self._lock:
            try:
                if game.id in self._games:
                    raise DuplicateIdError(game.id)
                self._run("adding game", operations.insert_game, game)
            except KnownError as e:
                return self._refuse(e)

            self._games[game.id] = replace(game)

        logger.info("Added game %d (%s)", game.id, game.name)
        return StoreResult.success(f"Added:\n{game}", data=game)

    def remove(self, game_id: int) -> StoreResult:
        """Delete a game by id."""
        with self._lock:
            try:
                if game_id not in self._games:
                    raise NotFoundError(game_id, action="remove")
                deleted = self._run("removing game", operations.delete_game, game_id)
            except KnownError as e:
                return self._refuse(e)

            if not deleted:
                # Row already gone from the table; drop the stale snapshot entry too
                logger.warning("Game %d was missing from the backing store", game_id)
            game = self._games.pop(game_id)

        logger.info("Removed game %d", game_id)
        return StoreResult.success(f"Removed id {game_id}.", data=game)

    def update_field(self, game_id: int, field: str, value: Any) -> StoreResult:
        """
        Change one field of a game.

        The new value is parsed and validated, then written to its column,
        and only then applied to the in-memory game. Changing "id" re-keys
        the record (delete old row, insert new row, one transaction).
        """
        column = (field or "").strip().lower()

        with self._lock:
            try:
                game = self._games.get(game_id)
                if game is None:
                    raise NotFoundError(game_id, action="update")
                if column == "id":
                    return self._change_id(game, value)
                if column not in operations.UPDATABLE_COLUMNS:
                    raise UnknownFieldError(field)

                new_value = parse_field_value(column, value)
                updated = self._run(
                    f"updating {column}",
                    operations.update_game_column,
                    game_id,
                    column,
                    new_value,
                )
                if not updated:
                    raise StorageError(f"updating {column}", f"game {game_id} missing from table")
            except KnownError as e:
                return self._refuse(e)

            setattr(game, column, new_value)

        logger.info("Updated %s of game %d", column, game_id)
        return StoreResult.success(f"Updated {column}:\n{game}", data=replace(game))

    def _change_id(self, game: Game, value: Any) -> StoreResult:
        new_id = parse_new_id(value)
        old_id = game.id

        if new_id == old_id:
            return StoreResult.success(f"Updated id:\n{game}", data=replace(game))
        if new_id in self._games:
            raise DuplicateIdError(new_id)

        renamed = replace(game, id=new_id)
        if not self._run("changing id", operations.replace_game_id, old_id, renamed):
            raise StorageError("changing id", f"game {old_id} missing from table")

        del self._games[old_id]
        self._games[new_id] = renamed

        logger.info("Changed id of game %d to %d", old_id, new_id)
        return StoreResult.success(f"Updated id:\n{renamed}", data=replace(renamed))

    # --- Import ---

    def import_from_file(self, path: str | Path | None) -> StoreResult:
        """
        Import games from a pipe-delimited text file.

        Bad lines are skipped; good lines are committed in one transaction.
        If that transaction fails, nothing from the file is kept.

        Returns:
            StoreResult whose data is an ImportSummary on success
        """
        try:
            text = read_import_source(path)
        except ImportSourceError as e:
            return self._refuse(e)

        logger.info("Importing games from %s", path)
        return self.import_from_text(text)

    def import_from_text(self, text: str) -> StoreResult:
        """Import games from pipe-delimited text already in memory."""
        with self._lock:
            batch = parse_import_text(text, self._games.keys())

            try:
                if batch.accepted:
                    self._run("importing games", operations.insert_games, batch.accepted)
            except KnownError as e:
                return self._refuse(e)

            for game in batch.accepted:
                self._games[game.id] = game

            summary = ImportSummary(
                added=len(batch.accepted),
                skipped=batch.skipped,
                total=len(self._games),
                skipped_lines=tuple(batch.skipped_lines),
            )

        logger.info(
            "Import committed: added=%d skipped=%d total=%d",
            summary.added,
            summary.skipped,
            summary.total,
        )
        return StoreResult.success(summary.message(), data=summary)

    # --- Scoring ---

    def score_for(self, game: Game) -> int:
        return score_for(game)

    def backlog_report(self, top_n: int | None = None) -> BacklogReport:
        """Report on the current snapshot; top_n defaults to the configured size."""
        if top_n is None:
            top_n = settings.report_top_n
        return build_backlog_report(self.list_all(), top_n)

    # --- Loading ---

    def reload(self) -> int:
        """
        Replace the snapshot with the current table contents.

        Rows that cannot form a valid game are skipped and counted in
        `load_skipped`.

        Returns:
            Number of games loaded
        """
        with self._lock:
            rows = self._run("loading games", operations.load_game_rows)

            games: dict[int, Game] = {}
            skipped = 0
            for row in rows:
                try:
                    games[row.id] = game_from_row(row)
                except ValidationError as e:
                    skipped += 1
                    logger.warning("Skipping stored game %r: %s", row.id, e.message)

            self._games = games
            self.load_skipped = skipped

        logger.info("Loaded %d games from %s", len(games), self.database_path)
        return len(games)

    # --- internals ---

    def _ensure_table(self) -> None:
        try:
            init_db(self._engine)
        except SQLAlchemyError as e:
            cause = getattr(e, "orig", None) or e
            logger.error("Storage failure while creating games table: %s", cause)
            raise StorageError("creating games table", str(cause)) from e

    def _run(self, operation: str, fn: Callable[..., T], *args: Any) -> T:
        """
        Run `fn(session, *args)` in its own transaction.

        Commits on success, rolls back on failure.

        Raises:
            StorageError: If the backing store fails.
        """
        try:
            with self._session_factory.begin() as session:
                return fn(session, *args)
        except (SQLAlchemyError, OverflowError) as e:
            cause = getattr(e, "orig", None) or e
            logger.error("Storage failure while %s: %s", operation, cause)
            raise StorageError(operation, str(cause)) from e

    def _refuse(self, error: KnownError) -> StoreResult:
        if error.kind == FailureKind.STORAGE_ERROR:
            logger.error("Store operation failed: %s", error.message)
        else:
            logger.info("Store operation refused: %s", error.message)
        return error.to_result()


def read_import_source(path: str | Path | None) -> str:
    """
    Read an import source as UTF-8 text.

    Raises:
        ImportSourceError: If no path was given, the file is missing, or
            it cannot be read or decoded.
    """
    if path is None or str(path).strip() == "":
        raise ImportSourceError(FailureKind.INVALID_INPUT, path)

    source = Path(path)
    if not source.is_file():
        raise ImportSourceError(FailureKind.SOURCE_NOT_FOUND, source)

    try:
        return source.read_text(encoding=IMPORT_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        raise ImportSourceError(FailureKind.SOURCE_UNREADABLE, source, str(e)) from e
