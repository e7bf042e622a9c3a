"""
Tests for the backlog store.

INVARIANTS:
- The snapshot and the backing table never diverge after an operation
- A failed write leaves the snapshot untouched
- Failures come back as results, not exceptions
"""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from checkpoint.models.failure import FailureKind
from checkpoint.models.game import MAX_ID, Game, Ownership, Status
from checkpoint.services.backlog_store import BacklogStore

LEGACY_TABLE = """
    CREATE TABLE games (
        id INTEGER PRIMARY KEY,
        name TEXT,
        platform TEXT,
        status TEXT,
        priority INTEGER,
        ownership TEXT
    )
"""


def reopen(db_path: Path) -> BacklogStore:
    return BacklogStore(db_path)


class TestInitialization:
    def test_creates_table_for_new_file(self, db_path: Path) -> None:
        store = BacklogStore(db_path)

        assert db_path.exists()
        assert store.list_all() == ()
        store.close()

    def test_loads_existing_rows_in_id_order(
        self, db_path: Path, sample_games: list[Game]
    ) -> None:
        store = BacklogStore(db_path)
        for game in reversed(sample_games):
            store.add(game)
        store.close()

        reloaded = reopen(db_path)

        assert [game.id for game in reloaded.list_all()] == [1, 2, 3]
        reloaded.close()

    def test_open_reports_unreachable_location(self, tmp_path: Path) -> None:
        result = BacklogStore.open(tmp_path / "missing-dir" / "checkpoint.db")

        assert not result.ok
        assert result.kind == FailureKind.STORAGE_ERROR

    def test_open_success(self, db_path: Path) -> None:
        result = BacklogStore.open(db_path)

        assert result.ok
        assert isinstance(result.data, BacklogStore)
        assert str(db_path) in result.message
        result.data.close()

    def test_in_memory_store(self, sample_games: list[Game]) -> None:
        store = BacklogStore(":memory:")

        assert store.add(sample_games[0]).ok
        assert store.remove(1).ok
        assert len(store) == 0
        store.close()


class TestLoadNormalization:
    def test_out_of_domain_labels_are_defaulted(
        self, db_path: Path, raw_sql: Callable[..., None]
    ) -> None:
        """Rows written by other tools still load, with safe defaults."""
        raw_sql(LEGACY_TABLE)
        raw_sql("INSERT INTO games VALUES (1, 'Halo', 'Xbox', 'ABANDONED', 3, 'GAME PASS')")
        raw_sql("INSERT INTO games VALUES (2, 'Celeste', 'Switch', 'beaten', 2, 'physical')")

        store = BacklogStore(db_path)

        halo = store.find_by_id(1)
        celeste = store.find_by_id(2)
        assert halo is not None and celeste is not None
        assert halo.status is Status.UNPLAYED
        assert halo.ownership is Ownership.DIGITAL
        assert celeste.status is Status.BEATEN
        assert celeste.ownership is Ownership.PHYSICAL
        assert store.load_skipped == 0
        store.close()

    def test_unrecoverable_rows_are_skipped(
        self,
        db_path: Path,
        raw_sql: Callable[..., None],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        raw_sql(LEGACY_TABLE)
        raw_sql("INSERT INTO games VALUES (1, 'Halo', 'Xbox', 'PLAYING', 3, 'DIGITAL')")
        raw_sql("INSERT INTO games VALUES (2, '  ', 'PC', 'PLAYING', 2, 'DIGITAL')")
        raw_sql("INSERT INTO games VALUES (3, 'Celeste', 'Switch', 'BEATEN', 9, 'DIGITAL')")

        with caplog.at_level(logging.WARNING, logger="checkpoint.services.backlog_store"):
            store = BacklogStore(db_path)

        assert [game.id for game in store.list_all()] == [1]
        assert store.load_skipped == 2
        assert "Skipping stored game" in caplog.text
        store.close()


class TestAdd:
    def test_add_game(self, store: BacklogStore, sample_games: list[Game]) -> None:
        result = store.add(sample_games[0])

        assert result.ok
        assert result.message.startswith("Added:")
        assert "Hades II" in str(result)
        assert result.data is sample_games[0]
        assert store.find_by_id(1) == sample_games[0]

    def test_duplicate_id_rejected(self, store: BacklogStore) -> None:
        first = Game(1, "Hades II", "PC", Status.UNPLAYED, 5, Ownership.DIGITAL)
        second = Game(1, "Celeste", "Switch", Status.BEATEN, 2, Ownership.PHYSICAL)
        store.add(first)

        result = store.add(second)

        assert not result.ok
        assert result.kind == FailureKind.DUPLICATE_ID
        assert "already exists" in result.message
        assert len(store) == 1
        assert store.find_by_id(1) == first

    def test_round_trip(self, store: BacklogStore, db_path: Path) -> None:
        """A fresh store on the same file sees an equal record."""
        game = Game(42, "Pentiment", "Xbox", Status.PLAYING, 3, Ownership.PHYSICAL)
        store.add(game)

        reloaded = reopen(db_path)

        assert reloaded.find_by_id(42) == game
        reloaded.close()

    def test_storage_failure_leaves_snapshot_untouched(
        self,
        store: BacklogStore,
        sample_games: list[Game],
        raw_sql: Callable[..., None],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        raw_sql("DROP TABLE games")

        with caplog.at_level(logging.ERROR, logger="checkpoint.services.backlog_store"):
            result = store.add(sample_games[0])

        assert not result.ok
        assert result.kind == FailureKind.STORAGE_ERROR
        assert result.message.startswith("DB error adding game")
        assert store.find_by_id(1) is None
        assert len(store) == 0
        assert "Storage failure" in caplog.text

    def test_row_written_by_other_writer_is_reported(
        self, store: BacklogStore, raw_sql: Callable[..., None], sample_games: list[Game]
    ) -> None:
        """The table's primary key is the last line of defense."""
        raw_sql("INSERT INTO games VALUES (1, 'Halo', 'Xbox', 'PLAYING', 3, 'DIGITAL')")

        result = store.add(sample_games[0])

        assert result.kind == FailureKind.STORAGE_ERROR
        assert store.find_by_id(1) is None

    def test_largest_id(self, store: BacklogStore, db_path: Path) -> None:
        result = store.add(Game(MAX_ID, "Big", "PC", Status.UNPLAYED, 3, Ownership.DIGITAL))

        assert result.ok
        reloaded = reopen(db_path)
        assert reloaded.find_by_id(MAX_ID) is not None
        reloaded.close()

    def test_id_too_large_for_column_is_reported(self, store: BacklogStore) -> None:
        """Ids that slip past validation still come back as a storage failure."""
        game = Game(1, "Big", "PC", Status.UNPLAYED, 3, Ownership.DIGITAL)
        object.__setattr__(game, "id", 10**20)

        result = store.add(game)

        assert result.kind == FailureKind.STORAGE_ERROR
        assert len(store) == 0

    def test_caller_keeps_its_own_object(
        self, store: BacklogStore, sample_games: list[Game]
    ) -> None:
        store.add(sample_games[0])

        sample_games[0].priority = 1

        assert store.find_by_id(1).priority == 5  # type: ignore[union-attr]


class TestRemove:
    def test_remove_then_find(self, populated_store: BacklogStore, db_path: Path) -> None:
        result = populated_store.remove(2)

        assert result.ok
        assert "Removed id 2" in result.message
        assert populated_store.find_by_id(2) is None
        assert len(populated_store) == 2

        reloaded = reopen(db_path)
        assert reloaded.find_by_id(2) is None
        reloaded.close()

    def test_remove_missing_id(self, populated_store: BacklogStore) -> None:
        result = populated_store.remove(999)

        assert not result.ok
        assert result.kind == FailureKind.NOT_FOUND
        assert "no game record with id 999" in result.message.lower()
        assert len(populated_store) == 3

    def test_storage_failure_keeps_record(
        self, populated_store: BacklogStore, raw_sql: Callable[..., None]
    ) -> None:
        raw_sql("DROP TABLE games")

        result = populated_store.remove(1)

        assert result.kind == FailureKind.STORAGE_ERROR
        assert populated_store.find_by_id(1) is not None
        assert len(populated_store) == 3

    def test_row_already_gone_is_dropped_from_snapshot(
        self, populated_store: BacklogStore, raw_sql: Callable[..., None]
    ) -> None:
        raw_sql("DELETE FROM games WHERE id = 3")

        result = populated_store.remove(3)

        assert result.ok
        assert populated_store.find_by_id(3) is None


class TestUpdateField:
    def test_update_name(self, populated_store: BacklogStore, db_path: Path) -> None:
        result = populated_store.update_field(3, "name", "Elden Ring (Shadow of the Erdtree)")

        assert result.ok
        assert "updated" in result.message.lower()
        game = populated_store.find_by_id(3)
        assert game is not None
        assert game.name == "Elden Ring (Shadow of the Erdtree)"

        reloaded = reopen(db_path)
        assert reloaded.find_by_id(3) == game
        reloaded.close()

    def test_update_every_field(self, populated_store: BacklogStore) -> None:
        populated_store.update_field(1, "platform", "Switch")
        populated_store.update_field(1, "status", "playing")
        populated_store.update_field(1, "priority", "2")
        populated_store.update_field(1, "ownership", "physical")

        game = populated_store.find_by_id(1)
        assert game is not None
        assert game.platform == "Switch"
        assert game.status is Status.PLAYING
        assert game.priority == 2
        assert game.ownership is Ownership.PHYSICAL

    def test_field_name_is_case_insensitive(self, populated_store: BacklogStore) -> None:
        result = populated_store.update_field(1, " Priority ", 4)

        assert result.ok
        assert populated_store.find_by_id(1).priority == 4  # type: ignore[union-attr]

    def test_earlier_copy_is_not_changed(self, populated_store: BacklogStore) -> None:
        before = populated_store.find_by_id(2)

        result = populated_store.update_field(2, "status", "BEATEN")

        assert before.status is Status.PLAYING  # type: ignore[union-attr]
        assert result.data.status is Status.BEATEN
        assert populated_store.find_by_id(2).status is Status.BEATEN  # type: ignore[union-attr]

    @pytest.mark.parametrize(
        ("field", "value"),
        [("status", Status.BEATEN), ("ownership", Ownership.PHYSICAL)],
    )
    def test_enum_member_value(
        self, populated_store: BacklogStore, db_path: Path, field: str, value: object
    ) -> None:
        result = populated_store.update_field(1, field, value)

        assert result.ok
        assert getattr(populated_store.find_by_id(1), field) is value
        reloaded = reopen(db_path)
        assert getattr(reloaded.find_by_id(1), field) is value
        reloaded.close()

    @pytest.mark.parametrize("value", ["0", "6", "not-a-number", ""])
    def test_bad_priority_leaves_record_unchanged(
        self, populated_store: BacklogStore, value: str
    ) -> None:
        result = populated_store.update_field(1, "priority", value)

        assert not result.ok
        assert result.kind == FailureKind.VALIDATION_ERROR
        assert "updated" not in result.message.lower()
        assert populated_store.find_by_id(1).priority == 5  # type: ignore[union-attr]

    @pytest.mark.parametrize(
        ("field", "value"),
        [("status", "NOT_A_STATUS"), ("ownership", "GAME PASS"), ("name", "   ")],
    )
    def test_bad_value_rejected(
        self, populated_store: BacklogStore, field: str, value: str
    ) -> None:
        snapshot_before = [Game(**vars(g)) for g in populated_store.list_all()]

        result = populated_store.update_field(1, field, value)

        assert result.kind == FailureKind.VALIDATION_ERROR
        assert list(populated_store.list_all()) == snapshot_before

    def test_unknown_field(self, populated_store: BacklogStore) -> None:
        result = populated_store.update_field(1, "madeUp", "x")

        assert result.kind == FailureKind.UNKNOWN_FIELD
        assert "madeUp" in result.message

    def test_missing_id(self, populated_store: BacklogStore) -> None:
        result = populated_store.update_field(999, "name", "X")

        assert result.kind == FailureKind.NOT_FOUND
        assert "no game" in result.message.lower()

    def test_missing_id_checked_before_field(self, populated_store: BacklogStore) -> None:
        result = populated_store.update_field(999, "madeUp", "X")

        assert result.kind == FailureKind.NOT_FOUND

    def test_storage_failure_keeps_old_value(
        self, populated_store: BacklogStore, raw_sql: Callable[..., None]
    ) -> None:
        """Memory is only changed after the write commits."""
        raw_sql("DROP TABLE games")

        result = populated_store.update_field(1, "priority", "1")

        assert result.kind == FailureKind.STORAGE_ERROR
        assert populated_store.find_by_id(1).priority == 5  # type: ignore[union-attr]

    def test_row_missing_from_table(
        self, populated_store: BacklogStore, raw_sql: Callable[..., None]
    ) -> None:
        raw_sql("DELETE FROM games WHERE id = 1")

        result = populated_store.update_field(1, "name", "Hades III")

        assert result.kind == FailureKind.STORAGE_ERROR
        assert populated_store.find_by_id(1).name == "Hades II"  # type: ignore[union-attr]


class TestChangeId:
    def test_change_id(self, populated_store: BacklogStore, db_path: Path) -> None:
        result = populated_store.update_field(1, "id", "10")

        assert result.ok
        assert populated_store.find_by_id(1) is None
        moved = populated_store.find_by_id(10)
        assert moved is not None
        assert moved.name == "Hades II"
        assert [game.id for game in populated_store.list_all()] == [2, 3, 10]

        reloaded = reopen(db_path)
        assert reloaded.find_by_id(1) is None
        assert reloaded.find_by_id(10) == moved
        reloaded.close()

    def test_change_to_taken_id(self, populated_store: BacklogStore) -> None:
        result = populated_store.update_field(1, "id", 2)

        assert result.kind == FailureKind.DUPLICATE_ID
        assert populated_store.find_by_id(1).name == "Hades II"  # type: ignore[union-attr]
        assert populated_store.find_by_id(2).name == "Spider-Man 2"  # type: ignore[union-attr]

    def test_change_to_same_id(self, populated_store: BacklogStore) -> None:
        before = populated_store.find_by_id(1)

        result = populated_store.update_field(1, "ID", "1")

        assert result.ok
        assert populated_store.find_by_id(1) == before

    @pytest.mark.parametrize("value", ["0", "-4", "abc", "99999999999999999999"])
    def test_invalid_new_id(self, populated_store: BacklogStore, value: str) -> None:
        result = populated_store.update_field(1, "id", value)

        assert result.kind == FailureKind.VALIDATION_ERROR
        assert populated_store.find_by_id(1) is not None

    def test_storage_failure_keeps_old_id(
        self, populated_store: BacklogStore, raw_sql: Callable[..., None]
    ) -> None:
        raw_sql("INSERT INTO games VALUES (10, 'Halo', 'Xbox', 'PLAYING', 3, 'DIGITAL')")

        result = populated_store.update_field(1, "id", 10)

        assert result.kind == FailureKind.STORAGE_ERROR
        assert populated_store.find_by_id(1) is not None
        assert populated_store.find_by_id(10) is None


class TestListAll:
    def test_read_only_view(self, populated_store: BacklogStore) -> None:
        games = populated_store.list_all()

        assert isinstance(games, tuple)
        assert [game.id for game in games] == [1, 2, 3]

    def test_view_is_detached_from_later_changes(self, populated_store: BacklogStore) -> None:
        games = populated_store.list_all()

        populated_store.remove(1)

        assert len(games) == 3
        assert len(populated_store.list_all()) == 2

    def test_changing_a_copy_does_not_touch_store(
        self, populated_store: BacklogStore, db_path: Path
    ) -> None:
        found = populated_store.find_by_id(1)
        listed = populated_store.list_all()[0]

        found.priority = 1  # type: ignore[union-attr]
        listed.name = "Renamed"

        assert populated_store.find_by_id(1).priority == 5  # type: ignore[union-attr]
        assert populated_store.find_by_id(1).name == "Hades II"  # type: ignore[union-attr]
        reloaded = reopen(db_path)
        assert reloaded.find_by_id(1) == populated_store.find_by_id(1)
        reloaded.close()

    def test_contains(self, populated_store: BacklogStore) -> None:
        assert 1 in populated_store
        assert 99 not in populated_store

    def test_reload_picks_up_external_rows(
        self, populated_store: BacklogStore, raw_sql: Callable[..., None]
    ) -> None:
        raw_sql("INSERT INTO games VALUES (8, 'Halo', 'Xbox', 'PLAYING', 3, 'DIGITAL')")

        assert populated_store.reload() == 4
        assert populated_store.find_by_id(8) is not None
