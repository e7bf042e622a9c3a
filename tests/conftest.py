from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from checkpoint.models.game import Game, Ownership, Status
from checkpoint.services.backlog_store import BacklogStore


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Location of a fresh SQLite file for one test."""
    return tmp_path / "checkpoint.db"


@pytest.fixture
def store(db_path: Path) -> Iterator[BacklogStore]:
    """An empty store backed by a temporary file."""
    backlog = BacklogStore(db_path)
    yield backlog
    backlog.close()


@pytest.fixture
def sample_games() -> list[Game]:
    """One game per status, highest urgency first."""
    return [
        Game(1, "Hades II", "PC", Status.UNPLAYED, 5, Ownership.DIGITAL),
        Game(2, "Spider-Man 2", "PS5", Status.PLAYING, 4, Ownership.PHYSICAL),
        Game(3, "Elden Ring", "PC", Status.BEATEN, 2, Ownership.DIGITAL),
    ]


@pytest.fixture
def populated_store(store: BacklogStore, sample_games: list[Game]) -> BacklogStore:
    """Store holding the sample games."""
    for game in sample_games:
        assert store.add(game).ok
    return store


@pytest.fixture
def sample_import_text() -> str:
    """Two good rows, one duplicate id, one malformed line."""
    return "\n".join(
        [
            "1|Hades II|PC|UNPLAYED|5|DIGITAL",
            "2|Spider-Man 2|PS5|PLAYING|4|PHYSICAL",
            "2|Spider-Man 2 DUP|PS5|PLAYING|4|PHYSICAL",
            "bad|line|oops",
        ]
    )


@pytest.fixture
def raw_sql(db_path: Path) -> Iterator[Callable[..., None]]:
    """
    Run SQL against the backing file behind the store's back.

    Used to simulate other writers and infrastructure failures.
    """
    engine = create_engine(f"sqlite:///{db_path}")

    def _execute(statement: str, params: dict | None = None) -> None:
        with engine.begin() as conn:
            conn.execute(text(statement), params or {})

    yield _execute
    engine.dispose()
