"""
Database CRUD operations.

Provides synchronous functions for reading and writing game rows. Every
function works inside the caller's session; committing or rolling back
is the caller's decision.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from checkpoint.models.db import GameDB
from checkpoint.models.game import Game

# Columns a single-field update may touch. The primary key is not here:
# changing an id goes through replace_game_id.
UPDATABLE_COLUMNS = ("name", "platform", "status", "priority", "ownership")


def game_to_row(game: Game) -> GameDB:
    """Convert a domain game to a database row."""
    return GameDB(
        id=game.id,
        name=game.name,
        platform=game.platform,
        status=game.status.value,
        priority=game.priority,
        ownership=game.ownership.value,
    )


def column_value(value: Any) -> Any:
    """Storage representation of a validated field value."""
    return getattr(value, "value", value)


def load_game_rows(session: Session) -> list[GameDB]:
    """Get every game row, ordered by id."""
    result = session.execute(select(GameDB).order_by(GameDB.id))
    return list(result.scalars().all())


def get_game_row(session: Session, game_id: int) -> GameDB | None:
    """Get a single game row by id."""
    return session.get(GameDB, game_id)


def insert_game(session: Session, game: Game) -> GameDB:
    """
    Insert one game row.

    Raises IntegrityError if the id already exists in the table.
    """
    row = game_to_row(game)
    session.add(row)
    session.flush()
    return row


def insert_games(session: Session, games: Iterable[Game]) -> int:
    """
    Insert a batch of game rows in the current transaction.

    Returns:
        Number of rows staged
    """
    rows = [game_to_row(game) for game in games]
    session.add_all(rows)
    session.flush()
    return len(rows)


def delete_game(session: Session, game_id: int) -> bool:
    """
    Delete a game row.

    Returns True if a row was deleted, False if none matched.
    """
    result = session.execute(delete(GameDB).where(GameDB.id == game_id))
    return result.rowcount > 0


def update_game_column(session: Session, game_id: int, column: str, value: Any) -> bool:
    """
    Write a single column of one game row.

    Returns True if a row was updated, False if none matched.
    """
    if column not in UPDATABLE_COLUMNS:
        raise ValueError(f"Column {column!r} cannot be updated in place")

    result = session.execute(
        update(GameDB).where(GameDB.id == game_id).values({column: column_value(value)})
    )
    return result.rowcount > 0


def replace_game_id(session: Session, old_id: int, game: Game) -> bool:
    """
    Re-key a game: delete the old row and insert `game` under its new id.

    Both statements run in the caller's transaction.

    Returns False (and writes nothing) if the old row does not exist.
    """
    if not delete_game(session, old_id):
        return False
    insert_game(session, game)
    return True
