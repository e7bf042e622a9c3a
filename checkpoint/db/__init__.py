from checkpoint.db.database import create_session_factory, create_store_engine, drop_db, init_db
from checkpoint.db.operations import (
    UPDATABLE_COLUMNS,
    delete_game,
    game_to_row,
    get_game_row,
    insert_game,
    insert_games,
    load_game_rows,
    replace_game_id,
    update_game_column,
)

__all__ = [
    "UPDATABLE_COLUMNS",
    "create_session_factory",
    "create_store_engine",
    "delete_game",
    "drop_db",
    "game_to_row",
    "get_game_row",
    "init_db",
    "insert_game",
    "insert_games",
    "load_game_rows",
    "replace_game_id",
    "update_game_column",
]
