"""
Checkpoint services.

The backlog store: persistence, snapshot, import and reporting.
"""

from checkpoint.services.backlog_store import (
    BacklogStore,
    game_from_row,
    parse_field_value,
    read_import_source,
)

__all__ = [
    "BacklogStore",
    "game_from_row",
    "parse_field_value",
    "read_import_source",
]
