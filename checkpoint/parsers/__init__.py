from checkpoint.parsers.backlog_import import (
    ImportBatch,
    ImportSummary,
    SkippedLine,
    parse_import_line,
    parse_import_lines,
    parse_import_text,
)
from checkpoint.parsers.game_fields import (
    normalize_stored_ownership,
    normalize_stored_status,
    parse_int_field,
    parse_ownership,
    parse_status,
)

__all__ = [
    "ImportBatch",
    "ImportSummary",
    "SkippedLine",
    "normalize_stored_ownership",
    "normalize_stored_status",
    "parse_import_line",
    "parse_import_lines",
    "parse_import_text",
    "parse_int_field",
    "parse_ownership",
    "parse_status",
]
