"""
Parser for backlog import files.

Format, one record per line:
    id|name|platform|status|priority|ownership

Blank lines and lines starting with "#" are ignored. Status and
ownership are matched case-insensitively.

This module is the row filter stage of an import: it turns raw text into
a batch of valid, non-duplicate games plus a record of what was skipped.
It never touches the backing store; committing the batch is the store's
job.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from checkpoint.config import IMPORT_COMMENT_PREFIX, IMPORT_FIELD_COUNT, IMPORT_FIELD_SEPARATOR
from checkpoint.models.failure import ValidationError
from checkpoint.models.game import Game
from checkpoint.parsers.game_fields import parse_int_field, parse_ownership, parse_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SkippedLine:
    """A source line that did not make it into the batch."""

    line_number: int
    text: str
    reason: str


@dataclass
class ImportBatch:
    """Games accepted from an import source, in source order."""

    accepted: list[Game] = field(default_factory=list)
    skipped_lines: list[SkippedLine] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skipped_lines)

    @property
    def accepted_ids(self) -> set[int]:
        return {game.id for game in self.accepted}


@dataclass(frozen=True)
class ImportSummary:
    """Outcome of a committed import."""

    added: int
    skipped: int
    total: int
    skipped_lines: tuple[SkippedLine, ...] = ()

    def message(self) -> str:
        return (
            f"Import complete. Added: {self.added}, "
            f"Skipped: {self.skipped}, Total now: {self.total}"
        )


def is_ignorable(line: str) -> bool:
    """Blank lines and comments carry no record."""
    stripped = line.strip()
    return not stripped or stripped.startswith(IMPORT_COMMENT_PREFIX)


def parse_import_line(line: str) -> Game:
    """
    Build a Game from one pipe-delimited line.

    Raises:
        ValidationError: If the field count is wrong or any field is invalid.
    """
    parts = line.split(IMPORT_FIELD_SEPARATOR)
    if len(parts) != IMPORT_FIELD_COUNT:
        raise ValidationError(
            "line", f"expected {IMPORT_FIELD_COUNT} fields, found {len(parts)}"
        )

    raw_id, name, platform, status, priority, ownership = (p.strip() for p in parts)
    return Game(
        id=parse_int_field("id", raw_id),
        name=name,
        platform=platform,
        status=parse_status(status),
        priority=parse_int_field("priority", priority),
        ownership=parse_ownership(ownership),
    )


def parse_import_lines(lines: Iterable[str], existing_ids: Iterable[int] = ()) -> ImportBatch:
    """
    Filter source lines into an import batch.

    A line is skipped, never fatal, when it has the wrong field count,
    fails validation, or carries an id that is already in the store or
    was accepted earlier in the same batch.

    Args:
        lines: Source lines (trailing newlines allowed)
        existing_ids: Ids already present in the store

    Returns:
        ImportBatch with accepted games and skipped line records
    """
    known_ids = set(existing_ids)
    batch = ImportBatch()

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if is_ignorable(line):
            continue

        try:
            game = parse_import_line(line)
        except ValidationError as e:
            batch.skipped_lines.append(SkippedLine(line_number, line, e.message))
            logger.debug("Skipping import line %d: %s", line_number, e.message)
            continue

        if game.id in known_ids:
            reason = f"duplicate id {game.id}"
            batch.skipped_lines.append(SkippedLine(line_number, line, reason))
            logger.debug("Skipping import line %d: %s", line_number, reason)
            continue

        known_ids.add(game.id)
        batch.accepted.append(game)

    return batch


def parse_import_text(text: str, existing_ids: Iterable[int] = ()) -> ImportBatch:
    """Filter a whole import source held in memory."""
    if not text:
        return ImportBatch()
    return parse_import_lines(text.splitlines(), existing_ids)
