"""
Text-to-field parsing for Game values arriving from outside the model.

Two policies live here and must not be confused:

- parse_*: strict, case-insensitive. Unknown labels raise ValidationError.
  Used for updates and import lines.
- normalize_stored_*: lenient. Unknown labels fall back to a default.
  Used only when loading rows that are already in the backing table.
"""

import logging
from typing import Any

from checkpoint.models.failure import ValidationError
from checkpoint.models.game import Ownership, Status

logger = logging.getLogger(__name__)

DEFAULT_STORED_STATUS = Status.UNPLAYED
DEFAULT_STORED_OWNERSHIP = Ownership.DIGITAL


def parse_status(text: Any) -> Status:
    """Parse a status label, ignoring case and surrounding whitespace."""
    if isinstance(text, Status):
        return text
    label = str(text).strip().upper() if text is not None else ""
    try:
        return Status(label)
    except ValueError:
        choices = ", ".join(s.value for s in Status)
        raise ValidationError("status", f"{text!r} is not one of {choices}") from None


def parse_ownership(text: Any) -> Ownership:
    """Parse an ownership label, ignoring case and surrounding whitespace."""
    if isinstance(text, Ownership):
        return text
    label = str(text).strip().upper() if text is not None else ""
    try:
        return Ownership(label)
    except ValueError:
        choices = ", ".join(o.value for o in Ownership)
        raise ValidationError("ownership", f"{text!r} is not one of {choices}") from None


def parse_int_field(field: str, text: Any) -> int:
    """
    Parse an integer field value.

    Integers pass through unchanged; strings are trimmed and parsed.
    """
    if isinstance(text, int) and not isinstance(text, bool):
        return text
    try:
        return int(str(text).strip())
    except ValueError:
        raise ValidationError(field, f"{text!r} is not a whole number") from None


def normalize_stored_status(text: str | None) -> Status:
    """Map a persisted status to a supported value; anything unknown becomes UNPLAYED."""
    label = (text or "").strip().upper()
    try:
        return Status(label)
    except ValueError:
        logger.warning("Stored status %r normalized to %s", text, DEFAULT_STORED_STATUS.value)
        return DEFAULT_STORED_STATUS


def normalize_stored_ownership(text: str | None) -> Ownership:
    """Map a persisted ownership to a supported value; anything unknown becomes DIGITAL."""
    label = (text or "").strip().upper()
    try:
        return Ownership(label)
    except ValueError:
        logger.warning(
            "Stored ownership %r normalized to %s", text, DEFAULT_STORED_OWNERSHIP.value
        )
        return DEFAULT_STORED_OWNERSHIP
