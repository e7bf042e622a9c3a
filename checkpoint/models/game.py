"""
Game record: the single entity tracked by the backlog.

Every field is validated on assignment, including during construction,
so a Game can never be observed holding an invalid value. Id uniqueness
is the store's concern, not the entity's.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from checkpoint.models.failure import ValidationError

MIN_PRIORITY = 1
MAX_PRIORITY = 5

# Largest id SQLite can store in an INTEGER column
MAX_ID = 2**63 - 1


class Status(str, Enum):
    """High-level progress for a title."""

    UNPLAYED = "UNPLAYED"
    PLAYING = "PLAYING"
    BEATEN = "BEATEN"


class Ownership(str, Enum):
    """Where a title is owned."""

    PHYSICAL = "PHYSICAL"
    DIGITAL = "DIGITAL"


def _require_int(field: str, value: Any) -> int:
    # bool is an int subclass; True must not pass as id 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"must be an integer, got {value!r}")
    return value


def _require_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "required")
    return value.strip()


def validate_id(value: Any) -> int:
    game_id = _require_int("id", value)
    if game_id <= 0:
        raise ValidationError("id", "must be > 0")
    if game_id > MAX_ID:
        raise ValidationError("id", f"must be <= {MAX_ID}")
    return game_id


def validate_name(value: Any) -> str:
    return _require_text("name", value)


def validate_platform(value: Any) -> str:
    return _require_text("platform", value)


def validate_status(value: Any) -> Status:
    """Accept a Status member or its exact value; no case folding here."""
    if isinstance(value, Status):
        return value
    try:
        return Status(value)
    except ValueError:
        raise ValidationError("status", f"unknown status {value!r}") from None


def validate_priority(value: Any) -> int:
    priority = _require_int("priority", value)
    if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        raise ValidationError("priority", f"must be {MIN_PRIORITY}-{MAX_PRIORITY}")
    return priority


def validate_ownership(value: Any) -> Ownership:
    """Accept an Ownership member or its exact value; no case folding here."""
    if isinstance(value, Ownership):
        return value
    try:
        return Ownership(value)
    except ValueError:
        raise ValidationError("ownership", f"unknown ownership {value!r}") from None


FIELD_VALIDATORS: dict[str, Callable[[Any], Any]] = {
    "id": validate_id,
    "name": validate_name,
    "platform": validate_platform,
    "status": validate_status,
    "priority": validate_priority,
    "ownership": validate_ownership,
}


def validate_field(field: str, value: Any) -> Any:
    """
    Validate a value for a single Game field without touching any instance.

    Returns the normalized value (trimmed text, enum member).

    Raises:
        ValidationError: If the value is not acceptable for the field.
        KeyError: If the field is not a Game field.
    """
    return FIELD_VALIDATORS[field](value)


@dataclass
class Game:
    """
    A backlog entry.

    Attributes:
        id: Unique identifier (> 0)
        name: Non-blank title
        platform: Non-blank platform label (e.g., PC, PS5, Switch)
        status: Current progress
        priority: 1 (low urgency) to 5 (high urgency)
        ownership: PHYSICAL or DIGITAL
    """

    id: int
    name: str
    platform: str
    status: Status
    priority: int
    ownership: Ownership

    def __setattr__(self, field: str, value: Any) -> None:
        validator = FIELD_VALIDATORS.get(field)
        if validator is not None:
            value = validator(value)
        super().__setattr__(field, value)

    def summary(self) -> str:
        """One-line summary used in list displays and logs."""
        return (
            f"#{self.id} | {self.name} | {self.platform} | "
            f"{self.status.value} | P{self.priority} | {self.ownership.value}"
        )

    def __str__(self) -> str:
        return self.summary()
