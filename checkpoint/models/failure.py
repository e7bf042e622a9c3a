"""
Store Result Envelope: Tagged Outcomes for Every Store Operation.

Every mutating store operation returns a StoreResult instead of raising
across the core/presentation boundary. Callers render `result.message`
verbatim and branch on `result.ok` or `result.failure.kind`.

Outcome types:
- Success: Operation completed and the snapshot reflects it
- KnownFailure: Operation refused or failed for a classified reason

Exceptions defined here are raised INSIDE the core and converted to
results at the store boundary. The one exception that escapes on purpose
is ValidationError from direct Game construction: the Game constructor
is the validator.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Record-level failures
    VALIDATION_ERROR = "validation_error"
    DUPLICATE_ID = "duplicate_id"
    NOT_FOUND = "not_found"
    UNKNOWN_FIELD = "unknown_field"

    # Backing store failures
    STORAGE_ERROR = "storage_error"

    # Import source failures
    INVALID_INPUT = "invalid_input"
    SOURCE_NOT_FOUND = "source_not_found"
    SOURCE_UNREADABLE = "source_unreadable"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class StoreResult(BaseModel):
    """
    Result envelope for store operations.

    `data` holds the operation's payload on success (the added/updated
    Game, an ImportSummary, ...). It is typed Any so domain objects are
    carried by reference rather than copied by validation.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    message: str = Field(
        ...,
        description="Human-readable status rendered verbatim by callers",
    )
    data: Any = Field(
        default=None,
        description="Operation payload (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @property
    def ok(self) -> bool:
        return self.outcome == OutcomeType.SUCCESS

    @property
    def kind(self) -> FailureKind | None:
        return self.failure.kind if self.failure else None

    @classmethod
    def success(cls, message: str, data: Any = None) -> "StoreResult":
        """Create a success result."""
        return cls(outcome=OutcomeType.SUCCESS, message=message, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
    ) -> "StoreResult":
        """Create a known failure result."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            message=message,
            failure=FailureDetail(kind=kind, message=message, detail=detail),
        )

    def __str__(self) -> str:
        return self.message


# Standard exception types that map to known failures


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the core knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        super().__init__(message)

    def to_result(self) -> StoreResult:
        """Convert to a StoreResult."""
        return StoreResult.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
        )


class ValidationError(KnownError):
    """A field value was rejected. Always local to one record."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(
            kind=FailureKind.VALIDATION_ERROR,
            message=f"Wrong value for {field}: {reason}",
        )


class DuplicateIdError(KnownError):
    """A game with this id already exists."""

    def __init__(self, game_id: int):
        self.game_id = game_id
        super().__init__(
            kind=FailureKind.DUPLICATE_ID,
            message=f"A game with id {game_id} already exists",
        )


class NotFoundError(KnownError):
    """No game with this id exists."""

    def __init__(self, game_id: int, action: str = "find"):
        self.game_id = game_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"No game record with id {game_id} to {action}",
        )


class UnknownFieldError(KnownError):
    """An update targeted a field that Game does not have."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            kind=FailureKind.UNKNOWN_FIELD,
            message=f"Unknown field: {field}",
        )


class StorageError(KnownError):
    """
    The backing store rejected or failed a write.

    Reported once, never retried by the core.
    """

    def __init__(self, operation: str, detail: str | None = None):
        self.operation = operation
        message = f"DB error {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            kind=FailureKind.STORAGE_ERROR,
            message=message,
            detail=detail,
        )


class ImportSourceError(KnownError):
    """The import source is missing, unreadable, or was not given."""

    def __init__(self, kind: FailureKind, path: object, detail: str | None = None):
        self.path = path
        if kind == FailureKind.INVALID_INPUT:
            message = "Import path is needed"
        elif kind == FailureKind.SOURCE_NOT_FOUND:
            message = f"Import file not found: {path}"
        else:
            message = f"Could not read import file {path}"
            if detail:
                message = f"{message}: {detail}"
        super().__init__(kind=kind, message=message, detail=detail)
