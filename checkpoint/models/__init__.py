from checkpoint.models.failure import (
    DuplicateIdError,
    FailureDetail,
    FailureKind,
    ImportSourceError,
    KnownError,
    NotFoundError,
    OutcomeType,
    StorageError,
    StoreResult,
    UnknownFieldError,
    ValidationError,
)
from checkpoint.models.game import (
    MAX_ID,
    MAX_PRIORITY,
    MIN_PRIORITY,
    Game,
    Ownership,
    Status,
    validate_field,
)

__all__ = [
    "DuplicateIdError",
    "FailureDetail",
    "FailureKind",
    "Game",
    "ImportSourceError",
    "KnownError",
    "MAX_ID",
    "MAX_PRIORITY",
    "MIN_PRIORITY",
    "NotFoundError",
    "OutcomeType",
    "Ownership",
    "Status",
    "StorageError",
    "StoreResult",
    "UnknownFieldError",
    "ValidationError",
    "validate_field",
]
