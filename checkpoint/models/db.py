"""
SQLAlchemy ORM model for persistent storage.

The table mirrors the Game invariants as column constraints so the
backing store rejects what the model would reject.
"""

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from checkpoint.models.game import MAX_PRIORITY, MIN_PRIORITY, Ownership, Status


def _in_list(column: str, values: list[str]) -> str:
    quoted = ",".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class GameDB(Base):
    """
    One row per backlog entry.

    Status and ownership are stored as their enum value text. Values are
    read back as plain strings so load-time normalization can decide what
    to do with anything out of domain.
    """

    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint(_in_list("status", [s.value for s in Status]), name="ck_games_status"),
        CheckConstraint(
            f"priority BETWEEN {MIN_PRIORITY} AND {MAX_PRIORITY}", name="ck_games_priority"
        ),
        CheckConstraint(
            _in_list("ownership", [o.value for o in Ownership]), name="ck_games_ownership"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    platform: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False)
    ownership: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<GameDB(id={self.id}, name={self.name})>"
