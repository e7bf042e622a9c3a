"""
Backlog report: status counts plus the top of the ranking.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from checkpoint.analysis.ranker import RankedGame, rank_games
from checkpoint.models.game import Game, Status

EMPTY_REPORT_MESSAGE = "No games loaded yet."


@dataclass(frozen=True)
class BacklogReport:
    """
    Summary of the backlog at one point in time.

    Attributes:
        total: Number of games in the backlog
        status_counts: Games per status, every status present
        top: Highest-ranked games, most urgent first
    """

    total: int = 0
    status_counts: dict[Status, int] = field(default_factory=dict)
    top: tuple[RankedGame, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def count(self, status: Status) -> int:
        return self.status_counts.get(status, 0)

    def render(self) -> str:
        """Render the report as display text."""
        if self.is_empty:
            return EMPTY_REPORT_MESSAGE

        lines = [
            "Backlog Health",
            (
                f"Total: {self.total}"
                f" | Unplayed: {self.count(Status.UNPLAYED)}"
                f" | Playing: {self.count(Status.PLAYING)}"
                f" | Beaten: {self.count(Status.BEATEN)}"
            ),
            "",
            f"Top {len(self.top)} To Tackle Next:",
        ]
        for entry in self.top:
            lines.append(f"{entry.rank}) [{entry.game.id}] {entry.game.name} (score={entry.score})")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


def clamp_top_n(top_n: int, total: int) -> int:
    """Clamp a requested entry count to [1, total]."""
    return max(1, min(top_n, total))


def build_backlog_report(games: Sequence[Game], top_n: int) -> BacklogReport:
    """
    Build a backlog report.

    Args:
        games: Games in snapshot order
        top_n: Requested number of ranked entries, clamped to [1, len(games)]

    Returns:
        BacklogReport; empty when there are no games
    """
    if not games:
        return BacklogReport()

    counts = {status: 0 for status in Status}
    for game in games:
        counts[game.status] += 1

    ranked = rank_games(games)
    limit = clamp_top_n(top_n, len(games))

    return BacklogReport(
        total=len(games),
        status_counts=counts,
        top=tuple(ranked[:limit]),
    )
