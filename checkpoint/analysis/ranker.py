"""
Backlog ranking algorithm.

Ranks games by how urgently they should be played next, combining the
owner's priority with how far along the game already is.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from checkpoint.models.game import Game, Status

# Unplayed games are the backlog proper; beaten games add nothing
STATUS_WEIGHTS: dict[Status, int] = {
    Status.UNPLAYED: 3,
    Status.PLAYING: 1,
    Status.BEATEN: 0,
}

PRIORITY_MULTIPLIER = 2


@dataclass(frozen=True, slots=True)
class RankedGame:
    """A game with its position and score in a ranking."""

    rank: int
    game: Game
    score: int


def score_for(game: Game) -> int:
    """
    Calculate the urgency score for a game.

    Score formula (higher is more urgent):
    - Priority contributes 2 points per level (2-10)
    - Status adds 3 for UNPLAYED, 1 for PLAYING, 0 for BEATEN

    Returns:
        Score from 2 to 13
    """
    return game.priority * PRIORITY_MULTIPLIER + STATUS_WEIGHTS[game.status]


def rank_games(games: Iterable[Game]) -> list[RankedGame]:
    """
    Rank games by score, most urgent first.

    The sort is stable: games with equal scores keep the order they were
    given in, which for the store is snapshot order.

    Returns:
        List of RankedGame with 1-based ranks
    """
    scored = [(game, score_for(game)) for game in games]

    # Sort by score descending (most urgent first)
    scored.sort(key=lambda pair: pair[1], reverse=True)

    return [
        RankedGame(rank=position, game=game, score=score)
        for position, (game, score) in enumerate(scored, start=1)
    ]
