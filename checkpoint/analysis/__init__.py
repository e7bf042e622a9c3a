from checkpoint.analysis.ranker import STATUS_WEIGHTS, RankedGame, rank_games, score_for
from checkpoint.analysis.report import BacklogReport, build_backlog_report

__all__ = [
    "BacklogReport",
    "RankedGame",
    "STATUS_WEIGHTS",
    "build_backlog_report",
    "rank_games",
    "score_for",
]
