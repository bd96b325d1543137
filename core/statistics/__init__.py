"""Statistical projections for the table."""

from core.statistics.probability import CATEGORIES, RankOdds, project_odds

__all__ = [
    "CATEGORIES",
    "RankOdds",
    "project_odds",
]
