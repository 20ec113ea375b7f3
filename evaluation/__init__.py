"""
Evaluation Layer - 行为评估

Modules:
    arena: 基因池、对战、锦标赛、排行榜
    metrics: 评估指标
"""
from .arena import (
    RANK_POINTS,
    rank_points,
    Gene,
    GenePool,
    MatchResult,
    TournamentResult,
    Arena,
    LeaderBoard,
)
from .metrics import (
    MetricsCollector,
)

__all__ = [
    # arena
    "RANK_POINTS",
    "rank_points",
    "Gene",
    "GenePool",
    "MatchResult",
    "TournamentResult",
    "Arena",
    "LeaderBoard",
    # metrics
    "MetricsCollector",
]
