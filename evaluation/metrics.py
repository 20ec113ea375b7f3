"""
评估指标

从每局结算结果 (GameResult) 统计玩家表现
"""
from typing import Dict, List, Optional
from collections import defaultdict
import numpy as np

from core.table import GameResult


class MetricsCollector:
    """
    指标收集器

    本局手牌分值最高者记为胜者 (同分取加入顺序靠前者)
    """

    def __init__(self):
        self.games: List[GameResult] = []
        self._stats: Dict[str, Dict] = defaultdict(lambda: defaultdict(list))

    def add_game(self, result: GameResult):
        """添加一局结果"""
        self.games.append(result)

        best_value = max(value for _, value in result.values) if result.values else 0.0
        winner = next((name for name, value in result.values if value == best_value), None)

        for name, value in result.values:
            stats = self._stats[name]
            stats["games"].append(1)
            stats["values"].append(value)
            stats["wins"].append(1 if name == winner else 0)
            stats["closes"].append(1 if name == result.closed_by else 0)
            stats["lengths"].append(result.rounds)

    def compute_metrics(self, player: Optional[str] = None) -> Dict[str, float]:
        """
        计算指标

        Args:
            player: 指定玩家，None 表示全局

        Returns:
            指标字典
        """
        if player is not None:
            stats = self._stats[player]
            n_games = len(stats["games"])

            if n_games == 0:
                return {}

            return {
                "games": n_games,
                "win_rate": sum(stats["wins"]) / n_games,
                "close_rate": sum(stats["closes"]) / n_games,
                "avg_value": float(np.mean(stats["values"])),
                "max_value": float(np.max(stats["values"])),
                "avg_length": float(np.mean(stats["lengths"])),
            }
        else:
            n_games = len(self.games)
            if n_games == 0:
                return {}

            forced = sum(1 for g in self.games if g.forced)
            return {
                "total_games": n_games,
                "forced_rate": forced / n_games,
                "avg_length": float(np.mean([g.rounds for g in self.games])),
                "avg_value": float(np.mean([v for g in self.games for _, v in g.values])),
            }

    def reset(self):
        """重置"""
        self.games.clear()
        self._stats.clear()
