"""
行为竞技场

随机生成一池玩家配置 (基因)，反复抽取若干基因同桌对战，
按每场最终排名给评分点 (第 1/2/3 名得 3/2/1 点)，统计排行榜。
"""
from typing import Dict, Iterator, List, Optional, Tuple
from dataclasses import dataclass, field
from collections import defaultdict
import random
import logging
import numpy as np

from core.config import TableConfig
from core.rules import DEFAULT_MAX_ROUNDS, MIN_PLAYER
from core.table import TableLogic
from players.config import PlayerConfig
from players.default import DefaultPlayer

from .metrics import MetricsCollector

logger = logging.getLogger(__name__)

# 按名次获得的评分点 (之后的名次为 0)
RANK_POINTS = (3, 2, 1)


def rank_points(rank: int) -> int:
    """名次 (从 1 开始) 对应的评分点"""
    if 1 <= rank <= len(RANK_POINTS):
        return RANK_POINTS[rank - 1]
    return 0


@dataclass
class Gene:
    """一组玩家配置"""
    name: str
    config: PlayerConfig


class GenePool:
    """
    基因池

    第一个基因总是默认配置，其余随机生成
    """

    def __init__(self, size: int, rng: Optional[random.Random] = None):
        if size < 1:
            raise ValueError(f"Gene pool size must be positive, got {size}")
        self.rng = rng or random.Random()
        self.genes: List[Gene] = [Gene("default", PlayerConfig())]
        for i in range(1, size):
            self.genes.append(Gene(f"gene-{i}", PlayerConfig.random(self.rng)))
        logger.info(f"Initialized pool with {size} genes")

    def random_gene(self) -> Gene:
        return self.rng.choice(self.genes)

    def sample(self, amount: int) -> List[Gene]:
        """不重复抽取"""
        return self.rng.sample(self.genes, amount)

    def get(self, name: str) -> Gene:
        for gene in self.genes:
            if gene.name == name:
                return gene
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self.genes)

    def __iter__(self) -> Iterator[Gene]:
        return iter(self.genes)


@dataclass
class MatchResult:
    """
    一场对战 (同一桌连续打若干局) 的结果

    Attributes:
        players: 参赛基因名 (按加入顺序)
        ranking: 最终排名 (基因名, 总分)
        rating_points: 每个基因获得的评分点
        games: 局数
        forced_games: 强制结束的局数
    """
    players: Tuple[str, ...]
    ranking: List[Tuple[str, float]]
    rating_points: Dict[str, int]
    games: int
    forced_games: int

    @property
    def winner(self) -> str:
        return self.ranking[0][0]


@dataclass
class TournamentResult:
    """锦标赛结果"""
    standings: Dict[str, Dict[str, float]]
    total_matches: int
    matches: List[MatchResult] = field(default_factory=list)

    def get_ranking(self) -> List[Tuple[str, float]]:
        """按平均评分点排名"""
        return sorted(
            [(name, stats["rating"]) for name, stats in self.standings.items()],
            key=lambda x: x[1],
            reverse=True,
        )

    def __repr__(self) -> str:
        ranking = self.get_ranking()
        lines = [f"Tournament Results ({self.total_matches} matches):"]
        for i, (name, rating) in enumerate(ranking):
            lines.append(f"  {i+1}. {name}: {rating:.2f}")
        return "\n".join(lines)


class Arena:
    """
    行为竞技场

    每场对战新建一张牌桌，每个基因一位 DefaultPlayer
    """

    def __init__(
        self,
        games_per_match: int = 10,
        max_rounds: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.games_per_match = games_per_match
        self.max_rounds = max_rounds
        self.rng = rng or random.Random()
        self.metrics = MetricsCollector()

    def _table_config(self, n_players: int) -> TableConfig:
        return TableConfig(
            max_players=max(n_players, MIN_PLAYER),
            max_rounds=self.max_rounds or DEFAULT_MAX_ROUNDS,
            games_to_play=self.games_per_match,
            seed=self.rng.randrange(2 ** 32),
        )

    def play_match(self, genes: List[Gene]) -> MatchResult:
        """
        同桌打 games_per_match 局

        Args:
            genes: 参赛基因 (2-9 个，名字不可重复)

        Returns:
            对战结果
        """
        names = [gene.name for gene in genes]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate gene names in match: {names}")

        logic = TableLogic(self._table_config(len(genes)))
        for gene in genes:
            logic.add_player(DefaultPlayer(
                logic,
                name=gene.name,
                config=gene.config,
                rng=random.Random(self.rng.randrange(2 ** 32)),
            ))

        ranking = logic.start()
        for result in logic.results:
            self.metrics.add_game(result)

        result = MatchResult(
            players=tuple(names),
            ranking=[(seat.name, seat.points) for seat in ranking],
            rating_points={seat.name: rank_points(i + 1) for i, seat in enumerate(ranking)},
            games=len(logic.results),
            forced_games=sum(1 for r in logic.results if r.forced),
        )
        logger.info(f"Match {' vs '.join(names)}: winner {result.winner}")
        return result

    def tournament(
        self,
        pool: GenePool,
        n_matches: int = 10,
        players_per_match: int = 2,
    ) -> TournamentResult:
        """
        锦标赛

        每场从基因池中随机抽取 players_per_match 个基因

        Args:
            pool: 基因池
            n_matches: 场数
            players_per_match: 每桌人数

        Returns:
            锦标赛结果
        """
        if players_per_match > len(pool):
            raise ValueError(
                f"Pool has {len(pool)} genes, can't seat {players_per_match} per match"
            )

        standings = {gene.name: defaultdict(float) for gene in pool}
        points: Dict[str, List[float]] = defaultdict(list)
        all_matches = []

        for _ in range(n_matches):
            result = self.play_match(pool.sample(players_per_match))
            all_matches.append(result)

            for rank, (name, total) in enumerate(result.ranking, start=1):
                stats = standings[name]
                stats["matches"] += 1
                stats["rating_points"] += result.rating_points[name]
                if rank == 1:
                    stats["wins"] += 1
                points[name].append(total)

        for name, stats in standings.items():
            matches, rating_points, wins = stats["matches"], stats["rating_points"], stats["wins"]
            stats["rating"] = rating_points / matches if matches else 0.0
            stats["win_rate"] = wins / matches if matches else 0.0
            stats["avg_points"] = float(np.mean(points[name])) if points[name] else 0.0
            stats["std_points"] = float(np.std(points[name])) if points[name] else 0.0

        return TournamentResult(
            standings={name: dict(stats) for name, stats in standings.items()},
            total_matches=len(all_matches),
            matches=all_matches,
        )


class LeaderBoard:
    """
    排行榜

    跨多次锦标赛累计评分点
    """

    def __init__(self):
        self.records: Dict[str, Dict[str, float]] = {}
        self.history: List[Dict] = []

    def update(self, tournament_result: TournamentResult):
        """更新排行榜"""
        for name, stats in tournament_result.standings.items():
            if name not in self.records:
                self.records[name] = defaultdict(float)

            self.records[name]["total_matches"] += stats.get("matches", 0)
            self.records[name]["total_rating_points"] += stats.get("rating_points", 0)

            if self.records[name]["total_matches"] > 0:
                self.records[name]["overall_rating"] = (
                    self.records[name]["total_rating_points"] /
                    self.records[name]["total_matches"]
                )

        self.history.append({
            "standings": tournament_result.standings,
            "total_matches": tournament_result.total_matches,
        })

    def get_ranking(self) -> List[Tuple[str, float, int]]:
        """获取排名 (名称, 平均评分点, 总场次)"""
        return sorted(
            [
                (name, stats.get("overall_rating", 0.0), int(stats.get("total_matches", 0)))
                for name, stats in self.records.items()
            ],
            key=lambda x: (x[1], x[2]),
            reverse=True,
        )

    def __repr__(self) -> str:
        ranking = self.get_ranking()
        lines = ["Leaderboard:"]
        for i, (name, rating, matches) in enumerate(ranking):
            lines.append(f"  {i+1}. {name}: {rating:.2f} ({matches} matches)")
        return "\n".join(lines)
