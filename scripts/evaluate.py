#!/usr/bin/env python3
"""
行为评估脚本

随机生成一池玩家配置，反复同桌对战，按名次给评分点并输出排行榜

Usage:
    python scripts/evaluate.py --genes 10 --matches 40 --games 10
    python scripts/evaluate.py --players 4 --turns 3 --seed 1 --output results.json
"""
import argparse
import logging
import random
import sys
from pathlib import Path
import json

import numpy as np

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.rules import MAX_PLAYER, MIN_PLAYER
from evaluation import Arena, GenePool, LeaderBoard

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Swimming (31) - behaviour tournament")

    parser.add_argument("--genes", type=int, default=10, help="Gene pool size")
    parser.add_argument("--players", type=int, default=2, help=f"Players per table ({MIN_PLAYER}-{MAX_PLAYER})")
    parser.add_argument("--matches", type=int, default=40, help="Matches per tournament")
    parser.add_argument("--games", type=int, default=10, help="Games per match")
    parser.add_argument("--max-rounds", type=int, default=None, help="Maximum rounds per game")
    parser.add_argument("--turns", type=int, default=1, help="Number of tournaments")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--debug", action="store_true", help="Debug output")

    return parser.parse_args()


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    # 单局细节太多，只保留汇总
    if not args.debug:
        for name in ("core", "players"):
            logging.getLogger(name).setLevel(logging.WARNING)

    if not MIN_PLAYER <= args.players <= MAX_PLAYER:
        logger.error(f"--players must be between {MIN_PLAYER} and {MAX_PLAYER}")
        return 1

    rng = random.Random(args.seed)
    pool = GenePool(args.genes, rng=random.Random(rng.randrange(2 ** 32)))
    for gene in pool:
        logger.info(f"{gene.name}: {gene.config.describe()}")

    arena = Arena(games_per_match=args.games, max_rounds=args.max_rounds, rng=rng)
    leaderboard = LeaderBoard()
    forced_games = []

    for turn in range(args.turns):
        logger.info(f"=== Turn {turn + 1}/{args.turns}")
        result = arena.tournament(pool, n_matches=args.matches, players_per_match=args.players)
        leaderboard.update(result)
        forced_games.extend(match.forced_games for match in result.matches)
        logger.info(repr(result))

    logger.info("=" * 50)
    logger.info(repr(leaderboard))
    if forced_games:
        logger.info(f"Forced endings per match: {np.mean(forced_games):.2f} (max {max(forced_games)})")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "leaderboard": leaderboard.get_ranking(),
                "genes": {gene.name: gene.config.to_dict() for gene in pool},
                "metrics": {
                    name: arena.metrics.compute_metrics(name) for name in (g.name for g in pool)
                },
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
