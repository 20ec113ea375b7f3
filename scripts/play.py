#!/usr/bin/env python3
"""
观看电脑玩家对战

Usage:
    python scripts/play.py                       # 4 位默认玩家打 1 局
    python scripts/play.py --players 6 --games 5
    python scripts/play.py --random 2 --seed 7 --debug
"""
import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Any

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core import Action, Event, HostHandler, NotificationSink, TableConfig, TableLogic
from core.cards import cards_to_str
from core.rules import DEFAULT_MAX_ROUNDS, MAX_PLAYER, MIN_PLAYER
from evaluation import MetricsCollector
from players import DefaultPlayer, RandomPlayer, PLAYER_NAMES

logger = logging.getLogger(__name__)


class Narrator(HostHandler):
    """把牌桌上发生的事情写到日志"""

    def __init__(self, logic: TableLogic):
        self.logic = logic

    def handle_event(self, event: Event, data: Any) -> None:
        if event == Event.GAME_START:
            logger.info("=" * 60)
            logger.info(f"Game {data} starts")
        elif event == Event.GAME_CLOSED:
            logger.info(f"{data} closed the round, last turn for everyone else")
        elif event == Event.GAME_FINISHED:
            logger.info("-" * 60)
            if data.forced:
                logger.info(f"Nobody closed within {data.rounds} rounds")
            for name, value in data.values:
                logger.info(f"  {name:<8} {value:>5}")
            logger.info("Ratings:")
            for rank, (name, points) in enumerate(data.ranking, start=1):
                logger.info(f"  {rank}. {name:<8} {points:>6}")

    def handle_action(self, action: Action, data: Any, player: Any) -> None:
        if action == Action.DROP_CARD:
            logger.info(f"{player} dropped {data}")
        elif action == Action.PICK_CARD:
            logger.info(f"{player} picked {data}  table: {cards_to_str(self.logic.current_cards())}")
        elif action == Action.END_CALL:
            logger.info(f"{player} is closing with {cards_to_str(data)}")
        elif action == Action.DROP_CARDSTACK_INITIAL:
            logger.info(f"{player} dropped the initial card stack {cards_to_str(data)}")
        elif action == Action.INITIAL_CARDSTACK_PICKED:
            logger.info(f"{player} kept the initial card stack, table: {cards_to_str(data)}")


def parse_args():
    parser = argparse.ArgumentParser(description="Swimming (31) - watch computer players")

    parser.add_argument("--players", type=int, default=4, help=f"Number of players ({MIN_PLAYER}-{MAX_PLAYER})")
    parser.add_argument("--random", type=int, default=0, help="How many of them play randomly")
    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--max-rounds", type=int, default=DEFAULT_MAX_ROUNDS, help="Maximum rounds per game")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--debug", action="store_true", help="Debug output")

    return parser.parse_args()


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(message)s",
    )

    if not MIN_PLAYER <= args.players <= MAX_PLAYER:
        logger.error(f"--players must be between {MIN_PLAYER} and {MAX_PLAYER}")
        return 1
    if args.random > args.players:
        logger.error("--random can't exceed --players")
        return 1

    rng = random.Random(args.seed)
    config = TableConfig(
        max_players=args.players,
        max_rounds=args.max_rounds,
        games_to_play=args.games,
        seed=args.seed,
    )
    sink = NotificationSink()
    logic = TableLogic(config, sink)
    sink.subscribe(Narrator(logic))

    names = rng.sample(PLAYER_NAMES, args.players)
    for i, name in enumerate(names):
        player_rng = random.Random(rng.randrange(2 ** 32))
        if i < args.random:
            logic.add_player(RandomPlayer(logic, name=name, rng=player_rng))
        else:
            logic.add_player(DefaultPlayer(logic, name=name, rng=player_rng))

    ranking = logic.start()

    metrics = MetricsCollector()
    for result in logic.results:
        metrics.add_game(result)

    logger.info("=" * 60)
    logger.info("Final ratings:")
    for rank, seat in enumerate(ranking, start=1):
        stats = metrics.compute_metrics(seat.name)
        logger.info(
            f"  {rank}. {seat.name:<8} {seat.points:>6}  "
            f"avg {stats['avg_value']:.1f}  closed {stats['close_rate']:.0%}"
        )
    overall = metrics.compute_metrics()
    logger.info(f"Forced endings: {overall['forced_rate']:.0%}  avg rounds: {overall['avg_length']:.1f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
