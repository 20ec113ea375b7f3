"""
规则引擎 - 目标牌型检测、手牌结算

所有方法都是纯函数，无状态
"""
from typing import Iterable, List
from collections import Counter
import logging
import numpy as np

from .cards import Card, WORTH_TABLE, SUIT_COUNT, CARDS_PER_SUIT, cards_to_array

logger = logging.getLogger(__name__)

# 每位玩家的初始手牌数
INITIAL_CARDS = 3

# 最大玩家数
MAX_PLAYER = 9

# 最小玩家数
MIN_PLAYER = 2

# 每局默认最大轮数
DEFAULT_MAX_ROUNDS = 32

# 目标牌型需要的同花色 / 同牌面张数
RULE_GOAL_CARDS_BY_COLOR = 3
RULE_GOAL_CARDS_BY_TYPE = 3

# 三张同牌面的固定分值
WORTH_THREE_OF_SAME_TYPE = 30.5

# 可达到的最小 / 最大分值
STACKVALUE_MIN = 24  # 7 + 8 + 9
STACKVALUE_MAX = 31  # A + 10 + 10


class RuleEngine:
    """
    游泳规则引擎

    提供目标牌型检测和手牌结算
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def _matrix(cards: Iterable[Card]) -> np.ndarray:
        """持牌矩阵 (4, 8)"""
        return cards_to_array(cards).reshape(SUIT_COUNT, CARDS_PER_SUIT)

    @staticmethod
    def verify_goal(cards: Iterable[Card]) -> bool:
        """
        检查是否达成目标牌型

        三张同花色 或 三张同牌面

        Args:
            cards: 手牌

        Returns:
            是否达成目标 (可以敲桌)
        """
        cards = list(cards)
        if len(cards) < INITIAL_CARDS:
            return False

        by_color = Counter(card.suit for card in cards)
        if max(by_color.values()) >= RULE_GOAL_CARDS_BY_COLOR:
            logger.debug("Three of a color!")
            return True

        by_type = Counter(card.rank for card in cards)
        if max(by_type.values()) >= RULE_GOAL_CARDS_BY_TYPE:
            logger.debug("Three of a type!")
            return True

        return False

    @staticmethod
    def calculate_value(cards: Iterable[Card]) -> float:
        """
        计算手牌分值

        - 三张同牌面: 固定 30.5
        - 否则: 同一花色牌的分值之和，取最大的花色

        Args:
            cards: 手牌

        Returns:
            分值
        """
        matrix = RuleEngine._matrix(cards)

        # 三张同牌面
        if (matrix.sum(axis=0) == RULE_GOAL_CARDS_BY_TYPE).any():
            return WORTH_THREE_OF_SAME_TYPE

        # 按花色求和
        worth = matrix * WORTH_TABLE.reshape(SUIT_COUNT, CARDS_PER_SUIT)
        return float(worth.sum(axis=1).max())

    @staticmethod
    def best_color_count(cards: Iterable[Card]) -> int:
        """同一花色最多的张数"""
        return int(RuleEngine._matrix(cards).sum(axis=1).max())

    @staticmethod
    def best_type_count(cards: Iterable[Card]) -> int:
        """同一牌面最多的张数"""
        return int(RuleEngine._matrix(cards).sum(axis=0).max())

    @staticmethod
    def rank_players(points: List[float]) -> List[int]:
        """
        按总分从高到低排序

        分数相同时保持加入顺序

        Args:
            points: 按加入顺序排列的总分

        Returns:
            玩家下标列表
        """
        return sorted(range(len(points)), key=lambda i: -points[i])
