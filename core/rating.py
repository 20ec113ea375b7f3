"""
牌的评分管线

电脑玩家用来决定保留、打出、捡起哪张牌。

所有评分因子都是纯函数，输入为评分上下文 (手牌 + 已见牌计数) 与候选牌，
输出归一化到 [0, 10]。评分种类到函数的映射见 RATING_FACTORS。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Tuple
import logging
import numpy as np

from .cards import (
    Card,
    Suit,
    Rank,
    WORTH_MIN,
    WORTH_MAX,
    SUIT_COUNT,
    CARDS_PER_SUIT,
    cards_by_color,
    cards_by_type,
)
from .stack import CardStack, UNINITIALIZED, NO_CARD, VALUE_MAX
from .rules import RULE_GOAL_CARDS_BY_COLOR, RULE_GOAL_CARDS_BY_TYPE, WORTH_THREE_OF_SAME_TYPE

logger = logging.getLogger(__name__)

# 未见过的牌的可用度下限
AVAILABILITY_UNSEEN = -5

# 同花色 / 同牌面每多一张的加成
INFLUENCE_SAME_COLOR = 5
INFLUENCE_SAME_TYPE = 10

# 理论最大值: 三张最高分值的牌 + 两次加成
WORTH_MAX_BY_COLOR = 2 * INFLUENCE_SAME_COLOR + 11 + 10 + 10
WORTH_MAX_BY_TYPE = 2 * INFLUENCE_SAME_TYPE + 3 * 11

# 评分写入牌堆时的放大倍数 (牌堆槽位只存整数)
RATING_SCALE = 10

# 归一化输出范围
RATING_MIN = 0.0
RATING_MAX = 10.0


class Bias(Enum):
    """评分因子权重名称"""
    AVAILABILITY = "availability"
    SAME_COLOR = "same_color"
    SAME_TYPE = "same_type"
    VALUE = "value"
    GOAL_DISTANCE = "goal_distance"


# 默认权重
BIAS_DEFAULTS: Dict[Bias, float] = {
    Bias.AVAILABILITY: 0.5,
    Bias.SAME_COLOR: 0.5,
    Bias.SAME_TYPE: 0.5,
    Bias.VALUE: 0.5,
    Bias.GOAL_DISTANCE: 0.5,
}


class RatingKind(Enum):
    """评分因子"""
    AVAILABILITY = "availability"
    SAME_COLOR = "same_color"
    COLOR_FREQUENCY = "color_frequency"
    SAME_TYPE = "same_type"
    VALUE = "value"
    GOAL_DISTANCE = "goal_distance"


def normalize(min_value: float, max_value: float, value: float) -> float:
    """
    线性归一化到 [0, 10]

    Args:
        min_value: 下限 (映射为 0)
        max_value: 上限 (映射为 10)
        value: 待归一化的值

    Returns:
        ((value - min) / (max - min)) * 10
    """
    return ((value - min_value) / (max_value - min_value)) * 10


@dataclass
class RatingContext:
    """
    评分上下文

    Attributes:
        hand: 自己的手牌
        seen: 每张牌被看到 (发到手上、打到桌面) 的次数
    """
    hand: CardStack
    seen: CardStack = field(default_factory=CardStack)

    def seen_counts(self) -> np.ndarray:
        """已见次数 (32,)，未初始化视为 0"""
        return np.clip(self.seen.as_array().astype(np.int16), 0, None)


def mark_seen(seen: CardStack, card: Card) -> None:
    """已见次数 +1"""
    seen.set_value(card, max(seen.get_value(card), NO_CARD) + 1)


@dataclass(frozen=True)
class GoalDistance:
    """
    距离目标牌型还差几张

    少于两张匹配时对应字段为 None

    Attributes:
        color: 匹配最多的花色
        color_gap: 该花色还差几张
        type: 匹配最多的牌面
        type_gap: 该牌面还差几张
    """
    color: Optional[Suit] = None
    color_gap: Optional[int] = None
    type: Optional[Rank] = None
    type_gap: Optional[int] = None

    @property
    def in_sight(self) -> bool:
        return self.color is not None or self.type is not None


def goal_distance(hand: CardStack) -> GoalDistance:
    """
    估算手牌到目标牌型的距离

    至少两张同花色 / 同牌面才计入

    Args:
        hand: 手牌

    Returns:
        GoalDistance
    """
    matrix = hand.as_matrix()
    by_color = matrix.sum(axis=1)
    by_type = matrix.sum(axis=0)

    color = color_gap = rank = type_gap = None
    best_color = int(np.argmax(by_color))
    if by_color[best_color] >= 2:
        color = Suit(best_color)
        color_gap = RULE_GOAL_CARDS_BY_COLOR - int(by_color[best_color])
    best_type = int(np.argmax(by_type))
    if by_type[best_type] >= 2:
        rank = Rank(best_type)
        type_gap = RULE_GOAL_CARDS_BY_TYPE - int(by_type[best_type])

    return GoalDistance(color=color, color_gap=color_gap, type=rank, type_gap=type_gap)


def _rate_partition(hand: CardStack, partition, influence: int) -> int:
    """同一分组 (花色或牌面) 中已持有牌的分值，第二张起每张加 influence"""
    value = 0
    same = 0
    for card in partition:
        if hand.has_card(card):
            same += 1
            value += card.worth
            if same > 1:
                value += influence
    return value


def rate_availability(context: RatingContext, card: Card) -> float:
    """按已见次数评分，相对于所有牌中的最大已见次数"""
    counts = context.seen_counts()
    max_seen = int(counts.max())
    return normalize(AVAILABILITY_UNSEEN, max_seen, int(counts[card.index]))


def rate_same_color(context: RatingContext, card: Card) -> float:
    value = _rate_partition(context.hand, cards_by_color(card.suit), INFLUENCE_SAME_COLOR)
    return normalize(0, WORTH_MAX_BY_COLOR, value)


def rate_color_frequency(context: RatingContext, card: Card) -> float:
    """按花色统计已见的牌数"""
    by_color = context.seen_counts().reshape(SUIT_COUNT, CARDS_PER_SUIT).sum(axis=1)
    max_value = int(by_color.max())
    if max_value == 0:
        return RATING_MIN
    return normalize(0, max_value, int(by_color[card.suit]))


def rate_same_type(context: RatingContext, card: Card) -> float:
    value = _rate_partition(context.hand, cards_by_type(card.rank), INFLUENCE_SAME_TYPE)
    return normalize(0, WORTH_MAX_BY_TYPE, value)


def rate_value(context: RatingContext, card: Card) -> float:
    return normalize(WORTH_MIN, WORTH_MAX, card.worth)


def rate_goal_distance(context: RatingContext, card: Card) -> float:
    """
    候选牌属于手牌中最接近目标的花色/牌面时，差距越小分越高
    """
    distance = goal_distance(context.hand)
    color_value = 0.0
    type_value = 0.0
    if distance.color is not None and card.suit == distance.color:
        color_value = normalize(-1, 1, 1 - distance.color_gap)
    if distance.type is not None and card.rank == distance.type:
        type_value = normalize(-1, 1, 1 - distance.type_gap)
    return max(color_value, type_value)


RatingFunction = Callable[[RatingContext, Card], float]

# 评分种类 -> (评分函数, 使用的权重)
RATING_FACTORS: Dict[RatingKind, Tuple[RatingFunction, Bias]] = {
    RatingKind.AVAILABILITY: (rate_availability, Bias.AVAILABILITY),
    RatingKind.SAME_COLOR: (rate_same_color, Bias.SAME_COLOR),
    RatingKind.COLOR_FREQUENCY: (rate_color_frequency, Bias.SAME_COLOR),
    RatingKind.SAME_TYPE: (rate_same_type, Bias.SAME_TYPE),
    RatingKind.VALUE: (rate_value, Bias.VALUE),
    RatingKind.GOAL_DISTANCE: (rate_goal_distance, Bias.GOAL_DISTANCE),
}

DEFAULT_PIPELINE: Tuple[RatingKind, ...] = tuple(RATING_FACTORS)


def rate(kind: RatingKind, context: RatingContext, card: Card) -> float:
    """执行单个评分因子，结果截断到 [0, 10]"""
    function, _ = RATING_FACTORS[kind]
    return float(np.clip(function(context, card), RATING_MIN, RATING_MAX))


class CardRating:
    """
    评分管线

    对每个评分因子乘以权重后取平均。
    每次评分前清空累计值。
    """

    def __init__(
        self,
        bias: Optional[Dict[Bias, float]] = None,
        pipeline: Tuple[RatingKind, ...] = DEFAULT_PIPELINE,
    ):
        self.pipeline = pipeline
        self._bias: Dict[Bias, float] = {}
        if bias:
            self.set_bias_values(bias)

        # 累计值
        self.rating = 0.0
        self.steps = 0
        self.details: Dict[RatingKind, float] = {}

    def set_bias(self, bias: Bias, value: float) -> None:
        if value < 0 or value > 1:
            raise ValueError(f"Bias value {value} not in the range 0-1.")
        self._bias[bias] = value

    def set_bias_values(self, bias: Dict[Bias, float]) -> None:
        for name, value in bias.items():
            self.set_bias(name, value)

    def get_bias(self, bias: Bias) -> float:
        """未设置时返回默认权重"""
        return self._bias.get(bias, BIAS_DEFAULTS[bias])

    def reset(self) -> None:
        """清空累计值"""
        self.rating = 0.0
        self.steps = 0
        self.details = {}

    def step(self, kind: RatingKind, context: RatingContext, card: Card) -> 'CardRating':
        """执行一个评分因子并累加加权结果"""
        _, bias = RATING_FACTORS[kind]
        value = rate(kind, context, card) * self.get_bias(bias)
        self.details[kind] = value
        self.rating += value
        self.steps += 1
        return self

    def get_rating(self, context: RatingContext, card: Card) -> float:
        """
        对一张牌完整评分

        Args:
            context: 评分上下文
            card: 候选牌

        Returns:
            加权平均分，范围 [0, 10]
        """
        self.reset()
        for kind in self.pipeline:
            self.step(kind, context, card)
        rating = self.rating / self.steps if self.steps else 0.0
        logger.debug(f"Rating {card}: ({self.rating:.2f}/{self.steps}) = {rating:.2f}")
        return rating

    def dump_rating(self) -> str:
        return " ".join(f"{kind.value}={value:.2f}" for kind, value in self.details.items())


def uprate(stack: CardStack, card: Card, value: float) -> None:
    """只在新值更高时写入 (只升不降)"""
    if value > stack.get_value(card):
        stack.set_value(card, min(value, VALUE_MAX))


def calculate_needed_cards(hand: CardStack, need: CardStack) -> CardStack:
    """
    计算需要的牌的优先级

    - 持有某花色的牌时: 该花色缺少的牌 = 分值 + 匹配数 × 同花色加成
    - 持有某牌面的牌时: 其他花色的同牌面牌 = 当前评分 + 同牌面加成 + 三条分值 / 3

    Args:
        hand: 手牌
        need: 评分输出牌堆 (会被重置)

    Returns:
        need
    """
    need.fill(UNINITIALIZED)
    matrix = hand.as_matrix()

    # 按花色
    for suit in Suit:
        matches = int(matrix[suit].sum())
        if matches == 0:
            continue
        for card in cards_by_color(suit):
            if not hand.has_card(card):
                uprate(need, card, card.worth + matches * INFLUENCE_SAME_COLOR)

    # 按牌面
    type_bonus = INFLUENCE_SAME_TYPE + int(WORTH_THREE_OF_SAME_TYPE / 3)
    for rank in Rank:
        if not matrix[:, rank].any():
            continue
        for card in cards_by_type(rank):
            if not hand.has_card(card):
                current = max(need.get_value(card), 0)
                uprate(need, card, current + type_bonus)

    return need
