"""
默认电脑玩家

基于评分管线决定保留、打出、捡起哪张牌:
1. 计算需要的牌 (need 牌堆)
2. 按需要程度给桌面牌排序
3. 给自己的牌评分，写入 need 牌堆
4. 打出评分最低的牌，捡起需要程度最高的桌面牌
"""
from typing import Any, List, Optional
import random
import logging

from core.actions import Event
from core.cards import Card, cards_to_str
from core.rating import (
    RATING_SCALE,
    CardRating,
    GoalDistance,
    RatingContext,
    calculate_needed_cards,
    goal_distance,
    mark_seen,
)
from core.rules import RuleEngine
from core.stack import CardStack, NO_CARD, UNINITIALIZED

from .base import Player
from .config import PlayerConfig

logger = logging.getLogger(__name__)


class DefaultPlayer(Player):
    """
    默认电脑玩家

    Attributes:
        config: 行为配置
        rating: 评分管线
        need: 需要程度 (桌面牌) 与自己牌的评分
        seen: 每张牌的已见次数
    """

    def __init__(
        self,
        table: Any,
        name: Optional[str] = None,
        config: Optional[PlayerConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(table, name, rng)
        self.config = config or PlayerConfig()
        self.rating = CardRating(self.config.bias)
        self.need = CardStack()
        self.seen = CardStack()
        self.initialize()

    def initialize(self) -> None:
        """新一局开始时清空所有记忆"""
        self.need.fill(UNINITIALIZED)
        self.seen.fill(NO_CARD)
        self.rating.reset()
        self.game_closed = False

    @property
    def context(self) -> RatingContext:
        return RatingContext(hand=self.cards, seen=self.seen)

    def set_cards(self, cards) -> None:
        super().set_cards(cards)
        for card in self.cards:
            mark_seen(self.seen, card)
        self.rating.reset()

    def keep_card_set(self) -> bool:
        value = self.cards.calculate_value()
        if value < self.config.stackdrop_initial:
            logger.info(f"{self.name}: Uhm... no! ({value} below {self.config.stackdrop_initial})")
            return False
        logger.debug(f"{self.name} keeps the card set {self.cards}")
        return True

    def rate_cards(self) -> None:
        """给自己的牌评分，写入 need 牌堆"""
        context = self.context
        for card in self.cards:
            rating = self.rating.get_rating(context, card)
            self.need.set_value(card, rating * RATING_SCALE)
            logger.debug(f"Rating {card}: {self.rating.dump_rating()}")

    def sort_table_cards(self, table_cards: List[Card]) -> List[Card]:
        """按需要程度从高到低排序 (同分保持原顺序)"""
        return sorted(table_cards, key=lambda card: -self.need.get_value(card))

    def _waits_for(self, card: Card, distance: GoalDistance, value: float) -> bool:
        """该牌是否属于差一张成型的花色/牌面，且手牌分值还不够高"""
        in_type = distance.type is not None and card.rank == distance.type and distance.type_gap > 0
        in_color = distance.color is not None and card.suit == distance.color and distance.color_gap > 0
        if not (in_type or in_color):
            return False
        return self.config.riskiness >= 2 and value < self.config.wait_for_card

    def choose_drop(self, pick: Optional[Card] = None) -> Optional[Card]:
        """
        选择要打出的牌

        评分最低的牌 (同分取第一张)，但跳过正在等第三张的牌；
        所有牌都被跳过时退回评分最低的牌。
        用评分最低的牌换 pick 后手牌分值达到 force_drop 时不再等牌。

        Args:
            pick: 准备捡起的桌面牌
        """
        distance = goal_distance(self.cards)
        value = self.cards.calculate_value()

        fallback = None
        for card in self.cards:
            if fallback is None or self.need.get_value(card) < self.need.get_value(fallback):
                fallback = card
        if fallback is None:
            return None

        if pick is not None:
            swapped = [c for c in self.cards if c != fallback] + [pick]
            swapped_value = RuleEngine.calculate_value(swapped)
            if swapped_value >= self.config.force_drop:
                logger.debug(f"{self.name} forces dropping {fallback} ({swapped_value} with {pick})")
                return fallback

        candidate = None
        lowest = None
        for card in self.cards:
            rating = self.need.get_value(card)
            if lowest is not None and rating >= lowest:
                continue
            if self._waits_for(card, distance, value):
                logger.debug(f"{self.name} waits for a third card, keeping {card}")
                continue
            candidate, lowest = card, rating

        return candidate or fallback

    def do_move(self, table_cards: List[Card]) -> None:
        logger.debug(f"{self.name}'s cards: {self.cards}")

        calculate_needed_cards(self.cards, self.need)
        ranked = self.sort_table_cards(table_cards)
        self.rate_cards()
        logger.debug(f"{self.name}'s need stack:\n{self.need.dump()}")

        if self.in_goal_state:
            # 已有人敲桌时保持不动
            if not self.game_closed:
                self.knock()
        else:
            drop = self.choose_drop(ranked[0] if ranked else None)
            if drop is not None and ranked:
                logger.debug(f"{self.name} drops {drop}, picks {ranked[0]} from {cards_to_str(ranked)}")
                self.swap(drop, ranked[0])

        self.finish_move()

    def handle_event(self, event: Event, data: Any) -> None:
        super().handle_event(event, data)
        if event == Event.GAME_START:
            self.initialize()
        elif event == Event.CARD_DROPPED:
            mark_seen(self.seen, data)
        elif event == Event.INITIAL_CARDSTACK_DROPPED:
            for card in data:
                mark_seen(self.seen, card)
