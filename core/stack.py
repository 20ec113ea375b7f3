"""
牌堆

32 个槽位的定长数组，按牌堆位置寻址，每个槽位为一个小整数:
- UNINITIALIZED (-1): 未初始化
- NO_CARD (0): 确认不在牌堆中
- HAS_CARD (1): 在牌堆中
- 其他值: 评分 (写入时截断到 0-127)

同一个类既用作手牌、桌面牌、底牌，也用作评分的临时空间。
"""
from typing import List, Optional, Iterable, Iterator
import random
import numpy as np

from .cards import (
    Card,
    DECK,
    Suit,
    Rank,
    STACK_SIZE,
    SUIT_COUNT,
    CARDS_PER_SUIT,
    SUIT_SYMBOLS,
    RANK_NAMES,
)
from .exceptions import CardNotOwnedError, EmptyStackError
from .rules import RuleEngine

# 槽位标记
UNINITIALIZED = -1
NO_CARD = 0
HAS_CARD = 1

# 评分取值范围
VALUE_MIN = 0
VALUE_MAX = 127


class CardStack:
    """
    牌堆

    底层为 numpy int8 数组，牌数增量维护
    """

    def __init__(self, filled: bool = False):
        """
        Args:
            filled: True 则初始包含全部 32 张牌，否则为空 (全部未初始化)
        """
        self._slots = np.full(STACK_SIZE, UNINITIALIZED, dtype=np.int8)
        self._count = 0
        if filled:
            self.fill(HAS_CARD)

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> 'CardStack':
        """用给定的牌创建牌堆"""
        stack = cls()
        stack.add_cards(cards)
        return stack

    def add_card(self, card: Card) -> None:
        """
        添加一张牌 (幂等)

        已存在的牌不会重复计数
        """
        if self._slots[card.index] != HAS_CARD:
            self._slots[card.index] = HAS_CARD
            self._count += 1

    def add_cards(self, cards: Iterable[Card]) -> None:
        """添加多张牌"""
        for card in cards:
            self.add_card(card)

    def remove_card(self, card: Card) -> None:
        """
        移除一张牌

        Raises:
            CardNotOwnedError: 牌不在牌堆中
        """
        if self._slots[card.index] != HAS_CARD:
            raise CardNotOwnedError(card)
        self._slots[card.index] = NO_CARD
        self._count -= 1

    def has_card(self, card: Card) -> bool:
        return bool(self._slots[card.index] == HAS_CARD)

    def get_value(self, card: Card) -> int:
        """获取槽位原始值 (标记或评分)"""
        return int(self._slots[card.index])

    def set_value(self, card: Card, value: float) -> None:
        """
        写入评分

        绕过持牌检查；负值保留给标记，因此截断到 [0, 127]。
        添加牌请使用 add_card。
        """
        was_present = self._slots[card.index] == HAS_CARD
        self._slots[card.index] = int(np.clip(value, VALUE_MIN, VALUE_MAX))
        if was_present and self._slots[card.index] != HAS_CARD:
            self._count -= 1
        elif not was_present and self._slots[card.index] == HAS_CARD:
            self._count += 1

    def fill(self, value: int) -> None:
        """用同一个值填充全部槽位"""
        self._slots.fill(value)
        self._count = STACK_SIZE if value == HAS_CARD else 0

    def get_random_card(self, rng: Optional[random.Random] = None) -> Card:
        """
        随机抽取一张牌 (不放回)

        在定长数组上做拒绝采样

        Args:
            rng: 随机数生成器，None 使用全局 random

        Raises:
            EmptyStackError: 牌堆为空
        """
        if self._count <= 0:
            raise EmptyStackError()

        rng = rng or random
        while True:
            index = rng.randrange(STACK_SIZE)
            if self._slots[index] == HAS_CARD:
                card = DECK[index]
                self.remove_card(card)
                return card

    def get_cards(self) -> List[Card]:
        """当前持有的牌 (按牌堆位置排序)"""
        return [DECK[i] for i in np.flatnonzero(self._slots == HAS_CARD)]

    def calculate_value(self) -> float:
        """按结算规则计算当前牌的分值"""
        return RuleEngine.calculate_value(self.get_cards())

    def as_array(self) -> np.ndarray:
        """槽位数组的拷贝"""
        return self._slots.copy()

    def as_matrix(self) -> np.ndarray:
        """持牌标记矩阵 (4, 8)，行是花色，列是牌面"""
        return (self._slots == HAS_CARD).reshape(SUIT_COUNT, CARDS_PER_SUIT)

    def copy(self) -> 'CardStack':
        stack = CardStack()
        stack._slots = self._slots.copy()
        stack._count = self._count
        return stack

    @property
    def is_empty(self) -> bool:
        return self._count == 0

    def dump(self) -> str:
        """
        以表格形式输出全部槽位值 (仅用于日志)

        Returns:
            4×8 文本表格
        """
        separator = "-+" + "----+" * CARDS_PER_SUIT
        header = " |" + "|".join(f"{RANK_NAMES[r]:>4}" for r in Rank) + "|"
        lines = [header, separator]
        matrix = self._slots.reshape(SUIT_COUNT, CARDS_PER_SUIT)
        for suit in Suit:
            row = "|".join(f"{int(v):+4d}" for v in matrix[suit])
            lines.append(f"{SUIT_SYMBOLS[suit]}|{row}|")
        lines.append(separator)
        return "\n".join(lines)

    def __len__(self) -> int:
        return self._count

    def __contains__(self, card: Card) -> bool:
        return self.has_card(card)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.get_cards())

    def __str__(self) -> str:
        return ''.join(str(c) for c in self.get_cards())

    def __repr__(self) -> str:
        return f"CardStack({self}, count={self._count})"
