"""
牌的定义与编码

游泳 (31 点) 使用 32 张牌：
- 4 种花色: ♦ ♥ ♠ ♣
- 8 种牌面: 7, 8, 9, 10, J, Q, K, A

牌在牌堆数组中的位置 (deck index = suit * 8 + rank):

       7  8  9 10  J  Q  K  A
    ♦ 00 01 02 03 04 05 06 07
    ♥ 08 09 10 11 12 13 14 15
    ♠ 16 17 18 19 20 21 22 23
    ♣ 24 25 26 27 28 29 30 31
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import List, Tuple, Dict, Iterable
import numpy as np


class Suit(IntEnum):
    """花色 (color)"""
    DIAMONDS = 0
    HEARTS = 1
    SPADES = 2
    CLUBS = 3


class Rank(IntEnum):
    """牌面 (type)"""
    SEVEN = 0
    EIGHT = 1
    NINE = 2
    TEN = 3
    JACK = 4
    QUEEN = 5
    KING = 6
    ACE = 7


# 每种花色的牌数
CARDS_PER_SUIT = len(Rank)

# 花色数量
SUIT_COUNT = len(Suit)

# 牌堆大小
STACK_SIZE = CARDS_PER_SUIT * SUIT_COUNT

# 花色符号
SUIT_SYMBOLS: Dict[Suit, str] = {
    Suit.DIAMONDS: '♦',
    Suit.HEARTS: '♥',
    Suit.SPADES: '♠',
    Suit.CLUBS: '♣',
}

# 牌面显示字符
RANK_NAMES: Dict[Rank, str] = {
    Rank.SEVEN: '7', Rank.EIGHT: '8', Rank.NINE: '9', Rank.TEN: '10',
    Rank.JACK: 'J', Rank.QUEEN: 'Q', Rank.KING: 'K', Rank.ACE: 'A',
}

# 牌面分值 (结算时使用)
RANK_WORTH: Dict[Rank, int] = {
    Rank.SEVEN: 7, Rank.EIGHT: 8, Rank.NINE: 9, Rank.TEN: 10,
    Rank.JACK: 10, Rank.QUEEN: 10, Rank.KING: 10, Rank.ACE: 11,
}

# 按牌堆位置展开的分值表 (32,)
WORTH_TABLE: np.ndarray = np.array(
    [RANK_WORTH[rank] for _ in Suit for rank in Rank], dtype=np.int16
)

WORTH_MIN = int(WORTH_TABLE.min())
WORTH_MAX = int(WORTH_TABLE.max())


@dataclass(frozen=True, order=True, slots=True)
class Card:
    """
    不可变的牌

    排序按 (花色, 牌面)，与牌堆位置一致

    Attributes:
        suit: 花色
        rank: 牌面
    """
    suit: Suit
    rank: Rank

    @property
    def index(self) -> int:
        """牌堆数组中的位置"""
        return int(self.suit) * CARDS_PER_SUIT + int(self.rank)

    @property
    def worth(self) -> int:
        """结算分值"""
        return RANK_WORTH[self.rank]

    @classmethod
    def from_index(cls, index: int) -> 'Card':
        """从牌堆位置创建"""
        validate_index(index)
        return DECK[index]

    def __str__(self) -> str:
        return f"[{SUIT_SYMBOLS[self.suit]}{RANK_NAMES[self.rank]}]"

    def __repr__(self) -> str:
        return f"Card({self.suit.name}, {self.rank.name})"


def validate_index(index: int) -> None:
    """检查牌堆位置是否合法"""
    if index < 0 or index >= STACK_SIZE:
        raise ValueError(f"Card index {index} out of bounds (0-{STACK_SIZE - 1})")


# 完整牌组 (32 张，按牌堆位置排序)
DECK: Tuple[Card, ...] = tuple(
    Card(suit, rank) for suit in Suit for rank in Rank
)


def card_worth(card: Card) -> int:
    """获取牌的结算分值"""
    return RANK_WORTH[card.rank]


def cards_by_color(suit: Suit) -> Tuple[Card, ...]:
    """
    获取某一花色的全部牌 (不管是否持有)

    Args:
        suit: 花色

    Returns:
        8 张牌
    """
    offset = int(suit) * CARDS_PER_SUIT
    return DECK[offset:offset + CARDS_PER_SUIT]


def cards_by_type(rank: Rank) -> Tuple[Card, ...]:
    """
    获取某一牌面的全部牌 (4 种花色)

    Args:
        rank: 牌面

    Returns:
        4 张牌
    """
    return DECK[int(rank)::CARDS_PER_SUIT]


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Args:
        cards: 牌列表

    Returns:
        如 "[♦7][♥A]"
    """
    return ''.join(str(c) for c in sorted(cards))


def str_to_card(s: str) -> Card:
    """
    将字符串转换为牌

    Args:
        s: 如 "♦7", "[♥10]"

    Returns:
        牌
    """
    s = s.strip('[]')
    symbol, name = s[0], s[1:]
    suit = next(k for k, v in SUIT_SYMBOLS.items() if v == symbol)
    rank = next(k for k, v in RANK_NAMES.items() if v == name)
    return Card(suit, rank)


def str_to_cards(s: str) -> List[Card]:
    """
    将字符串转换为牌列表

    Args:
        s: 如 "[♦7][♦8][♦9]" 或 "♦7 ♦8 ♦9"

    Returns:
        牌列表
    """
    tokens = s.replace('][', ' ').replace('[', '').replace(']', '').split()
    return [str_to_card(t) for t in tokens]


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 32 维 one-hot 向量

    Args:
        cards: 牌列表

    Returns:
        32 维 numpy 数组
    """
    array = np.zeros(STACK_SIZE, dtype=np.int8)
    for card in cards:
        array[card.index] = 1
    return array


def array_to_cards(array: np.ndarray) -> List[Card]:
    """
    将 32 维数组转换回牌列表

    Args:
        array: 32 维 numpy 数组

    Returns:
        牌列表 (按牌堆位置排序)
    """
    return [DECK[i] for i in np.flatnonzero(array > 0)]
