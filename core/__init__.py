"""
Core Layer - 游泳 (31 点) 纯游戏逻辑

Modules:
    cards: 牌定义与编码
    stack: 32 槽位牌堆
    rules: 规则引擎 (目标牌型、结算)
    rating: 电脑玩家的评分管线
    actions: 玩家动作与牌桌事件
    events: 通知分发
    state: 阶段、座位、轮次、局
    table: 牌桌与牌局引擎
    config: 牌桌配置
    exceptions: 异常定义
"""
from .cards import (
    Suit,
    Rank,
    Card,
    DECK,
    RANK_WORTH,
    card_worth,
    cards_by_color,
    cards_by_type,
    cards_to_array,
    array_to_cards,
    cards_to_str,
    str_to_cards,
)

from .stack import CardStack, UNINITIALIZED, NO_CARD, HAS_CARD

from .rules import (
    RuleEngine,
    INITIAL_CARDS,
    MAX_PLAYER,
    MIN_PLAYER,
    DEFAULT_MAX_ROUNDS,
    WORTH_THREE_OF_SAME_TYPE,
)

from .rating import (
    Bias,
    RatingKind,
    RatingContext,
    CardRating,
    GoalDistance,
    normalize,
    goal_distance,
    calculate_needed_cards,
)

from .actions import Action, Event

from .events import NotificationSink, HostHandler

from .state import Phase, Seat, PlayerIterator, TableContext, Round, Game

from .table import Table, TableLogic, GameResult

from .config import TableConfig

from .exceptions import (
    SwimGameError,
    CardNotOwnedError,
    EmptyStackError,
    TableClosedError,
    NoGameLeftError,
    CardsNotDroppableError,
)

__all__ = [
    # cards
    "Suit",
    "Rank",
    "Card",
    "DECK",
    "RANK_WORTH",
    "card_worth",
    "cards_by_color",
    "cards_by_type",
    "cards_to_array",
    "array_to_cards",
    "cards_to_str",
    "str_to_cards",
    # stack
    "CardStack",
    "UNINITIALIZED",
    "NO_CARD",
    "HAS_CARD",
    # rules
    "RuleEngine",
    "INITIAL_CARDS",
    "MAX_PLAYER",
    "MIN_PLAYER",
    "DEFAULT_MAX_ROUNDS",
    "WORTH_THREE_OF_SAME_TYPE",
    # rating
    "Bias",
    "RatingKind",
    "RatingContext",
    "CardRating",
    "GoalDistance",
    "normalize",
    "goal_distance",
    "calculate_needed_cards",
    # actions / events
    "Action",
    "Event",
    "NotificationSink",
    "HostHandler",
    # state
    "Phase",
    "Seat",
    "PlayerIterator",
    "TableContext",
    "Round",
    "Game",
    # table
    "Table",
    "TableLogic",
    "GameResult",
    "TableConfig",
    # exceptions
    "SwimGameError",
    "CardNotOwnedError",
    "EmptyStackError",
    "TableClosedError",
    "NoGameLeftError",
    "CardsNotDroppableError",
]
