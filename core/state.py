"""
牌局状态

- Phase: 牌桌所处阶段
- Seat: 一位玩家在牌桌上的座位 (总分、本回合动作标记)
- PlayerIterator: 座位迭代器 (可循环)
- TableContext: Table / Game / Round 共享的上下文
- Round: 轮次 (当前玩家、轮数、敲桌玩家)
- Game: 局 (局数、起始玩家)

Table、Game、Round 之间互不引用，只通过 TableContext 共享数据。
"""
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Sequence
from enum import Enum
import random
import logging

from .cards import Card
from .config import TableConfig
from .events import NotificationSink
from .exceptions import CardsNotDroppableError, NoGameLeftError
from .rules import RuleEngine
from .stack import CardStack

logger = logging.getLogger(__name__)


class Phase(Enum):
    """牌桌阶段"""
    AWAITING_PLAYERS = "awaiting_players"        # 等待玩家加入
    CLOSED_READY = "closed_ready"                # 已关闭，等待开局
    DEALING = "dealing"                          # 发牌 (含首轮换牌)
    ROUND_LOOP = "round_loop"                    # 轮流行动
    ROUND_CLOSING_GRACE = "round_closing_grace"  # 有人敲桌，其他人各再行动一次
    GAME_OVER = "game_over"                      # 一局结束
    ALL_GAMES_FINISHED = "all_games_finished"    # 全部局数结束


# 玩家可以出牌的阶段
PLAYING_PHASES = (Phase.ROUND_LOOP, Phase.ROUND_CLOSING_GRACE)


@dataclass(eq=False)
class Seat:
    """
    座位

    Attributes:
        player: 玩家对象
        index: 加入顺序
        points: 累计总分
        took_action: 本回合是否已有被接受的动作
        dropped: 本回合是否已打出一张牌
        picked: 本回合是否已捡起一张牌
        finished_turn: 本回合是否已提交 MOVE_FINISHED
    """
    player: Any
    index: int
    points: float = 0.0
    took_action: bool = False
    dropped: bool = False
    picked: bool = False
    finished_turn: bool = False

    @property
    def name(self) -> str:
        return self.player.name

    def clear_turn(self) -> None:
        """清空本回合标记"""
        self.took_action = False
        self.dropped = False
        self.picked = False
        self.finished_turn = False


class PlayerIterator:
    """
    座位迭代器

    wrap_around=True 时永不结束: 越过末尾后回到第一位，并记录 has_wrapped。
    不循环时，遇到敲桌玩家的位置即停止。
    """

    def __init__(self, seats: Sequence[Seat], wrap_around: bool = True):
        self._seats = seats
        self.wrap_around = wrap_around
        self.pointer = -1
        self.closing_pointer = -1
        self._wrapped = False

    def has_next(self) -> bool:
        if not self._seats:
            return False
        if self.wrap_around:
            return True
        following = self.pointer + 1
        return following < len(self._seats) and following != self.closing_pointer

    def next(self) -> Seat:
        """
        前进一个座位

        Raises:
            StopIteration: 非循环迭代器已到末尾
        """
        if not self.has_next():
            raise StopIteration
        self.pointer += 1
        if self.pointer == len(self._seats):
            self._wrapped = True
            self.pointer = 0
        else:
            self._wrapped = False
        return self.get()

    def __iter__(self) -> Iterator[Seat]:
        return self

    def __next__(self) -> Seat:
        return self.next()

    @property
    def index(self) -> int:
        """当前位置，尚未前进时为 0"""
        return 0 if self.pointer == -1 else self.pointer

    def get(self) -> Seat:
        return self._seats[self.index]

    def set_pointer(self, pointer: int) -> None:
        """下一次 next() 返回 pointer + 1 位置的座位"""
        self.pointer = pointer
        self._wrapped = False

    def set_as_closing(self) -> bool:
        """
        把当前位置标记为敲桌位置

        Returns:
            False 表示已有敲桌位置 (每轮只能设置一次)
        """
        if self.closing_pointer == -1:
            self.closing_pointer = self.index
            return True
        return False

    def has_wrapped(self) -> bool:
        """上一次 next() 是否越过了末尾"""
        return self._wrapped

    def reset(self) -> None:
        self.pointer = -1
        self.closing_pointer = -1
        self._wrapped = False


@dataclass
class TableContext:
    """
    共享上下文

    Attributes:
        config: 牌桌配置
        sink: 通知分发器
        rng: 随机数生成器
        seats: 座位 (按加入顺序，关闭后不再变化)
        pool: 底牌 (未发出的牌)
        cards: 桌面上明牌
        phase: 当前阶段
    """
    config: TableConfig
    sink: NotificationSink
    rng: random.Random
    seats: List[Seat] = field(default_factory=list)
    pool: CardStack = field(default_factory=lambda: CardStack(filled=True))
    cards: CardStack = field(default_factory=CardStack)
    phase: Phase = Phase.AWAITING_PLAYERS

    @property
    def closed(self) -> bool:
        return self.phase != Phase.AWAITING_PLAYERS


class Round:
    """
    轮次

    每位玩家行动一次为一个回合；当前玩家越过座位末尾时轮数 +1。
    轮数达到上限时强制结束；有人敲桌后，轮到敲桌玩家时结束。
    """

    def __init__(self, context: TableContext):
        self.context = context
        self.players = PlayerIterator(context.seats, wrap_around=True)
        self.max_rounds = context.config.max_rounds
        self.current_round = 0
        self.finished = False
        self.closing_seat: Optional[Seat] = None
        self.current: Optional[Seat] = None
        # 起始玩家本局是否已放弃第一手牌
        self.initial_dropped = False

    def reset(self, start_index: int = 0) -> None:
        """
        开始新的一局

        Args:
            start_index: 起始玩家的座位下标，该玩家第一个行动
        """
        self.players.reset()
        self.players.set_pointer(start_index - 1)
        self.current_round = 0
        self.finished = False
        self.closing_seat = None
        self.initial_dropped = False
        self.current = self.context.seats[start_index]

    def next_player(self) -> Seat:
        """
        轮到下一位玩家

        Returns:
            本回合行动的座位 (本回合标记已清空)
        """
        seat = self.players.next()
        seat.clear_turn()
        if self.players.has_wrapped():
            self.next()
        self.current = seat
        return seat

    def next(self) -> int:
        """轮数 +1，达到上限时标记结束"""
        self.current_round += 1
        if self.current_round >= self.max_rounds:
            self.finished = True
        return self.current_round

    def has_next(self) -> bool:
        return self.current_round + 1 <= self.max_rounds

    def is_finished(self) -> bool:
        return self.finished

    def close(self, cards: List[Card]) -> bool:
        """
        当前玩家敲桌

        Args:
            cards: 敲桌时的手牌

        Returns:
            True 表示敲桌成功；False 表示本轮已有人敲桌

        Raises:
            CardsNotDroppableError: 手牌未达成目标牌型
        """
        if not RuleEngine.verify_goal(cards):
            raise CardsNotDroppableError(cards)
        if self.players.set_as_closing():
            self.closing_seat = self.players.get()
            return True
        return False

    @property
    def is_closing(self) -> bool:
        return self.closing_seat is not None

    def is_closed_by(self, seat: Seat) -> bool:
        return self.closing_seat is seat


class Game:
    """
    局

    每局轮换起始玩家 (循环迭代)
    """

    def __init__(self, context: TableContext):
        self.context = context
        self.players = PlayerIterator(context.seats, wrap_around=True)
        self.games_to_play = context.config.games_to_play
        self.current_game = 0
        self.starting_seat: Optional[Seat] = None

    def has_next(self) -> bool:
        return self.current_game + 1 <= self.games_to_play

    def next(self) -> Seat:
        """
        准备下一局的起始玩家

        Returns:
            起始座位

        Raises:
            NoGameLeftError: 局数已打完
        """
        if not self.has_next():
            raise NoGameLeftError()
        self.current_game += 1
        self.starting_seat = self.players.next()
        logger.debug(f"Game {self.current_game} starts with {self.starting_seat.name}")
        return self.starting_seat
