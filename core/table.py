"""
牌桌与牌局引擎

- Table: 玩家登记、底牌与桌面牌、发牌
- TableLogic: 驱动一局局游戏，校验并执行玩家动作 (interact)，结算

流程:
    AWAITING_PLAYERS -> CLOSED_READY -> (每局) DEALING -> ROUND_LOOP
    -> ROUND_CLOSING_GRACE -> GAME_OVER ... -> ALL_GAMES_FINISHED
"""
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple
import random
import logging

from .actions import Action, Event, INTERACTIVE_ACTIONS
from .cards import Card, cards_to_str
from .config import TableConfig
from .events import NotificationSink
from .exceptions import CardsNotDroppableError, TableClosedError
from .rules import INITIAL_CARDS, MIN_PLAYER, RuleEngine
from .stack import HAS_CARD, NO_CARD
from .state import Game, Phase, PLAYING_PHASES, Round, Seat, TableContext

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """
    一局的结算结果

    Attributes:
        game: 局号 (从 1 开始)
        rounds: 结束时的轮数
        closed_by: 敲桌玩家名，强制结束时为 None
        values: 每位玩家本局的手牌分值 (按加入顺序)
        ranking: 本局结束后的总排名 (玩家名, 总分)
    """
    game: int
    rounds: int
    closed_by: Optional[str]
    values: List[Tuple[str, float]] = field(default_factory=list)
    ranking: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def forced(self) -> bool:
        """是否因达到最大轮数而结束"""
        return self.closed_by is None


class Table:
    """
    牌桌

    持有座位列表、底牌和桌面牌；关闭后不再接受玩家。
    """

    def __init__(self, context: TableContext):
        self.context = context

    @property
    def seats(self) -> List[Seat]:
        return self.context.seats

    @property
    def cards(self):
        """桌面上的明牌"""
        return self.context.cards

    @property
    def pool(self):
        """底牌"""
        return self.context.pool

    def is_closed(self) -> bool:
        return self.context.closed

    def add_player(self, player: Any) -> Seat:
        """
        玩家加入

        达到最大人数时牌桌自动关闭

        Raises:
            TableClosedError: 牌桌已关闭或已满员
        """
        if self.is_closed():
            raise TableClosedError()

        seat = Seat(player=player, index=len(self.seats))
        self.seats.append(seat)
        self.context.sink.register(player)
        logger.info(f"Player {seat.name} joined the table ({len(self.seats)}/{self.context.config.max_players})")

        if len(self.seats) == self.context.config.max_players:
            self.close()
        return seat

    def close(self) -> bool:
        """
        关闭牌桌 (单向，幂等)

        Returns:
            True 表示本次调用关闭了牌桌
        """
        if self.is_closed():
            return False
        self.context.phase = Phase.CLOSED_READY
        logger.info(f"Table closed with {len(self.seats)} players")
        self.context.sink.notify(Event.TABLE_CLOSED)
        return True

    def reset_cards(self) -> None:
        """底牌重新填满，桌面清空"""
        self.pool.fill(HAS_CARD)
        self.cards.fill(NO_CARD)

    def draw_cards(self, amount: int = INITIAL_CARDS) -> List[Card]:
        """从底牌随机抽取"""
        return [self.pool.get_random_card(self.context.rng) for _ in range(amount)]

    def deal_out_cards(self, starting_seat: Seat) -> None:
        """
        发牌: 起始玩家先，然后按加入顺序
        """
        self.context.phase = Phase.DEALING
        order = [starting_seat] + [s for s in self.seats if s is not starting_seat]
        for seat in order:
            cards = self.draw_cards()
            seat.player.set_cards(cards)
            logger.debug(f"Dealt {cards_to_str(cards)} to {seat.name}")

    def current_cards(self) -> List[Card]:
        """桌面上的明牌"""
        return self.cards.get_cards()


class TableLogic:
    """
    牌局引擎

    玩家只能通过 interact 修改牌桌状态。
    do_move 返回即表示该玩家回合结束。
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        sink: Optional[NotificationSink] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            config: 牌桌配置
            sink: 通知分发器，None 时新建
            rng: 随机数生成器，None 时按 config.seed 创建
        """
        self.config = config or TableConfig()
        self.sink = sink or NotificationSink()
        self.context = TableContext(
            config=self.config,
            sink=self.sink,
            rng=rng or random.Random(self.config.seed),
        )
        self.table = Table(self.context)
        self.game = Game(self.context)
        self.round = Round(self.context)

        # 当前是否处于某位玩家的 do_move 调用中
        self._in_turn = False
        self.results: List[GameResult] = []

    # ========== 玩家管理 ==========

    def add_player(self, player: Any) -> Seat:
        return self.table.add_player(player)

    def add_players(self, amount: int, factory: Callable[['TableLogic'], Any]) -> List[Seat]:
        """
        用工厂批量创建并加入玩家

        Args:
            amount: 玩家数
            factory: factory(table_logic) -> player
        """
        return [self.add_player(factory(self)) for _ in range(amount)]

    @property
    def seats(self) -> List[Seat]:
        return self.context.seats

    @property
    def phase(self) -> Phase:
        return self.context.phase

    @property
    def current_seat(self) -> Optional[Seat]:
        return self.round.current

    @property
    def is_closing(self) -> bool:
        return self.round.is_closing

    def current_cards(self) -> List[Card]:
        """桌面上的明牌"""
        return self.table.current_cards()

    def get_points(self, player: Any) -> float:
        for seat in self.seats:
            if seat.player is player:
                return seat.points
        raise ValueError(f"Player {player!r} is not seated at this table")

    def ranking(self) -> List[Seat]:
        """按总分从高到低排序的座位，同分保持加入顺序"""
        order = RuleEngine.rank_players([seat.points for seat in self.seats])
        return [self.seats[i] for i in order]

    # ========== 流程 ==========

    def start(self) -> List[Seat]:
        """
        关闭牌桌并打完所有局

        Returns:
            最终排名
        """
        if len(self.seats) < MIN_PLAYER:
            raise ValueError(f"At least {MIN_PLAYER} players needed, got {len(self.seats)}")
        self.table.close()
        logger.info(f"Players: {len(self.seats)}  Maximum rounds: {self.config.max_rounds}")

        while self.game.has_next():
            self.play_game()

        self.context.phase = Phase.ALL_GAMES_FINISHED
        return self.ranking()

    def next_game(self) -> Seat:
        """
        开始新的一局: 轮换起始玩家、重置轮次、重置牌、发牌、首轮换牌

        Returns:
            起始座位

        Raises:
            NoGameLeftError: 局数已打完
        """
        starting_seat = self.game.next()
        self.round.reset(starting_seat.index)
        self.table.reset_cards()
        self.sink.notify(Event.GAME_START, self.game.current_game)

        self.table.deal_out_cards(starting_seat)
        self._initial_exchange(starting_seat)
        return starting_seat

    def play_game(self) -> GameResult:
        """
        打一局

        Returns:
            本局结果
        """
        if not self.table.is_closed():
            self.table.close()
        starting_seat = self.next_game()
        logger.info(f"Game {self.game.current_game} started by {starting_seat.name}")

        self.context.phase = Phase.ROUND_LOOP
        while True:
            seat = self.round.next_player()
            if self.round.is_closed_by(seat):
                logger.info(f"Round closed by {seat.name}")
                break
            if self.round.is_finished():
                logger.info(f"Game ended after {self.round.current_round} rounds without a winner")
                break
            self._play_turn(seat)

        return self.finish_game()

    def _play_turn(self, seat: Seat) -> None:
        logger.debug(f"Round {self.round.current_round}: {seat.name}'s turn")
        self._in_turn = True
        try:
            seat.player.do_move(self.current_cards())
        finally:
            self._in_turn = False

    def finish_game(self) -> GameResult:
        """结算: 每位玩家的手牌分值计入总分"""
        self.context.phase = Phase.GAME_OVER
        values = []
        for seat in self.seats:
            value = RuleEngine.calculate_value(seat.player.get_cards())
            seat.points += value
            values.append((seat.name, value))

        closing_seat = self.round.closing_seat
        result = GameResult(
            game=self.game.current_game,
            rounds=self.round.current_round,
            closed_by=closing_seat.name if closing_seat else None,
            values=values,
            ranking=[(seat.name, seat.points) for seat in self.ranking()],
        )
        self.results.append(result)
        logger.info(f"Game {result.game} finished: {result.values}")
        self.sink.notify(Event.GAME_FINISHED, result)
        return result

    def _initial_exchange(self, seat: Seat) -> None:
        """
        首轮换牌: 起始玩家可以放弃第一手牌

        玩家在 keep_card_set 中已自行提交 DROP_CARDSTACK_INITIAL 时，
        桌面已有被放弃的牌，不再补牌也不再放弃第二次。
        """
        keep = seat.player.keep_card_set()
        if self.round.initial_dropped:
            logger.debug(f"{seat.name} already dropped the initial card stack")
        elif keep:
            self.table.cards.add_cards(self.table.draw_cards())
            self.sink.notify_action(Action.INITIAL_CARDSTACK_PICKED, self.current_cards(), seat.player)
        else:
            self.interact(Action.DROP_CARDSTACK_INITIAL, seat.player.get_cards())

    # ========== 玩家动作 ==========

    def interact(self, action: Action, data: Any = None) -> bool:
        """
        当前玩家提交动作

        Args:
            action: 动作
            data: 动作数据 (牌 / 手牌)

        Returns:
            动作是否被接受
        """
        if action not in INTERACTIVE_ACTIONS:
            logger.warning(f"Action {action} can't be used to interact with the table")
            return False

        if action == Action.DROP_CARDSTACK_INITIAL:
            return self._drop_initial_stack(data)

        seat = self.round.current
        if self.phase not in PLAYING_PHASES or not self._in_turn or seat is None:
            logger.warning(f"Action {action.value} rejected: no turn in progress ({self.phase.value})")
            return False

        handlers = {
            Action.DROP_CARD: self._drop_card,
            Action.PICK_CARD: self._pick_card,
            Action.END_CALL: self._end_call,
            Action.MOVE_FINISHED: self._move_finished,
        }
        return handlers[action](seat, data)

    @staticmethod
    def _as_card(data: Any) -> Card:
        """
        接受 Card 或牌堆位置

        Raises:
            TypeError: 数据既不是 Card 也不是整数
            ValueError: 牌堆位置越界
        """
        if isinstance(data, Card):
            return data
        return Card.from_index(int(data))

    def _parse_cards(self, seat: Seat, data: Any) -> Optional[List[Card]]:
        """把动作数据转换为牌列表，数据不合法时返回 None"""
        try:
            return sorted(self._as_card(c) for c in data)
        except (TypeError, ValueError) as e:
            logger.warning(f"{seat.name} sent malformed cards {data!r}: {e}")
            return None

    def _parse_card(self, seat: Seat, data: Any) -> Optional[Card]:
        """把动作数据转换为一张牌，数据不合法时返回 None"""
        try:
            return self._as_card(data)
        except (TypeError, ValueError) as e:
            logger.warning(f"{seat.name} sent a malformed card {data!r}: {e}")
            return None

    def _drop_initial_stack(self, data: Any) -> bool:
        seat = self.round.current
        if self.phase != Phase.DEALING or seat is None or seat is not self.game.starting_seat:
            logger.warning("Initial card stack can only be dropped by the starting player while dealing")
            return False
        if self.round.initial_dropped:
            logger.warning(f"{seat.name} already dropped the initial card stack")
            return False

        rejected = self._parse_cards(seat, data)
        if rejected is None:
            return False
        if rejected != sorted(seat.player.get_cards()):
            logger.warning(f"{seat.name} can only drop its own initial card stack: {cards_to_str(rejected)}")
            return False

        self.round.initial_dropped = True
        self.table.cards.add_cards(rejected)
        logger.info(f"{seat.name} dropped the initial card stack {cards_to_str(rejected)}")
        self.sink.notify(Event.INITIAL_CARDSTACK_DROPPED, rejected)
        self.sink.notify_action(Action.DROP_CARDSTACK_INITIAL, rejected, seat.player)
        seat.player.set_cards(self.table.draw_cards())
        return True

    def _drop_card(self, seat: Seat, data: Any) -> bool:
        card = self._parse_card(seat, data)
        if card is None:
            return False
        if seat.dropped:
            logger.warning(f"{seat.name} already dropped a card this turn")
            return False
        if self.table.cards.has_card(card):
            logger.warning(f"Card {card} is already on the table")
            return False
        if card not in seat.player.get_cards():
            logger.warning(f"{seat.name} can't drop {card}: card not owned")
            return False

        self.table.cards.add_card(card)
        seat.dropped = True
        seat.took_action = True
        self.sink.notify(Event.CARD_DROPPED, card)
        self.sink.notify_action(Action.DROP_CARD, card, seat.player)
        return True

    def _pick_card(self, seat: Seat, data: Any) -> bool:
        card = self._parse_card(seat, data)
        if card is None:
            return False
        if not seat.dropped:
            logger.warning(f"{seat.name} must drop a card before picking one")
            return False
        if seat.picked:
            logger.warning(f"{seat.name} already picked a card this turn")
            return False
        if not self.table.cards.has_card(card):
            logger.warning(f"Card {card} is not on the table")
            return False

        self.table.cards.remove_card(card)
        seat.picked = True
        seat.took_action = True
        self.sink.notify_action(Action.PICK_CARD, card, seat.player)
        return True

    def _end_call(self, seat: Seat, data: Any) -> bool:
        cards = self._parse_cards(seat, data)
        if cards is None:
            return False
        if cards != sorted(seat.player.get_cards()):
            logger.warning(f"{seat.name} called end with cards not in hand: {cards_to_str(cards)}")
            return False
        try:
            if not self.round.close(cards):
                logger.warning(f"{seat.name} can't close: round already closed")
                return False
        except CardsNotDroppableError as e:
            logger.warning(f"{seat.name} can't close: {e}")
            return False

        self.context.phase = Phase.ROUND_CLOSING_GRACE
        seat.took_action = True
        self.sink.notify(Event.GAME_CLOSED, seat.name)
        self.sink.notify_action(Action.END_CALL, cards, seat.player)
        return True

    def _move_finished(self, seat: Seat, data: Any) -> bool:
        seat.finished_turn = True
        self.sink.notify_action(Action.MOVE_FINISHED, data, seat.player)
        return True
