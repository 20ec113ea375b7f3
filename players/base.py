"""
玩家基类与随机玩家

玩家与牌桌的约定:
- set_cards(cards): 发牌
- get_cards(): 当前手牌
- keep_card_set(): 首轮是否保留第一手牌 (只问起始玩家)
- do_move(table_cards): 行动，通过 table.interact 提交动作，返回即回合结束
- handle_event(event, data): 牌桌事件
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional
import random
import logging

from core.actions import Action, Event
from core.cards import Card, cards_to_str
from core.rules import RuleEngine
from core.stack import CardStack

logger = logging.getLogger(__name__)

PLAYER_NAMES = ("Bob", "Alice", "Carol", "Dave", "Ted", "Eve", "Oscar", "Peggy", "Victor")


def random_name(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(PLAYER_NAMES)


class Player(ABC):
    """
    玩家基类

    持有自己的手牌，通过构造时传入的牌桌引擎提交动作
    """

    def __init__(
        self,
        table: Any,
        name: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            table: 牌桌引擎 (TableLogic)
            name: 玩家名，None 时随机取名
            rng: 随机数生成器
        """
        self.table = table
        self.rng = rng or random.Random()
        self.name = name or random_name(self.rng)
        self.cards = CardStack()
        self.game_closed = False

    def set_cards(self, cards: Iterable[Card]) -> None:
        self.cards = CardStack.from_cards(cards)
        logger.debug(f"{self.name} received cards: {self.cards}")

    def get_cards(self) -> List[Card]:
        return self.cards.get_cards()

    def get_name(self) -> str:
        return self.name

    @property
    def in_goal_state(self) -> bool:
        return RuleEngine.verify_goal(self.get_cards())

    @abstractmethod
    def keep_card_set(self) -> bool:
        """首轮是否保留第一手牌"""
        pass

    @abstractmethod
    def do_move(self, table_cards: List[Card]) -> None:
        """行动一个回合"""
        pass

    def handle_event(self, event: Event, data: Any) -> None:
        if event == Event.GAME_START:
            self.game_closed = False
        elif event == Event.GAME_CLOSED:
            self.game_closed = True

    def knock(self) -> bool:
        """敲桌"""
        logger.info(f"{self.name}: *knock!, knock!*")
        return self.table.interact(Action.END_CALL, self.get_cards())

    def swap(self, drop: Card, pick: Card) -> bool:
        """
        打出一张牌并捡起一张桌面牌，被接受后同步本地手牌

        Returns:
            两个动作是否都被接受
        """
        if not self.table.interact(Action.DROP_CARD, drop):
            return False
        self.cards.remove_card(drop)
        if not self.table.interact(Action.PICK_CARD, pick):
            return False
        self.cards.add_card(pick)
        logger.debug(f"{self.name} swapped {drop} for {pick}: {cards_to_str(self.get_cards())}")
        return True

    def finish_move(self) -> None:
        self.table.interact(Action.MOVE_FINISHED)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class RandomPlayer(Player):
    """
    随机玩家 (基线)

    总是保留首手牌；达成目标即敲桌；否则随机换一张牌
    """

    def keep_card_set(self) -> bool:
        return True

    def do_move(self, table_cards: List[Card]) -> None:
        if self.in_goal_state and not self.game_closed:
            self.knock()
        elif table_cards and len(self.cards) > 0:
            drop = self.rng.choice(self.get_cards())
            pick = self.rng.choice(list(table_cards))
            self.swap(drop, pick)
        self.finish_move()
