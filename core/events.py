"""
通知分发

牌桌把事件按顺序推送给:
1. 所有已注册的玩家 (按加入顺序)
2. 宿主处理器 (日志、界面、统计等)

宿主处理器额外接收被接受的玩家动作 (notify_action)。
"""
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol
import logging

from .actions import Action, Event

logger = logging.getLogger(__name__)


class EventListener(Protocol):
    """接收牌桌事件的对象 (玩家)"""

    def handle_event(self, event: Event, data: Any) -> None:
        ...


class HostHandler:
    """
    宿主处理器基类

    默认忽略所有通知，子类按需覆盖
    """

    def handle_event(self, event: Event, data: Any) -> None:
        pass

    def handle_action(self, action: Action, data: Any, player: Any) -> None:
        pass


@dataclass
class Notification:
    """一条已分发的通知 (用于回放/测试)"""
    kind: Any
    data: Any
    player: Optional[Any] = None


class NotificationSink:
    """
    通知分发器

    由构建牌桌的一方创建并传入，牌桌不持有全局单例
    """

    def __init__(self, max_history: int = 1000):
        self._players: List[EventListener] = []
        self._handlers: List[HostHandler] = []
        self._history: List[Notification] = []
        self._max_history = max_history

    def register(self, player: EventListener) -> None:
        """注册玩家"""
        self._players.append(player)

    def subscribe(self, handler: HostHandler) -> None:
        """注册宿主处理器"""
        self._handlers.append(handler)
        logger.debug(f"Subscribed host handler {type(handler).__name__}")

    def unsubscribe(self, handler: HostHandler) -> bool:
        try:
            self._handlers.remove(handler)
            return True
        except ValueError:
            return False

    def notify(self, event: Event, data: Any = None) -> None:
        """
        推送事件: 先玩家后宿主

        Args:
            event: 事件
            data: 事件数据
        """
        self._record(Notification(event, data))
        logger.debug(f"Notify {event.value} to {len(self._players)} players")
        for player in self._players:
            player.handle_event(event, data)
        for handler in self._handlers:
            handler.handle_event(event, data)

    def notify_action(self, action: Action, data: Any, player: Any) -> None:
        """推送已接受的玩家动作 (仅宿主)"""
        self._record(Notification(action, data, player))
        for handler in self._handlers:
            handler.handle_action(action, data, player)

    def _record(self, notification: Notification) -> None:
        self._history.append(notification)
        if len(self._history) > self._max_history:
            self._history.pop(0)

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()
