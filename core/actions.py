"""
动作与事件定义

- Action: 玩家通过 TableLogic.interact 提交的动作
- Event: 牌桌推送给玩家的通知
"""
from enum import Enum


class Action(Enum):
    """玩家动作"""
    DROP_CARD = "drop_card"                              # 打出一张手牌到桌面
    PICK_CARD = "pick_card"                              # 从桌面捡起一张牌
    END_CALL = "end_call"                                # 敲桌 (达成目标牌型)
    MOVE_FINISHED = "move_finished"                      # 本回合结束
    DROP_CARDSTACK_INITIAL = "drop_cardstack_initial"    # 放弃首轮手牌
    INITIAL_CARDSTACK_PICKED = "initial_cardstack_picked"  # 保留首轮手牌 (仅通知)


class Event(Enum):
    """牌桌事件"""
    TABLE_CLOSED = "table_closed"                          # 牌桌关闭，不再接受玩家
    GAME_START = "game_start"                              # 新一局开始
    INITIAL_CARDSTACK_DROPPED = "initial_cardstack_dropped"  # 首轮手牌被放到桌面
    GAME_CLOSED = "game_closed"                            # 有玩家敲桌
    GAME_FINISHED = "game_finished"                        # 一局结束
    CARD_DROPPED = "card_dropped"                          # 有玩家打出了一张牌


# 可以通过 interact 提交的动作
INTERACTIVE_ACTIONS = (
    Action.DROP_CARD,
    Action.PICK_CARD,
    Action.END_CALL,
    Action.MOVE_FINISHED,
    Action.DROP_CARDSTACK_INITIAL,
)
