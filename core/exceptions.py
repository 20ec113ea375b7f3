"""
游泳游戏业务异常定义

- 出牌/捡牌/敲桌等玩法校验失败由 TableLogic.interact 返回 False
- 生命周期错误 (满员后加入、局数耗尽) 直接向上抛出
"""


class SwimGameError(Exception):
    """游戏基础异常类"""
    pass


class CardNotOwnedError(SwimGameError):
    """移除/打出不在牌堆中的牌"""

    def __init__(self, card):
        super().__init__(f"You can't drop a card you don't own! ({card})")
        self.card = card


class EmptyStackError(SwimGameError):
    """从空牌堆中抽牌"""

    def __init__(self):
        super().__init__("Unable to get a card. Stack is empty!")


class TableClosedError(SwimGameError):
    """牌桌已关闭或已满员"""

    def __init__(self, message: str = "Table is closed! No more player allowed."):
        super().__init__(message)


class NoGameLeftError(SwimGameError):
    """配置的局数已全部打完"""

    def __init__(self):
        super().__init__("No game left to play.")


class CardsNotDroppableError(SwimGameError):
    """未达成目标牌型时敲桌"""

    def __init__(self, cards=None):
        super().__init__(f"Cards are not in goal state: {cards}")
        self.cards = cards
