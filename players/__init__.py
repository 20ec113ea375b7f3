"""
Players Layer - 玩家策略

Modules:
    base: 玩家基类、随机玩家
    default: 基于评分管线的默认电脑玩家
    config: 行为配置
"""
from .base import Player, RandomPlayer, PLAYER_NAMES, random_name
from .default import DefaultPlayer
from .config import PlayerConfig, HAND_VALUE_LADDER

__all__ = [
    "Player",
    "RandomPlayer",
    "DefaultPlayer",
    "PlayerConfig",
    "PLAYER_NAMES",
    "HAND_VALUE_LADDER",
    "random_name",
]
