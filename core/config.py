"""
牌桌配置
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any

from .rules import MAX_PLAYER, MIN_PLAYER, DEFAULT_MAX_ROUNDS


@dataclass
class TableConfig:
    """
    牌桌配置

    Attributes:
        max_players: 最大玩家数，达到后牌桌自动关闭
        max_rounds: 每局最大轮数，达到后强制结束 (无人敲桌)
        games_to_play: 要打的局数
        seed: 随机种子 (发牌)，None 表示不固定
    """
    max_players: int = MAX_PLAYER
    max_rounds: int = DEFAULT_MAX_ROUNDS
    games_to_play: int = 1
    seed: Optional[int] = None

    def __post_init__(self):
        if not MIN_PLAYER <= self.max_players <= MAX_PLAYER:
            raise ValueError(
                f"max_players must be between {MIN_PLAYER} and {MAX_PLAYER}, got {self.max_players}"
            )
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds must be positive, got {self.max_rounds}")
        if self.games_to_play < 1:
            raise ValueError(f"games_to_play must be positive, got {self.games_to_play}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TableConfig':
        """从字典创建配置"""
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "max_players": self.max_players,
            "max_rounds": self.max_rounds,
            "games_to_play": self.games_to_play,
            "seed": self.seed,
        }
