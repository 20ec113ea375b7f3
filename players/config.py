"""
电脑玩家行为配置

阈值都以手牌分值为单位
"""
from dataclasses import dataclass, field
from typing import Any, Dict
import random

from core.rating import Bias, BIAS_DEFAULTS
from core.rules import WORTH_THREE_OF_SAME_TYPE

# 随机配置时可选的手牌分值阈值
HAND_VALUE_LADDER = (24, 27, 28, 29, 30, WORTH_THREE_OF_SAME_TYPE, 31)


@dataclass
class PlayerConfig:
    """
    电脑玩家行为配置

    Attributes:
        stackdrop_initial: 首手牌分值低于该值时放弃
        force_drop: 换入桌面牌后手牌分值达到该值时，即使在等第三张也换牌
        wait_for_card: 手牌分值低于该值时保留差一张成型的牌，等第三张
        riskiness: 冒险程度 (>= 2 时才会等第三张)
        bias: 评分因子权重
    """
    stackdrop_initial: float = 20
    force_drop: float = 20
    wait_for_card: float = 21
    riskiness: int = 3
    bias: Dict[Bias, float] = field(default_factory=lambda: dict(BIAS_DEFAULTS))

    def __post_init__(self):
        for name, value in self.bias.items():
            if value < 0 or value > 1:
                raise ValueError(f"Bias {name.value} value {value} not in the range 0-1.")

    @classmethod
    def random(cls, rng: random.Random) -> 'PlayerConfig':
        """随机生成一组配置 (阈值取自分值阶梯，权重均匀分布)"""
        return cls(
            stackdrop_initial=rng.choice(HAND_VALUE_LADDER),
            force_drop=rng.choice(HAND_VALUE_LADDER),
            wait_for_card=rng.choice(HAND_VALUE_LADDER),
            riskiness=rng.randint(0, 3),
            bias={b: round(rng.random(), 2) for b in Bias},
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PlayerConfig':
        """从字典创建配置"""
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        if "bias" in filtered:
            bias = dict(BIAS_DEFAULTS)
            bias.update({Bias(k): float(v) for k, v in filtered["bias"].items()})
            filtered["bias"] = bias
        return cls(**filtered)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "stackdrop_initial": self.stackdrop_initial,
            "force_drop": self.force_drop,
            "wait_for_card": self.wait_for_card,
            "riskiness": self.riskiness,
            "bias": {b.value: v for b, v in self.bias.items()},
        }

    def describe(self) -> str:
        """单行描述 (用于排行榜)"""
        return (
            f"init={self.stackdrop_initial} force={self.force_drop} wait={self.wait_for_card} "
            f"risk={self.riskiness} "
            + " ".join(f"{b.value}={v:.2f}" for b, v in self.bias.items())
        )
