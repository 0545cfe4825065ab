from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Union

REWARD_MODES = ("perspective", "decisive")

# camelCase spellings accepted in JSON player files
_ALIASES = {
    "iterations": "iterations",
    "num_iterations": "iterations",
    "explorationConstant": "exploration_constant",
    "exploration_constant": "exploration_constant",
    "c_param": "exploration_constant",
    "rewardMode": "reward_mode",
    "reward_mode": "reward_mode",
}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class MCTSConfig:
    """Knobs for one MCTS search.

    ``reward_mode`` selects how a finished rollout is scored for the player
    who moved into the expanded leaf:

    * ``"perspective"``: 1.0 for that player's win, 0.5 for a draw, 0.0 for a loss.
    * ``"decisive"``: 1.0 whenever the rollout has a winner, 0.5 for a draw.
    """

    iterations: int = 2000
    exploration_constant: float = math.sqrt(2)
    reward_mode: str = "perspective"

    def __post_init__(self):
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int):
            raise ConfigError(f"iterations must be an int, got {self.iterations!r}")
        if self.iterations < 0:
            raise ConfigError(f"iterations must be >= 0, got {self.iterations}")
        c = self.exploration_constant
        if (isinstance(c, bool) or not isinstance(c, (int, float))
                or not math.isfinite(c) or c < 0):
            raise ConfigError(f"exploration_constant must be a non-negative number, "
                              f"got {self.exploration_constant!r}")
        if self.reward_mode not in REWARD_MODES:
            raise ConfigError(f"reward_mode must be one of {REWARD_MODES}, got {self.reward_mode!r}")

    @classmethod
    def from_dict(cls, data: dict) -> "MCTSConfig":
        kwargs = {}
        for key, value in data.items():
            if key not in _ALIASES:
                raise ConfigError(f"unknown MCTS option {key!r}")
            kwargs[_ALIASES[key]] = value
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: Union[str, Path]) -> MCTSConfig:
    with Path(path).open() as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    return MCTSConfig.from_dict(data)
