"""Player configuration system for Gravity Cube."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from game.constants import DEFAULT_AI_TIME_LIMIT, DIFFICULTIES

PlayerType = Literal["human", "ai"]


@dataclass
class PlayerConfig:
    """Configuration for a single player.

    Attributes:
        player_type: Type of player ('human' or 'ai')
        difficulty: AI difficulty ('easy', 'medium' or 'hard')
        depth: Search depth override (None = difficulty default)
        time_limit: Max thinking time per move in seconds
        rng_seed: Random seed for this player (None = unseeded)
    """

    player_type: PlayerType = "human"

    # AI settings
    difficulty: str = "medium"
    depth: int | None = None
    time_limit: float = DEFAULT_AI_TIME_LIMIT

    # General player settings
    rng_seed: int | None = None

    def __post_init__(self):
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(
                f"Invalid difficulty: {self.difficulty}. Must be one of: {', '.join(DIFFICULTIES)}"
            )
        if self.depth is not None and self.depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {self.depth}")
        if self.time_limit <= 0:
            raise ValueError(f"Time limit must be positive, got {self.time_limit}")

    @property
    def is_ai(self) -> bool:
        return self.player_type == "ai"

    @classmethod
    def human(cls) -> PlayerConfig:
        """Create a human player configuration."""
        return cls(player_type="human")

    @classmethod
    def ai(
        cls,
        difficulty: str = "medium",
        *,
        depth: int | None = None,
        time_limit: float = DEFAULT_AI_TIME_LIMIT,
        seed: int | None = None,
    ) -> PlayerConfig:
        """Create an AI player configuration.

        Args:
            difficulty: 'easy' (random), 'medium' (depth 1) or 'hard' (depth 2)
            depth: Override the difficulty's search depth
            time_limit: Max search time per move in seconds
            seed: Random seed for the easy player's move choice
        """
        return cls(
            player_type="ai",
            difficulty=difficulty,
            depth=depth,
            time_limit=time_limit,
            rng_seed=seed,
        )


def parse_player_spec(spec: str) -> PlayerConfig:
    """Parse a player specification string into a PlayerConfig.

    Format:
        TYPE[:PARAM=VALUE,PARAM=VALUE,...]

    Examples:
        "human" -> Human player
        "ai" -> Medium AI
        "ai:difficulty=hard" -> Hard AI
        "ai:difficulty=easy,seed=7" -> Seeded random AI

    Supported AI parameters:
        - difficulty (str): easy, medium or hard
        - depth (int): Search depth override
        - time_limit (float): Time limit in seconds
        - seed (int): Random seed
    """
    parts = spec.split(":", 1)
    player_type = parts[0].strip().lower()

    if player_type not in ["human", "ai"]:
        raise ValueError(f"Invalid player type: {player_type}. Must be 'human' or 'ai'")

    params = {}
    if len(parts) == 2:
        for param_pair in parts[1].split(","):
            param_pair = param_pair.strip()
            if not param_pair:
                continue
            if "=" not in param_pair:
                raise ValueError(f"Invalid parameter format: {param_pair}. Expected PARAM=VALUE")
            key, value = param_pair.split("=", 1)
            key = key.strip()
            value = value.strip()

            if key in ["depth", "seed"]:
                params[key] = int(value)
            elif key == "time_limit":
                params[key] = float(value)
            elif key == "difficulty":
                params[key] = value.lower()
            else:
                raise ValueError(f"Unknown parameter: {key}")

    if player_type == "human":
        if params:
            raise ValueError("Human players take no parameters")
        return PlayerConfig.human()

    return PlayerConfig.ai(
        difficulty=params.get("difficulty", "medium"),
        depth=params.get("depth"),
        time_limit=params.get("time_limit", DEFAULT_AI_TIME_LIMIT),
        seed=params.get("seed"),
    )
