"""Game configuration: difficulty profiles and gameplay rules.

Difficulty and level jointly decide how a board is generated. These are
plain configuration records; the engines in ``core`` read them.
"""
import math
from dataclasses import dataclass, field
from typing import Dict
from enum import Enum


class Difficulty(str, Enum):
    """Difficulty enumeration."""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    NIGHTMARE = "NIGHTMARE"


class Theme(str, Enum):
    """Visual theme (no gameplay effect)."""
    CLASSIC = "CLASSIC"
    WOOD = "WOOD"
    OCEAN = "OCEAN"
    NIGHT = "NIGHT"


class Language(str, Enum):
    """Language used for advice and commentary."""
    UZ = "uz"
    RU = "ru"
    EN = "en"


class GameStatus(str, Enum):
    """Global game state."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class ActionKind(str, Enum):
    """Costed helper actions."""
    UNDO = "undo"
    HINT = "hint"
    SHUFFLE = "shuffle"


@dataclass(frozen=True)
class DifficultyProfile:
    """Generation parameters for one difficulty."""
    max_layers: int         # Highest layer index a stack may reach
    density: float          # Probability of stacking on top of a tile
    base_count: int         # Tile count at level 1
    increment: int          # Extra tiles per level

    def tile_count(self, level: int) -> int:
        """Even tile count for a level (odd counts are rounded up)."""
        if level < 1:
            raise ValueError(f"Level must be a positive integer, got {level}")
        count = self.base_count + (level - 1) * self.increment
        return count + 1 if count % 2 else count


DIFFICULTY_PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(max_layers=1, density=0.1, base_count=12, increment=2),
    Difficulty.MEDIUM: DifficultyProfile(max_layers=2, density=0.3, base_count=16, increment=4),
    Difficulty.HARD: DifficultyProfile(max_layers=4, density=0.5, base_count=24, increment=8),
    Difficulty.NIGHTMARE: DifficultyProfile(max_layers=6, density=0.7, base_count=36, increment=12),
}


def get_difficulty_profile(difficulty: Difficulty) -> DifficultyProfile:
    """Look up the profile for a difficulty."""
    return DIFFICULTY_PROFILES[Difficulty(difficulty)]


def tile_count_for(level: int, difficulty: Difficulty) -> int:
    """Requested tile count for a level/difficulty pair."""
    return get_difficulty_profile(difficulty).tile_count(level)


def max_supported_level(difficulty: Difficulty, deck_size: int = 144) -> int:
    """Highest level whose requested tile count still fits in the deck."""
    profile = get_difficulty_profile(difficulty)
    if profile.base_count > deck_size:
        return 0
    return 1 + math.floor((deck_size - profile.base_count) / profile.increment)


@dataclass
class GameRules:
    """Timing, capacity and economy constants for a game session."""
    dock_capacity: int = 4
    history_capacity: int = 5
    combo_window: float = 3.0           # seconds
    flight_duration: float = 0.3        # seconds
    hint_duration: float = 3.0          # seconds
    combo_popup_duration: float = 1.0   # seconds
    match_score: int = 100
    match_coin_reward: int = 50
    next_level_coin_reward: int = 1000
    starting_coins: int = 10000
    action_costs: Dict[ActionKind, int] = field(default_factory=lambda: {
        ActionKind.UNDO: 2000,
        ActionKind.HINT: 2000,
        ActionKind.SHUFFLE: 3000,
    })
    score_penalties: Dict[ActionKind, int] = field(default_factory=lambda: {
        ActionKind.UNDO: 50,
        ActionKind.HINT: 200,
        ActionKind.SHUFFLE: 100,
    })

    def cost_of(self, kind: ActionKind) -> int:
        return self.action_costs.get(ActionKind(kind), 0)

    def penalty_of(self, kind: ActionKind) -> int:
        return self.score_penalties.get(ActionKind(kind), 0)
