"""Data models package.

This package contains tile models, game configuration and API schemas.
"""
from .tile import (
    TileCategory,
    TileLocation,
    TileFace,
    Tile,
    Position,
)
from .game_config import (
    Difficulty,
    Theme,
    Language,
    GameStatus,
    ActionKind,
    DifficultyProfile,
    DIFFICULTY_PROFILES,
    GameRules,
    get_difficulty_profile,
    tile_count_for,
)

__all__ = [
    # Tile models
    "TileCategory",
    "TileLocation",
    "TileFace",
    "Tile",
    "Position",
    # Game configuration
    "Difficulty",
    "Theme",
    "Language",
    "GameStatus",
    "ActionKind",
    "DifficultyProfile",
    "DIFFICULTY_PROFILES",
    "GameRules",
    "get_difficulty_profile",
    "tile_count_for",
]
