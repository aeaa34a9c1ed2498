"""Reference deck builder."""
from typing import List

from ..models.tile import (
    TileCategory,
    TileFace,
    SUITED_CATEGORIES,
    WIND_VALUES,
    DRAGON_VALUES,
    BONUS_VALUES,
)

COPIES_PER_FACE = 4
REFERENCE_DECK_SIZE = 144


def create_full_deck() -> List[TileFace]:
    """
    Build the standard 144-tile mahjong set.

    The order is fixed: suited tiles by value (dots, bamboo, characters
    interleaved), then winds, dragons, flowers and seasons.

    Returns:
        List of tile faces, 4 copies of each suited/honor face and one of
        each flower and season.
    """
    deck: List[TileFace] = []

    for value in range(1, 10):
        for _ in range(COPIES_PER_FACE):
            for category in SUITED_CATEGORIES:
                deck.append(TileFace(category, value))

    for wind in WIND_VALUES:
        deck.extend(TileFace(TileCategory.WIND, wind) for _ in range(COPIES_PER_FACE))

    for dragon in DRAGON_VALUES:
        deck.extend(TileFace(TileCategory.DRAGON, dragon) for _ in range(COPIES_PER_FACE))

    deck.extend(TileFace(TileCategory.FLOWER, v) for v in BONUS_VALUES)
    deck.extend(TileFace(TileCategory.SEASON, v) for v in BONUS_VALUES)

    return deck
