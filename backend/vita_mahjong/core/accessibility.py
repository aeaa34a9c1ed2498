"""Accessibility evaluator: decides which board tiles may be taken.

A board tile is playable when nothing on the layer above overlaps its
footprint and it is not pinched between neighbours on both its left and
right side. Everything here is evaluated against the tile collection passed
in; nothing is cached.
"""
from typing import Collection, Iterable, List, Optional, Sequence, Tuple

from ..models.tile import Tile, WILDCARD_CATEGORIES

# Two grid units equal one tile, so |d| < 2 means the footprints overlap
FOOTPRINT = 2


def _active_board_tiles(all_tiles: Iterable[Tile]) -> List[Tile]:
    return [t for t in all_tiles if t.on_board]


def is_covered(tile: Tile, board_tiles: Iterable[Tile]) -> bool:
    """True if a board tile one layer up overlaps this tile."""
    return any(
        other.z == tile.z + 1
        and abs(other.x - tile.x) < FOOTPRINT
        and abs(other.y - tile.y) < FOOTPRINT
        for other in board_tiles
    )


def _is_blocked_side(tile: Tile, board_tiles: Iterable[Tile], direction: int) -> bool:
    side_x = tile.x + direction * FOOTPRINT
    return any(
        other.z == tile.z
        and other.x == side_x
        and abs(other.y - tile.y) < FOOTPRINT
        for other in board_tiles
    )


def is_blocked_left(tile: Tile, board_tiles: Iterable[Tile]) -> bool:
    return _is_blocked_side(tile, board_tiles, -1)


def is_blocked_right(tile: Tile, board_tiles: Iterable[Tile]) -> bool:
    return _is_blocked_side(tile, board_tiles, 1)


def is_playable(tile: Tile, all_tiles: Sequence[Tile]) -> bool:
    """
    Check whether a tile can be selected right now.

    Args:
        tile: Tile to test.
        all_tiles: The live tile collection (any location or visibility).

    Returns:
        True if the tile is a visible board tile, uncovered, and free on at
        least one horizontal side.
    """
    if not tile.on_board:
        return False

    board_tiles = _active_board_tiles(all_tiles)

    if is_covered(tile, board_tiles):
        return False

    return not (is_blocked_left(tile, board_tiles) and is_blocked_right(tile, board_tiles))


def playable_tiles(all_tiles: Sequence[Tile]) -> List[Tile]:
    """All currently playable tiles, in collection order."""
    return [t for t in all_tiles if is_playable(t, all_tiles)]


def check_match(t1: Tile, t2: Tile) -> bool:
    """Two distinct tiles match when they share a category and a value,
    or share the flower/season category."""
    if t1.id == t2.id:
        return False
    if t1.category != t2.category:
        return False
    if t1.category in WILDCARD_CATEGORIES:
        return True
    return t1.value == t2.value


def find_hint_pair(
    all_tiles: Sequence[Tile],
    exclude_ids: Collection[str] = (),
) -> Optional[Tuple[Tile, Tile]]:
    """First matching pair among playable board tiles, or None.

    Tiles listed in ``exclude_ids`` are never proposed but still block others.
    """
    candidates = [t for t in playable_tiles(all_tiles) if t.id not in exclude_ids]

    for i, first in enumerate(candidates):
        for second in candidates[i + 1:]:
            if check_match(first, second):
                return first, second
    return None


def has_available_match(all_tiles: Sequence[Tile]) -> bool:
    return find_hint_pair(all_tiles) is not None
