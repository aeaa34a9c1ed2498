"""Procedural layout generator.

Coordinates use half-tile units: two grid units equal one tile width or
height, so tiles two units apart sit edge to edge and tiles one unit apart
overlap by half their footprint. ``z`` is the layer, 0 being the table.
"""
import logging
import math
import random
from typing import List, Optional, Set

from ..models.game_config import Difficulty, get_difficulty_profile
from ..models.tile import Position

logger = logging.getLogger(__name__)

# Upper bound on stacking/expansion attempts after the base layer
MAX_PLACEMENT_ATTEMPTS = 2000

SIMPLE_LAYOUT_MAX_TILES = 12
BASE_WIDTH_CAP = 10
BASE_ORIGIN_X = 4
BASE_ORIGIN_Y = 2
IRREGULAR_KEEP_THRESHOLD = 0.2

PLANAR_OFFSETS = ((2, 0), (-2, 0), (0, 2), (0, -2))


def generate_layout(
    count: int,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> List[Position]:
    """
    Place ``count`` tiles on the grid.

    Args:
        count: Number of positions wanted.
        difficulty: Controls maximum stack height and stacking probability.
        rng: Random source.

    Returns:
        Unique positions, at most ``count`` of them. Fewer are returned only
        when the placement loop runs out of attempts.
    """
    if count <= 0:
        return []

    rng = rng or random.Random()
    difficulty = Difficulty(difficulty)

    if difficulty == Difficulty.EASY and count <= SIMPLE_LAYOUT_MAX_TILES:
        return _generate_row_layout(count)

    positions = _generate_pile_layout(count, difficulty, rng)
    if len(positions) < count:
        logger.warning(
            "Layout shortfall for %s: placed %d of %d tiles",
            difficulty.value, len(positions), count,
        )
    return positions[:count]


def _generate_row_layout(count: int) -> List[Position]:
    """One or two centered rows on the ground layer."""
    rows = 1 if count <= 6 else 2
    items_per_row = math.ceil(count / rows)
    x_offset = 10 - items_per_row
    y_offset = 4 - rows

    positions = []
    for i in range(count):
        row, col = divmod(i, items_per_row)
        positions.append(Position(col * 2 + x_offset, row * 2 + y_offset, 0))
    return positions


def _generate_pile_layout(
    count: int, difficulty: Difficulty, rng: random.Random
) -> List[Position]:
    """Irregular base layer plus random stacking and outward growth."""
    profile = get_difficulty_profile(difficulty)
    max_layers = profile.max_layers
    density = profile.density

    positions: List[Position] = []
    occupied: Set[Position] = set()

    def place(pos: Position) -> None:
        positions.append(pos)
        occupied.add(pos)

    remaining = count
    base_width = min(BASE_WIDTH_CAP, math.ceil(math.sqrt(count * 1.5)))
    base_height = math.ceil(count / base_width)

    # Base layer; early cells are always kept, later ones are thinned
    for y in range(base_height):
        for x in range(base_width):
            if remaining <= 0:
                break
            if remaining > count * (1 - density) or rng.random() > IRREGULAR_KEEP_THRESHOLD:
                place(Position(x * 2 + BASE_ORIGIN_X, y * 2 + BASE_ORIGIN_Y, 0))
                remaining -= 1

    attempts = 0
    while remaining > 0 and attempts < MAX_PLACEMENT_ATTEMPTS:
        attempts += 1
        base = rng.choice(positions)

        can_stack = base.z < max_layers and rng.random() < density
        above = Position(base.x, base.y, base.z + 1)

        if can_stack and above not in occupied:
            place(above)
            remaining -= 1
            continue

        dx, dy = rng.choice(PLANAR_OFFSETS)
        beside = Position(base.x + dx, base.y + dy, 0)
        if beside not in occupied:
            place(beside)
            remaining -= 1

    return positions
