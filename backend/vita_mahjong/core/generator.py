"""Board generator: deck, pair sampler and layout combined into a level."""
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models.game_config import Difficulty, tile_count_for
from ..models.tile import Tile, TileFace, board_sort_key
from .layout import generate_layout
from .pairing import sample_pairs, split_into_pairs

logger = logging.getLogger(__name__)


@dataclass
class GeneratedBoard:
    """Result of board generation."""
    level: int
    difficulty: Difficulty
    requested_count: int
    tiles: List[Tile] = field(default_factory=list)
    generation_time_ms: int = 0

    @property
    def placed_count(self) -> int:
        return len(self.tiles)

    @property
    def shortfall(self) -> bool:
        return self.placed_count < self.requested_count

    @property
    def max_layer(self) -> int:
        return max((t.z for t in self.tiles), default=0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "level": self.level,
            "difficulty": self.difficulty.value,
            "requested_count": self.requested_count,
            "placed_count": self.placed_count,
            "shortfall": self.shortfall,
            "max_layer": self.max_layer,
            "generation_time_ms": self.generation_time_ms,
            "tiles": [t.to_dict() for t in self.tiles],
        }


class BoardGenerator:
    """Generates solvable-by-pairing boards for a level and difficulty."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def generate(self, level: int = 1, difficulty: Difficulty = Difficulty.MEDIUM) -> GeneratedBoard:
        """
        Generate the full tile set for a level.

        Args:
            level: Positive level number.
            difficulty: Difficulty controlling count, height and density.

        Returns:
            GeneratedBoard with tiles sorted by layer, row and column.

        Raises:
            ValueError: If level is not positive.
        """
        start_time = time.time()
        difficulty = Difficulty(difficulty)
        final_count = tile_count_for(level, difficulty)

        faces = sample_pairs(final_count, rng=self._rng)
        positions = generate_layout(final_count, difficulty, rng=self._rng)

        if len(positions) < len(faces):
            faces = self._trim_to_pairs(faces, len(positions))

        tiles = [
            Tile(
                id=f"tile-{level}-{i}",
                category=face.category,
                value=face.value,
                x=pos.x,
                y=pos.y,
                z=pos.z,
            )
            for i, (face, pos) in enumerate(zip(faces, positions))
        ]
        tiles.sort(key=board_sort_key)

        board = GeneratedBoard(
            level=level,
            difficulty=difficulty,
            requested_count=final_count,
            tiles=tiles,
            generation_time_ms=int((time.time() - start_time) * 1000),
        )
        if board.shortfall:
            logger.warning(
                "Board for level %d (%s) truncated to %d of %d tiles",
                level, difficulty.value, board.placed_count, final_count,
            )
        return board

    def _trim_to_pairs(self, faces: List[TileFace], slots: int) -> List[TileFace]:
        """Keep as many whole pairs as fit into ``slots`` positions."""
        pairs = split_into_pairs(faces)[: slots // 2]
        kept = [face for pair in pairs for face in pair]
        self._rng.shuffle(kept)
        return kept


def init_game(
    level: int = 1,
    difficulty: Difficulty = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
) -> List[Tile]:
    """Tile set for a new game at the given level."""
    return BoardGenerator(rng).generate(level, difficulty).tiles


# Singleton instance
_generator: Optional[BoardGenerator] = None


def get_generator() -> BoardGenerator:
    """Get or create generator singleton instance."""
    global _generator
    if _generator is None:
        _generator = BoardGenerator()
    return _generator
