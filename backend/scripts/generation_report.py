#!/usr/bin/env python3
"""
Board generation stress report.

Generates boards for every difficulty over a range of levels and reports
where the generator falls short of the requested tile count, whether every
board still splits into matching pairs, and how many tiles start playable.
"""

import sys
import json
import time
import random
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, List

# Add package root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vita_mahjong.core.generator import BoardGenerator
from vita_mahjong.core.accessibility import playable_tiles
from vita_mahjong.core.pairing import decomposes_into_pairs
from vita_mahjong.models.game_config import Difficulty, max_supported_level

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

# Constants
DEFAULT_MAX_LEVEL = 15
DEFAULT_SAMPLES = 20


def run_report(max_level: int, samples: int, seed: int) -> List[Dict[str, Any]]:
    """Generate ``samples`` boards per (difficulty, level) and summarise them."""
    rows = []
    generator = BoardGenerator(random.Random(seed))

    for difficulty in Difficulty:
        logger.info(
            "%s: deck supports levels up to %d",
            difficulty.value, max_supported_level(difficulty),
        )
        for level in range(1, max_level + 1):
            shortfalls = 0
            unpaired = 0
            placed = []
            playable = []

            for _ in range(samples):
                board = generator.generate(level, difficulty)
                shortfalls += int(board.shortfall)
                unpaired += int(not decomposes_into_pairs([t.face for t in board.tiles]))
                placed.append(board.placed_count)
                playable.append(len(playable_tiles(board.tiles)))

            rows.append({
                "difficulty": difficulty.value,
                "level": level,
                "requested": board.requested_count,
                "min_placed": min(placed),
                "avg_playable": round(sum(playable) / len(playable), 1),
                "shortfall_rate": round(shortfalls / samples, 3),
                "unpaired_boards": unpaired,
            })

            if shortfalls:
                logger.warning(
                    "  %s level %d: %d/%d boards short (min %d of %d tiles)",
                    difficulty.value, level, shortfalls, samples,
                    min(placed), board.requested_count,
                )

    return rows


def main() -> int:
    parser = argparse.ArgumentParser(description="Board generation stress report")
    parser.add_argument("--max-level", type=int, default=DEFAULT_MAX_LEVEL)
    parser.add_argument("--samples", type=int, default=DEFAULT_SAMPLES)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--output", type=Path, default=None, help="Write JSON rows here")
    args = parser.parse_args()

    start = time.time()
    rows = run_report(args.max_level, args.samples, args.seed)
    logger.info("Report finished in %.1fs", time.time() - start)

    bad = [r for r in rows if r["unpaired_boards"]]
    if bad:
        logger.error("%d configurations produced boards that do not pair up", len(bad))

    if args.output:
        args.output.write_text(json.dumps(rows, indent=2), encoding="utf-8")
        logger.info("Saved %d rows to %s", len(rows), args.output)
    else:
        for row in rows:
            print(json.dumps(row, ensure_ascii=False))

    return 1 if bad else 0


if __name__ == "__main__":
    sys.exit(main())
