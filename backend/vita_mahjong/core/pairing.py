"""Pair sampler: draws tiles that always decompose into matching pairs."""
import logging
import random
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from ..models.tile import TileFace, WILDCARD_CATEGORIES
from .deck import create_full_deck

logger = logging.getLogger(__name__)


def faces_match(a: TileFace, b: TileFace) -> bool:
    """Match-equivalence on faces: same category and same value, except
    flowers/seasons which match anything in their own category."""
    if a.category != b.category:
        return False
    if a.category in WILDCARD_CATEGORIES:
        return True
    return a.value == b.value


def sample_pairs(
    final_count: int,
    deck: Optional[Sequence[TileFace]] = None,
    rng: Optional[random.Random] = None,
) -> List[TileFace]:
    """
    Draw ``final_count`` faces made of ``final_count // 2`` matching pairs.

    The deck is shuffled, then scanned greedily: each unused face is paired
    with the earliest later unused face it matches. The collected pairs are
    shuffled again so array adjacency says nothing about pairing.

    Args:
        final_count: Even number of faces wanted.
        deck: Reference deck (defaults to the 144-tile set).
        rng: Random source.

    Returns:
        Shuffled list of faces. Shorter than requested when the deck runs out
        of pairs.

    Raises:
        ValueError: If final_count is negative or odd.
    """
    if final_count < 0 or final_count % 2 != 0:
        raise ValueError(f"Tile count must be a non-negative even number, got {final_count}")

    rng = rng or random.Random()
    pool = list(deck) if deck is not None else create_full_deck()
    rng.shuffle(pool)

    num_pairs = final_count // 2
    used = [False] * len(pool)
    result: List[TileFace] = []
    pairs_found = 0

    for i, face in enumerate(pool):
        if pairs_found >= num_pairs:
            break
        if used[i]:
            continue

        match_idx = -1
        for j in range(i + 1, len(pool)):
            if not used[j] and faces_match(face, pool[j]):
                match_idx = j
                break

        if match_idx != -1:
            used[i] = used[match_idx] = True
            result.append(face)
            result.append(pool[match_idx])
            pairs_found += 1

    if pairs_found < num_pairs:
        logger.warning(
            "Pair sampler shortfall: requested %d pairs, deck supplied %d",
            num_pairs, pairs_found,
        )

    rng.shuffle(result)
    return result


def pairable_capacity(deck: Optional[Sequence[TileFace]] = None) -> int:
    """Maximum number of pairs the deck can supply."""
    pool = list(deck) if deck is not None else create_full_deck()
    counts = Counter(
        f.category if f.category in WILDCARD_CATEGORIES else (f.category, f.value)
        for f in pool
    )
    return sum(n // 2 for n in counts.values())


def split_into_pairs(faces: Sequence[TileFace]) -> List[Tuple[TileFace, TileFace]]:
    """Group faces into matching pairs, in order of first appearance.

    Faces left without a partner are dropped.
    """
    used = [False] * len(faces)
    pairs: List[Tuple[TileFace, TileFace]] = []

    for i, face in enumerate(faces):
        if used[i]:
            continue
        for j in range(i + 1, len(faces)):
            if not used[j] and faces_match(face, faces[j]):
                used[i] = used[j] = True
                pairs.append((face, faces[j]))
                break

    return pairs


def decomposes_into_pairs(faces: Sequence[TileFace]) -> bool:
    """True when the multiset of faces splits fully into matching pairs."""
    counts = Counter(
        f.category if f.category in WILDCARD_CATEGORIES else (f.category, f.value)
        for f in faces
    )
    return all(n % 2 == 0 for n in counts.values())
