"""Tests for the accessibility evaluator."""
import random
from dataclasses import replace

import pytest
from vita_mahjong.core.accessibility import (
    check_match,
    find_hint_pair,
    has_available_match,
    is_covered,
    is_playable,
    playable_tiles,
)
from vita_mahjong.core.generator import BoardGenerator
from vita_mahjong.models.game_config import Difficulty
from vita_mahjong.models.tile import Tile, TileCategory, TileLocation


def make_tile(tile_id, x, y, z=0, category=TileCategory.DOTS, value=1, **kwargs):
    return Tile(id=tile_id, category=category, value=value, x=x, y=y, z=z, **kwargs)


class TestCovering:
    """Test cases for tiles covered from above."""

    def test_overlapping_tile_above_covers(self):
        tile = make_tile("a", 0, 0)
        above = make_tile("b", 1, 1, 1)

        assert is_covered(tile, [tile, above])
        assert not is_playable(tile, [tile, above])

    def test_edge_to_edge_tile_above_does_not_cover(self):
        tile = make_tile("a", 0, 0)
        above = make_tile("b", 2, 0, 1)

        assert not is_covered(tile, [tile, above])
        assert is_playable(tile, [tile, above])

    def test_two_layers_up_does_not_cover(self):
        tile = make_tile("a", 0, 0)
        high = make_tile("b", 0, 0, 2)

        assert is_playable(tile, [tile, high])

    def test_invisible_tile_above_does_not_cover(self):
        tile = make_tile("a", 0, 0)
        gone = make_tile("b", 0, 0, 1, is_visible=False)

        assert is_playable(tile, [tile, gone])

    def test_docked_tile_above_does_not_cover(self):
        tile = make_tile("a", 0, 0)
        docked = make_tile("b", 0, 0, 1, location=TileLocation.DOCK)

        assert is_playable(tile, [tile, docked])


class TestSideBlocking:
    """Test cases for left/right neighbours."""

    def test_blocked_on_both_sides(self):
        tile = make_tile("m", 2, 0)
        left = make_tile("l", 0, 0)
        right = make_tile("r", 4, 1)

        assert not is_playable(tile, [left, tile, right])

    def test_one_free_side_is_enough(self):
        tile = make_tile("m", 2, 0)
        left = make_tile("l", 0, 0)

        assert is_playable(tile, [left, tile])

    def test_neighbour_on_other_row_does_not_block(self):
        tile = make_tile("m", 2, 0)
        left = make_tile("l", 0, 2)
        right = make_tile("r", 4, -2)

        assert is_playable(tile, [left, tile, right])

    def test_neighbour_on_other_layer_does_not_block(self):
        base_left = make_tile("bl", 0, 0)
        base_right = make_tile("br", 4, 0)
        tile = make_tile("m", 2, 0, 1)
        support = make_tile("s", 2, 0)

        assert is_playable(tile, [base_left, support, base_right, tile])

    def test_half_offset_neighbour_does_not_block(self):
        tile = make_tile("m", 2, 0)
        left = make_tile("l", 1, 0)
        right = make_tile("r", 4, 0)

        assert is_playable(tile, [left, tile, right])


class TestPlayability:
    """Test cases for tiles that are not on the board."""

    def test_dock_tile_not_playable(self):
        tile = make_tile("a", 0, 0, location=TileLocation.DOCK)
        assert not is_playable(tile, [tile])

    def test_invisible_tile_not_playable(self):
        tile = make_tile("a", 0, 0, is_visible=False)
        assert not is_playable(tile, [tile])

    def test_playable_tiles_of_row(self):
        row = [make_tile(f"t{i}", i * 2, 0) for i in range(4)]
        assert [t.id for t in playable_tiles(row)] == ["t0", "t3"]

    @pytest.mark.parametrize("seed", range(5))
    def test_removing_tiles_never_blocks(self, seed):
        """Test playability is monotonic as tiles leave the board."""
        rng = random.Random(seed)
        tiles = BoardGenerator(random.Random(seed)).generate(3, Difficulty.HARD).tiles

        for _ in range(len(tiles) // 2):
            before = {t.id for t in playable_tiles(tiles)}
            index = rng.randrange(len(tiles))
            tiles = list(tiles)
            tiles[index] = replace(tiles[index], is_visible=False)
            after = {t.id for t in playable_tiles(tiles)}

            assert before - {tiles[index].id} <= after


class TestCheckMatch:
    """Test cases for the pair-matching rule."""

    def test_tile_never_matches_itself(self):
        tile = make_tile("a", 0, 0)
        assert not check_match(tile, tile)

    def test_same_face_matches(self):
        assert check_match(make_tile("a", 0, 0), make_tile("b", 4, 0))

    def test_match_is_symmetric(self):
        pairs = [
            (make_tile("a", 0, 0, category=TileCategory.WIND, value="E"), make_tile("b", 2, 0, category=TileCategory.WIND, value="E")),
            (make_tile("a", 0, 0, category=TileCategory.FLOWER, value=1), make_tile("b", 2, 0, category=TileCategory.FLOWER, value=2)),
            (make_tile("a", 0, 0, category=TileCategory.CHAR, value=3), make_tile("b", 2, 0, category=TileCategory.BAMBOO, value=3)),
        ]
        for first, second in pairs:
            assert check_match(first, second) == check_match(second, first)

    def test_flower_matches_any_flower(self):
        assert check_match(
            make_tile("a", 0, 0, category=TileCategory.FLOWER, value=1),
            make_tile("b", 2, 0, category=TileCategory.FLOWER, value=3),
        )

    def test_flower_does_not_match_season(self):
        assert not check_match(
            make_tile("a", 0, 0, category=TileCategory.FLOWER, value=1),
            make_tile("b", 2, 0, category=TileCategory.SEASON, value=1),
        )

    def test_dragons_need_same_value(self):
        assert not check_match(
            make_tile("a", 0, 0, category=TileCategory.DRAGON, value="R"),
            make_tile("b", 2, 0, category=TileCategory.DRAGON, value="G"),
        )


class TestHintPair:
    """Test cases for hint search."""

    def test_finds_playable_pair(self):
        tiles = [
            make_tile("a", 0, 0, category=TileCategory.DOTS, value=1),
            make_tile("b", 4, 0, category=TileCategory.BAMBOO, value=2),
            make_tile("c", 8, 0, category=TileCategory.DOTS, value=1),
        ]
        pair = find_hint_pair(tiles)

        assert {pair[0].id, pair[1].id} == {"a", "c"}
        assert has_available_match(tiles)

    def test_covered_partner_is_not_hinted(self):
        tiles = [
            make_tile("a", 0, 0, category=TileCategory.DOTS, value=1),
            make_tile("c", 8, 0, category=TileCategory.DOTS, value=1),
            make_tile("lid", 8, 0, 1, category=TileCategory.WIND, value="N"),
        ]

        assert find_hint_pair(tiles) is None
        assert not has_available_match(tiles)

    def test_excluded_ids_are_skipped(self):
        tiles = [
            make_tile("a", 0, 0, category=TileCategory.DOTS, value=1),
            make_tile("c", 8, 0, category=TileCategory.DOTS, value=1),
        ]

        assert find_hint_pair(tiles, exclude_ids={"a"}) is None

    def test_dock_tiles_are_not_hinted(self):
        tiles = [
            make_tile("a", 0, 0, category=TileCategory.DOTS, value=1, location=TileLocation.DOCK),
            make_tile("c", 8, 0, category=TileCategory.DOTS, value=1),
        ]

        assert find_hint_pair(tiles) is None
