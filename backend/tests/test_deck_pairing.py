"""Tests for the reference deck and the pair sampler."""
import random
from collections import Counter

import pytest
from vita_mahjong.core.deck import create_full_deck, REFERENCE_DECK_SIZE
from vita_mahjong.core.pairing import (
    faces_match,
    sample_pairs,
    pairable_capacity,
    decomposes_into_pairs,
    split_into_pairs,
)
from vita_mahjong.models.tile import TileCategory, TileFace


class TestDeckBuilder:
    """Test cases for create_full_deck."""

    def test_deck_has_144_tiles(self):
        """Test the reference deck size."""
        assert len(create_full_deck()) == REFERENCE_DECK_SIZE == 144

    def test_deck_category_counts(self):
        """Test the number of tiles per category."""
        counts = Counter(face.category for face in create_full_deck())

        assert counts[TileCategory.DOTS] == 36
        assert counts[TileCategory.BAMBOO] == 36
        assert counts[TileCategory.CHAR] == 36
        assert counts[TileCategory.WIND] == 16
        assert counts[TileCategory.DRAGON] == 12
        assert counts[TileCategory.FLOWER] == 4
        assert counts[TileCategory.SEASON] == 4

    def test_suited_faces_have_four_copies(self):
        """Test every suited face appears exactly four times."""
        counts = Counter(create_full_deck())
        for category in (TileCategory.DOTS, TileCategory.BAMBOO, TileCategory.CHAR):
            for value in range(1, 10):
                assert counts[TileFace(category, value)] == 4

    def test_flowers_and_seasons_are_distinct(self):
        """Test bonus tiles carry values 1-4 once each."""
        deck = create_full_deck()
        flowers = sorted(f.value for f in deck if f.category == TileCategory.FLOWER)
        seasons = sorted(f.value for f in deck if f.category == TileCategory.SEASON)

        assert flowers == [1, 2, 3, 4]
        assert seasons == [1, 2, 3, 4]

    def test_deck_is_deterministic(self):
        """Test two builds produce the same ordered deck."""
        assert create_full_deck() == create_full_deck()


class TestFacesMatch:
    """Test cases for the face match-equivalence rule."""

    def test_same_suited_face_matches(self):
        assert faces_match(TileFace(TileCategory.DOTS, 5), TileFace(TileCategory.DOTS, 5))

    def test_different_values_do_not_match(self):
        assert not faces_match(TileFace(TileCategory.DOTS, 5), TileFace(TileCategory.DOTS, 6))

    def test_cross_category_never_matches(self):
        assert not faces_match(TileFace(TileCategory.DOTS, 1), TileFace(TileCategory.BAMBOO, 1))
        assert not faces_match(TileFace(TileCategory.FLOWER, 1), TileFace(TileCategory.SEASON, 1))

    def test_bonus_categories_match_any_value(self):
        assert faces_match(TileFace(TileCategory.FLOWER, 1), TileFace(TileCategory.FLOWER, 4))
        assert faces_match(TileFace(TileCategory.SEASON, 2), TileFace(TileCategory.SEASON, 3))

    def test_honors_require_equal_value(self):
        assert faces_match(TileFace(TileCategory.WIND, "E"), TileFace(TileCategory.WIND, "E"))
        assert not faces_match(TileFace(TileCategory.WIND, "E"), TileFace(TileCategory.WIND, "N"))
        assert not faces_match(TileFace(TileCategory.DRAGON, "R"), TileFace(TileCategory.DRAGON, "Wh"))


class TestPairSampler:
    """Test cases for sample_pairs."""

    @pytest.mark.parametrize("count", [0, 2, 12, 16, 36, 100, 144])
    def test_returns_requested_count_of_pairs(self, count):
        """Test sampler output size and pairing for counts the deck supports."""
        faces = sample_pairs(count, rng=random.Random(count))

        assert len(faces) == count
        assert decomposes_into_pairs(faces)

    def test_result_is_drawn_from_deck(self):
        """Test no face is used more often than the deck holds it."""
        deck_counts = Counter(create_full_deck())
        faces = sample_pairs(144, rng=random.Random(7))

        for face, n in Counter(faces).items():
            assert n <= deck_counts[face]

    def test_request_beyond_deck_is_truncated(self):
        """Test a request larger than the deck returns every pairable tile."""
        faces = sample_pairs(160, rng=random.Random(3))

        assert len(faces) == 144
        assert decomposes_into_pairs(faces)

    def test_small_deck_shortfall(self):
        """Test a deck without enough pairs yields fewer faces."""
        deck = [
            TileFace(TileCategory.DOTS, 1),
            TileFace(TileCategory.DOTS, 1),
            TileFace(TileCategory.BAMBOO, 2),
            TileFace(TileCategory.CHAR, 3),
        ]
        faces = sample_pairs(4, deck=deck, rng=random.Random(0))

        assert sorted(f.category.value for f in faces) == ["DOTS", "DOTS"]

    @pytest.mark.parametrize("count", [-2, 3, 13])
    def test_rejects_odd_or_negative(self, count):
        """Test invalid counts raise ValueError."""
        with pytest.raises(ValueError):
            sample_pairs(count)

    def test_seeded_sampler_is_reproducible(self):
        """Test the same seed gives the same draw."""
        assert sample_pairs(40, rng=random.Random(11)) == sample_pairs(40, rng=random.Random(11))

    def test_does_not_mutate_given_deck(self):
        """Test the caller's deck is left in its original order."""
        deck = create_full_deck()
        original = list(deck)
        sample_pairs(20, deck=deck, rng=random.Random(1))

        assert deck == original


class TestPairHelpers:
    """Test cases for pairing helper functions."""

    def test_reference_capacity(self):
        assert pairable_capacity() == 72

    def test_capacity_with_odd_leftovers(self):
        deck = [
            TileFace(TileCategory.DOTS, 1),
            TileFace(TileCategory.DOTS, 1),
            TileFace(TileCategory.DOTS, 1),
            TileFace(TileCategory.FLOWER, 1),
            TileFace(TileCategory.FLOWER, 3),
        ]
        assert pairable_capacity(deck) == 2

    def test_decomposes_detects_unpaired(self):
        assert not decomposes_into_pairs([
            TileFace(TileCategory.DOTS, 1),
            TileFace(TileCategory.DOTS, 2),
        ])
        assert decomposes_into_pairs([
            TileFace(TileCategory.SEASON, 1),
            TileFace(TileCategory.SEASON, 4),
        ])

    def test_split_into_pairs_drops_singles(self):
        faces = [
            TileFace(TileCategory.WIND, "E"),
            TileFace(TileCategory.DOTS, 2),
            TileFace(TileCategory.WIND, "E"),
            TileFace(TileCategory.BAMBOO, 9),
        ]
        pairs = split_into_pairs(faces)

        assert pairs == [(TileFace(TileCategory.WIND, "E"), TileFace(TileCategory.WIND, "E"))]
