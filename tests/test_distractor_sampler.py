"""
Tests for distractor sampling: size, exclusion, uniqueness and uniformity.
"""

import random
from collections import Counter

import pytest

from menu_memorizer.services.quiz_service import sample_distractors


class TestSampleDistractors:
    """Unit tests for the sampling contract."""

    @pytest.mark.parametrize("k", [0, 1, 2, 3, 10])
    def test_size_is_min_of_k_and_candidates(self, rng, k):
        pool = ["a", "b", "c", "d", "e"]
        result = sample_distractors(pool, {"a", "b"}, k, rng)
        assert len(result) == min(k, 3)

    def test_excluded_items_never_returned(self, rng):
        pool = ["flour", "egg", "egg", "cheese", "milk"]
        for _ in range(200):
            result = sample_distractors(pool, {"flour", "egg"}, 5, rng)
            assert not set(result) & {"flour", "egg"}

    def test_no_duplicates_from_repeated_pool_entries(self, rng):
        pool = ["egg", "egg", "egg", "cheese", "cheese"]
        result = sample_distractors(pool, set(), 5, rng)
        assert sorted(result) == ["cheese", "egg"]

    def test_pool_is_not_mutated(self, rng):
        pool = ["a", "b", "c", "d"]
        snapshot = list(pool)
        sample_distractors(pool, {"a"}, 2, rng)
        assert pool == snapshot

    def test_everything_excluded_returns_empty(self, rng):
        assert sample_distractors(["a", "b"], {"a", "b"}, 3, rng) == []

    def test_empty_pool_returns_empty(self, rng):
        assert sample_distractors([], set(), 3, rng) == []

    def test_negative_k_rejected(self, rng):
        with pytest.raises(ValueError):
            sample_distractors(["a"], set(), -1, rng)

    def test_seeded_randomness_is_reproducible(self):
        pool = [f"item-{i}" for i in range(20)]
        first = sample_distractors(pool, {"item-3"}, 5, random.Random(7))
        second = sample_distractors(pool, {"item-3"}, 5, random.Random(7))
        assert first == second

    def test_injected_generator_controls_output(self, first_pick):
        result = sample_distractors(["a", "b", "c", "d"], {"b"}, 2, first_pick)
        assert result == ["a", "c"]


class TestSamplingDistribution:
    """Frequency checks over many draws with a fixed seed."""

    def test_single_draw_is_uniform_over_candidates(self):
        rng = random.Random(2024)
        pool = ["a", "b", "c", "d", "excluded"]
        counts = Counter(
            sample_distractors(pool, {"excluded"}, 1, rng)[0] for _ in range(4000)
        )
        assert set(counts) == {"a", "b", "c", "d"}
        for count in counts.values():
            assert 850 < count < 1150

    def test_repeated_pool_entries_do_not_skew_selection(self):
        rng = random.Random(99)
        pool = ["egg"] * 8 + ["cheese", "flour"]
        counts = Counter(sample_distractors(pool, set(), 1, rng)[0] for _ in range(3000))
        for count in counts.values():
            assert 850 < count < 1150
