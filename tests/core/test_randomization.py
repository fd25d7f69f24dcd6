"""Tests for the Mulberry32 PRNG and Fisher-Yates shuffle"""

import pytest
from core.randomization import Mulberry32, derive_location_seed, random_seed, shuffle
from config.design_config import MAX_RANDOM_SEED


class TestMulberry32:
    """Test suite for the seedable PRNG"""

    def test_known_stream_seed_42(self):
        """Test first draws for seed 42 match the reference stream"""
        rng = Mulberry32(42)
        assert rng() == 0.6011037519201636
        assert rng() == 0.44829055899754167
        assert rng() == 0.8524657934904099

    def test_negative_seed_wraps(self):
        """Test negative seeds wrap modulo 2**32"""
        rng = Mulberry32(-5)
        assert rng() == 0.48384718922898173
        assert rng() == 0.05296749505214393

    def test_same_seed_same_stream(self):
        """Test determinism for identical seeds"""
        a = Mulberry32(1234)
        b = Mulberry32(1234)
        assert [a() for _ in range(100)] == [b() for _ in range(100)]

    def test_different_seeds_differ(self):
        """Test different seeds give different streams"""
        a = Mulberry32(1)
        b = Mulberry32(2)
        assert [a() for _ in range(10)] != [b() for _ in range(10)]

    def test_values_in_unit_interval(self):
        """Test all draws lie in [0, 1)"""
        rng = Mulberry32(99)
        values = [rng() for _ in range(5000)]
        assert all(0.0 <= v < 1.0 for v in values)

    def test_values_look_uniform(self):
        """Test the mean of many draws is close to 0.5"""
        rng = Mulberry32(2024)
        values = [rng() for _ in range(20000)]
        assert abs(sum(values) / len(values) - 0.5) < 0.02

    def test_draw_counter(self):
        """Test the number of draws is tracked"""
        rng = Mulberry32(5)
        for _ in range(7):
            rng.random()
        assert rng.draws == 7


class TestDeriveLocationSeed:
    """Test per-location seed derivation"""

    def test_first_location_uses_seed(self):
        assert derive_location_seed(42, 1) == 42

    def test_later_locations_offset(self):
        assert derive_location_seed(42, 2) == 43
        assert derive_location_seed(42, 5) == 46


class TestRandomSeed:
    """Test fresh seed generation"""

    def test_random_seed_in_range(self):
        for _ in range(50):
            seed = random_seed()
            assert 0 <= seed < MAX_RANDOM_SEED


class TestShuffle:
    """Test suite for Fisher-Yates shuffle"""

    def test_known_permutation(self):
        """Test shuffle of 1..6 with seed 7 matches the reference permutation"""
        assert shuffle([1, 2, 3, 4, 5, 6], Mulberry32(7)) == [5, 2, 3, 4, 6, 1]

    def test_shuffle_in_place(self):
        """Test shuffle mutates and returns the same list"""
        items = list(range(10))
        result = shuffle(items, Mulberry32(3))
        assert result is items

    def test_shuffle_is_permutation(self):
        """Test shuffle keeps every element exactly once"""
        items = list(range(1, 51))
        shuffle(items, Mulberry32(11))
        assert sorted(items) == list(range(1, 51))

    def test_empty_and_singleton(self):
        """Test empty and one-element lists are no-ops"""
        rng = Mulberry32(1)
        assert shuffle([], rng) == []
        assert shuffle([7], rng) == [7]
        assert rng.draws == 0

    def test_draw_count(self):
        """Test shuffle of n items draws n-1 values"""
        rng = Mulberry32(8)
        shuffle(list(range(10)), rng)
        assert rng.draws == 9

    def test_uses_supplied_rng(self, mocker):
        """Test swap positions follow the rng output"""
        rng = mocker.Mock(side_effect=[0.0, 0.0])
        # i=2: j=0 -> [c, b, a]; i=1: j=0 -> [b, c, a]
        assert shuffle(["a", "b", "c"], rng) == ["b", "c", "a"]
        assert rng.call_count == 2

    def test_roughly_uniform_first_position(self):
        """Test each value lands first about equally often"""
        rng = Mulberry32(77)
        counts = {i: 0 for i in range(4)}
        for _ in range(8000):
            counts[shuffle([0, 1, 2, 3], rng)[0]] += 1
        for count in counts.values():
            assert count == pytest.approx(2000, rel=0.1)
