"""
Unit tests for blend statistics and parameter searches.
"""
import numpy as np
import pytest

from config import RootFinderConfig
from kstar.blend import (
    EntropyStats,
    SphereStats,
    bisect_sphere,
    entropic_search,
    entropy_stats,
    missing_probability,
    sphere_stats,
)


@pytest.mark.parametrize("mode,expected", [
    ('delete', 0.0),
    ('normal', 1.0),
    ('maxdiff', 0.1),
    ('average', 0.3),
])
def test_missing_probability(mode, expected):
    assert missing_probability(mode, smallest=0.1, average=0.3) == expected


class TestSphereStats:
    """Test suite for sphere_stats."""

    def test_equal_probabilities_reach_everyone(self):
        stats = sphere_stats(np.full(4, 0.25), total=4)
        assert stats.sphere == pytest.approx(4.0)
        assert stats.avg_prob == pytest.approx(0.25)
        assert stats.min_prob == pytest.approx(0.25)

    def test_single_instance_reached(self):
        stats = sphere_stats(np.array([1.0, 0.0, 0.0]), total=3)
        assert stats.sphere == pytest.approx(1.0)

    def test_counts_weight_entries(self):
        stats = sphere_stats(np.array([0.5, 0.5]), total=5, counts=np.array([3, 2]))
        assert stats.sphere == pytest.approx(5.0)

    def test_unreached_symbols_ignored_for_minimum(self):
        stats = sphere_stats(np.array([0.9, 0.05, 0.05]), total=3, counts=np.array([2, 1, 0]))
        assert stats.min_prob == pytest.approx(0.05)

    def test_zero_probabilities(self):
        stats = sphere_stats(np.zeros(3), total=3)
        assert stats.sphere == 0.0


class TestEntropyStats:
    """Test suite for entropy_stats."""

    def test_pure_class_has_zero_actual_entropy(self):
        pstar = np.array([1.0, 1.0, 0.0, 0.0])
        columns = np.array([[0, 1, 0, 1],
                            [0, 0, 1, 1]])
        stats = entropy_stats(pstar, columns, num_classes=2, total=4)
        assert stats.act_entropy == pytest.approx(0.0)
        assert stats.rand_entropy == pytest.approx(1.0)
        assert stats.gap == pytest.approx(1.0)

    def test_zero_probabilities(self):
        stats = entropy_stats(np.zeros(2), np.array([[0, 1], [1, 0]]), 2, 2)
        assert stats.act_entropy == 0.0
        assert stats.rand_entropy == 0.0


def _linear_sphere(x):
    return SphereStats(sphere=10.0 - x, avg_prob=1.0, min_prob=1.0)


class TestBisectSphere:
    """Test suite for bisect_sphere."""

    def test_finds_target(self):
        x, stats = bisect_sphere(_linear_sphere, 4.0, 0.0, 10.0, 5.0, RootFinderConfig())
        assert x == pytest.approx(6.0, abs=0.01)
        assert stats.sphere == pytest.approx(4.0, abs=0.01)

    def test_target_above_widest_sphere(self):
        x, _ = bisect_sphere(_linear_sphere, 12.0, 0.0, 10.0, 5.0, RootFinderConfig())
        assert x == 0.0

    def test_target_below_narrowest_sphere(self):
        x, _ = bisect_sphere(_linear_sphere, 4.0, 0.0, 5.0, 2.0, RootFinderConfig())
        assert x == 5.0

    def test_iteration_cap_returns_best_candidate(self):
        config = RootFinderConfig(accuracy=0.0, max_iter=1)
        x, stats = bisect_sphere(_linear_sphere, 4.0, 0.0, 10.0, 5.0, config)
        assert x == 5.0
        assert stats.sphere == 5.0


def _peaked_gap(x):
    return EntropyStats(act_entropy=(x - 0.6) ** 2, rand_entropy=1.0,
                        avg_prob=1.0, min_prob=1.0)


class TestEntropicSearch:
    """Test suite for entropic_search."""

    def test_climbs_to_peak(self):
        x, stats = entropic_search(_peaked_gap, 0.005, 0.995, 0.05, RootFinderConfig())
        assert x == pytest.approx(0.6, abs=0.01)
        assert stats.gap == pytest.approx(1.0, abs=1e-3)

    def test_no_gap_falls_back_to_lower_bound(self):
        def flat(x):
            return EntropyStats(1.0, 1.0, 1.0, 1.0)

        x, _ = entropic_search(flat, 0.005, 0.995, 0.05, RootFinderConfig())
        assert x == 0.005

    def test_terminates_within_cap(self):
        calls = []

        def counting(x):
            calls.append(x)
            return _peaked_gap(x)

        config = RootFinderConfig(max_iter=5)
        entropic_search(counting, 0.005, 0.995, 0.05, config)
        assert len(calls) <= 6
