"""Tests for the distance metrics."""

import math

import pytest

from caesar import (
    METRICS, build_histogram,
    chi_squared_distance, cosine_distance, euclidean_distance,
)


# English letter frequencies, a..z; no zero entries
ENGLISH_FREQ = (
    0.0817, 0.0129, 0.0278, 0.0425, 0.1270, 0.0223, 0.0202, 0.0609, 0.0697,
    0.0015, 0.0077, 0.0403, 0.0241, 0.0675, 0.0751, 0.0193, 0.0010, 0.0599,
    0.0633, 0.0906, 0.0276, 0.0098, 0.0236, 0.0015, 0.0197, 0.0007,
)


def unit(i):
    v = [0.0] * 26
    v[i] = 1.0
    return tuple(v)


class TestIdentity:

    def test_chi_squared(self):
        assert chi_squared_distance(ENGLISH_FREQ, ENGLISH_FREQ) == 0.0

    def test_euclidean(self):
        assert euclidean_distance(ENGLISH_FREQ, ENGLISH_FREQ) == 0.0

    def test_cosine(self):
        assert cosine_distance(ENGLISH_FREQ, ENGLISH_FREQ) == pytest.approx(0.0, abs=1e-12)

    def test_cosine_ignores_scale(self):
        scaled = tuple(v * 3 for v in ENGLISH_FREQ)
        assert cosine_distance(scaled, ENGLISH_FREQ) == pytest.approx(0.0, abs=1e-12)


class TestChiSquared:

    def test_skips_zero_reference_letters(self):
        observed = (0.5, 0.5) + (0.0,) * 24
        assert chi_squared_distance(observed, unit(0)) == pytest.approx(0.25)

    def test_argument_order_matters(self):
        observed = (0.5, 0.5) + (0.0,) * 24
        assert chi_squared_distance(unit(0), observed) == pytest.approx(1.0)

    def test_zero_histogram_sums_reference(self):
        zeros = (0.0,) * 26
        assert chi_squared_distance(zeros, ENGLISH_FREQ) == pytest.approx(sum(ENGLISH_FREQ))


class TestEuclidean:

    def test_orthogonal_units(self):
        assert euclidean_distance(unit(0), unit(1)) == pytest.approx(math.sqrt(2))

    def test_symmetric(self):
        hist = build_histogram("the quick brown fox")
        assert euclidean_distance(hist, ENGLISH_FREQ) == euclidean_distance(ENGLISH_FREQ, hist)


class TestCosine:

    def test_orthogonal_is_one(self):
        assert cosine_distance(unit(0), unit(5)) == pytest.approx(1.0)

    @pytest.mark.parametrize("observed, reference", [
        ((0.0,) * 26, ENGLISH_FREQ),
        (ENGLISH_FREQ, (0.0,) * 26),
        ((0.0,) * 26, (0.0,) * 26),
    ])
    def test_zero_norm_is_max_distance(self, observed, reference):
        assert cosine_distance(observed, reference) == 1.0

    def test_bounded(self):
        hist = build_histogram("zzzz qqq xx")
        assert 0.0 <= cosine_distance(hist, ENGLISH_FREQ) <= 2.0


def test_registry_names():
    assert set(METRICS) == {'chi2', 'euclidean', 'cosine'}
    assert METRICS['chi2'] is chi_squared_distance
