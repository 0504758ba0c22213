"""Unit tests for reputation arithmetic."""

import pytest

from skillswap.store.records import Rating
from skillswap.swaps.lifecycle import compute_new_rating, round_half_up


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (4.25, 4.3),
            (4.35, 4.4),
            (4.333333, 4.3),
            (2.05, 2.1),
            (5.0, 5.0),
            (0.0, 0.0),
        ],
    )
    def test_values(self, value: float, expected: float):
        assert round_half_up(value) == expected


class TestComputeNewRating:
    def test_first_rating(self):
        assert compute_new_rating(Rating(), 4) == Rating(average=4.0, count=1)

    def test_running_average(self):
        # (4.0 * 2 + 5) / 3 = 4.333...
        assert compute_new_rating(Rating(average=4.0, count=2), 5) == Rating(average=4.3, count=3)

    def test_half_rounds_up(self):
        # (4.5 * 1 + 4) / 2 = 4.25
        assert compute_new_rating(Rating(average=4.5, count=1), 4) == Rating(average=4.3, count=2)

    def test_stays_within_bounds(self):
        rating = Rating()
        for _ in range(10):
            rating = compute_new_rating(rating, 5)
        assert rating == Rating(average=5.0, count=10)
