"""Tests for the tallest-side dimension calculator."""

import pytest

from imgcache.domain.value_objects.dimensions import (
    ResizedDimensions,
    calculate_resized_dimensions,
)


class TestCalculateResizedDimensions:
    """Test suite for calculate_resized_dimensions."""

    @pytest.mark.parametrize(
        ("width", "height", "tallest_side", "expected"),
        [
            (4000, 2000, 1000, (1000, 500)),
            (2000, 4000, 1000, (500, 1000)),
            (1000, 1000, 500, (500, 500)),
            (1920, 1080, 960, (960, 540)),
            (1080, 1920, 1080, (608, 1080)),
            (100, 50, 200, (200, 100)),
        ],
    )
    def test_scales_longer_side(self, width, height, tallest_side, expected):
        result = calculate_resized_dimensions(width, height, tallest_side)
        assert result.as_tuple() == expected

    @pytest.mark.parametrize(
        ("width", "height", "tallest_side"),
        [(0, 100, 50), (100, 0, 50), (100, 100, 0), (0, 0, 0)],
    )
    def test_any_zero_input_yields_empty(self, width, height, tallest_side):
        result = calculate_resized_dimensions(width, height, tallest_side)
        assert result == ResizedDimensions(0, 0)
        assert result.is_empty

    def test_ties_round_away_from_zero(self):
        # 2 / 4 = 0.5 -> 1, where banker's rounding would give 0
        assert calculate_resized_dimensions(4, 1, 2).as_tuple() == (2, 1)
        assert calculate_resized_dimensions(1, 4, 2).as_tuple() == (1, 2)

    def test_banker_rounding_case_goes_up(self):
        # 5 / 2 = 2.5 -> 3
        assert calculate_resized_dimensions(2, 1, 5).as_tuple() == (5, 3)

    def test_square_takes_landscape_branch(self):
        assert calculate_resized_dimensions(300, 300, 7).as_tuple() == (7, 7)

    def test_upscaling_is_allowed(self):
        assert calculate_resized_dimensions(10, 5, 1000).as_tuple() == (1000, 500)

    def test_longer_side_always_equals_target(self):
        for width, height in [(3, 7), (640, 481), (1, 999), (1234, 1233)]:
            result = calculate_resized_dimensions(width, height, 321)
            assert max(result.as_tuple()) == 321
