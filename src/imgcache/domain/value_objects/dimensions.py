"""Output size calculation for "tallest side" resizing."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class ResizedDimensions:
    """Target size of a resize. Derived per request, never persisted.

    (0, 0) means "do not resize" - see calculate_resized_dimensions().
    """

    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


def _round_half_away_from_zero(value: float) -> int:
    # Python's round() is banker's rounding (2.5 -> 2), we need 2.5 -> 3
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


# Hey future me - squares go through the landscape branch (width pinned to
# tallest_side). Both branches land on the same numbers for a square anyway,
# but keep the >= so that stays obvious.
def calculate_resized_dimensions(
    original_width: int,
    original_height: int,
    tallest_side: int,
) -> ResizedDimensions:
    """Scale the longer side of an image to ``tallest_side``.

    The shorter side follows the aspect ratio and is rounded to the nearest
    integer, ties away from zero.

    Args:
        original_width: Source width in pixels
        original_height: Source height in pixels
        tallest_side: Target length of the longer side

    Returns:
        ResizedDimensions, or (0, 0) if any input is zero

    Example:
        >>> calculate_resized_dimensions(4000, 2000, 1000)
        ResizedDimensions(width=1000, height=500)
    """
    if original_width == 0 or original_height == 0 or tallest_side == 0:
        return ResizedDimensions(width=0, height=0)

    aspect_ratio = original_width / original_height

    if original_width >= original_height:
        return ResizedDimensions(
            width=tallest_side,
            height=_round_half_away_from_zero(tallest_side / aspect_ratio),
        )

    return ResizedDimensions(
        width=_round_half_away_from_zero(tallest_side * aspect_ratio),
        height=tallest_side,
    )
