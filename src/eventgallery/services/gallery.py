"""Waterfall layout helpers for the gallery view."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

# (minimum viewport width in px, column count), widest first
COLUMN_BREAKPOINTS = (
    (1280, 5),
    (1024, 4),
    (768, 3),
)
MIN_COLUMNS = 2


def distribute(photos: Sequence[T], column_count: int) -> list[list[T]]:
    """
    Spread photos across columns round-robin.

    The i-th photo goes to column ``i % column_count``, so reading the
    columns row by row gives back the input order. Column heights are not
    balanced by image size; identical input always yields identical output.

    Args:
        photos: Photos in display order (most recent first)
        column_count: Number of columns, at least 1

    Returns:
        list: ``column_count`` lists of photos

    Raises:
        ValueError: If column_count is not positive
    """
    if column_count <= 0:
        raise ValueError(f"column_count must be positive, got {column_count}")

    columns: list[list[T]] = [[] for _ in range(column_count)]
    for index, photo in enumerate(photos):
        columns[index % column_count].append(photo)
    return columns


def column_count_for_width(viewport_width: int) -> int:
    """Pick the number of gallery columns for a viewport width in pixels."""
    for min_width, columns in COLUMN_BREAKPOINTS:
        if viewport_width >= min_width:
            return columns
    return MIN_COLUMNS
