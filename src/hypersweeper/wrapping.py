"""
Bounded wrapping range.

Enumerates the coordinates along one axis that lie in a window around an
index, clipped to the axis bounds and optionally wrapping around them.
"""
from typing import Iterator, Optional


# ============================================================================
# Bounded Wrapping Range
# ============================================================================

class BoundedWrappingRange:
    """
    Single-pass iterator over an inclusive window clipped to axis bounds.

    The emitted order is:
        1. ``lowest``, if wrapping and ``stop`` lies past ``highest``
        2. the ascending run ``max(start, lowest) .. min(stop, highest)``
        3. ``highest``, if wrapping and ``start`` lies below ``lowest``

    The sequence is reproduced exactly, so a wrapped axis of size 1 or 2
    can yield the same value more than once.

    Attributes:
        start: First value of the requested window (inclusive).
        stop: Last value of the requested window (inclusive).
        lowest: Lowest valid value on the axis (inclusive).
        highest: Highest valid value on the axis (inclusive).
        wrap: Whether the axis is toroidal.
    """

    def __init__(
        self, start: int, stop: int, lowest: int, highest: int, wrap: bool
    ) -> None:
        self._first: Optional[int] = lowest if wrap and stop > highest else None
        self._last: Optional[int] = highest if wrap and start < lowest else None
        self._current: Optional[int] = max(start, lowest)
        self._stop = min(stop, highest)
        if self._current > self._stop:
            self._current = None

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        if self._first is not None:
            value, self._first = self._first, None
            return value

        if self._current is not None:
            value = self._current
            self._current = value + 1 if value < self._stop else None
            return value

        if self._last is not None:
            value, self._last = self._last, None
            return value

        raise StopIteration


def axis_window(index: int, size: int, wrap: bool) -> BoundedWrappingRange:
    """Range of ``index`` and its two neighbours on an axis of ``size``."""
    return BoundedWrappingRange(index - 1, index + 1, 0, size - 1, wrap)
