"""Aspect-ratio policies and target-size resolution for scaled copies."""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class AspectRatioMode(Enum):
    """How a requested ``(width, height)`` box is reconciled with the source."""

    IGNORE_ASPECT_RATIO = "ignore"
    KEEP_ASPECT_RATIO = "keep"
    KEEP_ASPECT_RATIO_BY_EXPANDING = "keep_by_expanding"


def resolve_size(
    width: int,
    height: int,
    source_width: int,
    source_height: int,
    mode: AspectRatioMode = AspectRatioMode.IGNORE_ASPECT_RATIO,
) -> Tuple[int, int]:
    """Return the ``(width, height)`` a scaled copy should have.

    ``KEEP_ASPECT_RATIO`` trusts ``width`` and derives the height;
    ``KEEP_ASPECT_RATIO_BY_EXPANDING`` trusts ``height`` and derives the
    width.  Derived sides are floored.  A zero source side cannot carry a
    ratio, so the derived side comes back as 0 and callers treat the
    result as invalid geometry.

    Raises:
        TypeError: if ``mode`` is not an :class:`AspectRatioMode`.
    """
    if not isinstance(mode, AspectRatioMode):
        raise TypeError(f"Unknown aspect ratio mode: {mode!r}")

    if mode is AspectRatioMode.KEEP_ASPECT_RATIO:
        if source_width == 0:
            return int(width), 0
        height = (width * source_height) // source_width
    elif mode is AspectRatioMode.KEEP_ASPECT_RATIO_BY_EXPANDING:
        if source_height == 0:
            return 0, int(height)
        width = (height * source_width) // source_height

    return int(width), int(height)


def is_valid_size(size: Tuple[int, int]) -> bool:
    """True when both sides of *size* can be allocated."""
    width, height = size
    return width > 0 and height > 0


__all__ = ["AspectRatioMode", "resolve_size", "is_valid_size"]
