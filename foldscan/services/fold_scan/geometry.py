"""Fold and visibility geometry against the locked mobile viewport."""

from typing import Optional

from foldscan.core.models import Rect, Size

# Locked mobile profile; fold tests never use the live window size
VIEWPORT = Size(width=390, height=844)

# Some review widgets render zero-size anchors and toggles
MIN_VISIBLE_DIMENSION = 8


def is_visually_present(rect: Optional[Rect]) -> bool:
    """True only for boxes at least MIN_VISIBLE_DIMENSION wide and tall."""
    if rect is None:
        return False
    return rect.width >= MIN_VISIBLE_DIMENSION and rect.height >= MIN_VISIBLE_DIMENSION


def is_above_fold(rect: Rect, viewport: Size = VIEWPORT) -> bool:
    """Top edge starts inside the first screen. Horizontal overflow is ignored."""
    return rect.y < viewport.height


def clamp_to_window(rect: Rect, window: Size) -> Rect:
    """Part of rect inside [0, width] x [0, height]; zero-sized when disjoint."""
    left = max(rect.x, 0)
    top = max(rect.y, 0)
    right = min(rect.x + rect.width, window.width)
    bottom = min(rect.y + rect.height, window.height)
    return Rect(
        x=left,
        y=top,
        width=max(right - left, 0),
        height=max(bottom - top, 0),
    )
