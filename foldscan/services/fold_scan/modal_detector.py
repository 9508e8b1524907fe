"""
Modal / overlay detector.

Two stages over one atomic layer snapshot of the page:

1. Semantic fast path - the first match of each known dialog pattern
   (ARIA dialog roles, aria-modal, open/active state classes, popup library
   "open" classes). Any such element that is shown and has area counts,
   whatever its size.
2. Coverage fallback - positioned layers (fixed, sticky, or absolute with a
   high z-index) whose visible part covers at least COVERAGE_THRESHOLD of the
   live window. Small fixed banners stay below the threshold.

Fold tests elsewhere use the locked viewport; coverage here is measured
against the live inner window size reported by the snapshot.
"""

import logging
from typing import Dict, List, Optional

from foldscan.core.models import ModalState
from foldscan.render.base import ElementSnapshot, LayerSnapshot, RenderSurface, SurfaceError
from foldscan.services.fold_scan.geometry import clamp_to_window

logger = logging.getLogger(__name__)

COVERAGE_THRESHOLD = 0.30
HIGH_Z_INDEX = 100

_ALWAYS_OVERLAY_POSITIONS = frozenset(['fixed', 'sticky'])


def _parse_opacity(value: Optional[str]) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_z_index(value: Optional[str]) -> Optional[int]:
    # "auto" and empty values have no stacking order
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def is_shown(style: Dict[str, str]) -> bool:
    """display != none, visibility != hidden, opacity > 0."""
    if style.get('display', '').strip() == 'none':
        return False
    if style.get('visibility', '').strip() == 'hidden':
        return False
    opacity = _parse_opacity(style.get('opacity', '1'))
    return opacity is not None and opacity > 0


def is_overlay_positioned(style: Dict[str, str]) -> bool:
    """fixed or sticky, or absolute above HIGH_Z_INDEX."""
    position = style.get('position', '').strip()
    if position in _ALWAYS_OVERLAY_POSITIONS:
        return True
    if position == 'absolute':
        z_index = _parse_z_index(style.get('z-index'))
        return z_index is not None and z_index >= HIGH_Z_INDEX
    return False


class ModalDetector:
    """Decide whether a blocking overlay currently covers the page."""

    def __init__(
        self,
        dialog_selectors: List[str],
        coverage_threshold: float = COVERAGE_THRESHOLD,
    ):
        self.dialog_selectors = list(dialog_selectors)
        self.coverage_threshold = coverage_threshold

    async def detect(self, surface: RenderSurface) -> ModalState:
        try:
            snapshot = await surface.layer_snapshot(self.dialog_selectors)
        except SurfaceError:
            raise
        except Exception as e:
            logger.debug(f"Layer snapshot failed, reporting modal not_present: {e}")
            return ModalState.NOT_PRESENT

        return self.classify(snapshot)

    def classify(self, snapshot: LayerSnapshot) -> ModalState:
        """Apply the fast path, then the coverage fallback."""
        for selector, dialog in zip(self.dialog_selectors, snapshot.dialogs):
            if dialog is not None and self._is_open_dialog(dialog):
                logger.debug(f"Modal detected via dialog pattern {selector!r}")
                return ModalState.PRESENT

        window_area = snapshot.window.area
        if window_area <= 0:
            return ModalState.NOT_PRESENT

        for layer in snapshot.layers:
            # the browser surface already drops these; other surfaces may not
            if not is_shown(layer.style) or not is_overlay_positioned(layer.style):
                continue
            if layer.rect is None:
                continue

            visible = clamp_to_window(layer.rect, snapshot.window)
            if visible.area <= 0:
                continue

            coverage = visible.area / window_area
            if coverage >= self.coverage_threshold:
                logger.debug(f"Modal detected via coverage fallback ({coverage:.0%} of window)")
                return ModalState.PRESENT

        return ModalState.NOT_PRESENT

    @staticmethod
    def _is_open_dialog(dialog: ElementSnapshot) -> bool:
        return is_shown(dialog.style) and dialog.rect is not None and dialog.rect.area > 0
