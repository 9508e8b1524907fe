"""Price visibility detector.

Price selectors are precise enough to trust directly: no allowlist, no media
or navigation exclusion. First rendered, above-fold match wins.
"""

import logging
from typing import List

from foldscan.core.models import PriceState
from foldscan.render.base import RenderSurface, SurfaceError
from foldscan.services.fold_scan.geometry import is_above_fold

logger = logging.getLogger(__name__)


class PriceDetector:
    """Check whether any price element is on the first screen."""

    def __init__(self, selectors: List[str]):
        self.selectors = list(selectors)

    async def detect(self, surface: RenderSurface) -> PriceState:
        """
        Scan selectors in order, matches in document order.

        Returns:
            VISIBLE_ABOVE_FOLD on the first above-fold match with a positive box
        """
        for selector in self.selectors:
            try:
                elements = await surface.query_all(selector)
            except SurfaceError:
                raise
            except Exception as e:
                logger.debug(f"Price selector {selector!r} skipped: {e}")
                continue

            for element in elements:
                try:
                    box = await element.bounding_box()
                except SurfaceError:
                    raise
                except Exception as e:
                    logger.debug(f"Price element unreadable: {e}")
                    continue

                if box and box.width > 0 and box.height > 0 and is_above_fold(box):
                    logger.debug(f"Price visible above fold via {selector!r} at y={box.y:.0f}")
                    return PriceState.VISIBLE_ABOVE_FOLD

        return PriceState.NOT_VISIBLE_ABOVE_FOLD
