"""Shipping mention detector (presence only, fold position is ignored)."""

import logging
from typing import List

from foldscan.core.models import ShippingState
from foldscan.render.base import RenderSurface, SurfaceError

logger = logging.getLogger(__name__)


class ShippingDetector:
    """Case-insensitive substring search of the page body text."""

    def __init__(self, keywords: List[str]):
        self.keywords = [str(k).lower() for k in keywords if str(k).strip()]

    async def detect(self, surface: RenderSurface) -> ShippingState:
        try:
            body_text = await surface.body_text()
        except SurfaceError:
            raise
        except Exception as e:
            logger.warning(f"Body text unavailable, reporting shipping not_present: {e}")
            return ShippingState.NOT_PRESENT

        return self.classify_text(body_text)

    def classify_text(self, text: str) -> ShippingState:
        text_lower = (text or '').lower()
        for keyword in self.keywords:
            if keyword in text_lower:
                return ShippingState.PRESENT
        return ShippingState.NOT_PRESENT
