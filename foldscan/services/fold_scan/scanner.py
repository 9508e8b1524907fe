"""
FoldScanner - sequences the fold detectors into one scan.

Order matters only for the modal signal. Overlays can open seconds after
first paint, so the modal detector is polled at a fixed interval for the
whole poll window and the screenshot is taken right after the last poll.
The reported modal state is that last observation, which makes the image
and the verdict describe the same instant. Reviews, price and shipping are
read after the capture; their results do not depend on its timing.

Pipeline:
  settle -> modal poll (full window) -> viewport capture -> reviews -> price -> shipping
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple

from foldscan.core.config import Config, SelectorConfig
from foldscan.core.models import ModalState, ScanResult
from foldscan.core.observability import get_logfire
from foldscan.render.base import RenderSurface
from foldscan.services.fold_scan.geometry import VIEWPORT
from foldscan.services.fold_scan.modal_detector import ModalDetector
from foldscan.services.fold_scan.price_detector import PriceDetector
from foldscan.services.fold_scan.review_detector import ReviewDetector
from foldscan.services.fold_scan.shipping_detector import ShippingDetector

logger = logging.getLogger(__name__)


@dataclass
class ScanSettings:
    """Timing for one scan, in milliseconds."""
    settle_ms: int = 1500
    poll_interval_ms: int = 500
    poll_window_ms: int = 12000

    @classmethod
    def from_config(cls) -> "ScanSettings":
        return cls(
            settle_ms=Config.SETTLE_MS,
            poll_interval_ms=Config.MODAL_POLL_INTERVAL_MS,
            poll_window_ms=Config.MODAL_POLL_WINDOW_MS,
        )


@dataclass
class CapturedScan:
    """Scan verdicts plus the viewport image they describe."""
    result: ScanResult
    screenshot: bytes
    modal_observations: int


class FoldScanner:
    """Run all four detectors against one loaded page.

    Usage:
        scanner = FoldScanner(load_selector_config())
        captured = await scanner.scan(surface, include_diagnostics=True)
        captured.result.reviews  # ReviewState
    """

    def __init__(
        self,
        selectors: SelectorConfig,
        settings: Optional[ScanSettings] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.settings = settings or ScanSettings.from_config()
        self.review_detector = ReviewDetector(selectors.reviews)
        self.price_detector = PriceDetector(selectors.price)
        self.shipping_detector = ShippingDetector(selectors.shipping_keywords)
        self.modal_detector = ModalDetector(selectors.modal)
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or time.monotonic

    async def scan(
        self,
        surface: RenderSurface,
        include_diagnostics: bool = False,
    ) -> CapturedScan:
        """
        Scan a loaded page.

        Args:
            surface: Page that has finished loading
            include_diagnostics: Attach review classification diagnostics

        Returns:
            CapturedScan

        Raises:
            SurfaceError: If the page became unusable mid-scan
        """
        lf = get_logfire()
        start_time = time.time()

        with lf.span("fold_scan", include_diagnostics=include_diagnostics):
            await self._sleep(self.settings.settle_ms / 1000)

            with lf.span("modal_poll"):
                modal_state, observations = await self.poll_modal(surface)

            with lf.span("viewport_capture"):
                screenshot = await surface.capture_viewport(VIEWPORT)

            with lf.span("detectors"):
                reviews = await self.review_detector.detect(surface, include_diagnostics)
                price = await self.price_detector.detect(surface)
                shipping = await self.shipping_detector.detect(surface)

        result = ScanResult(
            reviews=reviews.state,
            price=price,
            shipping=shipping,
            modal=modal_state,
            diagnostics=reviews.diagnostics if include_diagnostics else None,
        )

        logger.info(
            f"Scan complete in {time.time() - start_time:.1f}s: "
            f"reviews={result.reviews.value}, price={result.price.value}, "
            f"shipping={result.shipping.value}, modal={result.modal.value} "
            f"({observations} modal polls)"
        )

        return CapturedScan(result=result, screenshot=screenshot, modal_observations=observations)

    async def poll_modal(self, surface: RenderSurface) -> Tuple[ModalState, int]:
        """
        Poll the modal detector until the window has elapsed.

        Never stops early: a modal that opens and closes during the window
        is reported as it stands at the final poll.

        Returns:
            (last observed ModalState, number of polls)
        """
        interval = self.settings.poll_interval_ms / 1000
        window = self.settings.poll_window_ms / 1000

        started = self._clock()
        observations = 0

        while True:
            state = await self.modal_detector.detect(surface)
            observations += 1
            if self._clock() - started >= window:
                break
            await self._sleep(interval)

        logger.debug(f"Modal poll finished after {observations} observations: {state.value}")
        return state, observations
