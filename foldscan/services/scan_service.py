"""
ProductPageScanService - scans one product page URL end to end.

Opens the page in a mobile browser session, runs the FoldScanner, stores
the screenshot and returns the public report. Per-signal problems are
already masked by the detectors; anything that still goes wrong here is
reported as a single ScanFailedError for the whole scan.

Part of the Service Layer - contains business logic, no HTTP or CLI code.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, AsyncContextManager, Callable, Dict, Optional

from ..core.config import SelectorConfig, load_selector_config
from ..core.models import ScanResult
from ..core.url_validator import validate_scan_url
from ..render.base import RenderSurface
from ..render.browser import open_product_page
from .fold_scan.scanner import FoldScanner, ScanSettings
from .screenshot_store import ScreenshotStore

logger = logging.getLogger(__name__)


class ScanFailedError(Exception):
    """Raised when a scan cannot produce a result."""


class InvalidScanURLError(ValueError):
    """Raised when a scan target URL is rejected before loading."""


@dataclass
class ScanReport:
    """Result of scanning a URL."""
    url: str
    screenshot_url: str
    result: ScanResult
    modal_observations: int = 0
    duration_seconds: float = 0.0


class ProductPageScanService:
    """
    Scan product pages for above-the-fold conversion signals.

    Usage:
        service = ProductPageScanService()
        report = await service.scan_url("https://shop.example.com/products/mug")
        report.result.reviews  # ReviewState
    """

    def __init__(
        self,
        selectors: Optional[SelectorConfig] = None,
        store: Optional[ScreenshotStore] = None,
        settings: Optional[ScanSettings] = None,
        page_opener: Optional[Callable[[str], AsyncContextManager[RenderSurface]]] = None,
        scanner: Optional[FoldScanner] = None,
    ):
        """
        Initialize ProductPageScanService.

        Args:
            selectors: Selector seeds (default: load_selector_config())
            store: Screenshot storage (default: ScreenshotStore())
            settings: Scan timing (default: ScanSettings.from_config())
            page_opener: Async context manager factory yielding a loaded surface
            scanner: Preconfigured scanner, mainly for tests
        """
        self.store = store or ScreenshotStore()
        self.scanner = scanner or FoldScanner(selectors or load_selector_config(), settings)
        self._open_page = page_opener or open_product_page

    async def scan_url(self, url: str, include_diagnostics: bool = False) -> ScanReport:
        """
        Load a URL and scan it.

        Args:
            url: Product page URL
            include_diagnostics: Attach review classification diagnostics

        Returns:
            ScanReport

        Raises:
            InvalidScanURLError: If the URL is rejected
            ScanFailedError: If BASE_URL is not configured, or loading or
                scanning the page failed
        """
        if not self.store.base_url:
            raise ScanFailedError("Scan failed: BASE_URL is required (env BASE_URL or --base-url).")

        is_valid, url, reason = validate_scan_url(url)
        if not is_valid:
            raise InvalidScanURLError(f"Invalid URL: {reason}")

        start_time = time.time()
        logger.info(f"Scan started: {url} (diagnostics={include_diagnostics})")

        try:
            async with self._open_page(url) as surface:
                captured = await self.scanner.scan(surface, include_diagnostics)
            filename = self.store.save(captured.screenshot)
        except Exception as e:
            logger.error(f"Scan of {url} failed after {time.time() - start_time:.1f}s: {e}", exc_info=True)
            raise ScanFailedError(f"Scan failed: {e}") from e

        return ScanReport(
            url=url,
            screenshot_url=self.store.public_url(filename),
            result=captured.result,
            modal_observations=captured.modal_observations,
            duration_seconds=round(time.time() - start_time, 2),
        )

    def report_to_dict(self, report: ScanReport) -> Dict[str, Any]:
        """Public JSON shape: screenshot URL, verdicts, optional diagnostics."""
        result = report.result
        payload: Dict[str, Any] = {
            "screenshot_url": report.screenshot_url,
            "results": {
                "reviews": result.reviews.value,
                "price": result.price.value,
                "shipping": result.shipping.value,
                "modal": result.modal.value,
            },
        }
        if result.diagnostics is not None:
            payload["diagnostics"] = {"reviews": result.diagnostics.model_dump()}
        return payload
