"""
ScreenshotStore - persists fold screenshots and builds their public URLs.

Files are written as scan-<epoch ms>.png into the scans directory, which the
API serves under /scans.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

from ..core.config import Config

logger = logging.getLogger(__name__)


class ScreenshotStore:
    """Filesystem storage for viewport screenshots."""

    def __init__(self, scans_dir: Optional[Union[str, Path]] = None, base_url: Optional[str] = None):
        """
        Initialize ScreenshotStore.

        Args:
            scans_dir: Directory for PNG files (default: Config.SCANS_DIR)
            base_url: Public base URL of the service (default: Config.BASE_URL)
        """
        self.scans_dir = Path(scans_dir or Config.SCANS_DIR)
        self.base_url = base_url if base_url is not None else Config.BASE_URL

    def save(self, png_bytes: bytes) -> str:
        """Write a screenshot and return its file name."""
        self.scans_dir.mkdir(parents=True, exist_ok=True)

        filename = f"scan-{int(time.time() * 1000)}.png"
        path = self.scans_dir / filename
        # two scans finishing in the same millisecond
        suffix = 1
        while path.exists():
            filename = f"scan-{int(time.time() * 1000)}-{suffix}.png"
            path = self.scans_dir / filename
            suffix += 1

        path.write_bytes(png_bytes)
        logger.info(f"Saved screenshot {path} ({len(png_bytes)} bytes)")
        return filename

    def public_url(self, filename: str) -> str:
        """URL the API serves the screenshot from."""
        return f"{self.base_url.rstrip('/')}/scans/{filename}"
