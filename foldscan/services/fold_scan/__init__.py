"""
Fold Scan Service - above-the-fold signals for mobile product pages.

Classifies four independent signals on a loaded page:
- Reviews: evidence pipeline over broad widget selectors, placed against the fold
- Price: first rendered above-fold price match
- Shipping: keyword presence in body text
- Modal: dialog patterns, then window coverage, polled until capture
"""

from foldscan.services.fold_scan.geometry import (
    MIN_VISIBLE_DIMENSION,
    VIEWPORT,
    clamp_to_window,
    is_above_fold,
    is_visually_present,
)
from foldscan.services.fold_scan.modal_detector import ModalDetector
from foldscan.services.fold_scan.price_detector import PriceDetector
from foldscan.services.fold_scan.review_detector import ReviewDetection, ReviewDetector
from foldscan.services.fold_scan.scanner import CapturedScan, FoldScanner, ScanSettings
from foldscan.services.fold_scan.shipping_detector import ShippingDetector

__all__ = [
    "MIN_VISIBLE_DIMENSION",
    "VIEWPORT",
    "clamp_to_window",
    "is_above_fold",
    "is_visually_present",
    "ModalDetector",
    "PriceDetector",
    "ReviewDetection",
    "ReviewDetector",
    "CapturedScan",
    "FoldScanner",
    "ScanSettings",
    "ShippingDetector",
]
