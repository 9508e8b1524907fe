"""
Review evidence classifier.

Review selectors are broad on purpose ([class*="review"], [class*="rating"],
...), so most matches are noise: gallery slides, nav links, empty widget
shells. Candidates pass through an ordered filter pipeline and only elements
with explicit review evidence are placed against the fold:

  gather -> media exclusion -> navigation exclusion -> content allowlist
         -> geometry -> fold classification -> aggregate

Any check that cannot be evaluated resolves to the conservative outcome for
that element (excluded or rejected). Only SurfaceError escapes.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from foldscan.core.models import (
    ClassificationDiagnostics,
    FoldRecord,
    Rect,
    ReviewState,
)
from foldscan.render.base import ElementHandle, ElementInfo, RenderSurface, SurfaceError
from foldscan.services.fold_scan.geometry import is_above_fold, is_visually_present

logger = logging.getLogger(__name__)

# Stage 2: media / gallery exclusion
MEDIA_TAGS = frozenset([
    'media-gallery', 'img', 'picture', 'video', 'canvas', 'figure', 'iframe',
])
MEDIA_CLASS_MARKERS = ('gallery', 'carousel', 'slider', 'media')

# Stage 3: navigation context exclusion
NAVIGATION_TAGS = frozenset(['header', 'nav'])
NAVIGATION_ROLES = frozenset(['navigation', 'menu', 'menubar'])
NAVIGATION_CLASS_MARKERS = ('header', 'nav', 'menu', 'site-nav', 'navbar')

# Stage 4: positive content allowlist
REVIEW_PLATFORM_TOKENS = (
    'jdgm', 'yotpo', 'loox', 'stamped', 'rivyo', 'reviewsio', 'trustpilot',
)

_STAR_GLYPH_RE = re.compile(r'[★☆⭐]')
_SVG_STAR_WORD_RE = re.compile(r'star|rating', re.IGNORECASE)
_STAR_ICON_CLASS_RE = re.compile(r'fa-star|icon-star|star-icon|icon_star', re.IGNORECASE)

_RATING_PATTERNS = (
    re.compile(r'\b[0-5]\.\d+\s*(?:/\s*5|out\s+of\s+5)?\b', re.IGNORECASE),
    re.compile(r'\b[0-5]\.\d+\s*[★☆⭐]'),
    re.compile(r'[★☆⭐]{2,}'),
)

_REVIEW_COUNT_RE = re.compile(r'\d+\s+(?:review|rating)s?', re.IGNORECASE)
_PARENTHESIZED_COUNT_RE = re.compile(r'\(\d+\)')
_REVIEW_WORD_RE = re.compile(r'review|rating', re.IGNORECASE)

TEXT_PREVIEW_CHARS = 120


# ---------------------------------------------------------------------------
# Pure predicates
# ---------------------------------------------------------------------------

def is_media_element(info: ElementInfo) -> bool:
    """Media-bearing tag, or a gallery/carousel/slider/media class."""
    if info.tag_name.lower() in MEDIA_TAGS:
        return True
    class_name = info.class_name.lower()
    return any(marker in class_name for marker in MEDIA_CLASS_MARKERS)


def is_navigation_context(chain: List[ElementInfo]) -> bool:
    """Any node in the chain is a header/nav by tag, ARIA role or class."""
    for node in chain:
        if node.tag_name.lower() in NAVIGATION_TAGS:
            return True
        if node.role.strip().lower() in NAVIGATION_ROLES:
            return True
        class_name = node.class_name.lower()
        if any(marker in class_name for marker in NAVIGATION_CLASS_MARKERS):
            return True
    return False


def has_review_content(info: ElementInfo, html: str, text: str) -> bool:
    """Known widget, star markup, numeric rating, or review count."""
    attrs = f"{info.class_name} {info.id}".lower()
    if any(token in attrs for token in REVIEW_PLATFORM_TOKENS):
        return True

    has_stars = (
        ('<svg' in html and bool(_SVG_STAR_WORD_RE.search(html)))
        or bool(_STAR_GLYPH_RE.search(text))
        or bool(_STAR_ICON_CLASS_RE.search(html))
    )
    if has_stars:
        return True

    if any(pattern.search(text) for pattern in _RATING_PATTERNS):
        return True

    if _REVIEW_COUNT_RE.search(text):
        return True
    return bool(_PARENTHESIZED_COUNT_RE.search(text) and _REVIEW_WORD_RE.search(text))


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

@dataclass
class ReviewDetection:
    """Verdict plus the counters that produced it."""
    state: ReviewState
    diagnostics: ClassificationDiagnostics


class ReviewDetector:
    """Classify review evidence on a page against the fold."""

    def __init__(self, selectors: List[str]):
        self.selectors = list(selectors)

    async def detect(
        self,
        surface: RenderSurface,
        include_diagnostics: bool = False,
    ) -> ReviewDetection:
        """
        Run the filter pipeline and aggregate a ReviewState.

        Without diagnostics the fold scan stops at the first above-fold
        element, so below_fold may be incomplete. With diagnostics every
        survivor is measured and described.

        Args:
            surface: Loaded page
            include_diagnostics: Record element details and scan exhaustively

        Returns:
            ReviewDetection

        Raises:
            SurfaceError: If the page itself became unusable
        """
        diagnostics = ClassificationDiagnostics()

        try:
            candidates = await self._gather_candidates(surface)
            diagnostics.candidates_found = len(candidates)
            if not candidates:
                return ReviewDetection(ReviewState.NOT_PRESENT, diagnostics)

            valid = await self._screen_candidates(candidates, diagnostics)
            diagnostics.valid_elements = len(valid)
            if not valid:
                return ReviewDetection(ReviewState.NOT_PRESENT, diagnostics)

            await self._classify_fold(valid, diagnostics, include_diagnostics)

        except SurfaceError:
            raise
        except Exception as e:
            logger.warning(f"Review classification aborted, reporting not_present: {e}")
            return ReviewDetection(ReviewState.NOT_PRESENT, diagnostics)

        return ReviewDetection(self._aggregate(diagnostics), diagnostics)

    async def _gather_candidates(self, surface: RenderSurface) -> List[ElementHandle]:
        """Union of all selector matches. Duplicates are kept."""
        candidates: List[ElementHandle] = []
        for selector in self.selectors:
            try:
                candidates.extend(await surface.query_all(selector))
            except SurfaceError:
                raise
            except Exception as e:
                logger.debug(f"Review selector {selector!r} skipped: {e}")
        return candidates

    async def _screen_candidates(
        self,
        candidates: List[ElementHandle],
        diagnostics: ClassificationDiagnostics,
    ) -> List[ElementHandle]:
        """Stages 2-4: media, navigation, content allowlist."""
        valid = []
        for element in candidates:
            info = await self._describe(element)

            if info is None or is_media_element(info):
                diagnostics.filtered_by_media += 1
                continue

            if await self._in_navigation_context(element, info):
                diagnostics.filtered_by_navigation += 1
                continue

            if not await self._has_review_content(element, info):
                diagnostics.filtered_by_content += 1
                continue

            valid.append(element)
        return valid

    async def _classify_fold(
        self,
        elements: List[ElementHandle],
        diagnostics: ClassificationDiagnostics,
        include_diagnostics: bool,
    ) -> None:
        """Stages 5-6: geometry filter, then above/below fold buckets."""
        for element in elements:
            try:
                box = await element.bounding_box()
            except SurfaceError:
                raise
            except Exception as e:
                # element disappeared
                logger.debug(f"Bounding box read failed, skipping element: {e}")
                continue

            if not is_visually_present(box):
                diagnostics.filtered_by_visibility += 1
                continue

            record = await self._fold_record(element, box, include_diagnostics)

            if is_above_fold(box):
                diagnostics.above_fold.append(record)
                if not include_diagnostics:
                    break
            else:
                diagnostics.below_fold.append(record)

    @staticmethod
    def _aggregate(diagnostics: ClassificationDiagnostics) -> ReviewState:
        if diagnostics.above_fold:
            return ReviewState.VISIBLE_ABOVE_FOLD
        if diagnostics.below_fold:
            return ReviewState.PRESENT_BELOW_FOLD
        return ReviewState.NOT_PRESENT

    # ------------------------------------------------------------------
    # Guarded element reads
    # ------------------------------------------------------------------

    @staticmethod
    async def _describe(element: ElementHandle) -> Optional[ElementInfo]:
        try:
            return await element.describe()
        except SurfaceError:
            raise
        except Exception as e:
            logger.debug(f"Describe failed, excluding element: {e}")
            return None

    @staticmethod
    async def _in_navigation_context(element: ElementHandle, info: ElementInfo) -> bool:
        try:
            chain = [info] + await element.ancestors()
        except SurfaceError:
            raise
        except Exception as e:
            logger.debug(f"Ancestor walk failed, excluding element: {e}")
            return True
        return is_navigation_context(chain)

    @staticmethod
    async def _has_review_content(element: ElementHandle, info: ElementInfo) -> bool:
        try:
            html = await element.inner_html()
            text = await element.text_content()
        except SurfaceError:
            raise
        except Exception as e:
            logger.debug(f"Content read failed, rejecting element: {e}")
            return False
        return has_review_content(info, html or '', text or '')

    @staticmethod
    async def _fold_record(
        element: ElementHandle,
        box: Rect,
        include_diagnostics: bool,
    ) -> FoldRecord:
        if not include_diagnostics:
            return FoldRecord(position=box)
        try:
            info = await element.describe()
            text = await element.text_content() or ''
        except SurfaceError:
            raise
        except Exception as e:
            logger.debug(f"Diagnostic details unavailable, recording position only: {e}")
            return FoldRecord(position=box)
        return FoldRecord(
            position=box,
            tag_name=info.tag_name,
            class_name=info.class_name,
            id=info.id,
            text_preview=text[:TEXT_PREVIEW_CHARS],
        )
