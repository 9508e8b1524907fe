"""
Data models for fold scan results
"""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from enum import Enum


# ============================================================================
# Enums
# ============================================================================

class ReviewState(str, Enum):
    """Where review evidence was found, if anywhere"""
    NOT_PRESENT = "not_present"
    PRESENT_BELOW_FOLD = "present_below_fold"
    VISIBLE_ABOVE_FOLD = "visible_above_fold"


class PriceState(str, Enum):
    """Whether a price is visible without scrolling"""
    NOT_VISIBLE_ABOVE_FOLD = "not_visible_above_fold"
    VISIBLE_ABOVE_FOLD = "visible_above_fold"


class ShippingState(str, Enum):
    """Whether shipping is mentioned anywhere on the page"""
    NOT_PRESENT = "not_present"
    PRESENT = "present"


class ModalState(str, Enum):
    """Whether a blocking overlay covers the page"""
    NOT_PRESENT = "not_present"
    PRESENT = "present"


# ============================================================================
# Geometry
# ============================================================================

@dataclass(frozen=True)
class Rect:
    """Viewport-relative box in CSS pixels"""
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return max(self.width, 0) * max(self.height, 0)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Rect"]:
        """Build from a {x, y, width, height} mapping; None passes through."""
        if not data:
            return None
        return cls(
            x=float(data.get('x', 0)),
            y=float(data.get('y', 0)),
            width=float(data.get('width', 0)),
            height=float(data.get('height', 0)),
        )


@dataclass(frozen=True)
class Size:
    """Width/height pair for viewports and windows"""
    width: float
    height: float

    @property
    def area(self) -> float:
        return max(self.width, 0) * max(self.height, 0)


# ============================================================================
# Review diagnostics
# ============================================================================

class FoldRecord(BaseModel):
    """One review element placed above or below the fold.

    Descriptive fields are only filled in when diagnostics were requested.
    """
    position: Rect
    tag_name: Optional[str] = None
    class_name: Optional[str] = None
    id: Optional[str] = None
    text_preview: Optional[str] = None


class ClassificationDiagnostics(BaseModel):
    """Per-call counters for the review evidence pipeline"""
    candidates_found: int = 0
    filtered_by_media: int = 0
    filtered_by_navigation: int = 0
    filtered_by_content: int = 0
    filtered_by_visibility: int = 0
    valid_elements: int = 0
    above_fold: List[FoldRecord] = Field(default_factory=list)
    below_fold: List[FoldRecord] = Field(default_factory=list)


# ============================================================================
# Scan result
# ============================================================================

class ScanResult(BaseModel):
    """Verdicts for one scan of one page"""
    reviews: ReviewState
    price: PriceState
    shipping: ShippingState
    modal: ModalState
    diagnostics: Optional[ClassificationDiagnostics] = None

    class Config:
        frozen = True
