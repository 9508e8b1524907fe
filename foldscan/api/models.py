"""
API Request and Response Models.

Pydantic models for FastAPI request/response validation and
automatic OpenAPI documentation generation.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict
from datetime import datetime

from ..core.models import (
    ClassificationDiagnostics,
    ModalState,
    PriceState,
    ReviewState,
    ShippingState,
)


# ============================================================================
# Scan Request/Response Models
# ============================================================================

class ScanRequest(BaseModel):
    """
    Request model for a product page scan.
    """
    url: str = Field(
        ...,
        description="Product page URL to scan",
        examples=["https://shop.example.com/products/ceramic-mug"]
    )
    include_diagnostics: bool = Field(
        default=False,
        description="Attach review classification diagnostics (development use)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://shop.example.com/products/ceramic-mug",
                "include_diagnostics": False
            }
        }


class ScanResults(BaseModel):
    """Per-signal verdicts."""
    reviews: ReviewState = Field(..., description="not_present | present_below_fold | visible_above_fold")
    price: PriceState = Field(..., description="not_visible_above_fold | visible_above_fold")
    shipping: ShippingState = Field(..., description="not_present | present")
    modal: ModalState = Field(..., description="not_present | present")


class ScanDiagnostics(BaseModel):
    """Diagnostics grouped by signal."""
    reviews: ClassificationDiagnostics


class ScanResponse(BaseModel):
    """
    Response model for a product page scan.

    The screenshot is the locked 390x844 mobile viewport, captured at the
    same instant the modal state was observed.
    """
    screenshot_url: str = Field(..., description="Public URL of the fold screenshot")
    results: ScanResults
    diagnostics: Optional[ScanDiagnostics] = Field(
        None,
        description="Present only when include_diagnostics was requested"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "screenshot_url": "https://scan.example.com/scans/scan-1760700000000.png",
                "results": {
                    "reviews": "visible_above_fold",
                    "price": "visible_above_fold",
                    "shipping": "present",
                    "modal": "not_present"
                }
            }
        }


# ============================================================================
# System Models
# ============================================================================

class HealthResponse(BaseModel):
    """Response model for health check endpoint."""
    status: str = Field(..., description="Service status (healthy/degraded)")
    service: str = Field(default="mobile-product-page-scan")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(default_factory=datetime.now)
    checks: Dict[str, str] = Field(
        default_factory=dict,
        description="Status of configuration and dependencies"
    )


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error type or message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    timestamp: str = Field(..., description="Error timestamp (ISO format)")
