"""
Foldscan FastAPI Application.

REST API for mobile product page scans.

Features:
- Scan endpoint (reviews, price, shipping, modal verdicts + fold screenshot)
- Optional API key authentication
- Per-client rate limiting
- Screenshot hosting under /scans
- Health check endpoints
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import logging
import time
from datetime import datetime
from functools import lru_cache
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.security import APIKeyHeader
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from .. import __version__
from ..core.config import Config, load_selector_config
from ..core.observability import setup_logfire
from ..services.scan_service import (
    InvalidScanURLError,
    ProductPageScanService,
    ScanFailedError,
)
from .models import (
    ErrorResponse,
    HealthResponse,
    ScanRequest,
    ScanResponse,
)

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================================================
# FastAPI Application Setup
# ============================================================================

app = FastAPI(
    title="Foldscan API",
    description="Above-the-fold review, price, shipping and modal signals for mobile product pages",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# ============================================================================
# CORS Configuration
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# Rate Limiting
# ============================================================================

# In-memory storage keyed by client address; entries expire with their window
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ============================================================================
# Screenshot Hosting
# ============================================================================

app.mount("/scans", StaticFiles(directory=Config.SCANS_DIR, check_dir=False), name="scans")

# ============================================================================
# API Key Authentication
# ============================================================================

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)

async def verify_api_key(api_key: Optional[str] = Depends(API_KEY_HEADER)):
    """
    Verify API key from request header.

    Checks against Config.FOLDSCAN_API_KEY.
    If not set, allows all requests (development mode).

    Args:
        api_key: API key from X-API-Key header

    Raises:
        HTTPException: If API key is invalid or missing
    """
    expected_key = Config.FOLDSCAN_API_KEY

    # Development mode - no API key required
    if not expected_key:
        return True

    if not api_key:
        logger.warning("API key missing from request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required. Provide via X-API-Key header."
        )

    if api_key != expected_key:
        logger.warning(f"Invalid API key attempt: {api_key[:4]}...")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key"
        )

    return True


# ============================================================================
# Service Dependency
# ============================================================================

@lru_cache(maxsize=1)
def get_scan_service() -> ProductPageScanService:
    """Shared scan service; each scan still gets its own browser."""
    return ProductPageScanService()


# ============================================================================
# Health Check Endpoints
# ============================================================================

@app.get("/", tags=["System"])
async def root():
    """Service banner."""
    return {
        "status": "healthy",
        "service": "mobile-product-page-scan",
        "version": __version__
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check endpoint"
)
async def health_check():
    """
    Check API health and configuration.

    Reports whether BASE_URL is set and the selector seeds load.
    """
    checks = {}

    checks["base_url"] = "configured" if Config.BASE_URL else "missing"

    try:
        load_selector_config()
        checks["selectors"] = "loaded"
    except Exception as e:
        logger.error(f"Selector config health check failed: {e}")
        checks["selectors"] = "error"

    overall_status = "healthy" if all(
        v in ("configured", "loaded") for v in checks.values()
    ) else "degraded"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        timestamp=datetime.now(),
        checks=checks
    )


# ============================================================================
# Scan Endpoint
# ============================================================================

@app.post(
    "/scan",
    response_model=ScanResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid URL"},
        401: {"model": ErrorResponse, "description": "Unauthorized - Invalid API key"},
        429: {"model": ErrorResponse, "description": "Too many requests"},
        500: {"model": ErrorResponse, "description": "Scan failed"}
    },
    tags=["Scan"],
    summary="Scan a product page in a mobile viewport"
)
@limiter.limit(Config.RATE_LIMIT)
async def scan_product_page(
    request: Request,
    scan_request: ScanRequest,
    authenticated: bool = Depends(verify_api_key),
    service: ProductPageScanService = Depends(get_scan_service),
):
    """
    Load the page at 390x844 with a mobile user agent and report:

    - **reviews**: not_present | present_below_fold | visible_above_fold
    - **price**: not_visible_above_fold | visible_above_fold
    - **shipping**: not_present | present
    - **modal**: not_present | present

    A scan takes at least the modal poll window (12s by default).

    **Rate Limits:**
    - One scan per 3 seconds per client address by default
    - Configurable via RATE_LIMIT env var
    """
    start_time = time.time()

    try:
        report = await service.scan_url(
            scan_request.url,
            include_diagnostics=scan_request.include_diagnostics
        )
    except InvalidScanURLError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ScanFailedError as e:
        logger.error(f"Scan error after {time.time() - start_time:.2f}s: {e}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Scan failed",
                detail=str(e),
                timestamp=datetime.now().isoformat()
            ).model_dump()
        )

    return ScanResponse(**service.report_to_dict(report))


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent error format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=str(exc.detail),
            detail=str(exc),
            timestamp=datetime.now().isoformat()
        ).model_dump()
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies (e.g. missing url) are client errors, reported as 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="Invalid request",
            detail="Request body must include a \"url\" field",
            timestamp=datetime.now().isoformat()
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc),
            timestamp=datetime.now().isoformat()
        ).model_dump()
    )


# ============================================================================
# Startup/Shutdown Events
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Log startup information."""
    setup_logfire()
    logger.info("="*60)
    logger.info("Foldscan API Starting...")
    logger.info(f"API Version: {__version__}")
    logger.info(f"Docs available at: /docs")
    logger.info(f"BASE_URL: {Config.BASE_URL or 'NOT SET - REQUIRED FOR SCANS'}")
    logger.info(f"Auth mode: {'Production (API key required)' if Config.FOLDSCAN_API_KEY else 'Development (no auth)'}")
    logger.info(f"Rate limit: {Config.RATE_LIMIT} per client")
    logger.info("="*60)


@app.on_event("shutdown")
async def shutdown_event():
    """Log shutdown information."""
    logger.info("Foldscan API Shutting down...")
