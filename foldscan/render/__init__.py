"""
Render layer - Page surface interface and the Playwright implementation
"""

from .base import (
    ElementHandle,
    ElementInfo,
    ElementSnapshot,
    LayerSnapshot,
    RenderSurface,
    SurfaceError,
)

__all__ = [
    'ElementHandle',
    'ElementInfo',
    'ElementSnapshot',
    'LayerSnapshot',
    'RenderSurface',
    'SurfaceError',
]
