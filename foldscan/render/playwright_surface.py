"""
Playwright implementation of the render surface.

Each capability is a fixed, read-only snippet evaluated in the page. Errors
raised after the page has gone away are converted to SurfaceError so the
detectors can tell a dead page from a stale element.
"""

import logging
from typing import Any, Awaitable, Dict, Iterable, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import ElementHandle as PlaywrightElementHandle
from playwright.async_api import Page

from ..core.models import Rect, Size
from ..services.fold_scan.modal_detector import HIGH_Z_INDEX
from .base import (
    ElementHandle,
    ElementInfo,
    ElementSnapshot,
    LayerSnapshot,
    RenderSurface,
    SurfaceError,
)

logger = logging.getLogger(__name__)

# Messages Playwright uses when the target itself is gone
_CLOSED_MARKERS = (
    'has been closed',
    'Target closed',
    'Target crashed',
    'Browser closed',
)

_DESCRIBE_JS = """(el) => ({
    tagName: (el.tagName || '').toLowerCase(),
    className: (el.getAttribute && el.getAttribute('class')) || '',
    id: el.id || '',
    role: (el.getAttribute && el.getAttribute('role')) || '',
})"""

_ANCESTORS_JS = """(el) => {
    const out = [];
    let current = el.parentElement;
    while (current && current !== document.body && current !== document.documentElement) {
        out.push({
            tagName: (current.tagName || '').toLowerCase(),
            className: current.getAttribute('class') || '',
            id: current.id || '',
            role: current.getAttribute('role') || '',
        });
        current = current.parentElement;
    }
    return out;
}"""

_COMPUTED_STYLE_JS = """(el, props) => {
    const computed = window.getComputedStyle(el);
    const out = {};
    for (const prop of props) out[prop] = computed.getPropertyValue(prop);
    return out;
}"""

_LAYER_SNAPSHOT_JS = """({ selectors, highZIndex }) => {
    const STYLE_PROPS = ['display', 'visibility', 'opacity', 'position', 'z-index'];
    const read = (el, computed) => {
        const style = {};
        for (const prop of STYLE_PROPS) style[prop] = computed.getPropertyValue(prop);
        const r = el.getBoundingClientRect();
        return { style, rect: { x: r.x, y: r.y, width: r.width, height: r.height } };
    };
    const dialogs = selectors.map((selector) => {
        let el = null;
        try {
            el = document.querySelector(selector);
        } catch (e) {
            el = null;
        }
        return el ? read(el, window.getComputedStyle(el)) : null;
    });
    const layers = [];
    if (document.body) {
        for (const el of document.body.querySelectorAll('*')) {
            const computed = window.getComputedStyle(el);
            const position = computed.getPropertyValue('position');
            if (position !== 'fixed' && position !== 'sticky' && position !== 'absolute') continue;
            if (position === 'absolute') {
                const z = parseInt(computed.getPropertyValue('z-index'), 10);
                if (isNaN(z) || z < highZIndex) continue;
            }
            if (computed.getPropertyValue('display') === 'none') continue;
            if (computed.getPropertyValue('visibility') === 'hidden') continue;
            const opacity = parseFloat(computed.getPropertyValue('opacity'));
            if (isNaN(opacity) || opacity <= 0) continue;
            // style checks passed, read geometry
            layers.push(read(el, computed));
        }
    }
    return {
        window: { width: window.innerWidth, height: window.innerHeight },
        dialogs,
        layers,
    };
}"""


def _info_from_js(data: Optional[Dict[str, Any]]) -> ElementInfo:
    data = data or {}
    return ElementInfo(
        tag_name=str(data.get('tagName') or '').lower(),
        class_name=str(data.get('className') or ''),
        id=str(data.get('id') or ''),
        role=str(data.get('role') or ''),
    )


def _snapshot_from_js(data: Optional[Dict[str, Any]]) -> Optional[ElementSnapshot]:
    if not data:
        return None
    style = {k: str(v) for k, v in (data.get('style') or {}).items()}
    return ElementSnapshot(style=style, rect=Rect.from_dict(data.get('rect')))


class PlaywrightSurface(RenderSurface):
    """Render surface backed by a Playwright async Page."""

    def __init__(self, page: Page):
        self.page = page

    async def _call(self, operation: Awaitable[Any], what: str) -> Any:
        """Await a Playwright operation, promoting dead-page errors to SurfaceError."""
        try:
            return await operation
        except PlaywrightError as e:
            if self.page.is_closed() or any(marker in str(e) for marker in _CLOSED_MARKERS):
                raise SurfaceError(f"Page unavailable during {what}: {e}") from e
            raise

    async def query_all(self, selector: str) -> List[ElementHandle]:
        try:
            handles = await self._call(self.page.query_selector_all(selector), f"query {selector!r}")
        except PlaywrightError as e:
            logger.debug(f"Selector {selector!r} failed: {e}")
            return []
        return [PlaywrightElement(self, handle) for handle in handles]

    async def body_text(self) -> str:
        text = await self._call(self.page.inner_text('body'), "body text read")
        return text or ''

    async def layer_snapshot(self, dialog_selectors: List[str]) -> LayerSnapshot:
        data = await self._call(
            self.page.evaluate(
                _LAYER_SNAPSHOT_JS,
                {"selectors": list(dialog_selectors), "highZIndex": HIGH_Z_INDEX},
            ),
            "layer snapshot",
        )
        window = data.get('window') or {}
        return LayerSnapshot(
            window=Size(
                width=float(window.get('width') or 0),
                height=float(window.get('height') or 0),
            ),
            dialogs=[_snapshot_from_js(d) for d in data.get('dialogs') or []],
            layers=[s for s in (_snapshot_from_js(d) for d in data.get('layers') or []) if s],
        )

    async def capture_viewport(self, viewport: Size) -> bytes:
        clip = {'x': 0, 'y': 0, 'width': viewport.width, 'height': viewport.height}
        return await self._call(self.page.screenshot(clip=clip, type='png'), "screenshot")


class PlaywrightElement(ElementHandle):
    """Element handle backed by a Playwright ElementHandle."""

    def __init__(self, surface: PlaywrightSurface, handle: PlaywrightElementHandle):
        self._surface = surface
        self._handle = handle

    async def describe(self) -> ElementInfo:
        data = await self._surface._call(self._handle.evaluate(_DESCRIBE_JS), "describe")
        return _info_from_js(data)

    async def ancestors(self) -> List[ElementInfo]:
        data = await self._surface._call(self._handle.evaluate(_ANCESTORS_JS), "ancestor walk")
        return [_info_from_js(item) for item in data or []]

    async def inner_html(self) -> str:
        return await self._surface._call(self._handle.inner_html(), "inner html read") or ''

    async def text_content(self) -> str:
        return await self._surface._call(self._handle.text_content(), "text read") or ''

    async def bounding_box(self) -> Optional[Rect]:
        box = await self._surface._call(self._handle.bounding_box(), "bounding box read")
        return Rect.from_dict(box)

    async def computed_style(self, props: Iterable[str]) -> Dict[str, str]:
        data = await self._surface._call(
            self._handle.evaluate(_COMPUTED_STYLE_JS, list(props)),
            "computed style read",
        )
        return {k: str(v) for k, v in (data or {}).items()}
