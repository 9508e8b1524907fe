"""
Tests for the Playwright render surface adapter, using mocked Playwright objects.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from foldscan.core.models import Rect, Size
from foldscan.render.base import SurfaceError
from foldscan.render.playwright_surface import _LAYER_SNAPSHOT_JS, PlaywrightElement, PlaywrightSurface


@pytest.fixture
def mock_page():
    page = MagicMock()
    page.is_closed.return_value = False
    page.query_selector_all = AsyncMock(return_value=[])
    page.inner_text = AsyncMock(return_value="Free shipping on all orders")
    page.evaluate = AsyncMock()
    page.screenshot = AsyncMock(return_value=b"png")
    return page


def _element(surface, **methods):
    handle = MagicMock()
    for name, value in methods.items():
        setattr(handle, name, value)
    return PlaywrightElement(surface, handle)


class TestPlaywrightSurface:

    @pytest.mark.asyncio
    async def test_query_all_wraps_handles(self, mock_page):
        mock_page.query_selector_all.return_value = [MagicMock(), MagicMock()]

        elements = await PlaywrightSurface(mock_page).query_all(".price")

        assert len(elements) == 2
        assert all(isinstance(e, PlaywrightElement) for e in elements)

    @pytest.mark.asyncio
    async def test_malformed_selector_returns_empty(self, mock_page):
        mock_page.query_selector_all.side_effect = PlaywrightError("SyntaxError: '[class*=' is not a valid selector")

        assert await PlaywrightSurface(mock_page).query_all("[class*=") == []

    @pytest.mark.asyncio
    async def test_closed_page_raises_surface_error(self, mock_page):
        mock_page.is_closed.return_value = True
        mock_page.query_selector_all.side_effect = PlaywrightError("Target page, context or browser has been closed")

        with pytest.raises(SurfaceError):
            await PlaywrightSurface(mock_page).query_all(".price")

    @pytest.mark.asyncio
    async def test_body_text(self, mock_page):
        assert await PlaywrightSurface(mock_page).body_text() == "Free shipping on all orders"
        mock_page.inner_text.assert_awaited_once_with("body")

    @pytest.mark.asyncio
    async def test_layer_snapshot(self, mock_page):
        mock_page.evaluate.return_value = {
            "window": {"width": 390, "height": 844},
            "dialogs": [
                None,
                {"style": {"display": "block", "opacity": "1"}, "rect": {"x": 0, "y": 0, "width": 390, "height": 600}},
            ],
            "layers": [
                {"style": {"position": "fixed", "z-index": 10}, "rect": {"x": 0, "y": 780, "width": 390, "height": 64}},
            ],
        }

        snapshot = await PlaywrightSurface(mock_page).layer_snapshot(['[aria-modal="true"]', '[role="dialog"]'])

        assert snapshot.window == Size(390, 844)
        assert snapshot.dialogs[0] is None
        assert snapshot.dialogs[1].rect == Rect(0, 0, 390, 600)
        assert snapshot.layers[0].style == {"position": "fixed", "z-index": "10"}
        assert mock_page.evaluate.await_args.args[1] == {
            "selectors": ['[aria-modal="true"]', '[role="dialog"]'],
            "highZIndex": 100,
        }

    def test_layer_style_filter_runs_before_geometry(self):
        script = _LAYER_SNAPSHOT_JS
        loop = script[script.index("querySelectorAll('*')"):]

        assert loop.index("highZIndex") < loop.index("read(el, computed)")
        assert loop.index("'visibility') === 'hidden'") < loop.index("read(el, computed)")
        assert loop.index("opacity <= 0") < loop.index("read(el, computed)")

    @pytest.mark.asyncio
    async def test_capture_viewport_clips_to_viewport(self, mock_page):
        png = await PlaywrightSurface(mock_page).capture_viewport(Size(390, 844))

        assert png == b"png"
        mock_page.screenshot.assert_awaited_once_with(
            clip={"x": 0, "y": 0, "width": 390, "height": 844}, type="png"
        )


class TestPlaywrightElement:

    @pytest.mark.asyncio
    async def test_describe(self, mock_page):
        element = _element(
            PlaywrightSurface(mock_page),
            evaluate=AsyncMock(return_value={"tagName": "DIV", "className": "jdgm-widget", "id": "", "role": None}),
        )

        info = await element.describe()

        assert info.tag_name == "div"
        assert info.class_name == "jdgm-widget"
        assert info.role == ""

    @pytest.mark.asyncio
    async def test_ancestors(self, mock_page):
        element = _element(
            PlaywrightSurface(mock_page),
            evaluate=AsyncMock(return_value=[{"tagName": "li"}, {"tagName": "nav", "role": "navigation"}]),
        )

        chain = await element.ancestors()

        assert [node.tag_name for node in chain] == ["li", "nav"]
        assert chain[1].role == "navigation"

    @pytest.mark.asyncio
    async def test_bounding_box(self, mock_page):
        element = _element(
            PlaywrightSurface(mock_page),
            bounding_box=AsyncMock(return_value={"x": 16, "y": 420, "width": 200, "height": 20}),
        )

        assert await element.bounding_box() == Rect(16, 420, 200, 20)

    @pytest.mark.asyncio
    async def test_unrendered_element_has_no_box(self, mock_page):
        element = _element(PlaywrightSurface(mock_page), bounding_box=AsyncMock(return_value=None))

        assert await element.bounding_box() is None

    @pytest.mark.asyncio
    async def test_computed_style(self, mock_page):
        element = _element(
            PlaywrightSurface(mock_page),
            evaluate=AsyncMock(return_value={"display": "block", "opacity": 1}),
        )

        style = await element.computed_style(["display", "opacity"])

        assert style == {"display": "block", "opacity": "1"}

    @pytest.mark.asyncio
    async def test_detached_element_error_is_not_fatal(self, mock_page):
        element = _element(
            PlaywrightSurface(mock_page),
            text_content=AsyncMock(side_effect=PlaywrightError("Element is not attached to the DOM")),
        )

        with pytest.raises(PlaywrightError):
            await element.text_content()
