"""
Tests for the modal / overlay detector.
"""

import pytest

from foldscan.core.models import ModalState, Rect, Size
from foldscan.render.base import LayerSnapshot, SurfaceError
from foldscan.services.fold_scan.modal_detector import (
    ModalDetector,
    is_overlay_positioned,
    is_shown,
)

from fakes import FakeNode, FakeSurface, page

DIALOGS = ['[aria-modal="true"]', '[role="dialog"]', '.modal.open']


def _fixed_layer(height: float, **style):
    return FakeNode(
        class_name="overlay",
        rect=Rect(0, 0, 390, height),
        style={"position": "fixed", "z-index": "1000", **style},
    )


class TestStylePredicates:

    def test_shown(self):
        assert is_shown({"display": "block", "visibility": "visible", "opacity": "1"})

    @pytest.mark.parametrize("style", [
        {"display": "none", "visibility": "visible", "opacity": "1"},
        {"display": "block", "visibility": "hidden", "opacity": "1"},
        {"display": "block", "visibility": "visible", "opacity": "0"},
        {"display": "block", "visibility": "visible", "opacity": "bogus"},
    ])
    def test_hidden(self, style):
        assert not is_shown(style)

    @pytest.mark.parametrize("position", ["fixed", "sticky"])
    def test_always_overlay_positions(self, position):
        assert is_overlay_positioned({"position": position, "z-index": "auto"})

    def test_absolute_high_z_index(self):
        assert is_overlay_positioned({"position": "absolute", "z-index": "100"})

    @pytest.mark.parametrize("z_index", ["99", "auto", ""])
    def test_absolute_low_z_index(self, z_index):
        assert not is_overlay_positioned({"position": "absolute", "z-index": z_index})

    def test_static(self):
        assert not is_overlay_positioned({"position": "static", "z-index": "9999"})


class TestModalDetector:

    @pytest.mark.asyncio
    async def test_aria_modal_fast_path(self):
        dialog = FakeNode(role="dialog", rect=Rect(40, 300, 120, 80))
        surface = FakeSurface(page(dialog), matches={'[aria-modal="true"]': [dialog]})

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.PRESENT

    @pytest.mark.asyncio
    async def test_hidden_dialog_is_ignored(self):
        dialog = FakeNode(role="dialog", rect=Rect(0, 0, 390, 844), style={"display": "none"})
        surface = FakeSurface(page(dialog), matches={'[role="dialog"]': [dialog]})

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_zero_area_dialog_is_ignored(self):
        dialog = FakeNode(role="dialog", rect=Rect(0, 0, 0, 0))
        surface = FakeSurface(page(dialog), matches={'[role="dialog"]': [dialog]})

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_only_first_match_per_selector(self):
        closed = FakeNode(role="dialog", rect=Rect(0, 0, 390, 844), style={"visibility": "hidden"})
        opened = FakeNode(role="dialog", rect=Rect(0, 0, 390, 844))
        surface = FakeSurface(page(closed, opened), matches={'[role="dialog"]': [closed, opened]})

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_fixed_overlay_above_threshold(self):
        # 35% of the window
        layer = _fixed_layer(height=844 * 0.35)
        surface = FakeSurface(page(layer))

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.PRESENT

    @pytest.mark.asyncio
    async def test_fixed_banner_below_threshold(self):
        layer = _fixed_layer(height=844 * 0.10)
        surface = FakeSurface(page(layer))

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_coverage_measured_against_live_window(self):
        layer = _fixed_layer(height=300)
        small_window = FakeSurface(page(layer), window=Size(390, 600))
        large_window = FakeSurface(page(_fixed_layer(height=300)), window=Size(390, 1200))

        assert await ModalDetector(DIALOGS).detect(small_window) == ModalState.PRESENT
        assert await ModalDetector(DIALOGS).detect(large_window) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_offscreen_part_does_not_count(self):
        layer = FakeNode(rect=Rect(0, 700, 390, 2000), style={"position": "fixed"})
        surface = FakeSurface(page(layer))

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_absolute_layer_z_index(self):
        low = FakeNode(rect=Rect(0, 0, 390, 844), style={"position": "absolute", "z-index": "5"})
        high = FakeNode(rect=Rect(0, 0, 390, 844), style={"position": "absolute", "z-index": "2147483647"})

        assert await ModalDetector(DIALOGS).detect(FakeSurface(page(low))) == ModalState.NOT_PRESENT
        assert await ModalDetector(DIALOGS).detect(FakeSurface(page(high))) == ModalState.PRESENT

    @pytest.mark.asyncio
    async def test_transparent_overlay_is_ignored(self):
        layer = _fixed_layer(height=844, opacity="0")

        assert await ModalDetector(DIALOGS).detect(FakeSurface(page(layer))) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_zero_window(self):
        layer = _fixed_layer(height=844)
        surface = FakeSurface(page(layer), window=Size(0, 0))

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_snapshot_failure(self):
        surface = FakeSurface(page())

        async def broken(selectors):
            raise RuntimeError("execution context destroyed")

        surface.layer_snapshot = broken

        assert await ModalDetector(DIALOGS).detect(surface) == ModalState.NOT_PRESENT

    @pytest.mark.asyncio
    async def test_surface_error_propagates(self):
        surface = FakeSurface(page())
        surface.dead = True

        with pytest.raises(SurfaceError):
            await ModalDetector(DIALOGS).detect(surface)

    def test_classify_without_dialog_entries(self):
        snapshot = LayerSnapshot(window=Size(390, 844), dialogs=[], layers=[])

        assert ModalDetector(DIALOGS).classify(snapshot) == ModalState.NOT_PRESENT
