"""
Render surface interface for fold scanning

A render surface is one loaded, live page. The detectors only ever talk to
it through the fixed set of read-only operations below, so they can run
against a real browser or an in-memory tree.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..core.models import Rect, Size


class SurfaceError(Exception):
    """
    The render surface itself is unusable (page closed, browser crashed).

    Fatal to the scan. Detectors never mask it.
    """


@dataclass(frozen=True)
class ElementInfo:
    """Identity attributes of one DOM element"""
    tag_name: str = ""
    class_name: str = ""
    id: str = ""
    role: str = ""


@dataclass(frozen=True)
class ElementSnapshot:
    """Computed style and client rect of one element, read in the same pass"""
    style: Dict[str, str] = field(default_factory=dict)
    rect: Optional[Rect] = None


@dataclass(frozen=True)
class LayerSnapshot:
    """
    Whole-document view used by the modal detector.

    dialogs holds, per dialog selector and in the same order, the first
    matching element or None. layers holds every positioned element in the
    body. window is the live inner window size.
    """
    window: Size
    dialogs: List[Optional[ElementSnapshot]] = field(default_factory=list)
    layers: List[ElementSnapshot] = field(default_factory=list)


class ElementHandle(ABC):
    """
    Opaque reference into a render surface's tree.

    A handle can go stale at any moment; every method may raise.
    """

    @abstractmethod
    async def describe(self) -> ElementInfo:
        """Tag name (lowercase), class name, id and ARIA role"""
        pass

    @abstractmethod
    async def ancestors(self) -> List[ElementInfo]:
        """Parents of this element, nearest first, stopping before <body>"""
        pass

    @abstractmethod
    async def inner_html(self) -> str:
        pass

    @abstractmethod
    async def text_content(self) -> str:
        pass

    @abstractmethod
    async def bounding_box(self) -> Optional[Rect]:
        """Viewport-relative box, or None when the element is not rendered"""
        pass

    @abstractmethod
    async def computed_style(self, props: Iterable[str]) -> Dict[str, str]:
        pass


class RenderSurface(ABC):
    """
    Abstract base class for a loaded page

    Operations are awaited one at a time; a surface is never shared
    between concurrent scans.
    """

    @abstractmethod
    async def query_all(self, selector: str) -> List[ElementHandle]:
        """
        All elements matching a CSS selector, in document order

        Malformed selectors return an empty list instead of raising.
        """
        pass

    @abstractmethod
    async def body_text(self) -> str:
        """Text content of the page body"""
        pass

    @abstractmethod
    async def layer_snapshot(self, dialog_selectors: List[str]) -> LayerSnapshot:
        """
        Read dialog candidates and positioned layers in one atomic evaluation

        Args:
            dialog_selectors: Selectors whose first match is reported

        Returns:
            LayerSnapshot for the current instant
        """
        pass

    @abstractmethod
    async def capture_viewport(self, viewport: Size) -> bytes:
        """PNG screenshot clipped to the top-left viewport rectangle"""
        pass
