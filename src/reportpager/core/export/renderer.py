"""
Content renderer contract.

The export engine never measures or rasterizes report content itself.
A host environment (headless browser, native layout engine) implements
ContentRenderer and hands back one raster plus keep-together boxes for
the cover and one for the detail stream. The renderer is responsible
for consistent box alignment in its own output.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from reportpager.models.content import RenderedContent


class ContentRenderer(ABC):
    """Abstract base class for content renderers."""

    @abstractmethod
    def render_cover(self, report: Any) -> Optional[RenderedContent]:
        """
        Rasterize the cover block of a report.

        Args:
            report: Report data snapshot, opaque to the engine

        Returns:
            Cover capture, or None when the report has no cover
        """

    @abstractmethod
    def render_detail(self, report: Any) -> RenderedContent:
        """
        Rasterize the detail stream of a report.

        Args:
            report: Report data snapshot, opaque to the engine

        Returns:
            Detail capture with the boxes of every keep-together block
        """


class StaticContentRenderer(ContentRenderer):
    """
    Renderer returning captures taken ahead of time.

    Used when the host has already rasterized the report, and in tests.
    """

    def __init__(
        self,
        detail: RenderedContent,
        cover: Optional[RenderedContent] = None,
    ) -> None:
        self.detail = detail
        self.cover = cover

    def render_cover(self, report: Any) -> Optional[RenderedContent]:
        return self.cover

    def render_detail(self, report: Any) -> RenderedContent:
        return self.detail
