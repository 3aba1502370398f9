"""
Cover page preparation and drawing.

The cover block is template-fixed and expected to fit one page. It is
written as page 1 without any slicing; content that overflows the page
is clipped and logged as an authoring problem, never raised.
"""

import logging
from typing import Optional

from reportlab.pdfgen.canvas import Canvas

from reportpager.core.export.raster_codec import RasterEncoder, draw_raster
from reportpager.models.pagination import CoverPage, PageGeometry
from reportpager.models.raster import RasterImage

logger = logging.getLogger(__name__)


class CoverPageWriter:
    """
    Place the cover raster on its own page.

    With ``full_bleed`` the raster spans the full page width from the
    page top; otherwise it sits inside the page margins.
    """

    def __init__(
        self,
        geometry: PageGeometry,
        encoder: Optional[RasterEncoder] = None,
        full_bleed: bool = False,
    ) -> None:
        self.geometry = geometry
        self.encoder = encoder or RasterEncoder()
        self.full_bleed = full_bleed

    @property
    def box_width(self) -> float:
        return self.geometry.page_width if self.full_bleed else self.geometry.content_width

    @property
    def box_height(self) -> float:
        return self.geometry.page_height if self.full_bleed else self.geometry.cover_slot_height

    def prepare(self, raster: RasterImage) -> Optional[CoverPage]:
        """
        Fit the cover raster to its box and clip any overflow.

        Args:
            raster: Cover capture from the content renderer

        Returns:
            CoverPage, or None when the capture is empty
        """
        if raster.is_empty:
            logger.warning("Cover capture is empty; document will start with the detail stream")
            return None

        fitted = raster.fit_to_width(self.box_width)
        max_rows = int(self.box_height * fitted.px_per_unit)
        clipped_px = max(0, fitted.height_px - max_rows)

        if clipped_px:
            logger.warning(
                f"Cover content overflows one page by {clipped_px / fitted.px_per_unit:.1f}mm; "
                f"clipping {clipped_px} rows"
            )
            fitted = fitted.crop_rows(0, max_rows)

        return CoverPage(raster=fitted, full_bleed=self.full_bleed, clipped_px=clipped_px)

    def draw(self, canvas: Canvas, cover: CoverPage) -> None:
        """
        Draw a prepared cover onto the canvas's current page.

        The caller is responsible for ``showPage``.
        """
        geometry = self.geometry
        if cover.full_bleed:
            x, top = 0.0, 0.0
            width = geometry.page_width
        else:
            x, top = geometry.margin_left, geometry.margin_top
            width = geometry.content_width

        draw_raster(
            canvas,
            self.encoder.reader(cover.raster),
            geometry.page_height,
            x=x,
            top=top,
            width=width,
            height=cover.raster.physical_height,
        )
