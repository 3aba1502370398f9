"""
Header banner rendering for continuation pages.

The banner is a small two-column raster: title and subtitle on the left,
owner label and date on the right, with a rule line underneath. It is
rendered once per export and reused by reference on every continuation
page.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from reportpager.core.errors import BannerRenderError
from reportpager.models.content import ReportHeaderInfo
from reportpager.models.pagination import PageGeometry
from reportpager.models.raster import RasterImage

logger = logging.getLogger(__name__)

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

BACKGROUND = (255, 255, 255)
TITLE_COLOR = (17, 24, 39)
MUTED_COLOR = (107, 114, 128)
RULE_COLOR = (31, 41, 55)

# Share of the banner width given to the title column
LEFT_COLUMN_RATIO = 0.62


class HeaderBannerRenderer:
    """
    Render the running header banner.

    Attributes:
        geometry: Page geometry; the banner spans the content width
        px_per_unit: Banner pixel density in pixels per millimetre
        font_path: Optional TrueType font; Pillow's default font otherwise
    """

    def __init__(
        self,
        geometry: PageGeometry,
        px_per_unit: float,
        font_path: Optional[Path] = None,
    ) -> None:
        if px_per_unit <= 0:
            raise ValueError(f"px_per_unit must be positive, got {px_per_unit}")
        self.geometry = geometry
        self.px_per_unit = px_per_unit
        self.font_path = font_path

    @property
    def size_px(self) -> Tuple[int, int]:
        """Banner size as (width, height) in pixels."""
        width = max(1, int(round(self.geometry.content_width * self.px_per_unit)))
        height = max(1, int(round(self.geometry.banner_height * self.px_per_unit)))
        return width, height

    def render(self, header: ReportHeaderInfo) -> RasterImage:
        """
        Render the banner for one export.

        Args:
            header: Document identity shown in the banner

        Returns:
            Banner raster at ``px_per_unit``

        Raises:
            BannerRenderError: If fonts or the drawing backend fail
        """
        width, height = self.size_px
        try:
            image = Image.new("RGB", (width, height), BACKGROUND)
            draw = ImageDraw.Draw(image)

            title_font = self._load_font(max(6, int(height * 0.36)))
            small_font = self._load_font(max(5, int(height * 0.24)))

            pad = max(1, int(height * 0.08))
            rule_y = height - max(1, int(height * 0.06)) - 1
            left_width = int(width * LEFT_COLUMN_RATIO) - pad
            right_width = width - int(width * LEFT_COLUMN_RATIO) - pad

            # Left column: title, then subtitle
            title = _fit_text(draw, header.title, title_font, left_width)
            draw.text((pad, pad), title, font=title_font, fill=TITLE_COLOR)
            if header.subtitle:
                subtitle = _fit_text(draw, header.subtitle, small_font, left_width)
                draw.text(
                    (pad, int(height * 0.52)), subtitle, font=small_font, fill=MUTED_COLOR
                )

            # Right column, right-aligned: owner label, then date
            right_lines = [line for line in (header.owner_label, header.date) if line]
            for row, line in enumerate(right_lines):
                text = _fit_text(draw, line, small_font, right_width)
                text_width = draw.textlength(text, font=small_font)
                y = pad + row * int(height * 0.36)
                draw.text(
                    (width - pad - text_width, y), text, font=small_font, fill=MUTED_COLOR
                )

            draw.line(
                [(0, rule_y), (width - 1, rule_y)],
                fill=RULE_COLOR,
                width=max(1, int(height * 0.04)),
            )
        except (OSError, ValueError, TypeError, ImportError) as e:
            raise BannerRenderError(
                f"Failed to render header banner: {e}",
                details={"title": header.title, "size_px": [width, height]},
            ) from e

        logger.debug(f"Rendered header banner {width}x{height}px for '{header.title}'")
        return RasterImage.from_pil(image, self.px_per_unit)

    def _load_font(self, size: int) -> FontType:
        if self.font_path is not None:
            return ImageFont.truetype(str(self.font_path), size)
        return ImageFont.load_default(size=size)


def _fit_text(
    draw: ImageDraw.ImageDraw, text: str, font: FontType, max_width: float
) -> str:
    """Truncate ``text`` with an ellipsis so it fits ``max_width`` pixels."""
    if draw.textlength(text, font=font) <= max_width:
        return text
    ellipsis = "..."
    while text and draw.textlength(text + ellipsis, font=font) > max_width:
        text = text[:-1]
    return text + ellipsis if text else ""


def render_header_banner(
    header: ReportHeaderInfo,
    geometry: PageGeometry,
    px_per_unit: float,
    font_path: Optional[Path] = None,
) -> Optional[RasterImage]:
    """
    Render a banner, or return None when rendering fails.

    Failures are logged and swallowed so callers can continue without a
    banner.
    """
    try:
        return HeaderBannerRenderer(geometry, px_per_unit, font_path).render(header)
    except BannerRenderError as e:
        logger.warning(f"Header banner omitted: {e}")
        return None
