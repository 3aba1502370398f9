"""
Raster encoding and placement on reportlab canvases.

Page coordinates in this package are millimetres measured from the top
edge of the page; reportlab works in points from the bottom edge.
"""

import io
from typing import Literal

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from reportpager.models.raster import RasterImage


class RasterEncoder:
    """
    Encode rasters for embedding into the output document.

    JPEG keeps page images small; PNG is lossless. RGBA rasters are
    flattened onto white before encoding.
    """

    def __init__(
        self,
        image_format: Literal["jpeg", "png"] = "jpeg",
        jpeg_quality: int = 98,
    ) -> None:
        if image_format not in ("jpeg", "png"):
            raise ValueError(f"Unsupported image format: {image_format}")
        if not 1 <= jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be in [1, 100], got {jpeg_quality}")
        self.image_format = image_format
        self.jpeg_quality = jpeg_quality

    def encode(self, raster: RasterImage) -> bytes:
        """Encode a raster to JPEG or PNG bytes."""
        image = raster.to_pil()
        if image.mode == "RGBA":
            # Flatten onto white; JPEG has no alpha
            background = Image.new("RGB", image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background

        buffer = io.BytesIO()
        if self.image_format == "jpeg":
            image.save(buffer, format="JPEG", quality=self.jpeg_quality)
        else:
            image.save(buffer, format="PNG")
        return buffer.getvalue()

    def reader(self, raster: RasterImage) -> ImageReader:
        """Encode a raster and wrap it for ``Canvas.drawImage``."""
        return ImageReader(io.BytesIO(self.encode(raster)))


def draw_raster(
    canvas: Canvas,
    image: ImageReader,
    page_height: float,
    x: float,
    top: float,
    width: float,
    height: float,
) -> None:
    """
    Draw an encoded raster into a box given in top-origin millimetres.

    Args:
        canvas: Target canvas, positioned on the current page
        image: Encoded raster
        page_height: Page height in millimetres
        x: Left edge of the box
        top: Distance from the page top to the box
        width: Box width
        height: Box height
    """
    y = page_height - top - height
    canvas.drawImage(image, x * mm, y * mm, width=width * mm, height=height * mm)
