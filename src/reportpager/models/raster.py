"""
Raster image model.

A RasterImage is the single pixel snapshot the export engine operates
on. It wraps a read-only numpy buffer together with the pixel density
(pixels per millimetre) the content was captured at.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
from numpy.typing import NDArray
from PIL import Image


_CHANNEL_MODES = {1: "L", 3: "RGB", 4: "RGBA"}


@dataclass(frozen=True, eq=False)
class RasterImage:
    """
    Immutable 2-D pixel buffer with a known physical scale.

    Attributes:
        pixels: ``uint8`` array of shape (H, W), (H, W, 3) or (H, W, 4)
        px_per_unit: Pixels per millimetre
    """

    pixels: NDArray[np.uint8]
    px_per_unit: float

    def __post_init__(self) -> None:
        """Validate the buffer and freeze it."""
        if self.px_per_unit <= 0:
            raise ValueError(f"px_per_unit must be positive, got {self.px_per_unit}")

        array = np.asarray(self.pixels)
        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]
        if array.ndim not in (2, 3):
            raise ValueError(f"Raster must be a 2D or 3D array, got {array.ndim}D")
        if array.ndim == 3 and array.shape[2] not in _CHANNEL_MODES:
            raise ValueError(f"Unsupported channel count: {array.shape[2]}")
        if array.dtype != np.uint8:
            array = np.clip(array, 0, 255).astype(np.uint8)

        # Read-only view; the caller's array keeps its own flags
        view = array.view()
        view.flags.writeable = False
        object.__setattr__(self, "pixels", view)

    @property
    def width_px(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height_px(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])

    @property
    def physical_width(self) -> float:
        """Width in millimetres at the capture scale."""
        return self.width_px / self.px_per_unit

    @property
    def physical_height(self) -> float:
        """Height in millimetres at the capture scale."""
        return self.height_px / self.px_per_unit

    @property
    def is_empty(self) -> bool:
        return self.height_px == 0 or self.width_px == 0

    def crop_rows(self, top_px: int, height_px: int) -> "RasterImage":
        """
        Return the horizontal band ``[top_px, top_px + height_px)``.

        The band shares the underlying buffer.

        Raises:
            ValueError: If the band lies outside the raster
        """
        if top_px < 0 or height_px < 0 or top_px + height_px > self.height_px:
            raise ValueError(
                f"Row band [{top_px}, {top_px + height_px}) outside raster "
                f"of height {self.height_px}"
            )
        return RasterImage(self.pixels[top_px:top_px + height_px], self.px_per_unit)

    def fit_to_width(self, width: float) -> "RasterImage":
        """
        Return the same pixels rescaled so the full width spans ``width`` mm.

        Content captured at screen resolution is laid onto the page's
        content width; the vertical scale follows so aspect is preserved.
        """
        if width <= 0:
            raise ValueError(f"Target width must be positive, got {width}")
        if self.width_px == 0:
            return self
        return RasterImage(self.pixels, self.width_px / width)

    def to_pil(self) -> Image.Image:
        """Convert to a Pillow image (copy)."""
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    @classmethod
    def from_pil(cls, image: Image.Image, px_per_unit: float) -> "RasterImage":
        """Build a raster from a Pillow image."""
        if image.mode not in ("L", "RGB", "RGBA"):
            image = image.convert("RGB")
        return cls(np.array(image, dtype=np.uint8), px_per_unit)

    @classmethod
    def from_file(cls, path: Union[str, Path], px_per_unit: float) -> "RasterImage":
        """Load a raster from an image file."""
        with Image.open(path) as image:
            image.load()
            return cls.from_pil(image, px_per_unit)

    @classmethod
    def blank(
        cls, width_px: int, height_px: int, px_per_unit: float, value: int = 255
    ) -> "RasterImage":
        """Create a uniform RGB raster, white by default."""
        pixels = np.full((height_px, width_px, 3), value, dtype=np.uint8)
        return cls(pixels, px_per_unit)

    def to_dict(self) -> Dict[str, Any]:
        """Convert raster metadata to dictionary."""
        return {
            "width_px": self.width_px,
            "height_px": self.height_px,
            "channels": self.channels,
            "px_per_unit": self.px_per_unit,
            "physical_width": self.physical_width,
            "physical_height": self.physical_height,
        }
