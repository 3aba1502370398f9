"""
Configuration settings for the ReportPager export engine.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from reportpager.models.pagination import PageGeometry


class Settings(BaseSettings):
    """
    Export settings with environment variable support.

    All physical lengths are in millimetres.

    Attributes:
        page_width_mm: Physical page width
        page_height_mm: Physical page height
        margin_top_mm: Top margin of the cover page and of the header band
        first_page_top_margin_mm: Top margin of the first detail page
        continuation_top_margin_mm: Top margin of continuation pages
        banner_height_mm: Height of the running header banner
        min_fill_ratio: Smallest share of a content slot a snapped cut may leave
        termination_epsilon_mm: Remaining height below which slicing stops
        image_format: Encoding used for page rasters inside the document
        output_dir: Directory receiving exported documents
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="REPORTPAGER_",
        extra="ignore",
    )

    # Page geometry
    page_width_mm: float = Field(default=210.0, gt=0)
    page_height_mm: float = Field(default=297.0, gt=0)
    margin_top_mm: float = Field(default=10.0, ge=0)
    margin_bottom_mm: float = Field(default=10.0, ge=0)
    margin_left_mm: float = Field(default=10.0, ge=0)
    margin_right_mm: float = Field(default=10.0, ge=0)
    first_page_top_margin_mm: Optional[float] = Field(default=None, ge=0)
    continuation_top_margin_mm: Optional[float] = Field(default=None, ge=0)

    # Header banner
    banner_height_mm: float = Field(default=12.0, gt=0)
    banner_gap_mm: float = Field(default=3.0, ge=0)
    banner_font_path: Optional[Path] = None

    # Pagination tuning
    min_fill_ratio: float = Field(default=0.25, ge=0.0, le=1.0)
    termination_epsilon_mm: float = Field(default=0.5, gt=0)

    # Raster handling
    capture_scale: float = Field(default=2.0, gt=0)
    image_format: Literal["jpeg", "png"] = "jpeg"
    jpeg_quality: int = Field(default=98, ge=1, le=100)
    cover_full_bleed: bool = False

    # Output
    output_dir: Path = Path("./exports")
    filename_prefix: str = "report"

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Optional[str] = None

    @property
    def banner_px_per_mm(self) -> float:
        """Pixel density used when rasterizing the header banner."""
        # 96 CSS px per inch, multiplied by the capture scale
        return 96.0 / 25.4 * self.capture_scale

    def page_geometry(self) -> PageGeometry:
        """Build the page geometry described by these settings."""
        return PageGeometry(
            page_width=self.page_width_mm,
            page_height=self.page_height_mm,
            margin_top=self.margin_top_mm,
            margin_bottom=self.margin_bottom_mm,
            margin_left=self.margin_left_mm,
            margin_right=self.margin_right_mm,
            banner_height=self.banner_height_mm,
            banner_gap=self.banner_gap_mm,
            first_page_top_margin=self.first_page_top_margin_mm,
            continuation_top_margin=self.continuation_top_margin_mm,
        )

    def model_post_init(self, __context: object) -> None:
        """Create output directory if it doesn't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
