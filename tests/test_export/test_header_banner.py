"""
Tests for header banner rendering.
"""

import logging
from pathlib import Path

import numpy as np
import pytest
from PIL import Image, ImageDraw, ImageFont

from reportpager.core.errors import BannerRenderError
from reportpager.core.export.header_banner import (
    HeaderBannerRenderer,
    _fit_text,
    render_header_banner,
)
from reportpager.models.content import ReportHeaderInfo
from reportpager.models.pagination import PageGeometry

PX_PER_MM = 96.0 / 25.4 * 2


@pytest.fixture
def geometry() -> PageGeometry:
    """Default A4 geometry (190mm content width, 12mm banner)."""
    return PageGeometry.a4()


@pytest.fixture
def header() -> ReportHeaderInfo:
    """Typical report identity."""
    return ReportHeaderInfo(
        title="Lot Quality Report",
        subtitle="Line 3, week 42",
        owner_label="QC Department",
        date="2026-10-19",
    )


class TestHeaderBannerRenderer:
    """Tests for HeaderBannerRenderer."""

    def test_size(self, geometry: PageGeometry) -> None:
        """Test the banner spans the content width at the banner height."""
        renderer = HeaderBannerRenderer(geometry, PX_PER_MM)
        width, height = renderer.size_px

        assert width == round(190 * PX_PER_MM)
        assert height == round(12 * PX_PER_MM)

    def test_render(self, geometry: PageGeometry, header: ReportHeaderInfo) -> None:
        """Test the rendered raster matches the banner box."""
        renderer = HeaderBannerRenderer(geometry, PX_PER_MM)
        banner = renderer.render(header)

        assert (banner.width_px, banner.height_px) == renderer.size_px
        assert banner.px_per_unit == PX_PER_MM
        assert banner.physical_width == pytest.approx(190, abs=0.2)
        assert banner.physical_height == pytest.approx(12, abs=0.2)

    def test_render_draws_both_columns(
        self, geometry: PageGeometry, header: ReportHeaderInfo
    ) -> None:
        """Test ink appears in the left and right columns above the rule."""
        banner = HeaderBannerRenderer(geometry, PX_PER_MM).render(header)
        gray = banner.pixels.mean(axis=2)
        text_rows = gray[: int(banner.height_px * 0.8)]
        half = banner.width_px // 2

        assert (text_rows[:, :half] < 200).any()
        assert (text_rows[:, half:] < 200).any()

    def test_render_rule_line(self, geometry: PageGeometry, header: ReportHeaderInfo) -> None:
        """Test a full-width rule is drawn near the bottom."""
        banner = HeaderBannerRenderer(geometry, PX_PER_MM).render(header)
        gray = banner.pixels.mean(axis=2)

        dark_rows = np.where((gray < 128).mean(axis=1) > 0.95)[0]
        assert dark_rows.size > 0
        assert dark_rows.min() > banner.height_px * 0.8

    def test_title_only(self, geometry: PageGeometry) -> None:
        """Test a header with only a title leaves the right column blank."""
        banner = HeaderBannerRenderer(geometry, PX_PER_MM).render(
            ReportHeaderInfo(title="Summary")
        )
        gray = banner.pixels.mean(axis=2)
        text_rows = gray[: int(banner.height_px * 0.8)]

        assert (text_rows[:, banner.width_px // 2 :] == 255).all()

    def test_missing_font(
        self, geometry: PageGeometry, header: ReportHeaderInfo, tmp_path: Path
    ) -> None:
        """Test an unreadable font raises BannerRenderError."""
        renderer = HeaderBannerRenderer(geometry, PX_PER_MM, font_path=tmp_path / "missing.ttf")

        with pytest.raises(BannerRenderError) as exc_info:
            renderer.render(header)

        assert exc_info.value.error_code == "BANNER_RENDER_ERROR"
        assert exc_info.value.details["title"] == "Lot Quality Report"

    def test_font_backend_unavailable(
        self, geometry: PageGeometry, header: ReportHeaderInfo, monkeypatch
    ) -> None:
        """Test a Pillow build without FreeType raises BannerRenderError."""

        def no_freetype(*args, **kwargs):
            raise ImportError("The _imagingft C module is not installed")

        monkeypatch.setattr(ImageFont, "load_default", no_freetype)

        with pytest.raises(BannerRenderError) as exc_info:
            HeaderBannerRenderer(geometry, PX_PER_MM).render(header)

        assert isinstance(exc_info.value.__cause__, ImportError)
        assert render_header_banner(header, geometry, PX_PER_MM) is None

    def test_invalid_density(self, geometry: PageGeometry) -> None:
        """Test non-positive pixel density is rejected."""
        with pytest.raises(ValueError):
            HeaderBannerRenderer(geometry, 0)


class TestFitText:
    """Tests for text truncation."""

    def test_short_text_unchanged(self) -> None:
        """Test text that fits is returned as is."""
        draw = ImageDraw.Draw(Image.new("RGB", (10, 10)))
        font = ImageFont.load_default()
        assert _fit_text(draw, "Report", font, 1000) == "Report"

    def test_long_text_truncated(self) -> None:
        """Test text that overflows is cut and ends with an ellipsis."""
        draw = ImageDraw.Draw(Image.new("RGB", (10, 10)))
        font = ImageFont.load_default()
        text = "A very long report title that cannot fit"

        fitted = _fit_text(draw, text, font, 80)
        assert fitted.endswith("...")
        assert len(fitted) < len(text)
        assert draw.textlength(fitted, font=font) <= 80


class TestRenderHeaderBanner:
    """Tests for the convenience function."""

    def test_returns_banner(self, geometry: PageGeometry, header: ReportHeaderInfo) -> None:
        """Test a banner is returned on success."""
        banner = render_header_banner(header, geometry, PX_PER_MM)
        assert banner is not None

    def test_failure_returns_none(
        self, geometry: PageGeometry, header: ReportHeaderInfo, tmp_path: Path, caplog
    ) -> None:
        """Test failures degrade to no banner with a warning."""
        with caplog.at_level(logging.WARNING):
            banner = render_header_banner(header, geometry, PX_PER_MM, tmp_path / "missing.ttf")

        assert banner is None
        assert any("Header banner omitted" in r.message for r in caplog.records)
