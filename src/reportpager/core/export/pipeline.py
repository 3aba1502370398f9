"""
Export pipeline: one report in, one paginated document out.

Stages run strictly in sequence (render, collect zones, slice, write)
except the header banner, which renders on a worker thread while the
slicer runs. Any stage failure aborts the export without leaving a file;
a banner failure only drops the banner.
"""

import contextvars
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
from uuid import uuid4

from reportpager.core.config import Settings, settings as default_settings
from reportpager.core.errors import (
    BannerRenderError,
    ConfigurationError,
    ExportCancelledError,
    RenderUnavailableError,
    ReportPagerException,
)
from reportpager.core.export.avoid_zones import AvoidZoneCollector
from reportpager.core.export.cover_page import CoverPageWriter
from reportpager.core.export.document_writer import DocumentWriter
from reportpager.core.export.header_banner import HeaderBannerRenderer
from reportpager.core.export.raster_codec import RasterEncoder
from reportpager.core.export.renderer import ContentRenderer
from reportpager.core.export.slicer import PaginationSlicer
from reportpager.core.logging_config import LogContext
from reportpager.models.content import RenderedContent, ReportHeaderInfo
from reportpager.models.pagination import (
    CoverPage,
    DetailPage,
    Document,
    PageGeometry,
    SliceResult,
)
from reportpager.models.raster import RasterImage
from reportpager.utils.logging import PerformanceTimer

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """
    Summary of one completed export.

    Attributes:
        export_id: Identifier attached to every log record of the export
        output_path: Written document
        page_count: Total pages, cover included
        detail_page_count: Pages produced by the slicer
        cover_included: Whether page 1 is the cover
        banner_included: Whether continuation pages carry the banner
        forced_split_count: Avoid zones a page boundary fell inside
        cover_clipped: Whether the cover overflowed one page
        duration_ms: Wall time of the export
    """

    export_id: str
    output_path: Path
    page_count: int
    detail_page_count: int
    cover_included: bool
    banner_included: bool
    forced_split_count: int
    cover_clipped: bool
    duration_ms: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "export_id": self.export_id,
            "output_path": str(self.output_path),
            "page_count": self.page_count,
            "detail_page_count": self.detail_page_count,
            "cover_included": self.cover_included,
            "banner_included": self.banner_included,
            "forced_split_count": self.forced_split_count,
            "cover_clipped": self.cover_clipped,
            "duration_ms": round(self.duration_ms, 2),
        }


class ReportExporter:
    """
    Export reports to paginated raster documents.

    One exporter may serve many exports, including concurrent ones; no
    mutable state is shared between calls to ``export``.
    """

    def __init__(
        self,
        renderer: ContentRenderer,
        settings: Optional[Settings] = None,
        banner_renderer: Optional[HeaderBannerRenderer] = None,
        geometry: Optional[PageGeometry] = None,
    ) -> None:
        """
        Initialize the exporter.

        Args:
            renderer: Content renderer producing the cover and detail captures
            settings: Export settings (defaults to the global settings)
            banner_renderer: Banner renderer replacing the one built from settings
            geometry: Page geometry overriding the one derived from settings

        Raises:
            ConfigurationError: If the configured page geometry is unusable
        """
        self.renderer = renderer
        self.settings = settings or default_settings

        try:
            self.geometry = geometry or self.settings.page_geometry()
        except ValueError as e:
            raise ConfigurationError(f"Invalid page geometry: {e}", config_key="page") from e

        encoder = RasterEncoder(self.settings.image_format, self.settings.jpeg_quality)
        self.collector = AvoidZoneCollector()
        self.slicer = PaginationSlicer(
            self.geometry,
            min_fill_ratio=self.settings.min_fill_ratio,
            epsilon=self.settings.termination_epsilon_mm,
        )
        self.banner_renderer = banner_renderer or HeaderBannerRenderer(
            self.geometry,
            px_per_unit=self.settings.banner_px_per_mm,
            font_path=self.settings.banner_font_path,
        )
        self.cover_writer = CoverPageWriter(
            self.geometry, encoder, full_bleed=self.settings.cover_full_bleed
        )
        self.writer = DocumentWriter(self.geometry, encoder, self.cover_writer)

    def default_filename(self, on: Optional[date] = None) -> str:
        """Filename used when the caller supplies none, e.g. ``report_2026-10-19.pdf``."""
        return f"{self.settings.filename_prefix}_{(on or date.today()).isoformat()}.pdf"

    def resolve_output_path(self, filename: Optional[Union[str, Path]] = None) -> Path:
        """Resolve a caller-supplied filename against the output directory."""
        path = Path(filename) if filename else Path(self.default_filename())
        if path.suffix.lower() != ".pdf":
            path = path.with_name(path.name + ".pdf")
        if not path.is_absolute():
            path = self.settings.output_dir / path
        return path

    def export(
        self,
        report: Any,
        header: Optional[ReportHeaderInfo] = None,
        filename: Optional[Union[str, Path]] = None,
        cancel_event: Optional[threading.Event] = None,
        report_id: Optional[str] = None,
    ) -> ExportResult:
        """
        Export one report.

        Args:
            report: Report data snapshot passed through to the renderer
            header: Identity for the running header; no banner when None
            filename: Output filename or path (defaults to ``report_<date>.pdf``)
            cancel_event: Set to abort the export between pages
            report_id: Identifier added to log records

        Returns:
            ExportResult describing the written document

        Raises:
            RenderUnavailableError: If the renderer cannot produce a capture
            ExportCancelledError: If cancel_event is set before finalization
            WriteFailureError: If the document cannot be written
        """
        export_id = uuid4().hex[:12]
        output_path = self.resolve_output_path(filename)

        with LogContext(export_id=export_id, report_id=report_id or ""):
            with PerformanceTimer("export_report") as timer:
                logger.info(f"Starting export to {output_path}")

                cover_content, detail_content = self._render(report)
                _check_cancelled(cancel_event)

                cover = self._prepare_cover(cover_content)
                detail_raster, slice_result, banner = self._paginate(detail_content, header)
                _check_cancelled(cancel_event)

                document = self._build_document(cover, detail_raster, slice_result, banner, header)
                self.writer.write(document, output_path, cancel_event)

            result = ExportResult(
                export_id=export_id,
                output_path=output_path,
                page_count=document.page_count,
                detail_page_count=len(document.detail_pages),
                cover_included=cover is not None,
                banner_included=document.banner_count > 0,
                forced_split_count=len(slice_result.forced_splits),
                cover_clipped=cover is not None and cover.overflowed,
                duration_ms=timer.duration_ms or 0.0,
            )
            logger.info(f"Export finished: {result.to_dict()}")

        return result

    def _render(self, report: Any) -> Tuple[Optional[RenderedContent], RenderedContent]:
        try:
            cover_content = self.renderer.render_cover(report)
            detail_content = self.renderer.render_detail(report)
        except ReportPagerException:
            raise
        except Exception as e:
            logger.error(f"Content renderer failed: {e}", exc_info=True)
            raise RenderUnavailableError(
                f"Could not render report content: {e}",
                details={"renderer": type(self.renderer).__name__},
            ) from e

        if detail_content is None:
            raise RenderUnavailableError(
                "Content renderer returned no detail capture", stage="detail"
            )
        return cover_content, detail_content

    def _prepare_cover(self, cover_content: Optional[RenderedContent]) -> Optional[CoverPage]:
        if cover_content is None:
            return None
        return self.cover_writer.prepare(cover_content.raster)

    def _paginate(
        self,
        detail_content: RenderedContent,
        header: Optional[ReportHeaderInfo],
    ) -> Tuple[Optional[RasterImage], SliceResult, Optional[RasterImage]]:
        raster = detail_content.raster
        if raster.is_empty:
            logger.info("Detail capture is empty; exporting cover only")
            return None, SliceResult(), None

        # Box offsets stay valid: fitting changes the scale, not the pixels
        fitted = raster.fit_to_width(self.geometry.content_width)
        zones = self.collector.collect(detail_content.content_boxes, fitted.height_px)

        with_banner = header is not None
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="banner") as executor:
            banner_future = None
            if with_banner:
                context = contextvars.copy_context()
                banner_future = executor.submit(context.run, self._render_banner, header)

            with PerformanceTimer("slice_detail_stream", log_level=logging.DEBUG):
                slice_result = self.slicer.slice_raster(fitted, zones, with_banner=with_banner)

            banner = banner_future.result() if banner_future is not None else None

        return fitted, slice_result, banner

    def _render_banner(self, header: ReportHeaderInfo) -> Optional[RasterImage]:
        try:
            return self.banner_renderer.render(header)
        except BannerRenderError as e:
            logger.warning(f"Continuing without header banner: {e}")
            return None
        except Exception as e:
            # Any banner failure degrades to no banner
            logger.warning(
                f"Continuing without header banner: {type(e).__name__}: {e}", exc_info=True
            )
            return None

    def _build_document(
        self,
        cover: Optional[CoverPage],
        detail_raster: Optional[RasterImage],
        slice_result: SliceResult,
        banner: Optional[RasterImage],
        header: Optional[ReportHeaderInfo],
    ) -> Document:
        detail_pages = [
            DetailPage(page_slice, banner if page_slice.stamp_banner else None)
            for page_slice in slice_result.slices
        ]
        return Document(
            geometry=self.geometry,
            detail_raster=detail_raster,
            cover=cover,
            detail_pages=detail_pages,
            title=header.title if header else "",
            author=header.owner_label if header else "",
        )


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ExportCancelledError(pages_written=0)


def export_report(
    renderer: ContentRenderer,
    report: Any,
    header: Optional[ReportHeaderInfo] = None,
    filename: Optional[Union[str, Path]] = None,
    settings: Optional[Settings] = None,
) -> ExportResult:
    """
    Convenience function to export one report.

    Args:
        renderer: Content renderer for the report
        report: Report data snapshot
        header: Identity for the running header
        filename: Output filename or path
        settings: Export settings

    Returns:
        ExportResult describing the written document
    """
    return ReportExporter(renderer, settings=settings).export(report, header, filename)
