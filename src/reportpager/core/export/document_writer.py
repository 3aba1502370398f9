"""
Document writer: assembles cover, banners and detail slices into a PDF.

Every page shares the same physical size and horizontal margins. Detail
pages place their slice at the slice's top margin; pages marked for the
banner get it stamped at the page's top margin. The document is written
to a temporary file and moved into place only once it is complete, so a
failed or cancelled export never leaves a partial file behind.
"""

import logging
import shutil
import threading
from pathlib import Path
from typing import Optional

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from reportpager import __version__
from reportpager.core.errors import ExportCancelledError, WriteFailureError
from reportpager.core.export.cover_page import CoverPageWriter
from reportpager.core.export.raster_codec import RasterEncoder, draw_raster
from reportpager.models.pagination import DetailPage, Document, PageGeometry
from reportpager.models.raster import RasterImage
from reportpager.utils.logging import log_performance

logger = logging.getLogger(__name__)


class DocumentWriter:
    """
    Emit a page-ordered Document as one PDF file.

    Attributes:
        geometry: Page geometry shared by every page
        encoder: Raster encoder used for page images
        cover_writer: Writer placing the cover page
    """

    def __init__(
        self,
        geometry: PageGeometry,
        encoder: Optional[RasterEncoder] = None,
        cover_writer: Optional[CoverPageWriter] = None,
    ) -> None:
        self.geometry = geometry
        self.encoder = encoder or RasterEncoder()
        self.cover_writer = cover_writer or CoverPageWriter(geometry, self.encoder)

    @log_performance(log_level=logging.DEBUG)
    def write(
        self,
        document: Document,
        output_path: Path,
        cancel_event: Optional[threading.Event] = None,
    ) -> Path:
        """
        Write the document to ``output_path``.

        Args:
            document: Pages to emit
            output_path: Destination file
            cancel_event: Checked between pages; set it to abort the export

        Returns:
            Path of the written document

        Raises:
            ExportCancelledError: If cancel_event was set before the document was finalized
            WriteFailureError: If the file cannot be written or moved into place
        """
        output_path = Path(output_path)
        temp_path = output_path.with_suffix(output_path.suffix + ".tmp")
        completed = False

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            canvas = self._new_canvas(temp_path, document)
            pages_written = self._emit_pages(canvas, document, cancel_event)

            _check_cancelled(cancel_event, pages_written)
            canvas.save()
            shutil.move(str(temp_path), str(output_path))
            completed = True

        except OSError as e:
            logger.error(f"Failed to write document {output_path}: {e}")
            raise WriteFailureError(str(e), file_path=str(output_path)) from e

        finally:
            if not completed and temp_path.exists():
                temp_path.unlink()
                logger.debug(f"Removed partial document {temp_path}")

        logger.info(f"Wrote {document.page_count} pages to {output_path}")
        return output_path

    def _new_canvas(self, path: Path, document: Document) -> Canvas:
        geometry = self.geometry
        canvas = Canvas(
            str(path),
            pagesize=(geometry.page_width * mm, geometry.page_height * mm),
        )
        canvas.setCreator(f"ReportPager {__version__}")
        if document.title:
            canvas.setTitle(document.title)
        if document.author:
            canvas.setAuthor(document.author)
        return canvas

    def _emit_pages(
        self,
        canvas: Canvas,
        document: Document,
        cancel_event: Optional[threading.Event],
    ) -> int:
        pages_written = 0

        if document.cover is not None:
            _check_cancelled(cancel_event, pages_written)
            self.cover_writer.draw(canvas, document.cover)
            canvas.showPage()
            pages_written += 1

        if document.detail_pages and document.detail_raster is None:
            raise ValueError("Document has detail pages but no detail raster")

        # Encoded once; reportlab embeds identical images a single time
        banner_reader: Optional[ImageReader] = None
        banner = _first_banner(document)
        if banner is not None:
            banner_reader = self.encoder.reader(banner)

        for page in document.detail_pages:
            _check_cancelled(cancel_event, pages_written)
            self._draw_detail_page(canvas, document.detail_raster, page, banner_reader)  # type: ignore[arg-type]
            canvas.showPage()
            pages_written += 1

        if pages_written == 0:
            logger.warning("Document has no pages; writing a single blank page")
            canvas.showPage()

        return pages_written

    def _draw_detail_page(
        self,
        canvas: Canvas,
        detail_raster: RasterImage,
        page: DetailPage,
        banner_reader: Optional[ImageReader],
    ) -> None:
        geometry = self.geometry
        page_slice = page.page_slice

        if page.banner is not None and banner_reader is not None:
            draw_raster(
                canvas,
                banner_reader,
                geometry.page_height,
                x=geometry.margin_left,
                top=geometry.margin_top,
                width=geometry.content_width,
                height=geometry.banner_height,
            )

        if page_slice.source_height_px <= 0:
            return

        band = detail_raster.crop_rows(page_slice.source_top_px, page_slice.source_height_px)
        draw_raster(
            canvas,
            self.encoder.reader(band),
            geometry.page_height,
            x=geometry.margin_left,
            top=page_slice.top_margin,
            width=geometry.content_width,
            height=page_slice.dest_height,
        )


def _first_banner(document: Document) -> Optional[RasterImage]:
    for page in document.detail_pages:
        if page.banner is not None:
            return page.banner
    return None


def _check_cancelled(cancel_event: Optional[threading.Event], pages_written: int) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info(f"Export cancelled after {pages_written} pages")
        raise ExportCancelledError(pages_written=pages_written)
