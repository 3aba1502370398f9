"""
Tests for the PDF document writer.

Tests cover:
- Page count, page size and metadata of written documents
- Banner placement on continuation pages
- Atomic writes on cancellation and write failures
"""

import threading
from pathlib import Path

import pytest
from pypdf import PdfReader
from reportlab.lib.units import mm

from reportpager import __version__
from reportpager.core.errors import ExportCancelledError, WriteFailureError
from reportpager.core.export.cover_page import CoverPageWriter
from reportpager.core.export.document_writer import DocumentWriter
from reportpager.core.export.raster_codec import RasterEncoder
from reportpager.core.export.slicer import PaginationSlicer
from reportpager.models.pagination import DetailPage, Document, PageGeometry
from reportpager.models.raster import RasterImage


@pytest.fixture
def geometry() -> PageGeometry:
    """Default A4 geometry."""
    return PageGeometry.a4()


@pytest.fixture
def writer(geometry: PageGeometry) -> DocumentWriter:
    """Writer using PNG so test rasters stay exact."""
    return DocumentWriter(geometry, RasterEncoder(image_format="png"))


@pytest.fixture
def document(geometry: PageGeometry) -> Document:
    """Cover plus a 600mm detail stream with banners on continuation pages."""
    detail = RasterImage.blank(380, 1200, 2.0, value=230)
    banner = RasterImage.blank(380, 24, 2.0, value=40)
    result = PaginationSlicer(geometry).slice_raster(detail, [], with_banner=True)

    cover = CoverPageWriter(geometry).prepare(RasterImage.blank(380, 500, 1.0, value=200))
    return Document(
        geometry=geometry,
        detail_raster=detail,
        cover=cover,
        detail_pages=[
            DetailPage(page_slice, banner if page_slice.stamp_banner else None)
            for page_slice in result.slices
        ],
        title="Lot Quality Report",
        author="QC Department",
    )


@pytest.mark.integration
class TestWrite:
    """Tests for DocumentWriter.write."""

    def test_page_count_and_size(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test every page is emitted at the configured size."""
        output = writer.write(document, tmp_path / "report.pdf")

        reader = PdfReader(str(output))
        # Cover + 600mm over 277mm and 262mm slots
        assert len(reader.pages) == 1 + 3
        for page in reader.pages:
            assert float(page.mediabox.width) == pytest.approx(210 * mm, abs=0.01)
            assert float(page.mediabox.height) == pytest.approx(297 * mm, abs=0.01)

    def test_metadata(self, writer: DocumentWriter, document: Document, tmp_path: Path) -> None:
        """Test title and author come from the document."""
        output = writer.write(document, tmp_path / "report.pdf")

        metadata = PdfReader(str(output)).metadata
        assert metadata.title == "Lot Quality Report"
        assert metadata.author == "QC Department"
        assert metadata.creator == f"ReportPager {__version__}"

    def test_banner_on_continuation_pages(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test continuation pages carry two images and the others one."""
        output = writer.write(document, tmp_path / "report.pdf")

        image_counts = [len(page.images) for page in PdfReader(str(output)).pages]
        assert image_counts == [1, 1, 2, 2]

    def test_no_temp_file_left(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test only the final document remains after a successful write."""
        writer.write(document, tmp_path / "report.pdf")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["report.pdf"]

    def test_creates_parent_directory(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test missing output directories are created."""
        output = writer.write(document, tmp_path / "nested" / "dir" / "report.pdf")
        assert output.exists()

    def test_overwrites_existing_file(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test an existing document is replaced."""
        target = tmp_path / "report.pdf"
        target.write_bytes(b"old")

        writer.write(document, target)
        assert target.read_bytes().startswith(b"%PDF")

    def test_cover_only(self, writer: DocumentWriter, document: Document, tmp_path: Path) -> None:
        """Test a document without detail pages has just the cover."""
        document.detail_pages = []
        output = writer.write(document, tmp_path / "cover.pdf")
        assert len(PdfReader(str(output)).pages) == 1

    def test_empty_document(
        self, writer: DocumentWriter, geometry: PageGeometry, tmp_path: Path
    ) -> None:
        """Test a document without pages is still a valid file."""
        output = writer.write(Document(geometry=geometry), tmp_path / "empty.pdf")
        assert len(PdfReader(str(output)).pages) == 1

    def test_detail_pages_require_raster(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test detail pages without their source raster are rejected."""
        document.detail_raster = None
        with pytest.raises(ValueError):
            writer.write(document, tmp_path / "report.pdf")
        assert list(tmp_path.iterdir()) == []

    def test_jpeg_encoding(
        self, geometry: PageGeometry, document: Document, tmp_path: Path
    ) -> None:
        """Test the default JPEG encoder produces a readable document."""
        output = DocumentWriter(geometry).write(document, tmp_path / "report.pdf")
        assert len(PdfReader(str(output)).pages) == 4


@pytest.mark.integration
class TestAtomicWrite:
    """Tests for cancellation and failure handling."""

    def test_cancelled_before_start(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test a cancelled export leaves no file behind."""
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(ExportCancelledError) as exc_info:
            writer.write(document, tmp_path / "report.pdf", cancel_event=cancel)

        assert exc_info.value.details["pages_written"] == 0
        assert list(tmp_path.iterdir()) == []

    def test_cancelled_mid_document(
        self, geometry: PageGeometry, document: Document, tmp_path: Path
    ) -> None:
        """Test cancelling between pages discards the partial document."""
        cancel = threading.Event()

        class CancellingEncoder(RasterEncoder):
            def reader(self, raster):
                cancel.set()
                return super().reader(raster)

        writer = DocumentWriter(geometry, CancellingEncoder())
        with pytest.raises(ExportCancelledError) as exc_info:
            writer.write(document, tmp_path / "report.pdf", cancel_event=cancel)

        assert exc_info.value.details["pages_written"] >= 1
        assert list(tmp_path.iterdir()) == []

    def test_cancelled_keeps_previous_file(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test a cancelled export leaves an earlier document untouched."""
        target = tmp_path / "report.pdf"
        target.write_bytes(b"previous")
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(ExportCancelledError):
            writer.write(document, target, cancel_event=cancel)

        assert target.read_bytes() == b"previous"

    def test_write_failure(
        self, writer: DocumentWriter, document: Document, tmp_path: Path
    ) -> None:
        """Test OS errors surface as WriteFailureError with the OS message."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(WriteFailureError) as exc_info:
            writer.write(document, blocker / "report.pdf")

        assert exc_info.value.error_code == "WRITE_FAILURE"
        assert exc_info.value.details["file_path"] == str(blocker / "report.pdf")
        assert exc_info.value.message
