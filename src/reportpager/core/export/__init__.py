"""
Paginated document export for rendered reports.

This module turns a cover capture and one tall detail capture into a
multi-page PDF whose page boundaries avoid splitting keep-together
blocks, with a running header banner on continuation pages.
"""

from reportpager.core.export.avoid_zones import AvoidZoneCollector, collect_avoid_zones
from reportpager.core.export.cover_page import CoverPageWriter
from reportpager.core.export.document_writer import DocumentWriter
from reportpager.core.export.header_banner import HeaderBannerRenderer, render_header_banner
from reportpager.core.export.pipeline import ExportResult, ReportExporter, export_report
from reportpager.core.export.raster_codec import RasterEncoder
from reportpager.core.export.renderer import ContentRenderer, StaticContentRenderer
from reportpager.core.export.slicer import PaginationSlicer, slice_detail_stream

__all__ = [
    "AvoidZoneCollector",
    "collect_avoid_zones",
    "PaginationSlicer",
    "slice_detail_stream",
    "HeaderBannerRenderer",
    "render_header_banner",
    "CoverPageWriter",
    "RasterEncoder",
    "DocumentWriter",
    "ContentRenderer",
    "StaticContentRenderer",
    "ReportExporter",
    "ExportResult",
    "export_report",
]
