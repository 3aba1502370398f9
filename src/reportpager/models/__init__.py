"""
Data models and schemas.
"""

from .raster import RasterImage
from .content import ContentBox, ContentKind, RenderedContent, ReportHeaderInfo
from .pagination import (
    AvoidZone,
    CoverPage,
    DetailPage,
    Document,
    PageGeometry,
    PageSlice,
    SliceResult,
)

__all__ = [
    # Raster
    "RasterImage",
    # Renderer inputs
    "ContentBox",
    "ContentKind",
    "RenderedContent",
    "ReportHeaderInfo",
    # Pagination
    "AvoidZone",
    "PageGeometry",
    "PageSlice",
    "SliceResult",
    "CoverPage",
    "DetailPage",
    "Document",
]
