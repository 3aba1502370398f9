"""
Pagination data models for the document export engine.

This module defines the geometry of an output page, the normalized
"do-not-split" zones the slicer honours, the slices it emits, and the
page-ordered document the writer consumes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from reportpager.core.errors import ValidationError
from reportpager.models.raster import RasterImage


@dataclass(frozen=True)
class AvoidZone:
    """
    A vertical range a page boundary must not fall strictly inside.

    Attributes:
        top: Upper edge as a fraction of the total document height
        bottom: Lower edge as a fraction of the total document height
    """

    top: float
    bottom: float

    def __post_init__(self) -> None:
        """Validate zone bounds after initialization."""
        if not (0.0 <= self.top <= 1.0 and 0.0 <= self.bottom <= 1.0):
            raise ValidationError(
                f"Zone bounds must lie in [0, 1], got ({self.top}, {self.bottom})",
                field="avoid_zone",
            )
        if self.bottom <= self.top:
            raise ValidationError(
                f"Zone bottom ({self.bottom}) must be greater than top ({self.top})",
                field="avoid_zone",
            )

    @property
    def span(self) -> float:
        """Normalized height of the zone."""
        return self.bottom - self.top

    def contains_cut(self, cut_fraction: float, tolerance: float = 1e-6) -> bool:
        """
        Check whether a cut at ``cut_fraction`` would split this zone.

        A cut exactly on the bottom edge counts as inside; a cut exactly
        on the top edge does not.
        """
        return self.top + tolerance < cut_fraction < self.bottom + tolerance

    def to_dict(self) -> Dict[str, float]:
        """Convert zone to dictionary."""
        return {"top": self.top, "bottom": self.bottom}


@dataclass(frozen=True)
class PageGeometry:
    """
    Physical page layout, in millimetres.

    Attributes:
        page_width: Page width
        page_height: Page height
        margin_top: Top margin of the cover page; the banner is stamped here
        margin_bottom: Bottom margin of every page
        margin_left: Left margin of every page
        margin_right: Right margin of every page
        banner_height: Height reserved for the header banner
        banner_gap: Space between the banner and the slice below it
        first_page_top_margin: Top margin of the first detail page
        continuation_top_margin: Top margin of continuation pages
    """

    page_width: float = 210.0
    page_height: float = 297.0
    margin_top: float = 10.0
    margin_bottom: float = 10.0
    margin_left: float = 10.0
    margin_right: float = 10.0
    banner_height: float = 12.0
    banner_gap: float = 3.0
    first_page_top_margin: Optional[float] = None
    continuation_top_margin: Optional[float] = None

    def __post_init__(self) -> None:
        """Fill derived margins and validate the layout."""
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValidationError(
                f"Page size must be positive, got {self.page_width}x{self.page_height}",
                field="page_size",
            )
        margins = (
            self.margin_top,
            self.margin_bottom,
            self.margin_left,
            self.margin_right,
            self.banner_height,
            self.banner_gap,
        )
        if any(value < 0 for value in margins):
            raise ValidationError(
                "Margins and banner dimensions must not be negative", field="margins"
            )

        if self.first_page_top_margin is None:
            object.__setattr__(self, "first_page_top_margin", self.margin_top)
        if self.continuation_top_margin is None:
            object.__setattr__(
                self,
                "continuation_top_margin",
                self.margin_top + self.banner_height + self.banner_gap,
            )

        if self.continuation_top_margin < self.banner_bottom:  # type: ignore[operator]
            raise ValidationError(
                f"Continuation top margin ({self.continuation_top_margin}mm) overlaps "
                f"the header banner ending at {self.banner_bottom}mm",
                field="continuation_top_margin",
            )
        if self.content_width <= 0:
            raise ValidationError(
                "Horizontal margins leave no room for content", field="margins"
            )
        if self.first_slot_height <= 0 or self.continuation_slot_height <= 0:
            raise ValidationError(
                "Vertical margins leave no room for content", field="margins"
            )

    @classmethod
    def a4(cls, **overrides: Any) -> "PageGeometry":
        """A4 portrait geometry with optional overrides."""
        params: Dict[str, Any] = {"page_width": 210.0, "page_height": 297.0}
        params.update(overrides)
        return cls(**params)

    @property
    def banner_bottom(self) -> float:
        """Distance from the page top to the bottom edge of the banner."""
        return self.margin_top + self.banner_height

    @property
    def content_width(self) -> float:
        """Horizontal space between the left and right margins."""
        return self.page_width - self.margin_left - self.margin_right

    def slot_height(self, top_margin: float) -> float:
        """Usable vertical space below ``top_margin``."""
        return self.page_height - top_margin - self.margin_bottom

    @property
    def first_slot_height(self) -> float:
        return self.slot_height(self.first_page_top_margin)  # type: ignore[arg-type]

    @property
    def continuation_slot_height(self) -> float:
        return self.slot_height(self.continuation_top_margin)  # type: ignore[arg-type]

    @property
    def cover_slot_height(self) -> float:
        return self.slot_height(self.margin_top)

    def to_dict(self) -> Dict[str, Any]:
        """Convert geometry to dictionary."""
        return {
            "page_width": self.page_width,
            "page_height": self.page_height,
            "margin_top": self.margin_top,
            "margin_bottom": self.margin_bottom,
            "margin_left": self.margin_left,
            "margin_right": self.margin_right,
            "banner_height": self.banner_height,
            "banner_gap": self.banner_gap,
            "first_page_top_margin": self.first_page_top_margin,
            "continuation_top_margin": self.continuation_top_margin,
            "content_width": self.content_width,
            "first_slot_height": self.first_slot_height,
            "continuation_slot_height": self.continuation_slot_height,
        }


@dataclass(frozen=True)
class PageSlice:
    """
    One contiguous band of the source raster mapped onto one output page.

    Attributes:
        index: Position of the slice in the detail stream (0-based)
        source_top_px: First source row of the band
        source_height_px: Number of source rows in the band
        source_top: Physical offset of the band within the source
        dest_height: Physical height the band occupies on the page
        top_margin: Distance from the page top to the band
        stamp_banner: Whether the header banner belongs above the band
    """

    index: int
    source_top_px: int
    source_height_px: int
    source_top: float
    dest_height: float
    top_margin: float
    stamp_banner: bool

    @property
    def source_bottom_px(self) -> int:
        return self.source_top_px + self.source_height_px

    def to_dict(self) -> Dict[str, Any]:
        """Convert slice to dictionary."""
        return {
            "index": self.index,
            "source_top_px": self.source_top_px,
            "source_height_px": self.source_height_px,
            "source_top": self.source_top,
            "dest_height": self.dest_height,
            "top_margin": self.top_margin,
            "stamp_banner": self.stamp_banner,
        }


@dataclass
class SliceResult:
    """
    Output of one slicing pass.

    Attributes:
        slices: Emitted slices in page order
        source_height: Physical height of the sliced raster
        forced_splits: Zones a page boundary was allowed to fall inside
    """

    slices: List[PageSlice] = field(default_factory=list)
    source_height: float = 0.0
    forced_splits: List[AvoidZone] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.slices)

    @property
    def is_empty(self) -> bool:
        return not self.slices

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "page_count": self.page_count,
            "source_height": self.source_height,
            "forced_splits": [zone.to_dict() for zone in self.forced_splits],
            "slices": [page_slice.to_dict() for page_slice in self.slices],
        }


@dataclass(frozen=True)
class CoverPage:
    """
    The fixed-size cover block, written as a page of its own.

    Attributes:
        raster: Cover raster, fitted to its box and clipped to one page
        full_bleed: Whether the raster spans the whole page instead of the content box
        clipped_px: Source rows dropped because the cover overflowed one page
    """

    raster: RasterImage
    full_bleed: bool = False
    clipped_px: int = 0

    @property
    def overflowed(self) -> bool:
        return self.clipped_px > 0


@dataclass(frozen=True)
class DetailPage:
    """One page of the detail stream: a slice plus an optional banner."""

    page_slice: PageSlice
    banner: Optional[RasterImage] = None


Page = Union[CoverPage, DetailPage]


@dataclass
class Document:
    """
    Page-ordered description of the output document.

    Built once per export and discarded once the binary is written.
    """

    geometry: PageGeometry
    detail_raster: Optional[RasterImage] = None
    cover: Optional[CoverPage] = None
    detail_pages: List[DetailPage] = field(default_factory=list)
    title: str = ""
    author: str = ""

    @property
    def pages(self) -> List[Page]:
        """All pages in output order."""
        pages: List[Page] = []
        if self.cover is not None:
            pages.append(self.cover)
        pages.extend(self.detail_pages)
        return pages

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def banner_count(self) -> int:
        """Number of detail pages carrying the header banner."""
        return sum(1 for page in self.detail_pages if page.banner is not None)
