"""
Pagination slicer for tall detail rasters.

Walks the detail stream top to bottom in physical units, proposing one
page-sized cut at a time. A cut that would land inside an avoid zone is
snapped back to the zone's top edge, provided the shortened page still
holds at least ``min_fill_ratio`` of its content slot; otherwise the
unadjusted cut is kept and the zone is recorded as a forced split.

The scan is single-pass: after a snap the new cut is not re-checked
against earlier zones.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from reportpager.core.errors import ValidationError
from reportpager.models.pagination import AvoidZone, PageGeometry, PageSlice, SliceResult
from reportpager.models.raster import RasterImage
from reportpager.utils.logging import log_performance

logger = logging.getLogger(__name__)

# Smallest share of a content slot a snapped page may keep
MIN_ACCEPTABLE_FILL_RATIO = 0.25

# Remaining height (mm) below which slicing stops
TERMINATION_EPSILON = 0.5

# Tolerance on normalized zone edges
ZONE_EDGE_TOLERANCE = 1e-6


class PaginationSlicer:
    """
    Split one tall raster into page-sized slices.

    The first detail page uses ``geometry.first_page_top_margin``; every
    later page uses ``geometry.continuation_top_margin``, which reserves
    room for the header banner.
    """

    def __init__(
        self,
        geometry: PageGeometry,
        min_fill_ratio: float = MIN_ACCEPTABLE_FILL_RATIO,
        epsilon: float = TERMINATION_EPSILON,
    ) -> None:
        """
        Initialize the slicer.

        Args:
            geometry: Output page geometry
            min_fill_ratio: Snap floor as a fraction of the slot height
            epsilon: Termination threshold in millimetres

        Raises:
            ValidationError: If min_fill_ratio is outside [0, 1] or epsilon is not positive
        """
        if not 0.0 <= min_fill_ratio <= 1.0:
            raise ValidationError(
                f"min_fill_ratio must be in [0, 1], got {min_fill_ratio}",
                field="min_fill_ratio",
            )
        if epsilon <= 0:
            raise ValidationError(f"epsilon must be positive, got {epsilon}", field="epsilon")

        self.geometry = geometry
        self.min_fill_ratio = min_fill_ratio
        self.epsilon = epsilon

    @log_performance(log_level=logging.DEBUG)
    def slice_raster(
        self,
        raster: RasterImage,
        zones: Sequence[AvoidZone],
        with_banner: bool = False,
    ) -> SliceResult:
        """
        Slice a detail raster at its own physical scale.

        Args:
            raster: Detail raster, already fitted to the content width
            zones: Sorted, disjoint avoid zones for this raster
            with_banner: Whether continuation pages will carry a banner

        Returns:
            SliceResult covering every row of the raster exactly once
        """
        return self.slice(
            raster.physical_height,
            zones,
            px_per_unit=raster.px_per_unit,
            height_px=raster.height_px,
            with_banner=with_banner,
        )

    def slice(
        self,
        source_height: float,
        zones: Sequence[AvoidZone],
        px_per_unit: float = 1.0,
        height_px: Optional[int] = None,
        with_banner: bool = False,
    ) -> SliceResult:
        """
        Slice a source of ``source_height`` millimetres.

        Args:
            source_height: Physical height of the detail stream
            zones: Sorted, disjoint avoid zones (normalized)
            px_per_unit: Source pixels per millimetre
            height_px: Source height in pixels (derived when omitted)
            with_banner: Whether continuation pages will carry a banner

        Returns:
            SliceResult with contiguous slices and any forced splits
        """
        if px_per_unit <= 0:
            raise ValidationError(
                f"px_per_unit must be positive, got {px_per_unit}", field="px_per_unit"
            )
        if height_px is None:
            height_px = int(round(source_height * px_per_unit))

        result = SliceResult(source_height=max(source_height, 0.0))
        if source_height <= self.epsilon:
            logger.info("Detail stream is empty; no detail pages emitted")
            return result

        ordered = sorted(zones, key=lambda zone: zone.top)
        chunks = self._plan_chunks(source_height, ordered, result.forced_splits)
        result.slices = self._to_slices(chunks, px_per_unit, height_px, with_banner)

        logger.info(
            f"Sliced {source_height:.1f}mm detail stream into "
            f"{result.page_count} pages ({len(result.forced_splits)} forced splits)"
        )
        return result

    def _plan_chunks(
        self,
        source_height: float,
        zones: List[AvoidZone],
        forced_splits: List[AvoidZone],
    ) -> List[Tuple[float, float, float]]:
        """Greedy pass producing (source_top, chunk, top_margin) triples."""
        geometry = self.geometry
        chunks: List[Tuple[float, float, float]] = []

        remaining = source_height
        cursor = 0.0
        is_first = True

        while remaining > self.epsilon:
            top_margin = (
                geometry.first_page_top_margin if is_first else geometry.continuation_top_margin
            )
            slot = geometry.slot_height(top_margin)  # type: ignore[arg-type]
            chunk = min(remaining, slot)

            # The final cut is the end of the document and splits nothing
            if chunk < remaining:
                chunk = self._snap(cursor, chunk, slot, source_height, zones, forced_splits)

            chunks.append((cursor, chunk, top_margin))  # type: ignore[arg-type]
            cursor += chunk
            remaining -= chunk
            is_first = False

        return chunks

    def _snap(
        self,
        cursor: float,
        chunk: float,
        slot: float,
        source_height: float,
        zones: List[AvoidZone],
        forced_splits: List[AvoidZone],
    ) -> float:
        cut_fraction = (cursor + chunk) / source_height

        for zone in zones:
            if zone.top > cut_fraction:
                break
            if not zone.contains_cut(cut_fraction, ZONE_EDGE_TOLERANCE):
                continue

            snapped = max(0.0, zone.top * source_height - cursor)
            # A page shorter than epsilon makes no progress, whatever the floor
            if snapped > self.epsilon and snapped >= self.min_fill_ratio * slot:
                return snapped

            forced_splits.append(zone)
            logger.warning(
                f"Avoid zone [{zone.top:.4f}, {zone.bottom:.4f}] "
                f"({zone.span * source_height:.1f}mm) cannot be kept on one page; "
                f"cutting inside it at {cursor + chunk:.1f}mm"
            )
            break

        return chunk

    def _to_slices(
        self,
        chunks: List[Tuple[float, float, float]],
        px_per_unit: float,
        height_px: int,
        with_banner: bool,
    ) -> List[PageSlice]:
        geometry = self.geometry
        slices: List[PageSlice] = []
        last = len(chunks) - 1

        # A single detail page that fits a continuation slot is laid out
        # like a continuation page so it can carry the banner
        single_banner_page = (
            with_banner
            and len(chunks) == 1
            and chunks[0][1] <= geometry.continuation_slot_height
        )

        for index, (source_top, chunk, top_margin) in enumerate(chunks):
            top_px = int(round(source_top * px_per_unit))
            if single_banner_page:
                top_margin = geometry.continuation_top_margin  # type: ignore[assignment]
                stamp_banner = True
            else:
                stamp_banner = with_banner and index > 0

            if index == last:
                bottom_px = height_px
                # Residue rows are squeezed into the slot, never into the bottom margin
                dest_height = min(
                    max(chunk, (bottom_px - top_px) / px_per_unit),
                    geometry.slot_height(top_margin),
                )
            else:
                bottom_px = int(round((source_top + chunk) * px_per_unit))
                dest_height = chunk

            slices.append(
                PageSlice(
                    index=index,
                    source_top_px=top_px,
                    source_height_px=bottom_px - top_px,
                    source_top=source_top,
                    dest_height=dest_height,
                    top_margin=top_margin,
                    stamp_banner=stamp_banner,
                )
            )

        return slices


def slice_detail_stream(
    raster: RasterImage,
    zones: Sequence[AvoidZone],
    geometry: PageGeometry,
    min_fill_ratio: float = MIN_ACCEPTABLE_FILL_RATIO,
    with_banner: bool = False,
) -> SliceResult:
    """
    Convenience function to slice a detail raster.

    Args:
        raster: Detail raster fitted to the content width
        zones: Sorted, disjoint avoid zones
        geometry: Output page geometry
        min_fill_ratio: Snap floor as a fraction of the slot height
        with_banner: Whether continuation pages will carry a banner

    Returns:
        SliceResult for the raster
    """
    slicer = PaginationSlicer(geometry, min_fill_ratio=min_fill_ratio)
    return slicer.slice_raster(raster, zones, with_banner=with_banner)
