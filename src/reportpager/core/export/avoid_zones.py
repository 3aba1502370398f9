"""
Avoid-zone collection for the pagination slicer.

Turns the pixel boxes of keep-together blocks (metric tables, chart
panels, photo cards) into a sorted, disjoint list of normalized
AvoidZone ranges. Overlapping and touching boxes are merged so the
slicer only ever consults one zone per cut.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union

from reportpager.core.errors import ValidationError
from reportpager.models.content import ContentBox, ContentKind
from reportpager.models.pagination import AvoidZone

logger = logging.getLogger(__name__)

BoxLike = Union[ContentBox, Tuple[float, float]]


class AvoidZoneCollector:
    """
    Normalize and merge keep-together boxes into avoid zones.

    Boxes are clipped to the raster, degenerate boxes are dropped, and
    boxes separated by no more than ``merge_gap_px`` are merged.
    """

    def __init__(
        self,
        merge_gap_px: float = 0.0,
        kinds: Optional[Iterable[ContentKind]] = None,
    ) -> None:
        """
        Initialize the collector.

        Args:
            merge_gap_px: Largest gap (in source pixels) still treated as touching
            kinds: Block kinds to keep together; all kinds when None

        Raises:
            ValidationError: If merge_gap_px is negative
        """
        if merge_gap_px < 0:
            raise ValidationError(
                f"merge_gap_px must not be negative, got {merge_gap_px}",
                field="merge_gap_px",
            )
        self.merge_gap_px = merge_gap_px
        self.kinds: Optional[Set[ContentKind]] = set(kinds) if kinds is not None else None

    def collect(self, boxes: Sequence[BoxLike], total_height_px: float) -> List[AvoidZone]:
        """
        Build the sorted, disjoint zone list for one raster.

        Args:
            boxes: Keep-together boxes in source pixels
            total_height_px: Height of the raster the boxes were measured on

        Returns:
            Avoid zones as fractions of ``total_height_px``, sorted by top
        """
        if total_height_px <= 0 or not boxes:
            return []

        spans = self._clipped_spans(boxes, total_height_px)
        merged = self._merge(spans)

        zones = [
            AvoidZone(top=top / total_height_px, bottom=bottom / total_height_px)
            for top, bottom in merged
        ]

        logger.debug(
            f"Collected {len(zones)} avoid zones from {len(boxes)} boxes "
            f"(height={total_height_px}px)"
        )
        return zones

    def _clipped_spans(
        self, boxes: Sequence[BoxLike], total_height_px: float
    ) -> List[Tuple[float, float]]:
        spans: List[Tuple[float, float]] = []
        dropped = 0

        for box in boxes:
            if isinstance(box, ContentBox):
                if self.kinds is not None and box.kind not in self.kinds:
                    continue
                top, bottom = box.top, box.bottom
            else:
                top, bottom = box

            top = max(0.0, float(top))
            bottom = min(float(total_height_px), float(bottom))
            if bottom <= top:
                dropped += 1
                continue
            spans.append((top, bottom))

        if dropped:
            logger.debug(f"Dropped {dropped} degenerate or out-of-range boxes")

        spans.sort()
        return spans

    def _merge(self, spans: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
        merged: List[Tuple[float, float]] = []
        for top, bottom in spans:
            if merged and top <= merged[-1][1] + self.merge_gap_px:
                prev_top, prev_bottom = merged[-1]
                merged[-1] = (prev_top, max(prev_bottom, bottom))
            else:
                merged.append((top, bottom))
        return merged


def collect_avoid_zones(
    boxes: Sequence[BoxLike],
    total_height_px: float,
    merge_gap_px: float = 0.0,
) -> List[AvoidZone]:
    """
    Convenience function to collect avoid zones.

    Args:
        boxes: Keep-together boxes in source pixels
        total_height_px: Height of the raster the boxes were measured on
        merge_gap_px: Largest gap still treated as touching

    Returns:
        Sorted, disjoint avoid zones in normalized height fractions
    """
    return AvoidZoneCollector(merge_gap_px=merge_gap_px).collect(boxes, total_height_px)
