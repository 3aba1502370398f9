"""
Tests for avoid-zone collection.

Tests cover:
- Normalization against the raster height
- Merging of overlapping and touching boxes
- Clipping and dropping of out-of-range boxes
- Kind filtering
"""

import pytest

from reportpager.core.errors import ValidationError
from reportpager.core.export.avoid_zones import AvoidZoneCollector, collect_avoid_zones
from reportpager.models.content import ContentBox, ContentKind
from reportpager.models.pagination import AvoidZone


@pytest.fixture
def collector() -> AvoidZoneCollector:
    """Collector with default settings."""
    return AvoidZoneCollector()


class TestCollect:
    """Tests for AvoidZoneCollector.collect."""

    def test_empty_inputs(self, collector: AvoidZoneCollector) -> None:
        """Test empty box lists and zero heights yield no zones."""
        assert collector.collect([], 1000) == []
        assert collector.collect([ContentBox(top=0, bottom=10)], 0) == []

    def test_normalizes_boxes(self, collector: AvoidZoneCollector) -> None:
        """Test pixel boxes become fractions of the total height."""
        zones = collector.collect([ContentBox(top=850, bottom=950)], 1000)
        assert zones == [AvoidZone(top=0.85, bottom=0.95)]

    def test_sorted_output(self, collector: AvoidZoneCollector) -> None:
        """Test zones are returned sorted by top regardless of input order."""
        zones = collector.collect([(600, 700), (100, 200), (300, 400)], 1000)
        assert [zone.top for zone in zones] == [0.1, 0.3, 0.6]

    def test_merges_overlapping_boxes(self, collector: AvoidZoneCollector) -> None:
        """Test overlapping boxes merge into one zone."""
        zones = collector.collect([(100, 300), (250, 400), (350, 380)], 1000)
        assert zones == [AvoidZone(top=0.1, bottom=0.4)]

    def test_merges_touching_boxes(self, collector: AvoidZoneCollector) -> None:
        """Test boxes sharing an edge merge into one zone."""
        zones = collector.collect([(100, 200), (200, 300)], 1000)
        assert zones == [AvoidZone(top=0.1, bottom=0.3)]

    def test_keeps_separated_boxes(self, collector: AvoidZoneCollector) -> None:
        """Test boxes with a gap stay separate."""
        zones = collector.collect([(100, 200), (201, 300)], 1000)
        assert len(zones) == 2

    def test_merge_gap(self) -> None:
        """Test boxes closer than merge_gap_px are merged."""
        collector = AvoidZoneCollector(merge_gap_px=5)
        zones = collector.collect([(100, 200), (204, 300), (400, 500)], 1000)
        assert zones == [AvoidZone(top=0.1, bottom=0.3), AvoidZone(top=0.4, bottom=0.5)]

    def test_clips_to_raster(self, collector: AvoidZoneCollector) -> None:
        """Test boxes extending past the raster are clipped to it."""
        zones = collector.collect([(-50, 100), (900, 1200)], 1000)
        assert zones == [AvoidZone(top=0.0, bottom=0.1), AvoidZone(top=0.9, bottom=1.0)]

    def test_drops_degenerate_boxes(self, collector: AvoidZoneCollector) -> None:
        """Test zero-height, inverted and out-of-range boxes are dropped."""
        boxes = [(100, 100), (300, 200), (1100, 1200), (400, 500)]
        zones = collector.collect(boxes, 1000)
        assert zones == [AvoidZone(top=0.4, bottom=0.5)]

    def test_zones_are_disjoint(self, collector: AvoidZoneCollector) -> None:
        """Test every zone ends before the next one starts."""
        boxes = [(i * 60, i * 60 + 50) for i in range(20)] + [(25, 70)]
        zones = collector.collect(boxes, 2000)
        for previous, current in zip(zones, zones[1:]):
            assert previous.bottom < current.top

    def test_kind_filter(self) -> None:
        """Test only the configured kinds are kept together."""
        collector = AvoidZoneCollector(kinds=[ContentKind.TABLE, ContentKind.PHOTO])
        boxes = [
            ContentBox(top=0, bottom=100, kind=ContentKind.TABLE),
            ContentBox(top=200, bottom=300, kind=ContentKind.SECTION),
            ContentBox(top=400, bottom=500, kind=ContentKind.PHOTO),
        ]
        zones = collector.collect(boxes, 1000)
        assert zones == [AvoidZone(top=0.0, bottom=0.1), AvoidZone(top=0.4, bottom=0.5)]

    def test_negative_merge_gap_rejected(self) -> None:
        """Test negative merge gaps are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            AvoidZoneCollector(merge_gap_px=-1)

        assert exc_info.value.details["field"] == "merge_gap_px"


def test_collect_avoid_zones_function() -> None:
    """Test the convenience function."""
    zones = collect_avoid_zones([ContentBox(top=0, bottom=500)], 1000)
    assert zones == [AvoidZone(top=0.0, bottom=0.5)]
