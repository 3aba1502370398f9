"""
Report Export Demo

Demonstrates the complete export workflow with a synthetic renderer:
1. Draw a cover block and a tall detail stream of tables, charts and photos
2. Collect keep-together boxes for every block
3. Slice the detail stream into pages without splitting blocks
4. Write the paginated PDF with a running header banner
"""

import random
from pathlib import Path
from typing import Any, List, Optional, Tuple

from PIL import Image, ImageDraw

from reportpager.core.config import Settings
from reportpager.core.export import ContentRenderer, ReportExporter
from reportpager.core.logging_config import setup_logging
from reportpager.models import (
    ContentBox,
    ContentKind,
    RasterImage,
    RenderedContent,
    ReportHeaderInfo,
)

# 96 dpi captured at 2x, like a browser screenshot
PX_PER_MM = 96.0 / 25.4 * 2
WIDTH_PX = 1436

BLOCK_COLORS = {
    ContentKind.TABLE: (219, 234, 254),
    ContentKind.CHART: (220, 252, 231),
    ContentKind.PHOTO: (254, 243, 199),
    ContentKind.SECTION: (243, 244, 246),
}


class SyntheticReportRenderer(ContentRenderer):
    """Renders a fake quality report made of coloured blocks."""

    def __init__(self, seed: int = 7) -> None:
        self.seed = seed

    def render_cover(self, report: Any) -> Optional[RenderedContent]:
        image = Image.new("RGB", (WIDTH_PX, 900), (255, 255, 255))
        draw = ImageDraw.Draw(image)
        draw.rectangle([40, 40, WIDTH_PX - 40, 300], fill=(30, 64, 175))
        draw.text((80, 120), report["title"], fill=(255, 255, 255))
        for row in range(4):
            top = 360 + row * 120
            draw.rectangle([40, top, WIDTH_PX - 40, top + 90], outline=(156, 163, 175), width=2)
        return RenderedContent(raster=RasterImage.from_pil(image, PX_PER_MM))

    def render_detail(self, report: Any) -> RenderedContent:
        rng = random.Random(self.seed)
        blocks: List[Tuple[int, int, ContentKind]] = []

        cursor = 40
        for _ in range(report["blocks"]):
            kind = rng.choice(list(BLOCK_COLORS))
            height = rng.randint(180, 900)
            blocks.append((cursor, cursor + height, kind))
            cursor += height + rng.randint(20, 60)

        image = Image.new("RGB", (WIDTH_PX, cursor + 40), (255, 255, 255))
        draw = ImageDraw.Draw(image)
        boxes = []
        for index, (top, bottom, kind) in enumerate(blocks):
            draw.rectangle(
                [40, top, WIDTH_PX - 40, bottom], fill=BLOCK_COLORS[kind], outline=(75, 85, 99)
            )
            draw.text((60, top + 20), f"{kind.value} #{index + 1}", fill=(17, 24, 39))
            boxes.append(ContentBox(top=top, bottom=bottom, kind=kind))

        return RenderedContent(raster=RasterImage.from_pil(image, PX_PER_MM), content_boxes=boxes)


def run_export(output_dir: Path) -> None:
    """Export one synthetic report and print what was written."""
    print("\n=== Exporting Synthetic Report ===")

    settings = Settings(output_dir=output_dir)
    exporter = ReportExporter(SyntheticReportRenderer(), settings=settings)
    header = ReportHeaderInfo(
        title="Lot Quality Report",
        subtitle="Line 3, week 42",
        owner_label="QC Department",
        date="2026-10-19",
    )

    result = exporter.export(
        {"title": header.title, "blocks": 24},
        header,
        filename="lot_quality_demo.pdf",
        report_id="demo",
    )

    print(f"  Output: {result.output_path}")
    print(f"  Pages: {result.page_count} ({result.detail_page_count} detail)")
    print(f"  Banner on continuation pages: {result.banner_included}")
    print(f"  Blocks split across pages: {result.forced_split_count}")
    print(f"  Duration: {result.duration_ms:.0f}ms")


def main():
    """Run the demo."""
    print("=" * 60)
    print("ReportPager Export Demo")
    print("=" * 60)

    setup_logging(log_level="INFO")

    run_export(Path("./exports"))

    print("\n" + "=" * 60)
    print("Demo Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
