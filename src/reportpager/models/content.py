"""
Pydantic models for the inputs supplied by the content renderer and the
report data model.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from reportpager.models.raster import RasterImage


class ContentKind(str, Enum):
    """Kinds of keep-together blocks the renderer marks."""

    TABLE = "table"
    CHART = "chart"
    PHOTO = "photo"
    SECTION = "section"
    SIGNATURE = "signature"
    OTHER = "other"


class ContentBox(BaseModel):
    """
    Vertical extent of one atomic block in the rendered raster.

    Offsets are source pixels measured from the top of the raster.
    Degenerate boxes (``bottom <= top``) are accepted here and dropped
    by the avoid-zone collector.
    """

    top: float = Field(..., description="Top offset in source pixels")
    bottom: float = Field(..., description="Bottom offset in source pixels")
    kind: ContentKind = Field(default=ContentKind.OTHER, description="Block kind")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={"example": {"top": 120, "bottom": 480, "kind": "table"}},
    )

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def is_degenerate(self) -> bool:
        return self.bottom <= self.top


class RenderedContent(BaseModel):
    """A raster capture together with its keep-together boxes."""

    raster: RasterImage
    content_boxes: List[ContentBox] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)


class ReportHeaderInfo(BaseModel):
    """
    Document identity shown in the running header banner.

    Attributes:
        title: Report title, left column
        subtitle: Optional second line under the title
        owner_label: Department or owner, right column
        date: Report date as it should be printed
    """

    title: str = Field(..., description="Report title", min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, description="Line under the title")
    owner_label: str = Field(default="", description="Department or owner label")
    date: str = Field(default="", description="Printed report date")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Lot Quality Report",
                "subtitle": "Multi-lot manufacturing",
                "owner_label": "QC Department",
                "date": "2026-10-19",
            }
        }
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Reject titles that are only whitespace."""
        if not v.strip():
            raise ValueError("Title must not be blank")
        return v.strip()

    @model_validator(mode="after")
    def strip_labels(self) -> "ReportHeaderInfo":
        self.owner_label = self.owner_label.strip()
        self.date = self.date.strip()
        return self
