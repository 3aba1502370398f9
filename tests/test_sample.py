"""
Sample tests to verify the test framework and package metadata.
"""

import pytest

import reportpager


def test_version() -> None:
    """Test the package version string."""
    assert reportpager.__version__ == "0.1.0"


@pytest.mark.unit
def test_public_export_api() -> None:
    """Test the export package exposes the pipeline entry points."""
    from reportpager.core import export

    for name in ("ReportExporter", "export_report", "PaginationSlicer", "ContentRenderer"):
        assert name in export.__all__
        assert hasattr(export, name)
