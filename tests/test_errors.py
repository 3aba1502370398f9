"""
Tests for custom exception hierarchy.
"""

import pytest

from reportpager.core.errors import (
    BannerRenderError,
    ConfigurationError,
    ExportCancelledError,
    RenderUnavailableError,
    ReportPagerException,
    ValidationError,
    WriteFailureError,
)


class TestReportPagerException:
    """Tests for base ReportPagerException class."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = ReportPagerException(
            message="Test error",
            error_code="TEST_ERROR",
        )

        assert str(exc) == "TEST_ERROR: Test error"
        assert exc.message == "Test error"
        assert exc.error_code == "TEST_ERROR"
        assert exc.details == {}
        assert exc.suggestions == []

    def test_exception_with_details(self):
        """Test exception with details and suggestions."""
        exc = ReportPagerException(
            message="Test error with details",
            error_code="TEST_ERROR",
            details={"field": "test", "value": 123},
            suggestions=["Try this", "Or that"],
        )

        assert exc.details == {"field": "test", "value": 123}
        assert exc.suggestions == ["Try this", "Or that"]

    def test_to_dict(self):
        """Test exception serialization."""
        exc = ReportPagerException(
            message="Test error",
            error_code="TEST_ERROR",
            details={"key": "value"},
            suggestions=["Fix it"],
        )

        assert exc.to_dict() == {
            "error_code": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
            "suggestions": ["Fix it"],
        }

    def test_repr(self):
        """Test debugging representation."""
        exc = ReportPagerException(message="Boom", error_code="TEST_ERROR")
        assert repr(exc) == "ReportPagerException(error_code='TEST_ERROR', message='Boom')"


class TestSpecificExceptions:
    """Tests for the export error types."""

    def test_validation_error(self):
        """Test ValidationError records the offending field."""
        exc = ValidationError("Bad box", field="content_boxes")

        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.details["field"] == "content_boxes"
        assert exc.suggestions
        assert isinstance(exc, ValueError)

    def test_render_unavailable_error(self):
        """Test RenderUnavailableError records the failed stage."""
        exc = RenderUnavailableError("Preview not mounted", stage="detail")

        assert exc.error_code == "RENDER_UNAVAILABLE"
        assert exc.details == {"stage": "detail"}
        assert len(exc.suggestions) == 2

    def test_banner_render_error(self):
        """Test BannerRenderError carries details without suggestions."""
        exc = BannerRenderError("Font missing", details={"size_px": [10, 2]})

        assert exc.error_code == "BANNER_RENDER_ERROR"
        assert exc.details == {"size_px": [10, 2]}
        assert exc.suggestions == []

    def test_write_failure_error(self):
        """Test WriteFailureError keeps the OS message verbatim."""
        exc = WriteFailureError("[Errno 28] No space left on device", file_path="/tmp/r.pdf")

        assert exc.message == "[Errno 28] No space left on device"
        assert exc.error_code == "WRITE_FAILURE"
        assert exc.details["file_path"] == "/tmp/r.pdf"
        assert any("disk space" in s for s in exc.suggestions)

    def test_export_cancelled_error(self):
        """Test ExportCancelledError defaults."""
        exc = ExportCancelledError(pages_written=3)

        assert str(exc) == "EXPORT_CANCELLED: Export cancelled"
        assert exc.details == {"pages_written": 3}

    def test_configuration_error(self):
        """Test ConfigurationError records the config key."""
        exc = ConfigurationError("Invalid geometry", config_key="page")

        assert exc.error_code == "CONFIGURATION_ERROR"
        assert exc.details["config_key"] == "page"

    def test_custom_suggestions_override_defaults(self):
        """Test caller suggestions replace the defaults."""
        exc = WriteFailureError("Denied", suggestions=["Pick another folder"])
        assert exc.suggestions == ["Pick another folder"]

    @pytest.mark.parametrize(
        "exc",
        [
            ValidationError("x"),
            RenderUnavailableError("x"),
            BannerRenderError("x"),
            WriteFailureError("x"),
            ExportCancelledError(),
            ConfigurationError("x"),
        ],
    )
    def test_hierarchy(self, exc):
        """Test every export error derives from the base exception."""
        assert isinstance(exc, ReportPagerException)
        with pytest.raises(ReportPagerException):
            raise exc
