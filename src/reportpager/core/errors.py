"""
Custom exception hierarchy for the ReportPager export engine.

Every failure an export can surface derives from ReportPagerException so
the embedding application can report it uniformly. Oversized avoid zones
and empty detail streams are not errors and have no exception here.
"""

from typing import Any, Dict, List, Optional


class ReportPagerException(Exception):
    """
    Base exception for all ReportPager errors.

    Attributes:
        error_code: String identifier for the error type
        message: User-friendly error message
        details: Technical details for logging/debugging
        suggestions: Optional list of resolution suggestions
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ReportPagerException.

        Args:
            message: User-friendly error message
            error_code: String identifier for the error type
            details: Technical details for logging
            suggestions: List of suggestions for resolution
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestions = suggestions or []

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for the embedding application.

        Returns:
            Dictionary representation of the error
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "suggestions": self.suggestions,
        }

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        """Detailed string representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"error_code='{self.error_code}', "
            f"message='{self.message}')"
        )


class ValidationError(ReportPagerException, ValueError):
    """
    Raised when export input is malformed.

    Used for invalid page geometry, avoid zones and slicer tuning values.
    Also a ValueError, so callers validating plain values can catch either.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=error_details,
            suggestions=suggestions or ["Check the input format and try again"],
        )


class RenderUnavailableError(ReportPagerException):
    """
    Raised when the content renderer cannot produce a raster.

    Fatal to the whole export; no partial file is kept.
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize RenderUnavailableError.

        Args:
            message: User-friendly error message
            stage: Which capture failed ('cover' or 'detail')
            details: Technical details about the render failure
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if stage:
            error_details["stage"] = stage

        default_suggestions = [
            "Make sure the report preview is open and fully loaded",
            "Try the export again",
        ]

        super().__init__(
            message=message,
            error_code="RENDER_UNAVAILABLE",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class BannerRenderError(ReportPagerException):
    """
    Raised when the header banner cannot be rasterized.

    The export pipeline recovers from this by omitting the banner.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="BANNER_RENDER_ERROR",
            details=details,
        )


class WriteFailureError(ReportPagerException):
    """
    Raised when the output document cannot be written or finalized.

    The underlying OS error message is carried verbatim. No automatic
    retry is attempted.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize WriteFailureError.

        Args:
            message: Error message (typically the OS error text)
            file_path: Path of the document being written
            details: Technical details about the write failure
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if file_path:
            error_details["file_path"] = file_path

        default_suggestions = [
            "Check that the output directory exists and is writable",
            "Check available disk space",
            "Trigger the export again",
        ]

        super().__init__(
            message=message,
            error_code="WRITE_FAILURE",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class ExportCancelledError(ReportPagerException):
    """Raised when an export is cancelled between pages."""

    def __init__(
        self,
        message: str = "Export cancelled",
        pages_written: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if pages_written is not None:
            error_details["pages_written"] = pages_written

        super().__init__(
            message=message,
            error_code="EXPORT_CANCELLED",
            details=error_details,
        )


class ConfigurationError(ReportPagerException):
    """
    Raised when export configuration is invalid.

    Used for page geometries that leave no room for content or settings
    that cannot be combined.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        error_details = details or {}
        if config_key:
            error_details["config_key"] = config_key

        default_suggestions = [
            "Check environment variables are set correctly",
            "Verify page size and margins leave room for content",
        ]

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )
