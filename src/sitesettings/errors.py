"""Exception classes for loading and saving site settings.

The pattern store itself never raises for bad patterns or URLs; these
errors belong to the file and configuration layers around it.
"""

from __future__ import annotations

from pathlib import Path


class SiteSettingsError(Exception):
    """Base error for site settings files.

    Includes the offending path when one is known.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            path: Optional file the error relates to
        """
        super().__init__(f"{path}: {message}" if path else message)
        self.message: str = message
        self.path: Path | None = path


class StoreFileError(SiteSettingsError):
    """Raised when a store file cannot be read, written or decoded."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize with file error details.

        Args:
            message: Description of the failure
            path: File being read or written
            original_error: The original exception that was caught
        """
        super().__init__(message, path)
        self.original_error = original_error


class StoreFormatError(SiteSettingsError):
    """Raised when a store document does not match the expected schema."""

    pass
