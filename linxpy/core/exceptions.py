"""
Custom exceptions for linx client operations.

This module defines exception classes for local failures: configuration,
input files, the delete-key upload log, transport and URL checks.
Protocol-level failures live in ``linxpy.core.api.errors``.
"""
from typing import Optional
from pathlib import Path


class LinxException(Exception):
    """Base exception for all linx-related errors."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class LinxConfigError(LinxException):
    """Exception raised for invalid or incomplete configuration."""
    pass


class LinxFileError(LinxException):
    """Exception raised when an input file cannot be read."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            path: Path of the offending input file
        """
        self.path = path
        super().__init__(message)


class LinxUploadLogError(LinxException):
    """Exception raised when the delete-key upload log cannot be read or written."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        super().__init__(message)


class LinxTransportError(LinxException):
    """Exception raised for connection, DNS or proxy failures."""
    pass


class LinxInvalidURLError(LinxException):
    """Exception raised when a URL does not belong to the configured server."""

    def __init__(self, url: str, server: str) -> None:
        self.url = url
        self.server = server
        super().__init__(f'"{url}" is not a valid URL for the configured server {server}')
