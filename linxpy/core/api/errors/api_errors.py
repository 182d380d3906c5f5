"""linx server status codes and protocol exceptions."""
from typing import Dict, Optional

from ...exceptions import LinxException


class HTTPStatusText:
    """Hints for the status codes a linx server answers uploads with."""

    HINTS: Dict[int, str] = {
        400: 'the server rejected the request headers',
        401: 'an API key is required or the supplied key was rejected',
        403: 'the server refused the request',
        404: 'no such file on the server',
        413: 'the file is larger than the server allows',
        500: 'the server failed to store the file',
    }

    @classmethod
    def format(cls, status: int, reason: Optional[str] = None) -> str:
        """Formats a status line like '404 Not Found'."""
        if reason:
            return f"{status} {reason}"
        return str(status)

    @classmethod
    def get_hint(cls, status: int) -> Optional[str]:
        """Gets a human readable hint for a status code."""
        return cls.HINTS.get(status)


class LinxAPIError(LinxException):
    """Exception raised when the server answers with a non-2xx status."""

    def __init__(self, status: int, reason: Optional[str] = None, operation: str = 'Upload'):
        self.status = status
        self.reason = reason
        self.status_text = HTTPStatusText.format(status, reason)
        message = f"{operation} failed: {self.status_text}"
        hint = HTTPStatusText.get_hint(status)
        if hint:
            message += f" ({hint})"
        super().__init__(message, error_code=status)


class LinxResponseError(LinxException):
    """Exception raised when the response body is not the expected JSON object."""

    def __init__(self, message: str, body: Optional[bytes] = None):
        self.body = body
        super().__init__(message)
