"""linx protocol errors and exceptions."""
from .api_errors import LinxAPIError, LinxResponseError, HTTPStatusText

__all__ = [
    'LinxAPIError',
    'LinxResponseError',
    'HTTPStatusText',
]
