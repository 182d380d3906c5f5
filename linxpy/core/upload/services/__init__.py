"""Upload services module."""
from .file_service import FileValidator

__all__ = [
    'FileValidator',
]
