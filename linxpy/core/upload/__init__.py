"""
Upload module for linx file uploads.

Streams files to the server with progress output and reports the
resulting URLs and delete keys.
"""
from .coordinator import UploadOrchestrator
from .progress import ProgressReader
from .models import UploadRequest, UploadResult, DeleteResult, COLLECTION_NAME
from .services import FileValidator

__all__ = [
    # Main classes
    'UploadOrchestrator',
    'ProgressReader',
    'FileValidator',

    # Models
    'UploadRequest',
    'UploadResult',
    'DeleteResult',
    'COLLECTION_NAME',
]
