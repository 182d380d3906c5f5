"""Upload models."""
from .upload_models import (
    UploadRequest,
    UploadResult,
    DeleteResult,
    COLLECTION_NAME,
)

__all__ = [
    'UploadRequest',
    'UploadResult',
    'DeleteResult',
    'COLLECTION_NAME',
]
