"""
linxpy - Async Python client for linx file hosting servers.

Usage:
    >>> from linxpy import LinxConfig, TransferClient, UploadOrchestrator
    >>>
    >>> config = LinxConfig(server="https://linx.example/")
    >>> async with TransferClient(config) as client:
    ...     linx = UploadOrchestrator(config, client)
    ...     await linx.upload_files(["notes.txt"])
"""
import logging

# Configuration
from .core.api import (
    LinxConfig,
    ProxyConfig,
    load_config,
    default_config_path,
    TransferClient,
    LinxAPIError,
    LinxResponseError,
)

# Uploads
from .core.upload import (
    UploadOrchestrator,
    ProgressReader,
    UploadRequest,
    UploadResult,
    DeleteResult,
    COLLECTION_NAME,
)

# Delete keys
from .core.keys import DeleteKeyStore, DeleteKeyStorage

from .core.exceptions import (
    LinxException,
    LinxConfigError,
    LinxFileError,
    LinxUploadLogError,
    LinxTransportError,
    LinxInvalidURLError,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for linxpy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'linxpy',
        'linxpy.api',
        'linxpy.config',
        'linxpy.keys',
        'linxpy.upload',
        'linxpy.upload.progress',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'LinxConfig',
    'ProxyConfig',
    'load_config',
    'default_config_path',
    'TransferClient',
    'UploadOrchestrator',
    'ProgressReader',
    'UploadRequest',
    'UploadResult',
    'DeleteResult',
    'COLLECTION_NAME',
    'DeleteKeyStore',
    'DeleteKeyStorage',
    'LinxException',
    'LinxConfigError',
    'LinxFileError',
    'LinxUploadLogError',
    'LinxTransportError',
    'LinxInvalidURLError',
    'LinxAPIError',
    'LinxResponseError',
    'setup_logging',
]
