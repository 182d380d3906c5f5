"""linx API module: configuration, transport and protocol errors."""
from .config import LinxConfig, ProxyConfig, load_config, default_config_path, parse_headers
from .errors import LinxAPIError, LinxResponseError, HTTPStatusText
from .transfer_client import TransferClient

__all__ = [
    # Client
    'TransferClient',

    # Configuration
    'LinxConfig',
    'ProxyConfig',
    'load_config',
    'default_config_path',
    'parse_headers',

    # Errors
    'LinxAPIError',
    'LinxResponseError',
    'HTTPStatusText',
]
