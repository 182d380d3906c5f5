"""
Delete-key storage module.

Keeps the secret delete keys of uploaded objects in an append-only
'name:key' log so they can be deleted later.
"""
from .protocols import DeleteKeyStorage
from .upload_log import DeleteKeyStore, object_name_from_url

__all__ = [
    'DeleteKeyStorage',
    'DeleteKeyStore',
    'object_name_from_url',
]
