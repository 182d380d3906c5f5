"""
Upload log storage implementation.

Stores delete keys in a plain text file, one 'name:key' record per line.
The file is opened, appended, synced and closed for every record, so no
lock is held for the lifetime of the process.
"""
import os
from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import urlsplit

from ..exceptions import LinxUploadLogError
from ..logging import get_logger

LOG_FILE_MODE = 0o600


def object_name_from_url(url: str) -> str:
    """
    Get the remote object name for a URL.

    Example:
        >>> object_name_from_url("https://linx.example/abc123.txt")
        'abc123.txt'
    """
    path = urlsplit(url).path
    return path[1:] if path.startswith('/') else path


class DeleteKeyStore:
    """
    File-backed delete-key store.

    Example:
        >>> store = DeleteKeyStore("~/.linx-uploads.log")
        >>> store.append("abc123.txt", "s3cret")
        >>> store.load()["abc123.txt"]
        's3cret'
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize upload log storage.

        Args:
            path: Path of the log file (created on first append)
        """
        self._path = Path(os.path.expanduser(str(path)))
        self._logger = get_logger('linxpy.keys')

    @property
    def path(self) -> Path:
        """Get log file path."""
        return self._path

    def load(self) -> Dict[str, str]:
        """
        Load all delete keys from the log.

        A missing log is normal on first use and yields an empty mapping.
        Lines are split on the first colon; lines without one are skipped.

        Returns:
            Mapping of object name to delete key (last record wins)

        Raises:
            LinxUploadLogError: If the log exists but cannot be read
        """
        keys: Dict[str, str] = {}

        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                for line in f:
                    name, sep, key = line.rstrip('\r\n').partition(':')
                    if sep:
                        keys[name] = key
        except FileNotFoundError as e:
            self._logger.warning(f"Could not open upload log: {e}")
            return {}
        except (OSError, UnicodeDecodeError) as e:
            raise LinxUploadLogError(f"Failed to read upload log \"{self._path}\": {e}", self._path)

        self._logger.debug(f"Loaded {len(keys)} delete keys from {self._path}")
        return keys

    def append(self, name: str, key: str) -> None:
        """
        Append one record and sync it to disk.

        Raises:
            LinxUploadLogError: If the log cannot be opened or written
        """
        try:
            fd = os.open(self._path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, LOG_FILE_MODE)
        except OSError as e:
            raise LinxUploadLogError(
                f"Failed to open upload log \"{self._path}\" to write delete key \"{key}\": {e}",
                self._path
            )

        try:
            with os.fdopen(fd, 'a', encoding='utf-8') as f:
                f.write(f"{name}:{key}\n")
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise LinxUploadLogError(
                f"Failed to write delete key \"{key}\" to log \"{self._path}\": {e}",
                self._path
            )

        self._logger.debug(f"Recorded delete key for {name} in {self._path}")

    def lookup(self, url: str, keys: Optional[Dict[str, str]] = None) -> Optional[str]:
        """
        Find the delete key for a URL.

        Args:
            url: Full URL of the uploaded object
            keys: Previously loaded mapping (loaded from the log if omitted)

        Returns:
            Delete key, or None when no record exists
        """
        if keys is None:
            keys = self.load()
        return keys.get(object_name_from_url(url)) or None
