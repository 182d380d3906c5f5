"""
File validation service.

Checks local input files before they are opened for upload.
"""
from pathlib import Path
from typing import Tuple, Union

from ...exceptions import LinxFileError


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size

    Empty files are valid uploads.
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            LinxFileError: If the file is missing, not a regular file,
                or cannot be stat'ed
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        try:
            if not path.exists():
                raise LinxFileError(f"Failed to open file: {path}: no such file", path)

            if not path.is_file():
                raise LinxFileError(f"Failed to open file: {path}: not a regular file", path)

            file_size = path.stat().st_size
        except OSError as e:
            raise LinxFileError(f"Failed to stat file: {e}", path)

        return path, file_size
