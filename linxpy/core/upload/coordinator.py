"""
Upload orchestrator.

Drives one invocation end to end: sequential file uploads, the optional
collection, result reporting and batch deletion. The transfer client and
the delete-key store are injected.
"""
import io
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TextIO, Union, TYPE_CHECKING

import aiofiles
from rich.console import Console

from .models import UploadRequest, UploadResult, COLLECTION_NAME
from .progress import ProgressReader
from .services import FileValidator
from ..api.config import LinxConfig
from ..exceptions import LinxFileError, LinxInvalidURLError
from ..keys import DeleteKeyStorage, DeleteKeyStore, object_name_from_url
from ..logging import get_logger

if TYPE_CHECKING:
    from ..api.transfer_client import TransferClient

logger = get_logger('linxpy.upload')


class UploadOrchestrator:
    """
    Coordinates uploads and deletions for one run.

    Uploads are all-or-nothing: the first failure propagates and the
    remaining files are not uploaded. Deletions continue past a failed
    URL and report each outcome.

    Example:
        >>> async with TransferClient(config) as client:
        ...     orchestrator = UploadOrchestrator(config, client)
        ...     await orchestrator.upload_files(["a.txt", "b.txt"], collection=True)
    """

    def __init__(
        self,
        config: LinxConfig,
        client: 'TransferClient',
        key_store: Optional[DeleteKeyStorage] = None,
        console: Optional[Console] = None,
        progress_output: Optional[TextIO] = None
    ):
        """
        Initialize upload orchestrator.

        Args:
            config: Client configuration
            client: Transfer client used for every request
            key_store: Delete-key store (built from config.upload_log if omitted)
            console: Console for user-facing output
            progress_output: Stream for progress lines (stderr if omitted)
        """
        self._config = config
        self._client = client
        if key_store is None and config.upload_log:
            key_store = DeleteKeyStore(config.upload_log)
        self._key_store = key_store
        self._console = console or Console(highlight=False)
        self._progress_output = progress_output
        self._validator = FileValidator()

    @property
    def key_store(self) -> Optional[DeleteKeyStorage]:
        return self._key_store

    async def upload_files(
        self,
        paths: Iterable[Union[str, Path]],
        ttl: int = 0,
        delete_key: Optional[str] = None,
        collection: bool = False
    ) -> List[UploadResult]:
        """
        Upload files one after another.

        Args:
            paths: Local files to upload
            ttl: Lifetime in seconds (0 = server default)
            delete_key: Delete key to use for every upload
            collection: Also upload the list of resulting URLs

        Returns:
            Results of the file uploads, in order (the collection excluded)
        """
        results = []
        for file_path in paths:
            results.append(await self.upload_file(file_path, ttl, delete_key))

        if collection:
            await self.upload_collection([r.url for r in results], ttl, delete_key)

        return results

    async def upload_file(
        self,
        file_path: Union[str, Path],
        ttl: int = 0,
        delete_key: Optional[str] = None
    ) -> UploadResult:
        """
        Upload a single local file.

        Raises:
            LinxFileError: If the file cannot be stat'ed or opened
        """
        path, file_size = self._validator.validate(file_path)
        logger.info(f"Starting upload: {path.name} ({file_size} bytes)")

        try:
            f = await aiofiles.open(path, 'rb')
        except OSError as e:
            raise LinxFileError(f"Failed to open file: {e}", path)

        try:
            return await self._upload(path.name, file_size, f, ttl, delete_key)
        finally:
            await f.close()

    async def upload_collection(
        self,
        urls: List[str],
        ttl: int = 0,
        delete_key: Optional[str] = None
    ) -> UploadResult:
        """Upload the newline-joined URLs as a collection object."""
        body = '\n'.join(urls).encode('utf-8')
        logger.info(f"Uploading collection of {len(urls)} URLs")
        return await self._upload(COLLECTION_NAME, len(body), io.BytesIO(body), ttl, delete_key)

    async def _upload(
        self,
        name: str,
        size: int,
        source: Any,
        ttl: int,
        delete_key: Optional[str]
    ) -> UploadResult:
        async with ProgressReader(name, source, size, output=self._progress_output) as reader:
            request = UploadRequest(
                name=name,
                size=size,
                source=reader,
                ttl=ttl,
                delete_key=delete_key
            )
            result = await self._client.upload(request)

        self._report(result, delete_key)
        return result

    def _report(self, result: UploadResult, delete_key: Optional[str]) -> None:
        """Print the result and persist its delete key when a log is configured."""
        if delete_key or self._key_store is not None:
            self._print(result.url)

            if self._key_store is not None:
                name = result.filename or object_name_from_url(result.url)
                self._key_store.append(name, result.delete_key or delete_key)
            else:
                logger.debug(f"No upload log configured; delete key for {result.url} not recorded")
        else:
            self._print(f"{result.url:<40}  delete key: {result.delete_key}")

    async def delete_urls(
        self,
        urls: Iterable[str],
        delete_key: Optional[str] = None
    ) -> Dict[str, bool]:
        """
        Delete previously uploaded objects.

        Args:
            urls: Full URLs of the objects
            delete_key: Key to use for every URL; looked up per URL if omitted

        Returns:
            Mapping of URL to whether it was deleted
        """
        keys = {} if delete_key else self._load_keys()
        outcomes: Dict[str, bool] = {}

        for url in urls:
            key = delete_key
            if not key:
                try:
                    key = keys.get(object_name_from_url(url))
                except ValueError:
                    raise LinxInvalidURLError(url, self._config.server)

            if not key:
                self._print(f"{url}: no delete key found")
                outcomes[url] = False
                continue

            result = await self._client.delete(url, key)
            if result:
                self._print(f"{url}: deleted")
            else:
                self._print(f"{url}: deletion failed: {result.status}")
            outcomes[url] = result.deleted

        return outcomes

    def _load_keys(self) -> Dict[str, str]:
        if self._key_store is None:
            logger.warning("Could not open upload log: no upload log configured")
            return {}
        return self._key_store.load()

    def _print(self, line: str) -> None:
        self._console.print(line, markup=False, highlight=False, soft_wrap=True)
