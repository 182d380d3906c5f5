"""
Async linx transfer client.

Issues the upload (PUT) and delete (DELETE) requests against a linx
server, optionally through a forward proxy.
"""
import asyncio
import inspect
import json
import time
from typing import List, Optional, Tuple

import aiohttp
from aiohttp_socks import ProxyConnector

from .config import LinxConfig
from .errors import LinxAPIError, LinxResponseError, HTTPStatusText
from ..exceptions import LinxInvalidURLError, LinxTransportError
from ..logging import get_logger
from ..upload.models import UploadRequest, UploadResult, DeleteResult
from ..upload.progress import ProgressReader, DEFAULT_CHUNK_SIZE


class TransferClient:
    """
    Asynchronous linx transfer client.

    The configuration is fixed at construction; the aiohttp session is
    created on first use and released by close().

    Example:
        >>> config = LinxConfig(server="https://linx.example/")
        >>> async with TransferClient(config) as client:
        ...     result = await client.upload(request)
    """

    def __init__(self, config: LinxConfig):
        """
        Initialize transfer client.

        Args:
            config: Client configuration (proxy already validated)
        """
        self._config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._proxy = config.get_proxy()
        self._logger = get_logger('linxpy.api')

    @property
    def config(self) -> LinxConfig:
        """Get current configuration."""
        return self._config

    async def __aenter__(self) -> 'TransferClient':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = self._create_connector()
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
        return self._session

    def _create_connector(self) -> aiohttp.TCPConnector:
        """Create the session connector, dialing through a SOCKS proxy if configured."""
        kwargs = self._config.get_connector_kwargs()
        socks_proxy = self._config.get_socks_proxy()
        if socks_proxy:
            self._logger.debug(f"Dialing through SOCKS proxy {self._config.proxy.url}")
            return ProxyConnector.from_url(socks_proxy, **kwargs)
        return aiohttp.TCPConnector(**kwargs)

    async def close(self):
        """Close client and release resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    def _extra_headers(self) -> List[Tuple[str, str]]:
        return list(self._config.headers)

    def _upload_headers(self, request: UploadRequest) -> List[Tuple[str, str]]:
        """Build upload headers; extra headers are appended as-is."""
        headers = [
            ('Accept', 'application/json'),
            ('User-Agent', self._config.user_agent),
            ('Linx-Expiry', str(request.ttl)),
            ('Linx-Randomize', 'yes'),
            ('Content-Length', str(request.size)),
        ]

        if self._config.api_key:
            headers.append(('Linx-Api-Key', self._config.api_key))

        if request.delete_key:
            headers.append(('Linx-Delete-Key', request.delete_key))

        headers.extend(self._extra_headers())
        return headers

    async def upload(self, request: UploadRequest) -> UploadResult:
        """
        Upload one object.

        The request source is streamed as the body. Wrap it in a
        ProgressReader beforehand to get progress output.

        Args:
            request: Upload request

        Returns:
            Parsed server response

        Raises:
            LinxTransportError: If the request could not be sent
            LinxAPIError: If the server answers with a non-2xx status
            LinxResponseError: If the body is not a JSON object
        """
        session = await self._ensure_session()
        url = f"{self._config.server}{request.path}"
        headers = self._upload_headers(request)

        self._logger.info(f"Uploading {request.name} ({request.size} bytes) to {url}")
        self._logger.debug(f"Request headers: {[name for name, _ in headers]}")

        body = _iter_source(request.source)
        upload_start = time.time()

        try:
            async with session.put(url, data=body, headers=headers, proxy=self._proxy) as response:
                if not 200 <= response.status < 300:
                    self._logger.error(f"Upload of {request.name} failed: HTTP {response.status}")
                    raise LinxAPIError(response.status, response.reason, operation='Upload')

                raw = await response.read()
        except aiohttp.ClientError as e:
            self._logger.error(f"Network error uploading {request.name}: {e}")
            raise LinxTransportError(f"Failed to issue request: {e}")
        except (OSError, asyncio.TimeoutError) as e:
            raise LinxTransportError(f"Failed to issue request: {e}")

        elapsed = time.time() - upload_start
        self._logger.debug(f"Upload of {request.name} finished in {elapsed:.2f}s")

        return self._parse_upload_response(raw)

    def _parse_upload_response(self, raw: bytes) -> UploadResult:
        """Parse the JSON body of a successful upload."""
        try:
            data = json.loads(raw.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise LinxResponseError(f"Unable to unmarshal JSON: {e}", raw)

        if not isinstance(data, dict):
            raise LinxResponseError(
                f"Unable to unmarshal JSON: expected an object, got {type(data).__name__}", raw
            )

        return UploadResult.from_dict(data)

    async def delete(self, url: str, delete_key: str) -> DeleteResult:
        """
        Delete an uploaded object.

        Args:
            url: Full URL of the object; must belong to the configured server
            delete_key: Delete key for the object

        Returns:
            DeleteResult, truthy on HTTP 200

        Raises:
            LinxInvalidURLError: If the URL is not on the configured server
            LinxTransportError: If the request could not be sent
        """
        if not url.startswith(self._config.server):
            raise LinxInvalidURLError(url, self._config.server)

        session = await self._ensure_session()
        headers = [
            ('User-Agent', self._config.user_agent),
            ('Linx-Delete-Key', delete_key),
        ]
        headers.extend(self._extra_headers())

        self._logger.debug(f"Deleting {url}")

        try:
            async with session.delete(url, headers=headers, proxy=self._proxy) as response:
                status = HTTPStatusText.format(response.status, response.reason)
                deleted = response.status == 200
        except aiohttp.ClientError as e:
            self._logger.error(f"Network error deleting {url}: {e}")
            raise LinxTransportError(f"Failed to issue request: {e}")
        except (OSError, asyncio.TimeoutError) as e:
            raise LinxTransportError(f"Failed to issue request: {e}")

        if deleted:
            self._logger.info(f"{url}: deleted")
        else:
            self._logger.info(f"{url}: deletion failed: {status}")

        return DeleteResult(url=url, deleted=deleted, status=status)


async def _iter_source(source, chunk_size: int = DEFAULT_CHUNK_SIZE):
    """Stream a request source, reading through a ProgressReader when given one."""
    if isinstance(source, ProgressReader):
        async for chunk in source.iter_chunks(chunk_size):
            yield chunk
        return

    while True:
        chunk = source.read(chunk_size)
        if inspect.isawaitable(chunk):
            chunk = await chunk
        if not chunk:
            return
        yield chunk
