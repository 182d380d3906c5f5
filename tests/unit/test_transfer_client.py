"""Tests for the transfer client."""
import io

import aiohttp
import pytest
from aiohttp_socks import ProxyConnector

from linxpy.core.api import TransferClient, LinxConfig, LinxAPIError, LinxResponseError
from linxpy.core.exceptions import LinxInvalidURLError, LinxTransportError
from linxpy.core.upload.models import UploadRequest
from linxpy.core.upload.progress import ProgressReader


def make_request(data: bytes = b'hello', **kwargs) -> UploadRequest:
    return UploadRequest(name=kwargs.pop('name', 'hello.txt'), size=len(data),
                         source=io.BytesIO(data), **kwargs)


class TestUpload:
    """Test suite for TransferClient.upload."""

    @pytest.mark.asyncio
    async def test_upload_sends_protocol_headers(self, linx_server):
        """Test the PUT carries the linx protocol headers."""
        async with linx_server:
            config = LinxConfig(server=linx_server.base_url)
            async with TransferClient(config) as client:
                result = await client.upload(make_request(ttl=3600))

        upload = linx_server.uploads[0]
        headers = upload['headers']
        assert upload['name'] == 'hello.txt'
        assert upload['body'] == b'hello'
        assert headers['Accept'] == 'application/json'
        assert headers['User-Agent'] == config.user_agent
        assert headers['Linx-Expiry'] == '3600'
        assert headers['Linx-Randomize'] == 'yes'
        assert 'Linx-Api-Key' not in headers
        assert 'Linx-Delete-Key' not in headers
        assert result.url == f"{linx_server.base_url}hello.txt"
        assert result.delete_key == 'srvkey'

    @pytest.mark.asyncio
    async def test_upload_optional_headers(self, linx_server):
        """Test API key, delete key and extra headers are sent."""
        async with linx_server:
            config = LinxConfig(
                server=linx_server.base_url,
                api_key='apikey',
                headers=(('X-Trace', '1'), ('X-Trace', '2')),
            )
            async with TransferClient(config) as client:
                result = await client.upload(make_request(delete_key='mine'))

        headers = linx_server.uploads[0]['headers']
        assert headers['Linx-Api-Key'] == 'apikey'
        assert headers['Linx-Delete-Key'] == 'mine'
        assert headers.getall('X-Trace') == ['1', '2']
        assert result.delete_key == 'mine'

    @pytest.mark.asyncio
    async def test_upload_through_progress_reader(self, linx_server, progress_output):
        """Test a progress-wrapped source is streamed and accounted."""
        data = b'x' * 200_000
        async with linx_server:
            config = LinxConfig(server=linx_server.base_url)
            async with TransferClient(config) as client:
                async with ProgressReader('big.bin', io.BytesIO(data), len(data),
                                          output=progress_output, interval=0.01) as reader:
                    await client.upload(UploadRequest(name='big.bin', size=len(data), source=reader))

        assert linx_server.uploads[0]['body'] == data
        assert reader.transferred == len(data)

    @pytest.mark.asyncio
    async def test_upload_empty_body(self, linx_server):
        """Test zero-byte uploads."""
        async with linx_server:
            async with TransferClient(LinxConfig(server=linx_server.base_url)) as client:
                result = await client.upload(make_request(b''))

        assert linx_server.uploads[0]['body'] == b''
        assert result.size == '0'

    @pytest.mark.asyncio
    async def test_upload_http_error(self, linx_server):
        """Test a non-2xx status raises LinxAPIError."""
        linx_server.upload_status = 500
        async with linx_server:
            async with TransferClient(LinxConfig(server=linx_server.base_url)) as client:
                with pytest.raises(LinxAPIError) as exc_info:
                    await client.upload(make_request())

        assert exc_info.value.status == 500
        assert exc_info.value.error_code == 500
        assert "Upload failed: 500" in str(exc_info.value)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [b'not json', b'[1, 2]'])
    async def test_upload_malformed_body(self, linx_server, body):
        """Test a body that is not a JSON object raises LinxResponseError."""
        linx_server.upload_body = body
        async with linx_server:
            async with TransferClient(LinxConfig(server=linx_server.base_url)) as client:
                with pytest.raises(LinxResponseError) as exc_info:
                    await client.upload(make_request())

        assert exc_info.value.body == body

    @pytest.mark.asyncio
    async def test_upload_connection_refused(self, unused_tcp_port):
        """Test connection failures raise LinxTransportError."""
        config = LinxConfig(server=f"http://127.0.0.1:{unused_tcp_port}/")
        async with TransferClient(config) as client:
            with pytest.raises(LinxTransportError, match="Failed to issue request"):
                await client.upload(make_request())


class TestDelete:
    """Test suite for TransferClient.delete."""

    @pytest.mark.asyncio
    async def test_delete_success(self, linx_server):
        """Test HTTP 200 yields a truthy result."""
        async with linx_server:
            async with TransferClient(LinxConfig(server=linx_server.base_url)) as client:
                result = await client.delete(f"{linx_server.base_url}abc.txt", "k1")

        assert result
        assert result.status == "200 OK"
        deletion = linx_server.deletes[0]
        assert deletion['name'] == 'abc.txt'
        assert deletion['headers']['Linx-Delete-Key'] == 'k1'

    @pytest.mark.asyncio
    async def test_delete_sends_extra_headers(self, linx_server):
        """Test extra headers are attached to deletes."""
        async with linx_server:
            config = LinxConfig(server=linx_server.base_url, headers=(('X-Trace', '1'),))
            async with TransferClient(config) as client:
                await client.delete(f"{linx_server.base_url}abc.txt", "k1")

        assert linx_server.deletes[0]['headers']['X-Trace'] == '1'

    @pytest.mark.asyncio
    async def test_delete_failure_is_not_raised(self, linx_server):
        """Test a non-200 status yields a falsy result."""
        linx_server.delete_status['abc.txt'] = 404
        async with linx_server:
            async with TransferClient(LinxConfig(server=linx_server.base_url)) as client:
                result = await client.delete(f"{linx_server.base_url}abc.txt", "wrong")

        assert not result
        assert result.status == "404 Not Found"

    @pytest.mark.asyncio
    async def test_delete_foreign_url_rejected(self, linx_server):
        """Test URLs outside the configured server never reach the network."""
        async with linx_server:
            async with TransferClient(LinxConfig(server=linx_server.base_url)) as client:
                with pytest.raises(LinxInvalidURLError):
                    await client.delete("http://elsewhere.invalid/abc.txt", "k1")

        assert linx_server.deletes == []


class TestConnector:
    """Test suite for session connector selection."""

    @pytest.mark.asyncio
    async def test_direct_connector(self):
        """Test a plain TCP connector without a proxy."""
        async with TransferClient(LinxConfig(server="https://linx.example/")) as client:
            assert type(client._connector) is aiohttp.TCPConnector
            assert client._proxy is None

    @pytest.mark.asyncio
    async def test_socks_connector(self):
        """Test a SOCKS proxy is dialed by the session connector."""
        config = LinxConfig.from_dict({
            'server': 'https://linx.example/',
            'proxy': 'socks5://127.0.0.1:9050',
        })

        async with TransferClient(config) as client:
            assert isinstance(client._connector, ProxyConnector)
            assert client._proxy is None

    @pytest.mark.asyncio
    async def test_http_proxy_per_request(self):
        """Test an HTTP proxy is passed with each request."""
        config = LinxConfig.from_dict({
            'server': 'https://linx.example/',
            'proxy': 'http://127.0.0.1:3128',
        })

        async with TransferClient(config) as client:
            assert not isinstance(client._connector, ProxyConnector)
            assert client._proxy == 'http://127.0.0.1:3128'
