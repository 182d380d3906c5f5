"""Pytest fixtures for linxpy tests."""
import io
from typing import Dict, List, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from rich.console import Console


class FakeLinxServer:
    """
    In-process linx server.

    Records every upload and delete it receives. Use as an async context
    manager to start it; base_url is set once it is running.
    """

    def __init__(self):
        self.uploads: List[Dict] = []
        self.deletes: List[Dict] = []
        self.upload_status = 200
        self.upload_body: Optional[bytes] = None
        self.delete_status: Dict[str, int] = {}
        self.server_key = 'srvkey'
        self.url_base: Optional[str] = None
        self.base_url: Optional[str] = None
        self._server: Optional[TestServer] = None

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_put('/upload/{name}', self._handle_upload)
        app.router.add_delete('/{name}', self._handle_delete)
        return app

    async def _handle_upload(self, request: web.Request) -> web.Response:
        name = request.match_info['name']
        body = await request.read()
        self.uploads.append({
            'name': name,
            'headers': request.headers.copy(),
            'body': body,
        })

        if self.upload_status != 200:
            return web.Response(status=self.upload_status)
        if self.upload_body is not None:
            return web.Response(body=self.upload_body, content_type='application/json')

        return web.json_response({
            'Filename': name,
            'Url': f"{self.url_base or self.base_url}{name}",
            'Delete_Key': request.headers.get('Linx-Delete-Key', self.server_key),
            'Expiry': '0',
            'Size': str(len(body)),
        })

    async def _handle_delete(self, request: web.Request) -> web.Response:
        name = request.match_info['name']
        self.deletes.append({
            'name': name,
            'headers': request.headers.copy(),
        })
        return web.Response(status=self.delete_status.get(name, 200))

    async def __aenter__(self) -> 'FakeLinxServer':
        self._server = TestServer(self.make_app())
        await self._server.start_server()
        self.base_url = str(self._server.make_url('/'))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._server.close()


@pytest.fixture
def linx_server():
    """Returns a fake linx server (start it with 'async with')."""
    return FakeLinxServer()


@pytest.fixture
def console():
    """Returns a console that records output in memory."""
    return Console(file=io.StringIO(), width=200, highlight=False)


@pytest.fixture
def progress_output():
    """Returns an in-memory progress stream."""
    return io.StringIO()


@pytest.fixture
def sample_file(tmp_path):
    """Creates a small file to upload."""
    path = tmp_path / "notes.txt"
    path.write_bytes(b"hello linx\n")
    return path
