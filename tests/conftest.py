import asyncio
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import List

import pytest
from aiohttp import web

from loadfire.config import LoadTestConfig
from loadfire.request_builder import RequestDescriptor


def make_config(url: str = "http://test/echo", request_count: int = 5, **kwargs) -> LoadTestConfig:
    return LoadTestConfig(url=url, request_count=request_count, **kwargs)


RECEIVED = web.AppKey("received", list)


class RecordingTransport:
    """In-process transport: always answers with ``status`` after a short random delay."""

    def __init__(self, status: int = 200, delay: float = 0.002):
        self.status = status
        self.delay = delay
        self.requests: List[RequestDescriptor] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def send(self, request: RequestDescriptor) -> int:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay * (len(self.requests) % 7) / 7)
        finally:
            self.in_flight -= 1
        return self.status


@pytest.fixture
def recording_transport():
    return RecordingTransport()


@pytest.fixture
def target_app():
    received: List[dict] = []

    async def echo(request: web.Request) -> web.Response:
        body = await request.text()
        received.append({"method": request.method, "body": body, "headers": dict(request.headers)})
        return web.Response(text=body or "ok")

    async def error(request: web.Request) -> web.Response:
        return web.Response(status=500, text="boom")

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(1)
        return web.Response(text="late")

    app = web.Application()
    app.router.add_route("*", "/echo", echo)
    app.router.add_route("*", "/error", error)
    app.router.add_get("/slow", slow)
    app[RECEIVED] = received
    return app


class _OkHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        payload = b"ok"
        self.send_response(200)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def threaded_server():
    """A stdlib HTTP server on a background thread, for tests that drive the sync entry points."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _OkHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield f"http://{host}:{port}"
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
