from typing import Optional

import aiohttp

from loadfire.request_builder import RequestDescriptor


class AiohttpTransport:
    """Sends request descriptors over one shared aiohttp session.

    ``limit`` caps simultaneous connections (``None`` means no cap) and
    ``timeout`` is the total per-request timeout in seconds.
    """

    def __init__(self, limit: Optional[int] = None, timeout: Optional[float] = None):
        self.limit = limit
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "AiohttpTransport":
        connector = aiohttp.TCPConnector(limit=self.limit or 0)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        self._session = aiohttp.ClientSession(connector=connector, timeout=timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def send(self, request: RequestDescriptor) -> int:
        """Send one request, read the whole response and return its status code."""
        if self._session is None:
            raise RuntimeError("Transport is not open; use 'async with AiohttpTransport()'")
        data = request.body.encode("utf-8") if request.body is not None else None
        async with self._session.request(request.method, request.url,
                                         headers=request.headers, data=data) as response:
            await response.read()
            return response.status
