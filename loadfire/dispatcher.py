"""Concurrent request dispatch.

``LoadTester.run`` schedules one asyncio task per request, waits for every
task to record its outcome and only then computes the summary.
"""

import asyncio
import contextlib
import logging
import time
from typing import Awaitable, List, Optional, Protocol, Sequence

import aiohttp

from loadfire.aggregator import Aggregator, ProgressObserver, RequestOutcome, SummaryStats
from loadfire.config import LoadTestConfig
from loadfire.data_loader import DataRow
from loadfire.errors import InvalidHeader
from loadfire.request_builder import RequestDescriptor, build_request
from loadfire.settings import settings
from loadfire.transport import AiohttpTransport

logger = logging.getLogger(__name__)

EXPECTED_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, InvalidHeader)


class Transport(Protocol):
    def send(self, request: RequestDescriptor) -> Awaitable[int]: ...


class LoadTester:
    def __init__(self, config: LoadTestConfig, rows: Optional[Sequence[DataRow]] = None,
                 transport: Optional[Transport] = None, observer: Optional[ProgressObserver] = None):
        self.config = config
        self.rows: Sequence[DataRow] = rows or []
        self.transport = transport
        self.aggregator = Aggregator(observer)
        self._semaphore: Optional[asyncio.Semaphore] = None

    def row_for(self, index: int) -> Optional[DataRow]:
        if not self.rows:
            return None
        return self.rows[index % len(self.rows)]

    async def run(self) -> SummaryStats:
        count = self.config.request_count
        if count == 0:
            return self.aggregator.finalize()

        logger.info("Starting load test: %s %s x%d (concurrency=%s)",
                    self.config.effective_method.value, self.config.url, count,
                    self.config.concurrency or "unbounded")
        if self.config.concurrency:
            self._semaphore = asyncio.Semaphore(self.config.concurrency)

        start = time.perf_counter()
        async with contextlib.AsyncExitStack() as stack:
            transport = self.transport
            if transport is None:
                timeout = self.config.timeout or settings.get_request_timeout()
                transport = await stack.enter_async_context(
                    AiohttpTransport(limit=self.config.concurrency, timeout=timeout))
            # join barrier: every task has recorded its outcome once gather returns
            await asyncio.gather(*[self._worker(transport, i) for i in range(count)])
        elapsed = time.perf_counter() - start

        stats = self.aggregator.finalize(elapsed)
        logger.info("Load test finished in %.2fs: %d succeeded, %d failed",
                    elapsed, stats.succeeded, stats.failed)
        return stats

    async def _worker(self, transport: Transport, index: int) -> None:
        if self._semaphore is None:
            await self._execute(transport, index)
        else:
            async with self._semaphore:
                await self._execute(transport, index)

    async def _execute(self, transport: Transport, index: int) -> None:
        self.aggregator.record_sent()
        start = time.perf_counter()
        try:
            request = build_request(self.config, self.row_for(index))
            status = await transport.send(request)
        except Exception as e:
            # any error stays inside this one request
            outcome = RequestOutcome.from_error(e, time.perf_counter() - start)
            logger.debug("Request %d failed (%s): %s", index, outcome.kind.value, outcome.error,
                         exc_info=not isinstance(e, EXPECTED_ERRORS))
        else:
            outcome = RequestOutcome.from_status(status, time.perf_counter() - start)
            if not outcome.success:
                logger.debug("Request %d failed (%s): HTTP %d", index, outcome.kind.value, status)
        self.aggregator.record_received(outcome)


def run_load_test(config: LoadTestConfig, rows: Optional[List[DataRow]] = None,
                  observer: Optional[ProgressObserver] = None) -> SummaryStats:
    return asyncio.run(LoadTester(config, rows, observer=observer).run())
