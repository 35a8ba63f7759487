import sys
import threading
from typing import Optional, TextIO

from loadfire.aggregator import SummaryStats


def format_duration(seconds: float) -> str:
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.3f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.3f}ms"
    return f"{seconds:.3f}s"


class ProgressPrinter:
    """Keeps a single ``Progress: sent/received of total`` line up to date."""

    def __init__(self, total: int, stream: Optional[TextIO] = None):
        self.total = total
        self.stream = stream or sys.stdout
        self._lock = threading.Lock()
        self._last = None

    def __call__(self, sent: int, received: int) -> None:
        with self._lock:
            if (sent, received) == self._last:
                return
            self._last = (sent, received)
            self.stream.write(f"\rProgress: {sent}/{received} of {self.total}")
            self.stream.flush()

    def close(self) -> None:
        with self._lock:
            if self._last is not None:
                self.stream.write("\n")
                self.stream.flush()


def format_summary(stats: SummaryStats) -> str:
    lines = [
        f"Total Requests: {stats.total}",
        f"Successful Requests: {stats.succeeded}",
        f"Failed Requests: {stats.failed}",
        f"Success Percentage: {stats.success_percentage:.2f}%",
        f"Failure Percentage: {stats.failure_percentage:.2f}%",
        f"Average Response Time: {format_duration(stats.average_duration)}",
        f"Minimum Response Time: {format_duration(stats.min_duration)}",
        f"Maximum Response Time: {format_duration(stats.max_duration)}",
        f"Total Time: {stats.elapsed:.2f}s",
        f"Throughput: {stats.requests_per_second:.2f} req/s",
    ]
    return "\n".join(lines)


def print_summary(stats: SummaryStats, stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stdout
    print("\n=== LOAD TEST SUMMARY ===", file=stream)
    print(format_summary(stats), file=stream)
