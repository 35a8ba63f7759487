import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

ProgressObserver = Callable[[int, int], None]


class OutcomeKind(Enum):
    SUCCESS = "success"
    FAILURE_STATUS = "failure_status"
    FAILURE_TRANSPORT = "failure_transport"


@dataclass(frozen=True)
class RequestOutcome:
    kind: OutcomeKind
    duration: float
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def from_status(cls, status: int, duration: float) -> "RequestOutcome":
        kind = OutcomeKind.SUCCESS if 200 <= status < 300 else OutcomeKind.FAILURE_STATUS
        return cls(kind, duration, status=status)

    @classmethod
    def from_error(cls, error: BaseException, duration: float) -> "RequestOutcome":
        return cls(OutcomeKind.FAILURE_TRANSPORT, duration, error=str(error) or type(error).__name__)


@dataclass(frozen=True)
class AggregateState:
    sent: int
    received: int
    succeeded: int
    failed: int
    durations: List[float]


@dataclass(frozen=True)
class SummaryStats:
    total: int
    succeeded: int
    failed: int
    success_percentage: float
    failure_percentage: float
    average_duration: float
    min_duration: float
    max_duration: float
    elapsed: float = 0.0
    requests_per_second: float = 0.0


class Aggregator:
    """Counters and response times shared by every in-flight request.

    All mutation happens under a single lock so that ``received`` and exactly
    one of ``succeeded``/``failed`` move together. The observer is notified
    with the counts read inside the lock, after the lock is released.
    """

    def __init__(self, observer: Optional[ProgressObserver] = None):
        self._lock = threading.Lock()
        self._observer = observer
        self._sent = 0
        self._received = 0
        self._succeeded = 0
        self._failed = 0
        self._durations: List[float] = []

    def record_sent(self) -> None:
        with self._lock:
            self._sent += 1
            sent, received = self._sent, self._received
        self._notify(sent, received)

    def record_received(self, outcome: RequestOutcome) -> None:
        with self._lock:
            self._received += 1
            if outcome.success:
                self._succeeded += 1
            else:
                self._failed += 1
            self._durations.append(outcome.duration)
            sent, received = self._sent, self._received
        self._notify(sent, received)

    def snapshot(self) -> AggregateState:
        with self._lock:
            return AggregateState(
                sent=self._sent,
                received=self._received,
                succeeded=self._succeeded,
                failed=self._failed,
                durations=list(self._durations),
            )

    def finalize(self, elapsed: float = 0.0) -> SummaryStats:
        state = self.snapshot()
        return summarize(state, elapsed)

    def _notify(self, sent: int, received: int) -> None:
        if self._observer is not None:
            self._observer(sent, received)


def summarize(state: AggregateState, elapsed: float = 0.0) -> SummaryStats:
    total = state.received
    if total == 0:
        return SummaryStats(0, 0, 0, 0.0, 0.0, 0.0, 0.0, 0.0, elapsed, 0.0)

    durations = state.durations
    return SummaryStats(
        total=total,
        succeeded=state.succeeded,
        failed=state.failed,
        success_percentage=state.succeeded / total * 100,
        failure_percentage=state.failed / total * 100,
        average_duration=sum(durations) / total,
        min_duration=min(durations),
        max_duration=max(durations),
        elapsed=elapsed,
        requests_per_second=total / elapsed if elapsed > 0 else 0.0,
    )
