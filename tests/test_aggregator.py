from concurrent.futures import ThreadPoolExecutor

import pytest

from loadfire.aggregator import Aggregator, OutcomeKind, RequestOutcome


class TestRequestOutcome:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success_statuses(self, status):
        outcome = RequestOutcome.from_status(status, 0.01)
        assert outcome.kind is OutcomeKind.SUCCESS
        assert outcome.success

    @pytest.mark.parametrize("status", [199, 301, 404, 500, 503])
    def test_failure_statuses(self, status):
        outcome = RequestOutcome.from_status(status, 0.01)
        assert outcome.kind is OutcomeKind.FAILURE_STATUS
        assert outcome.status == status
        assert not outcome.success

    def test_transport_error(self):
        outcome = RequestOutcome.from_error(ConnectionRefusedError("refused"), 0.01)
        assert outcome.kind is OutcomeKind.FAILURE_TRANSPORT
        assert outcome.error == "refused"
        assert outcome.status is None

    def test_transport_error_without_message(self):
        assert RequestOutcome.from_error(TimeoutError(), 0.5).error == "TimeoutError"


class TestAggregator:
    def test_empty_finalize_has_zero_values(self):
        stats = Aggregator().finalize()
        assert stats.total == 0
        assert stats.succeeded == stats.failed == 0
        assert stats.success_percentage == stats.failure_percentage == 0.0
        assert stats.average_duration == stats.min_duration == stats.max_duration == 0.0
        assert stats.requests_per_second == 0.0

    def test_summary_arithmetic(self):
        aggregator = Aggregator()
        for duration, status in [(0.1, 200), (0.3, 200), (0.2, 500), (0.4, None)]:
            aggregator.record_sent()
            if status is None:
                aggregator.record_received(RequestOutcome.from_error(OSError("down"), duration))
            else:
                aggregator.record_received(RequestOutcome.from_status(status, duration))

        stats = aggregator.finalize(elapsed=2.0)
        assert stats.total == 4
        assert stats.succeeded == 2
        assert stats.failed == 2
        assert stats.success_percentage == pytest.approx(50.0)
        assert stats.failure_percentage == pytest.approx(50.0)
        assert stats.average_duration == pytest.approx(0.25)
        assert stats.min_duration == pytest.approx(0.1)
        assert stats.max_duration == pytest.approx(0.4)
        assert stats.requests_per_second == pytest.approx(2.0)

    def test_observer_sees_sent_and_received(self):
        seen = []
        aggregator = Aggregator(observer=lambda sent, received: seen.append((sent, received)))
        aggregator.record_sent()
        aggregator.record_sent()
        aggregator.record_received(RequestOutcome.from_status(200, 0.01))
        assert seen == [(1, 0), (2, 0), (2, 1)]

    def test_snapshot_is_a_copy(self):
        aggregator = Aggregator()
        aggregator.record_received(RequestOutcome.from_status(200, 0.01))
        state = aggregator.snapshot()
        aggregator.record_received(RequestOutcome.from_status(200, 0.02))
        assert state.durations == [0.01]

    def test_no_lost_updates_across_threads(self):
        aggregator = Aggregator()

        def worker(i):
            aggregator.record_sent()
            status = 200 if i % 4 else 503
            aggregator.record_received(RequestOutcome.from_status(status, 0.001))

        with ThreadPoolExecutor(max_workers=32) as ex:
            list(ex.map(worker, range(5000)))

        state = aggregator.snapshot()
        assert state.sent == state.received == 5000
        assert state.succeeded == 3750
        assert state.failed == 1250
        assert len(state.durations) == 5000
