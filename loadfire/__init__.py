"""loadfire - fire a burst of concurrent HTTP requests and report latency statistics."""

__version__ = "0.1.0"

from loadfire.aggregator import Aggregator, OutcomeKind, RequestOutcome, SummaryStats  # noqa: E402
from loadfire.config import HttpMethod, LoadTestConfig, load_config  # noqa: E402
from loadfire.data_loader import load_data  # noqa: E402
from loadfire.dispatcher import LoadTester, run_load_test  # noqa: E402
from loadfire.request_builder import RequestDescriptor, build_request, substitute  # noqa: E402

__all__ = [
    "Aggregator",
    "HttpMethod",
    "LoadTestConfig",
    "LoadTester",
    "OutcomeKind",
    "RequestDescriptor",
    "RequestOutcome",
    "SummaryStats",
    "build_request",
    "load_config",
    "load_data",
    "run_load_test",
    "substitute",
    "__version__",
]
