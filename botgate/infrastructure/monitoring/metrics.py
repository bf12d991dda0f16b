"""Prometheus metrics for the throttle gate.

Operational counters only: how many events were checked, how they were
decided, which scope levels denied, how many warnings went out and how
often the counter store failed.

Labels: service, environment (from SERVICE_NAME / ENVIRONMENT).
"""

import os
import threading

from prometheus_client import CollectorRegistry, Counter, generate_latest

# Content type for a Prometheus metrics endpoint
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_collector_lock = threading.Lock()


class ThrottleMetrics:
    """Collects throttle gate counters.

    Attributes:
        throttle_checks_total: Events evaluated, labelled by outcome.
        throttle_scope_denials_total: Per-scope denials, labelled by scope kind.
        throttle_warnings_total: Warning notifications sent.
        throttle_store_errors_total: Counter store failures seen by the gate.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize the collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "botgate")

        self.throttle_checks_total = Counter(
            name="throttle_checks_total",
            documentation="Total events evaluated by the throttle gate",
            labelnames=["service", "environment", "outcome"],
            registry=self._registry,
        )
        self.throttle_scope_denials_total = Counter(
            name="throttle_scope_denials_total",
            documentation="Total per-scope denials",
            labelnames=["service", "environment", "scope_kind"],
            registry=self._registry,
        )
        self.throttle_warnings_total = Counter(
            name="throttle_warnings_total",
            documentation="Total throttle warnings sent to callers",
            labelnames=["service", "environment"],
            registry=self._registry,
        )
        self.throttle_store_errors_total = Counter(
            name="throttle_store_errors_total",
            documentation="Total counter store failures",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

    def _labels(self) -> dict[str, str]:
        return {"service": self._service_name, "environment": self._environment}

    def record_check(self, outcome: str) -> None:
        """Record one gate evaluation ("allowed", "denied" or "unthrottled")."""
        self.throttle_checks_total.labels(**self._labels(), outcome=outcome).inc()

    def record_scope_denial(self, scope_kind: str) -> None:
        self.throttle_scope_denials_total.labels(**self._labels(), scope_kind=scope_kind).inc()

    def record_warning(self) -> None:
        self.throttle_warnings_total.labels(**self._labels()).inc()

    def record_store_error(self) -> None:
        self.throttle_store_errors_total.labels(**self._labels()).inc()

    def get_registry(self) -> CollectorRegistry:
        """Get the Prometheus registry (for exposition and tests)."""
        return self._registry


_throttle_metrics: ThrottleMetrics | None = None


def get_throttle_metrics() -> ThrottleMetrics:
    """Get the process-wide ThrottleMetrics instance (lazy, thread-safe)."""
    global _throttle_metrics
    if _throttle_metrics is None:
        with _collector_lock:
            if _throttle_metrics is None:
                _throttle_metrics = ThrottleMetrics()
    return _throttle_metrics


def generate_metrics() -> bytes:
    """Render all throttle metrics in Prometheus exposition format."""
    return generate_latest(get_throttle_metrics().get_registry())


def reset_throttle_metrics() -> None:
    """Drop the process-wide collector (for tests)."""
    global _throttle_metrics
    with _collector_lock:
        _throttle_metrics = None
