"""
Helper functions for Prometheus metric registration.

Metrics are module-level singletons, but uvicorn --reload and test
collection can import the defining module more than once. These helpers
return the already registered collector instead of failing on the
duplicate name.
"""

from prometheus_client import REGISTRY, Counter, Gauge, Histogram


def _registered(name: str):
    """Return the collector registered under ``name``."""
    return REGISTRY._names_to_collectors[name]


def _get_or_create_counter(
    name: str, doc: str, labels: list[str] | None = None
) -> Counter:
    """
    Get existing counter or create new one.

    Args:
        name: Metric name.
        doc: Metric documentation.
        labels: Optional list of label names.

    Returns:
        Counter instance.
    """
    try:
        return Counter(name, doc, labels or [])
    except ValueError:
        # Counters register both "<name>" and "<name>_total"
        return _registered(name)


def _get_or_create_gauge(
    name: str, doc: str, labels: list[str] | None = None
) -> Gauge:
    """Get existing gauge or create new one."""
    try:
        return Gauge(name, doc, labels or [])
    except ValueError:
        return _registered(name)


def _get_or_create_histogram(
    name: str,
    doc: str,
    labels: list[str] | None = None,
    buckets: tuple[float, ...] | None = None,
) -> Histogram:
    """Get existing histogram or create new one."""
    try:
        if buckets:
            return Histogram(name, doc, labels or [], buckets=buckets)
        return Histogram(name, doc, labels or [])
    except ValueError:
        return _registered(name)
