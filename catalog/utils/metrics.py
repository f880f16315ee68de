"""Prometheus metrics for collection store operations."""

from prometheus_client import Counter

store_operations_total = Counter(
    "store_operations_total",
    "Collection store operations by serving backend",
    ["collection", "operation", "backend"],
)

store_remote_fallbacks_total = Counter(
    "store_remote_fallbacks_total",
    "Operations that fell back to the local store",
    ["collection", "operation", "reason"],
)

store_write_failures_total = Counter(
    "store_write_failures_total",
    "Failed writes reported by the serving backend",
    ["collection", "operation", "result"],
)


class PrometheusStoreMetrics:
    """Prometheus-based store metrics implementation."""

    def record_operation(self, collection: str, operation: str, backend: str) -> None:
        """Count an operation served by a backend ("remote" or "local")."""
        store_operations_total.labels(
            collection=collection, operation=operation, backend=backend
        ).inc()

    def inc_fallback(self, collection: str, operation: str, reason: str) -> None:
        """Count a remote miss that triggered the local fallback."""
        store_remote_fallbacks_total.labels(
            collection=collection, operation=operation, reason=reason
        ).inc()

    def inc_write_failure(self, collection: str, operation: str, result: str) -> None:
        """Count a write that did not succeed."""
        store_write_failures_total.labels(
            collection=collection, operation=operation, result=result
        ).inc()


class StoreMetrics:
    """No-op metrics interface (tests, embedding without Prometheus)."""

    def record_operation(self, collection: str, operation: str, backend: str) -> None:
        pass

    def inc_fallback(self, collection: str, operation: str, reason: str) -> None:
        pass

    def inc_write_failure(self, collection: str, operation: str, result: str) -> None:
        pass
