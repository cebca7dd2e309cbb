"""
Prometheus metrics for deploy runs.

Tracks uploads, deletions, storage API errors and latencies. A deploy is a
one-shot process, so there is no metrics server: the CLI writes the registry
to a node-exporter textfile when S3_SPA_UPLOAD_METRICS_FILE is set.

Metrics Provided:
    - s3_spa_upload_objects_uploaded_total: Counter for uploaded objects
    - s3_spa_upload_bytes_uploaded_total: Counter for uploaded bytes
    - s3_spa_upload_objects_deleted_total: Counter for deleted stale objects
    - s3_spa_upload_storage_errors_total: Counter for S3 API errors
    - s3_spa_upload_storage_duration_seconds: Histogram for S3 API latency
    - s3_spa_upload_deploy_duration_seconds: Histogram for whole deploys

Usage:
    from s3_spa_upload.utils.metrics import get_metrics

    metrics = get_metrics()
    with metrics.track_storage_call("put_object"):
        client.put_object(...)
    metrics.record_upload(bytes_uploaded=1024)
"""

from contextlib import nullcontext
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, write_to_textfile

from s3_spa_upload.utils.config import get_config
from s3_spa_upload.utils.logging import get_logger

logger = get_logger(__name__)


class DeployMetrics:
    """
    Prometheus collectors for one process.

    Each instance owns its registry, so tests can create fresh instances
    without clashing with the process-wide one.

    Example:
        >>> metrics = DeployMetrics()
        >>> metrics.record_upload(bytes_uploaded=2048)
        >>> metrics.record_deletion()
    """

    def __init__(
        self, enabled: bool = True, registry: Optional[CollectorRegistry] = None
    ) -> None:
        """
        Initialize metrics collectors.

        Args:
            enabled: Whether metrics collection is enabled
            registry: Registry to register on (a new one if None)
        """
        self.enabled = enabled
        self.registry = registry if registry is not None else CollectorRegistry()

        if not self.enabled:
            logger.debug("Metrics collection disabled")
            return

        self.objects_uploaded = Counter(
            name="s3_spa_upload_objects_uploaded_total",
            documentation="Total number of objects uploaded",
            registry=self.registry,
        )

        self.bytes_uploaded = Counter(
            name="s3_spa_upload_bytes_uploaded_total",
            documentation="Total bytes uploaded",
            registry=self.registry,
        )

        self.objects_deleted = Counter(
            name="s3_spa_upload_objects_deleted_total",
            documentation="Total number of stale objects deleted",
            registry=self.registry,
        )

        self.storage_errors = Counter(
            name="s3_spa_upload_storage_errors_total",
            documentation="Total S3 API errors",
            labelnames=["operation", "error_type"],  # operation: put/list/delete
            registry=self.registry,
        )

        self.storage_duration = Histogram(
            name="s3_spa_upload_storage_duration_seconds",
            documentation="S3 API call latency",
            labelnames=["operation"],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )

        self.deploy_duration = Histogram(
            name="s3_spa_upload_deploy_duration_seconds",
            documentation="Time spent on whole deploys",
            buckets=[1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
            registry=self.registry,
        )

    def track_storage_call(self, operation: str):
        """
        Context manager timing one S3 API call.

        Args:
            operation: S3 operation (put_object, list_objects_v2, delete_object)
        """
        if not self.enabled:
            return nullcontext()
        return self.storage_duration.labels(operation=operation).time()

    def track_deploy(self):
        """Context manager timing a whole deploy."""
        if not self.enabled:
            return nullcontext()
        return self.deploy_duration.time()

    def record_upload(self, bytes_uploaded: int) -> None:
        """Record one uploaded object of ``bytes_uploaded`` bytes."""
        if not self.enabled:
            return
        self.objects_uploaded.inc()
        self.bytes_uploaded.inc(bytes_uploaded)

    def record_deletion(self) -> None:
        """Record one deleted stale object."""
        if not self.enabled:
            return
        self.objects_deleted.inc()

    def record_storage_error(self, operation: str, error: BaseException) -> None:
        """
        Record an S3 API error.

        Args:
            operation: S3 operation that failed
            error: The raised exception; its S3 error code is used when present
        """
        if not self.enabled:
            return
        response = getattr(error, "response", None) or {}
        error_type = response.get("Error", {}).get("Code") or type(error).__name__
        self.storage_errors.labels(operation=operation, error_type=error_type).inc()

    def write_textfile(self, path: str) -> None:
        """Write all collectors in Prometheus text format to ``path``."""
        if not self.enabled:
            logger.debug(f"Metrics disabled; not writing {path}")
            return
        write_to_textfile(path, self.registry)
        logger.debug(f"Wrote metrics to {path}")


# Global metrics instance (singleton)
_metrics_instance: Optional[DeployMetrics] = None


def get_metrics() -> DeployMetrics:
    """
    Get global metrics instance (singleton).

    Honors the METRICS_ENABLED setting (default: true).

    Returns:
        Global DeployMetrics instance
    """
    global _metrics_instance

    if _metrics_instance is None:
        _metrics_instance = DeployMetrics(enabled=get_config().metrics_enabled)

    return _metrics_instance
