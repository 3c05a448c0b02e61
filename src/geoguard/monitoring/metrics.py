"""Monitoring - evaluation latency, scores, rule errors and degraded lookups."""

import atexit, logging, os, queue, threading
from datetime import datetime, timezone
from typing import Dict, List, Optional
from dataclasses import dataclass
from enum import Enum

import boto3
from botocore.exceptions import ClientError
from geoguard.common.constants import MonitoringConstants

logger = logging.getLogger(__name__)


class MetricType(str, Enum):
    EVALUATION_COUNT = "evaluation_count"
    EVALUATION_LATENCY = "evaluation_latency"
    RISK_SCORE = "risk_score"
    VIOLATION_COUNT = "violation_count"
    RULE_TRIGGERED = "rule_triggered"
    RULE_ERROR = "rule_error"
    DEGRADED_LOOKUP = "degraded_lookup"


@dataclass
class MetricPoint:
    metric_name: str
    value: float
    unit: str = "None"
    timestamp: Optional[datetime] = None
    dimensions: Optional[Dict[str, str]] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)


class MetricsCollector:
    """Collects evaluation metrics and publishes them to CloudWatch.

    Safe to share across threads; the buffer is guarded by a lock.
    Full batches are handed to a background publisher thread through a
    bounded queue, so recording never waits on CloudWatch. When the queue
    is full the batch is dropped and counted.
    Dimensions never include user ids, addresses or coordinates.
    """

    DEFAULT_REGION = "us-east-1"
    DEFAULT_NAMESPACE = "GeoGuard"

    def __init__(self, namespace: Optional[str] = None, region: Optional[str] = None,
                 aws_profile: Optional[str] = None,
                 batch_size: int = MonitoringConstants.DEFAULT_BATCH_SIZE,
                 max_queue_size: int = MonitoringConstants.PUBLISH_QUEUE_SIZE,
                 publish_timeout: float = MonitoringConstants.PUBLISH_TIMEOUT_SECONDS):
        self.namespace = namespace or os.environ.get("CLOUDWATCH_NAMESPACE", self.DEFAULT_NAMESPACE)
        self.region = region or os.environ.get("AWS_REGION", self.DEFAULT_REGION)
        self.batch_size = batch_size
        self.metric_buffer: List[MetricPoint] = []
        self.publish_timeout = publish_timeout
        self._lock = threading.Lock()

        self._queue: queue.Queue[Optional[List[MetricPoint]]] = queue.Queue(
            maxsize=max_queue_size
        )
        self._shutdown_event = threading.Event()
        self._publisher_thread: Optional[threading.Thread] = None

        self._batches_published = 0
        self._batches_dropped = 0
        self._stats_lock = threading.Lock()

        if aws_profile:
            session = boto3.Session(profile_name=aws_profile)
            self.cloudwatch = session.client("cloudwatch", region_name=self.region)
        else:
            self.cloudwatch = boto3.client("cloudwatch", region_name=self.region)

        logger.info(f"Initialized MetricsCollector: namespace={self.namespace}")

        self._start_publisher()
        atexit.register(self.shutdown)

    def _start_publisher(self) -> None:
        self._publisher_thread = threading.Thread(
            target=self._publisher_loop,
            name="MetricsPublisher",
            daemon=True,
        )
        self._publisher_thread.start()

    def _publisher_loop(self) -> None:
        while not self._shutdown_event.is_set():
            try:
                batch = self._queue.get(timeout=MonitoringConstants.QUEUE_GET_TIMEOUT)
            except queue.Empty:
                continue

            if batch is None:
                self._queue.task_done()
                break
            self._publish_queued(batch)

        # Publish whatever was queued before shutdown
        while True:
            try:
                batch = self._queue.get_nowait()
            except queue.Empty:
                break
            if batch is not None:
                self._publish_queued(batch)
            else:
                self._queue.task_done()

    def _publish_queued(self, batch: List[MetricPoint]) -> None:
        try:
            self._publish(batch)
            with self._stats_lock:
                self._batches_published += 1
        except Exception as e:
            logger.error(f"Background metrics publish failed: {e}")
        finally:
            self._queue.task_done()

    def record_metric(self, metric: MetricPoint) -> None:
        """Record a metric point.

        Buffers metrics; a full buffer is queued for the publisher thread.
        """
        with self._lock:
            self.metric_buffer.append(metric)
            if len(self.metric_buffer) < self.batch_size:
                return
            batch = list(self.metric_buffer)
            self.metric_buffer.clear()

        if self._shutdown_event.is_set():
            with self._lock:
                self.metric_buffer[:0] = batch
            return

        try:
            self._queue.put_nowait(batch)
        except queue.Full:
            with self._stats_lock:
                self._batches_dropped += 1
            logger.warning(f"Metrics queue full, dropped {len(batch)} metrics")

    def record_evaluation(
        self,
        latency_ms: float,
        total_score: int,
        triggered_rules: List[str],
    ) -> None:
        """Record metrics for one evaluation.

        Args:
            latency_ms: Evaluation latency in milliseconds
            total_score: Aggregated risk score
            triggered_rules: Names of rules that contributed
        """
        self.record_metric(MetricPoint(
            metric_name=MetricType.EVALUATION_COUNT.value,
            value=1.0,
            unit="Count",
        ))

        self.record_metric(MetricPoint(
            metric_name=MetricType.EVALUATION_LATENCY.value,
            value=latency_ms,
            unit="Milliseconds",
        ))

        self.record_metric(MetricPoint(
            metric_name=MetricType.RISK_SCORE.value,
            value=float(total_score),
            unit="None",
        ))

        self.record_metric(MetricPoint(
            metric_name=MetricType.VIOLATION_COUNT.value,
            value=float(len(triggered_rules)),
            unit="Count",
        ))

        for rule_name in triggered_rules:
            self.record_metric(MetricPoint(
                metric_name=MetricType.RULE_TRIGGERED.value,
                value=1.0,
                unit="Count",
                dimensions={"rule": rule_name},
            ))

        if latency_ms > MonitoringConstants.EVALUATION_LATENCY_WARNING_MS:
            logger.warning(f"Slow evaluation: {latency_ms:.1f} ms")

    def record_rule_error(self, rule_name: str, error_type: str) -> None:
        """Record a rule that raised during evaluation."""
        self.record_metric(MetricPoint(
            metric_name=MetricType.RULE_ERROR.value,
            value=1.0,
            unit="Count",
            dimensions={
                "rule": rule_name,
                "error_type": error_type,
            },
        ))

    def record_degraded_lookup(self, stage: str) -> None:
        """Record a port failure the engine degraded on.

        Args:
            stage: One of "geo", "asn", "history", "previous_geo"
        """
        self.record_metric(MetricPoint(
            metric_name=MetricType.DEGRADED_LOOKUP.value,
            value=1.0,
            unit="Count",
            dimensions={"stage": stage},
        ))

    def flush(self) -> None:
        """Flush buffered metrics to CloudWatch.

        Publishes on the calling thread. Meant for explicit flushes and
        shutdown, not the evaluation path.

        Raises:
            IOError: If CloudWatch write fails
        """
        with self._lock:
            if not self.metric_buffer:
                return
            pending = list(self.metric_buffer)
            self.metric_buffer.clear()

        self._publish(pending)

    def _publish(self, pending: List[MetricPoint]) -> None:
        try:
            metric_data = []
            for metric in pending:
                metric_dict = {
                    "MetricName": metric.metric_name,
                    "Value": metric.value,
                    "Unit": metric.unit,
                    "Timestamp": metric.timestamp,
                }

                if metric.dimensions:
                    metric_dict["Dimensions"] = [
                        {"Name": k, "Value": str(v)}
                        for k, v in metric.dimensions.items()
                    ]

                metric_data.append(metric_dict)

            # CloudWatch allows max 20 metrics per request
            step = MonitoringConstants.CLOUDWATCH_MAX_BATCH
            for i in range(0, len(metric_data), step):
                self.cloudwatch.put_metric_data(
                    Namespace=self.namespace,
                    MetricData=metric_data[i:i + step],
                )

            logger.debug(f"Published {len(pending)} metrics to CloudWatch")

        except ClientError as e:
            logger.error(f"Failed to publish metrics: {e}")
            raise IOError(f"CloudWatch write failed: {e}") from e

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop the publisher thread and publish remaining metrics.

        Args:
            timeout: Maximum time to wait for queued batches. Uses default if None.
        """
        if self._shutdown_event.is_set():
            return

        timeout = timeout if timeout is not None else self.publish_timeout
        self._shutdown_event.set()
        try:
            self._queue.put_nowait(None)
        except queue.Full:
            pass  # publisher sees the shutdown event

        if self._publisher_thread and self._publisher_thread.is_alive():
            self._publisher_thread.join(timeout=timeout)
            if self._publisher_thread.is_alive():
                logger.warning("Metrics publisher did not stop cleanly")

        try:
            self.flush()
        except IOError as e:
            logger.error(f"Dropped buffered metrics on shutdown: {e}")

        logger.info(
            f"Metrics publisher stopped. "
            f"Published batches: {self._batches_published}, "
            f"Dropped batches: {self._batches_dropped}"
        )

    def get_stats(self) -> dict:
        """Get publisher statistics."""
        with self._stats_lock:
            return {
                "batches_published": self._batches_published,
                "batches_dropped": self._batches_dropped,
                "queue_size": self._queue.qsize(),
                "buffered": len(self.metric_buffer),
            }
