"""Monitoring - CloudWatch metrics."""

from geoguard.monitoring.metrics import MetricPoint, MetricsCollector, MetricType

__all__ = ["MetricPoint", "MetricsCollector", "MetricType"]
